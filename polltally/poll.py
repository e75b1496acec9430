'''Poll definitions.

A poll is one question put to the voters of a meeting. The kind of question
determines the vote type and the evaluator used to tally it:

-   :class:`BasicPoll` asks a yes/no question,
-   :class:`MedianPoll` asks for an amount of money,
-   :class:`SchulzePoll` asks for a ranking of a number of options.

Polls are grouped into :class:`PollGroup` objects in the agenda of a meeting.
Definitions are validated on construction and raise
:class:`polltally.exceptions.ConfigurationError` when invalid.
'''

import abc
import dataclasses
from typing import Any, List, Optional, Sequence, Tuple

import polltally.util
from polltally.exceptions import ConfigurationError
from polltally.majority import MajorityRule
from polltally.persist import simple_serialization


POLL_TYPES = ('basic', 'median', 'schulze')

MAX_OPTION_LENGTH = 300
MAX_CURRENCY_LENGTH = 5


class Poll(metaclass=abc.ABCMeta):
    '''A poll with a majority rule. Base class, not intended for direct use.

    :param poll_id: Opaque identifier of the poll.
    :param name: Name of the poll (the question).
    :param majority: The majority rule the poll is tallied by.
    '''
    poll_type: str = NotImplemented

    def __init__(self, poll_id: Any, name: str, majority: MajorityRule):
        if not isinstance(majority, MajorityRule):
            raise ConfigurationError(
                f'poll {poll_id!r}: majority must be a MajorityRule,'
                f' got {majority!r}'
            )
        self.poll_id = poll_id
        self.name = name
        self.majority = majority

    def __eq__(self, other: Any) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash((type(self), self.poll_id))

    def __repr__(self) -> str:
        return f'<{type(self).__name__}({self.poll_id!r}, {self.name!r})>'


@simple_serialization
class BasicPoll(Poll):
    '''A yes/no question.'''
    poll_type = 'basic'


@simple_serialization
class MedianPoll(Poll):
    '''A question about an amount of money.

    :param value: The requested (maximum) amount in the smallest currency
        unit. Votes for more are truncated to it. None means no limit.
    :param currency: Currency code of the amounts, 1 to 5 characters.
    '''
    poll_type = 'median'

    def __init__(self,
                 poll_id: Any,
                 name: str,
                 majority: MajorityRule,
                 value: Optional[int] = None,
                 currency: str = 'EUR',
                 ):
        super().__init__(poll_id, name, majority)
        if value is not None and not (
            polltally.util.is_integer(value)
            and 1 <= value <= polltally.util.MAX_WEIGHT
        ):
            raise ConfigurationError(
                f'median poll {poll_id!r}: value must be an integer'
                f' between 1 and {polltally.util.MAX_WEIGHT}, got {value!r}'
            )
        if not (isinstance(currency, str)
                and 1 <= len(currency) <= MAX_CURRENCY_LENGTH):
            raise ConfigurationError(
                f'median poll {poll_id!r}: invalid currency {currency!r}'
            )
        self.value = value
        self.currency = currency


@dataclasses.dataclass(frozen=True)
class SchulzeOption:
    '''A named option of a Schulze poll with its stable index.'''
    index: int
    name: str


@simple_serialization
class SchulzePoll(Poll):
    '''A ranking of named options.

    :param options: Names of the options, in order; the position of an
        option in this sequence is its index used by the votes.
    '''
    poll_type = 'schulze'

    def __init__(self,
                 poll_id: Any,
                 name: str,
                 majority: MajorityRule,
                 options: Sequence[str],
                 ):
        super().__init__(poll_id, name, majority)
        options = tuple(options)
        if not options:
            raise ConfigurationError(
                f'schulze poll {poll_id!r}: no options given'
            )
        for option in options:
            if not (isinstance(option, str)
                    and 1 <= len(option) <= MAX_OPTION_LENGTH):
                raise ConfigurationError(
                    f'schulze poll {poll_id!r}: invalid option {option!r}'
                )
        if len(frozenset(options)) != len(options):
            raise ConfigurationError(
                f'schulze poll {poll_id!r}: duplicate options in {options!r}'
            )
        self.options = options

    @property
    def n_options(self) -> int:
        return len(self.options)

    @property
    def indexed_options(self) -> Tuple[SchulzeOption, ...]:
        return tuple(
            SchulzeOption(index, name)
            for index, name in enumerate(self.options)
        )

    def option_index(self, name: str) -> int:
        '''Return the index of the option with the given name.

        :raises KeyError: If there is no such option.
        '''
        try:
            return self.options.index(name)
        except ValueError:
            raise KeyError(f'unknown option {name!r} in poll {self.poll_id!r}')


@simple_serialization
class PollGroup:
    '''A named group of polls, as they appear in the agenda of a meeting.

    :param name: Name of the group.
    :param polls: The polls in the group; their ids must be unique.
    '''
    def __init__(self, name: str, polls: List[Poll]):
        poll_ids = [poll.poll_id for poll in polls]
        if len(frozenset(poll_ids)) != len(poll_ids):
            raise ConfigurationError(
                f'poll group {name!r}: duplicate poll ids in {poll_ids!r}'
            )
        self.name = name
        self.polls = list(polls)
