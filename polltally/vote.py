'''Voters and the votes they cast in polls.

Every vote consists of a :class:`VoteCore` (who voted, with what weight and
whether they are eligible for the poll at all) and a poll-type specific part:

-   **Basic** votes answer a yes/no question (or abstain). Represented by
    :class:`BasicVote` with a :class:`BasicAnswer`.
-   **Median** votes name an amount of money the voter agrees to (or abstain
    by naming None). Represented by :class:`MedianVote`.
-   **Schulze** votes rank the options of a poll by assigning sort positions
    to option indices; lower positions are better, equal positions mean no
    preference and options without a position are ranked below all others.
    Represented by :class:`SchulzeVote`.

The vote objects only check their own structure; whether a vote is
consistent with its poll (option indices, weight bounds) is checked by the
aggregators in :mod:`polltally.aggregate`, which abort the tally on the first
malformed vote.
'''

import enum
import dataclasses
import collections.abc
from typing import Any, ClassVar, Mapping, Optional, Sequence, Tuple, \
    Union

from polltally.exceptions import MalformedVote


@dataclasses.dataclass(frozen=True)
class Voter:
    '''A registered voter.

    :param voter_id: Opaque identifier, unique among the voters of a meeting.
    :param name: Display name.
    :param weight: Voting weight; zero means the voter is registered but
        carries no effective weight.
    '''
    voter_id: Any
    name: str
    weight: int


@dataclasses.dataclass(frozen=True)
class VoteCore:
    '''The part shared by all votes: the voter and their weight.

    :param voter_id: Identifier of the voter casting the vote.
    :param weight: Weight of the voter, resolved when the vote was cast.
    :param approved: Whether the voter is eligible for this particular poll.
        Votes of voters that are not approved are ignored by the tally and
        do not count toward the eligible weight.
    '''
    voter_id: Any
    weight: int
    approved: bool = True

    @classmethod
    def for_voter(cls, voter: Voter, approved: bool = True) -> 'VoteCore':
        '''Create a vote core with the voter's registered weight.'''
        return cls(voter.voter_id, voter.weight, approved)


class BasicAnswer(enum.Enum):
    '''Possible answers in a basic poll.'''
    NO = 0
    YES = 1
    ABSTAIN = 2

    @classmethod
    def parse(cls, text: str) -> 'BasicAnswer':
        '''Parse an answer from its name (case insensitive).

        Accepts ``yes``/``aye``, ``no`` and ``abstain``/``abstention``.

        :raises ValueError: If the text names no answer.
        '''
        try:
            return ANSWER_NAMES[text.strip().lower()]
        except KeyError:
            raise ValueError(f'unknown basic poll answer: {text!r}')


ANSWER_NAMES = {
    'no': BasicAnswer.NO,
    'yes': BasicAnswer.YES,
    'aye': BasicAnswer.YES,
    'abstain': BasicAnswer.ABSTAIN,
    'abstention': BasicAnswer.ABSTAIN,
}


@dataclasses.dataclass(frozen=True)
class BasicVote:
    '''A yes/no/abstain vote in a basic poll.'''
    poll_type: ClassVar[str] = 'basic'

    core: VoteCore
    answer: BasicAnswer


@dataclasses.dataclass(frozen=True)
class MedianVote:
    '''A vote for an amount (in the smallest currency unit) in a median poll.

    :param value: The amount the voter agrees to; None means abstention.
    '''
    poll_type: ClassVar[str] = 'median'

    core: VoteCore
    value: Optional[int]


@dataclasses.dataclass(frozen=True)
class SchulzeVote:
    '''A (possibly partial) ranking of the options of a Schulze poll.

    The ranking maps option indices to sort positions and can be given either
    as a mapping or as an iterable of ``(option_index, position)`` pairs.
    It is stored as a tuple of such pairs in the input order so that
    conflicting repeated entries for an option remain detectable.
    Only the relative order of positions matters.
    '''
    poll_type: ClassVar[str] = 'schulze'

    core: VoteCore
    ranking: Tuple[Tuple[int, int], ...]

    def __post_init__(self):
        ranking = self.ranking
        if isinstance(ranking, collections.abc.Mapping):
            ranking = ranking.items()
        pairs = []
        for item in ranking:
            if not (isinstance(item, collections.abc.Sequence)
                    and len(item) == 2):
                raise MalformedVote(
                    self.core.voter_id, 'ranking entry is not a pair', item
                )
            pairs.append((item[0], item[1]))
        object.__setattr__(self, 'ranking', tuple(pairs))

    @classmethod
    def from_positions(cls,
                       core: VoteCore,
                       positions: Sequence[Optional[int]],
                       ) -> 'SchulzeVote':
        '''Create a vote from a list of positions indexed by option.

        :param core: The voter part of the vote.
        :param positions: Sort position of every option by its index; None
            leaves the option unranked.
        '''
        return cls(core, tuple(
            (option, position)
            for option, position in enumerate(positions)
            if position is not None
        ))

    def positions(self) -> Mapping[int, int]:
        '''Return the ranking as a mapping of option indices to positions.'''
        return dict(self.ranking)


AnyVoteType = Union[BasicVote, MedianVote, SchulzeVote]
