'''Results of tallied polls.

Results are immutable records produced by the evaluators, one per poll. Two
results are equal if they belong to the same poll and have the same outcome;
the additional audit figures they carry (weight sums, matrices) do not take
part in the comparison. Results are serializable with :mod:`polltally.persist`
for archival.
'''

import enum
import dataclasses
from typing import Any, Optional, Tuple

from polltally.persist import register_class, simple_serialization


@register_class
class BasicOutcome(enum.Enum):
    '''Outcome of a basic poll.

    The evaluator decides between ``YES`` and ``NO`` only; ``NO_MAJORITY``
    is reserved for archived results of polls that were not decided.
    '''
    YES = 'yes'
    NO = 'no'
    NO_MAJORITY = 'no-majority'


@simple_serialization
@dataclasses.dataclass(frozen=True)
class BasicResult:
    '''Result of a basic (yes/no) poll.

    :param poll_id: Identifier of the tallied poll.
    :param outcome: Whether the question passed.
    :param yes_weight: Total weight of yes votes.
    :param no_weight: Total weight of no votes.
    :param abstain_weight: Total weight of abstentions.
    :param n_yes: Number of yes votes.
    :param n_no: Number of no votes.
    :param n_abstain: Number of abstentions.
    '''
    poll_id: Any
    outcome: BasicOutcome
    yes_weight: int = dataclasses.field(default=0, compare=False)
    no_weight: int = dataclasses.field(default=0, compare=False)
    abstain_weight: int = dataclasses.field(default=0, compare=False)
    n_yes: int = dataclasses.field(default=0, compare=False)
    n_no: int = dataclasses.field(default=0, compare=False)
    n_abstain: int = dataclasses.field(default=0, compare=False)

    @property
    def accepted(self) -> bool:
        return self.outcome is BasicOutcome.YES


@simple_serialization
@dataclasses.dataclass(frozen=True)
class MedianResult:
    '''Result of a median poll.

    :param poll_id: Identifier of the tallied poll.
    :param settled_value: The lowest amount at which the accumulated weight
        of voters (sorted by amount) reaches the required majority, or None
        if no amount reached it.
    :param currency: Currency code of the amount.
    :param total_weight: The weight the majority was measured against.
    :param truncated: Ids of voters whose amounts were truncated to the
        requested value of the poll.
    '''
    poll_id: Any
    settled_value: Optional[int]
    currency: str = dataclasses.field(default='', compare=False)
    total_weight: int = dataclasses.field(default=0, compare=False)
    truncated: Tuple[Any, ...] = dataclasses.field(default=(), compare=False)

    def __post_init__(self):
        object.__setattr__(self, 'truncated', tuple(self.truncated))

    @property
    def settled(self) -> bool:
        return self.settled_value is not None


@simple_serialization
@dataclasses.dataclass(frozen=True)
class SchulzeResult:
    '''Result of a Schulze poll.

    :param poll_id: Identifier of the tallied poll.
    :param ranking: Tie classes of option indices, best first. Options within
        a class are sorted by index.
    :param preferences: The preference matrix in row-major order; the value
        at ``i * n + j`` is the weight preferring option i to option j.
    :param strongest_paths: The strongest path matrix in row-major order.
    '''
    poll_id: Any
    ranking: Tuple[Tuple[int, ...], ...]
    preferences: Tuple[int, ...] = dataclasses.field(
        default=(), compare=False
    )
    strongest_paths: Tuple[int, ...] = dataclasses.field(
        default=(), compare=False
    )

    def __post_init__(self):
        object.__setattr__(
            self, 'ranking', tuple(tuple(group) for group in self.ranking)
        )
        object.__setattr__(self, 'preferences', tuple(self.preferences))
        object.__setattr__(
            self, 'strongest_paths', tuple(self.strongest_paths)
        )

    @property
    def n_options(self) -> int:
        return sum(len(group) for group in self.ranking)

    @property
    def winners(self) -> Tuple[int, ...]:
        '''Option indices in the top tie class (empty without options).'''
        return self.ranking[0] if self.ranking else ()

    def rank_of(self, option: int) -> int:
        '''Return the zero-based index of the tie class of the option.

        :raises KeyError: If the option is not ranked.
        '''
        for i, group in enumerate(self.ranking):
            if option in group:
                return i
        raise KeyError(f'option {option} not in result of {self.poll_id!r}')

    def beats(self, option1: int, option2: int) -> bool:
        '''Return True if the first option is ranked above the second.'''
        return self.rank_of(option1) < self.rank_of(option2)

    def preference(self, option1: int, option2: int) -> int:
        '''Weight of voters strictly preferring option1 to option2.'''
        return self.preferences[option1 * self.n_options + option2]

    def path_strength(self, option1: int, option2: int) -> int:
        '''Strength of the strongest path from option1 to option2.'''
        return self.strongest_paths[option1 * self.n_options + option2]

