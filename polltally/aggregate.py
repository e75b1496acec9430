'''Aggregators of collected votes into weighted tallies.

These objects have an ``aggregate()`` method that walks the votes of a poll
once, checks each of them against the poll and sums voter weights into a
tally specific to the poll type. The tallies are the input of the evaluators
in :mod:`polltally.evaluate`.

Votes of voters not approved for the poll are skipped entirely. The first
malformed vote aborts the aggregation with
:class:`polltally.exceptions.MalformedVote`; there are no partial tallies.
All weight sums are checked to fit into signed 64-bit integers.
'''

import logging
import dataclasses
from typing import Any, Dict, Iterable, List, Optional, Tuple

import polltally.util
from polltally.exceptions import ConfigurationError, MalformedVote
from polltally.poll import Poll, MedianPoll, SchulzePoll
from polltally.vote import AnyVoteType, BasicAnswer, BasicVote, \
    MedianVote, SchulzeVote
from polltally.persist import simple_serialization


logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class BasicTally:
    '''Weights and counts of the answers in a basic poll.'''
    yes_weight: int = 0
    no_weight: int = 0
    abstain_weight: int = 0
    n_yes: int = 0
    n_no: int = 0
    n_abstain: int = 0

    @property
    def valid_weight(self) -> int:
        '''Weight of the yes and no votes; abstentions are not valid.'''
        return polltally.util.checked_add(self.yes_weight, self.no_weight)

    @property
    def eligible_weight(self) -> int:
        '''Weight of all approved voters, abstaining ones included.'''
        return polltally.util.checked_add(
            self.valid_weight, self.abstain_weight
        )


@dataclasses.dataclass(frozen=True)
class MedianTally:
    '''Collected amounts of a median poll with the weights of their voters.

    :param values: ``(value, weight)`` pairs of the non-abstaining approved
        voters, in input order.
    :param eligible_weight: Weight of all approved voters.
    :param truncated: Ids of voters whose values were truncated to the
        requested amount of the poll.
    '''
    values: Tuple[Tuple[int, int], ...]
    eligible_weight: int
    truncated: Tuple[Any, ...] = ()

    @property
    def valid_weight(self) -> int:
        return polltally.util.checked_sum(weight for _, weight in self.values)


@dataclasses.dataclass(frozen=True)
class SchulzeTally:
    '''Collected rankings of a Schulze poll with the weights of their voters.

    :param n_options: Number of options of the poll.
    :param ballots: ``(positions, weight)`` pairs where positions holds the
        sort position of each option by its index, None for unranked
        options.
    :param eligible_weight: Weight of all approved voters.
    '''
    n_options: int
    ballots: Tuple[Tuple[Tuple[Optional[int], ...], int], ...]
    eligible_weight: int


class VoteAggregator:
    '''Check votes against their poll and sum them by outcome.

    Base class, not intended for direct use; subclasses implement
    :meth:`aggregate` for a single poll type.
    '''
    poll_type: str = NotImplemented
    vote_class: type = NotImplemented

    def aggregate(self, poll: Poll, votes: Iterable[AnyVoteType]):
        raise NotImplementedError

    def approved_votes(self,
                       poll: Poll,
                       votes: Iterable[AnyVoteType],
                       ) -> Iterable[AnyVoteType]:
        '''Yield the votes of approved voters after checking common fields.

        :raises MalformedVote: If a vote is of another poll type or carries
            an invalid weight or approval flag.
        '''
        if poll.poll_type != self.poll_type:
            raise ConfigurationError(
                f'{type(self).__name__} cannot aggregate votes'
                f' of {poll.poll_type} poll {poll.poll_id!r}'
            )
        n_skipped = 0
        for vote in votes:
            core = getattr(vote, 'core', None)
            if core is None:
                raise MalformedVote(None, 'not a vote', vote)
            if not isinstance(vote, self.vote_class):
                raise MalformedVote(
                    core.voter_id,
                    f'vote of type {type(vote).__name__}'
                    f' in {self.poll_type} poll {poll.poll_id!r}'
                )
            weight = core.weight
            if not (polltally.util.is_integer(weight)
                    and 0 <= weight <= polltally.util.MAX_WEIGHT):
                raise MalformedVote(
                    core.voter_id,
                    f'weight must be between 0 and'
                    f' {polltally.util.MAX_WEIGHT}',
                    weight
                )
            if not isinstance(core.approved, bool):
                raise MalformedVote(
                    core.voter_id, 'approval flag must be a bool',
                    core.approved
                )
            if core.approved:
                yield vote
            else:
                n_skipped += 1
        if n_skipped:
            logger.debug('poll %r: skipped %d votes of unapproved voters',
                         poll.poll_id, n_skipped)


@simple_serialization
class BasicVoteAggregator(VoteAggregator):
    '''Sum the weights of yes, no and abstain votes.'''
    poll_type = 'basic'
    vote_class = BasicVote

    def aggregate(self,
                  poll: Poll,
                  votes: Iterable[BasicVote],
                  ) -> BasicTally:
        '''Aggregate basic votes to a tally of answers.'''
        weights = {answer: 0 for answer in BasicAnswer}
        counts = {answer: 0 for answer in BasicAnswer}
        for vote in self.approved_votes(poll, votes):
            if not isinstance(vote.answer, BasicAnswer):
                raise MalformedVote(
                    vote.core.voter_id, 'invalid answer', vote.answer
                )
            weights[vote.answer] = polltally.util.checked_add(
                weights[vote.answer], vote.core.weight
            )
            counts[vote.answer] += 1
        tally = BasicTally(
            yes_weight=weights[BasicAnswer.YES],
            no_weight=weights[BasicAnswer.NO],
            abstain_weight=weights[BasicAnswer.ABSTAIN],
            n_yes=counts[BasicAnswer.YES],
            n_no=counts[BasicAnswer.NO],
            n_abstain=counts[BasicAnswer.ABSTAIN],
        )
        logger.debug('poll %r: aggregated %d basic votes',
                     poll.poll_id, sum(counts.values()))
        return tally


@simple_serialization
class MedianVoteAggregator(VoteAggregator):
    '''Collect the amounts of median votes with their weights.

    Amounts above the requested value of the poll are truncated to it.
    '''
    poll_type = 'median'
    vote_class = MedianVote

    def aggregate(self,
                  poll: MedianPoll,
                  votes: Iterable[MedianVote],
                  ) -> MedianTally:
        '''Aggregate median votes to a list of weighted amounts.'''
        values = []
        truncated = []
        eligible_weight = 0
        for vote in self.approved_votes(poll, votes):
            eligible_weight = polltally.util.checked_add(
                eligible_weight, vote.core.weight
            )
            value = vote.value
            if value is None:
                continue
            if not (polltally.util.is_integer(value) and value >= 0):
                raise MalformedVote(
                    vote.core.voter_id,
                    'value must be a non-negative integer',
                    value
                )
            if poll.value is not None and value > poll.value:
                truncated.append(vote.core.voter_id)
                value = poll.value
            values.append((value, vote.core.weight))
        if truncated:
            logger.warning(
                'poll %r: truncated values of %d voters to %d %s',
                poll.poll_id, len(truncated), poll.value, poll.currency
            )
        logger.debug('poll %r: aggregated %d median votes',
                     poll.poll_id, len(values))
        return MedianTally(
            values=tuple(values),
            eligible_weight=eligible_weight,
            truncated=tuple(truncated),
        )


@simple_serialization
class SchulzeVoteAggregator(VoteAggregator):
    '''Collect the rankings of Schulze votes with their weights.

    Each ranking is expanded into a position for every option of the poll;
    options the voter did not rank get None.
    '''
    poll_type = 'schulze'
    vote_class = SchulzeVote

    def aggregate(self,
                  poll: SchulzePoll,
                  votes: Iterable[SchulzeVote],
                  ) -> SchulzeTally:
        '''Aggregate Schulze votes to a list of weighted position vectors.'''
        ballots = []
        eligible_weight = 0
        for vote in self.approved_votes(poll, votes):
            eligible_weight = polltally.util.checked_add(
                eligible_weight, vote.core.weight
            )
            ballots.append((
                self.positions(vote, poll.n_options), vote.core.weight
            ))
        logger.debug('poll %r: aggregated %d rankings of %d options',
                     poll.poll_id, len(ballots), poll.n_options)
        return SchulzeTally(
            n_options=poll.n_options,
            ballots=tuple(ballots),
            eligible_weight=eligible_weight,
        )

    @staticmethod
    def positions(vote: SchulzeVote,
                  n_options: int,
                  ) -> Tuple[Optional[int], ...]:
        '''Expand a ranking to a position (or None) for every option.

        :raises MalformedVote: If an option index is out of range, a position
            is not a non-negative integer or an option is given two different
            positions.
        '''
        voter_id = vote.core.voter_id
        positions: List[Optional[int]] = [None] * n_options
        for option, position in vote.ranking:
            if not (polltally.util.is_integer(option)
                    and 0 <= option < n_options):
                raise MalformedVote(
                    voter_id,
                    f'option index out of range 0..{n_options - 1}',
                    option
                )
            if not (polltally.util.is_integer(position) and position >= 0):
                raise MalformedVote(
                    voter_id,
                    f'invalid position for option {option}',
                    position
                )
            if positions[option] is not None and positions[option] != position:
                raise MalformedVote(
                    voter_id,
                    f'option {option} ranked inconsistently',
                    (positions[option], position)
                )
            positions[option] = position
        return tuple(positions)


AGGREGATORS: Dict[str, VoteAggregator] = {
    'basic': BasicVoteAggregator(),
    'median': MedianVoteAggregator(),
    'schulze': SchulzeVoteAggregator(),
}
