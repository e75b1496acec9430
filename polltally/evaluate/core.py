'''General poll evaluator machinery.'''

import abc
import logging
from typing import Any, Callable, Dict, Iterable, Mapping

from polltally.exceptions import ConfigurationError
from polltally.poll import Poll, PollGroup
from polltally.vote import AnyVoteType


logger = logging.getLogger(__name__)

__all__ = [
    'PollEvaluator', 'EVALUATORS', 'evaluator_mark', 'get_evaluator',
    'tally', 'tally_group',
]


class PollEvaluator(metaclass=abc.ABCMeta):
    '''Tally the votes of a poll into its result.

    A root abstract base class for the evaluators of all poll types.
    Subclasses set the ``poll_type`` they handle, the ``aggregator`` that
    sums the votes, and implement :meth:`evaluate_tally`.
    '''
    poll_type: str = NotImplemented
    aggregator = None

    def evaluate(self, poll: Poll, votes: Iterable[AnyVoteType]):
        '''Aggregate the votes and evaluate the poll.

        :param poll: The poll to tally.
        :param votes: All votes cast in the poll, at most one per voter.
        :raises ConfigurationError: If the poll is of another type.
        :raises MalformedVote: If any vote is inconsistent with the poll.
        :raises ArithmeticOverflow: If weight sums get out of range.
        '''
        if poll.poll_type != self.poll_type:
            raise ConfigurationError(
                f'{type(self).__name__} cannot evaluate'
                f' {poll.poll_type} poll {poll.poll_id!r}'
            )
        snapshot = tuple(votes)
        result = self.evaluate_tally(
            poll, self.aggregator.aggregate(poll, snapshot)
        )
        logger.info('poll %r tallied from %d votes: %r',
                    poll.poll_id, len(snapshot), result)
        return result

    @abc.abstractmethod
    def evaluate_tally(self, poll: Poll, tally: Any):
        '''Produce the result of the poll from its aggregated tally.'''
        raise NotImplementedError


EVALUATORS: Dict[str, PollEvaluator] = {}


def evaluator_mark(class_: type) -> type:
    '''A registration decorator for evaluator classes by their poll type.'''
    EVALUATORS[class_.poll_type] = class_()
    return class_


def get_evaluator(poll_type: str) -> PollEvaluator:
    '''Return the evaluator for the given poll type.

    :raises ConfigurationError: If there is no such poll type.
    '''
    try:
        return EVALUATORS[poll_type]
    except KeyError:
        raise ConfigurationError(f'unknown poll type: {poll_type!r}')


def tally(poll: Poll, votes: Iterable[AnyVoteType]):
    '''Tally the votes of a poll with the evaluator for its type.

    :param poll: The poll to tally.
    :param votes: All votes cast in the poll, at most one per voter.
    :returns: A :class:`polltally.result.BasicResult`,
        :class:`polltally.result.MedianResult` or
        :class:`polltally.result.SchulzeResult`, by the type of the poll.
    '''
    return get_evaluator(poll.poll_type).evaluate(poll, votes)


def tally_group(group: PollGroup,
                votes: Mapping[Any, Iterable[AnyVoteType]],
                tally_function: Callable = tally,
                ) -> Dict[Any, Any]:
    '''Tally all polls of a group.

    :param group: The poll group.
    :param votes: Votes by poll id. Polls without an entry are tallied as
        having received no votes.
    :param tally_function: The function to tally a single poll with.
    :returns: Results by poll id, in the order of the polls in the group.
    '''
    poll_ids = frozenset(poll.poll_id for poll in group.polls)
    unknown = [poll_id for poll_id in votes if poll_id not in poll_ids]
    if unknown:
        raise ConfigurationError(
            f'votes for polls {unknown!r} outside group {group.name!r}'
        )
    return {
        poll.poll_id: tally_function(poll, votes.get(poll.poll_id, ()))
        for poll in group.polls
    }
