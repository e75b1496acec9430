"""Median poll evaluator - settling an amount by a weighted median.

Each voter names the amount they agree to. The amounts are sorted in
ascending order and voter weights are accumulated along them; the settled
value is the first amount at which the accumulated weight reaches the
majority rule of the poll. When the accumulated weight lands exactly on the
threshold, the lower of the two neighbouring amounts is thus taken.

For a relative majority, the accumulated weight is compared with the weight
of all non-abstaining voters, so a value is always settled if anyone voted.
For an absolute majority, it is compared with the weight of all approved
voters including abstainers, so a poll with many abstentions may settle no
value at all.
"""

import logging
from typing import Iterable, Optional, Tuple

import polltally.aggregate
import polltally.util
from polltally.majority import MajorityRule
from polltally.poll import MedianPoll
from polltally.result import MedianResult
from polltally.evaluate.core import PollEvaluator, evaluator_mark
from polltally.persist import simple_serialization


logger = logging.getLogger(__name__)


def weighted_median(values: Iterable[Tuple[int, int]],
                    majority: MajorityRule,
                    eligible_weight: int,
                    ) -> Optional[int]:
    '''Return the lowest value whose cumulative weight reaches the majority.

    :param values: ``(value, weight)`` pairs.
    :param majority: The majority rule to reach.
    :param eligible_weight: Weight of all eligible voters, used as the base
        of absolute majorities.
    :returns: The settled value or None if the majority is never reached.
    '''
    values = polltally.util.sorted_by_value(values)
    valid_weight = polltally.util.checked_sum(weight for _, weight in values)
    cumulative = 0
    for value, weight in values:
        cumulative = polltally.util.checked_add(cumulative, weight)
        if majority.is_satisfied(cumulative, eligible_weight, valid_weight):
            return value
    return None


@evaluator_mark
@simple_serialization
class MedianPollEvaluator(PollEvaluator):
    '''Settle the amount of a median poll by weighted median.'''
    poll_type = 'median'
    aggregator = polltally.aggregate.MedianVoteAggregator()

    def evaluate_tally(self,
                       poll: MedianPoll,
                       tally: polltally.aggregate.MedianTally,
                       ) -> MedianResult:
        '''Settle the amount given the collected weighted amounts.

        :param poll: The tallied poll.
        :param tally: Amounts of the non-abstaining voters with their weights.
        '''
        settled = weighted_median(
            tally.values, poll.majority, tally.eligible_weight
        )
        if settled is None:
            logger.info('poll %r: no amount reached the %s majority',
                        poll.poll_id, poll.majority.format())
        return MedianResult(
            poll_id=poll.poll_id,
            settled_value=settled,
            currency=poll.currency,
            total_weight=(
                tally.eligible_weight if poll.majority.absolute
                else tally.valid_weight
            ),
            truncated=tally.truncated,
        )
