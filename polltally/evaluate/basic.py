'''Basic (yes/no) poll evaluator.

A question passes if the weight of yes votes reaches the majority rule of the
poll and fails otherwise; there is no third outcome for a question with only
two valid answers. Abstentions do not count toward the valid weight of a
relative majority but do count toward the eligible weight of an absolute one.
'''

import polltally.aggregate
from polltally.poll import BasicPoll
from polltally.result import BasicOutcome, BasicResult
from polltally.evaluate.core import PollEvaluator, evaluator_mark
from polltally.persist import simple_serialization


@evaluator_mark
@simple_serialization
class BasicPollEvaluator(PollEvaluator):
    '''Decide a yes/no question by the majority rule of its poll.'''
    poll_type = 'basic'
    aggregator = polltally.aggregate.BasicVoteAggregator()

    def evaluate_tally(self,
                       poll: BasicPoll,
                       tally: polltally.aggregate.BasicTally,
                       ) -> BasicResult:
        '''Decide the question given the summed answers.

        :param poll: The tallied poll.
        :param tally: Weights and counts of the answers.
        '''
        passed = poll.majority.is_satisfied(
            tally.yes_weight, tally.eligible_weight, tally.valid_weight
        )
        return BasicResult(
            poll_id=poll.poll_id,
            outcome=BasicOutcome.YES if passed else BasicOutcome.NO,
            yes_weight=tally.yes_weight,
            no_weight=tally.no_weight,
            abstain_weight=tally.abstain_weight,
            n_yes=tally.n_yes,
            n_no=tally.n_no,
            n_abstain=tally.n_abstain,
        )
