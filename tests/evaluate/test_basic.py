import sys
import os

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))
import polltally.evaluate.basic
import polltally.evaluate.core
from polltally.majority import MajorityRule
from polltally.poll import BasicPoll
from polltally.result import BasicOutcome, BasicResult
from polltally.vote import BasicAnswer, BasicVote, VoteCore

YES, NO, ABSTAIN = BasicAnswer.YES, BasicAnswer.NO, BasicAnswer.ABSTAIN

VOTES = {
    'clear': [(3, YES), (2, YES), (1, NO)],
    'pair_abstain': [(1, YES), (1, ABSTAIN)],
    'abstainer': [(1, YES), (1, NO), (5, ABSTAIN)],
    'abstain_heavy': [(1, YES), (2, ABSTAIN)],
    'even': [(3, YES), (3, NO)],
    'all_abstain': [(4, ABSTAIN), (1, ABSTAIN)],
    'zero_weight': [(0, YES), (1, NO)],
    'empty': [],
}

EXPECTED = [
    # vote set, numerator, denominator, absolute, outcome
    ('clear', 2, 3, True, YES),
    ('clear', 1, 2, False, YES),
    ('clear', 1, 1, False, NO),
    ('pair_abstain', 1, 2, False, YES),
    ('pair_abstain', 1, 2, True, YES),
    ('abstainer', 1, 2, False, YES),
    ('abstainer', 1, 2, True, NO),
    ('abstain_heavy', 1, 2, False, YES),
    ('abstain_heavy', 1, 2, True, NO),
    ('even', 1, 2, False, YES),
    ('even', 2, 3, False, NO),
    ('all_abstain', 1, 2, False, NO),
    ('all_abstain', 1, 2, True, NO),
    ('zero_weight', 1, 2, False, NO),
    ('empty', 1, 2, False, NO),
    ('empty', 1, 2, True, NO),
]


def make_votes(vote_set_name):
    return [
        BasicVote(VoteCore(f'v{i}', weight), answer)
        for i, (weight, answer) in enumerate(VOTES[vote_set_name])
    ]


@pytest.mark.parametrize(
    ('vote_set_name', 'numerator', 'denominator', 'absolute', 'expected'),
    EXPECTED
)
def test_basic_eval(vote_set_name, numerator, denominator, absolute,
                    expected):
    poll = BasicPoll(
        'q', 'Question', MajorityRule(numerator, denominator, absolute)
    )
    result = polltally.evaluate.basic.BasicPollEvaluator().evaluate(
        poll, make_votes(vote_set_name)
    )
    outcome = BasicOutcome.YES if expected is YES else BasicOutcome.NO
    assert result == BasicResult('q', outcome)
    assert result.accepted == (expected is YES)


def test_basic_audit_figures():
    poll = BasicPoll('q', 'Question', MajorityRule(1, 2))
    result = polltally.evaluate.core.tally(poll, make_votes('abstainer'))
    assert result.yes_weight == 1
    assert result.no_weight == 1
    assert result.abstain_weight == 5
    assert (result.n_yes, result.n_no, result.n_abstain) == (1, 1, 1)


def test_basic_idempotent():
    poll = BasicPoll('q', 'Question', MajorityRule(2, 3, absolute=True))
    votes = make_votes('clear')
    first = polltally.evaluate.core.tally(poll, votes)
    second = polltally.evaluate.core.tally(poll, votes)
    assert first == second
    assert first.to_dict() == second.to_dict()


def test_basic_unapproved_ignored():
    poll = BasicPoll('q', 'Question', MajorityRule(1, 2, absolute=True))
    votes = make_votes('abstain_heavy') + [
        BasicVote(VoteCore('late', 100, approved=False), NO)
    ]
    result = polltally.evaluate.core.tally(poll, votes)
    assert result.outcome == BasicOutcome.NO
    assert result.no_weight == 0


def test_basic_absolute_two_thirds():
    poll = BasicPoll('q', 'Question', MajorityRule(2, 3, absolute=True))
    result = polltally.evaluate.core.tally(poll, make_votes('clear'))
    assert result.outcome == BasicOutcome.YES
    assert result.yes_weight + result.no_weight + result.abstain_weight == 6
    assert result.yes_weight == 5


def test_basic_relative_half_with_abstention():
    poll = BasicPoll('q', 'Question', MajorityRule(1, 2))
    result = polltally.evaluate.core.tally(poll, make_votes('pair_abstain'))
    assert result.outcome == BasicOutcome.YES
    assert (result.yes_weight, result.no_weight) == (1, 0)
