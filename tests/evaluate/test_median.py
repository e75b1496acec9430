import sys
import os
import random

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))
import polltally.evaluate.core
import polltally.evaluate.median
from polltally.majority import MajorityRule
from polltally.poll import MedianPoll
from polltally.result import MedianResult
from polltally.vote import MedianVote, VoteCore


VOTES = {
    'spread': [(10, 3), (20, 2), (30, 1)],
    'reversed': [(30, 1), (20, 2), (10, 3)],
    'split': [(10, 1), (20, 1)],
    'single': [(25, 4)],
    'abstainer': [(10, 1), (20, 1), (None, 10)],
    'all_abstain': [(None, 1), (None, 2)],
    'empty': [],
}

EXPECTED = [
    # vote set, numerator, denominator, absolute, settled value
    ('spread', 1, 2, False, 10),
    ('reversed', 1, 2, False, 10),
    ('spread', 2, 3, False, 20),
    ('spread', 1, 1, False, 30),
    ('split', 1, 2, False, 10),
    ('split', 2, 3, False, 20),
    ('single', 1, 1, True, 25),
    ('abstainer', 1, 2, False, 10),
    ('abstainer', 1, 2, True, None),
    ('all_abstain', 1, 2, False, None),
    ('empty', 1, 2, False, None),
]


def make_votes(vote_set_name):
    return [
        MedianVote(VoteCore(f'v{i}', weight), value)
        for i, (value, weight) in enumerate(VOTES[vote_set_name])
    ]


@pytest.mark.parametrize(
    ('vote_set_name', 'numerator', 'denominator', 'absolute', 'expected'),
    EXPECTED
)
def test_median_eval(vote_set_name, numerator, denominator, absolute,
                     expected):
    poll = MedianPoll(
        'm', 'Budget', MajorityRule(numerator, denominator, absolute)
    )
    result = polltally.evaluate.median.MedianPollEvaluator().evaluate(
        poll, make_votes(vote_set_name)
    )
    assert result == MedianResult('m', expected)
    assert result.settled == (expected is not None)


def test_median_order_independent():
    values = [(value, weight) for value in range(1, 40, 3)
              for weight in (1, 2)]
    majority = MajorityRule(1, 2)
    expected = polltally.evaluate.median.weighted_median(values, majority, 0)
    rng = random.Random(42)
    for i in range(10):
        rng.shuffle(values)
        assert polltally.evaluate.median.weighted_median(
            values, majority, 0
        ) == expected


def test_median_truncation(caplog):
    poll = MedianPoll('m', 'Budget', MajorityRule(1, 2), value=15,
                      currency='CZK')
    votes = [
        MedianVote(VoteCore('a', 2), 30),
        MedianVote(VoteCore('b', 1), 10),
    ]
    result = polltally.evaluate.core.tally(poll, votes)
    assert result.settled_value == 15
    assert result.truncated == ('a', )
    assert result.currency == 'CZK'
    assert result.total_weight == 3
    assert 'truncated' in caplog.text


def test_median_total_weight_absolute():
    poll = MedianPoll('m', 'Budget', MajorityRule(1, 2, absolute=True))
    result = polltally.evaluate.core.tally(poll, make_votes('abstainer'))
    assert result.total_weight == 12
    assert result.settled_value is None
