import sys
import os
import subprocess

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))
import polltally.evaluate
import polltally.evaluate.core
from polltally.exceptions import ConfigurationError
from polltally.majority import MajorityRule
from polltally.poll import BasicPoll, MedianPoll, PollGroup, SchulzePoll
from polltally.result import BasicOutcome, BasicResult, MedianResult, \
    SchulzeResult
from polltally.vote import BasicAnswer, BasicVote, MedianVote, SchulzeVote, \
    VoteCore


MAJORITY = MajorityRule(1, 2)
POLLS = [
    BasicPoll('q1', 'Approve the budget?', MAJORITY),
    MedianPoll('q2', 'Membership fee', MAJORITY, value=5000),
    SchulzePoll('q3', 'Venue', MAJORITY, ['Hall', 'Park']),
]
VOTES = {
    'q1': [BasicVote(VoteCore('a', 2), BasicAnswer.YES)],
    'q2': [MedianVote(VoteCore('a', 2), 3000)],
    'q3': [SchulzeVote(VoteCore('a', 2), {1: 1})],
}
RESULTS = {
    'q1': BasicResult('q1', BasicOutcome.YES),
    'q2': MedianResult('q2', 3000),
    'q3': SchulzeResult('q3', ((1, ), (0, ))),
}


def test_registry():
    assert set(polltally.evaluate.EVALUATORS) == {
        'basic', 'median', 'schulze'
    }
    for poll_type, evaluator in polltally.evaluate.EVALUATORS.items():
        assert evaluator.poll_type == poll_type
        assert evaluator.aggregator.poll_type == poll_type


def test_unknown_poll_type():
    with pytest.raises(ConfigurationError):
        polltally.evaluate.core.get_evaluator('approval')


@pytest.mark.parametrize('poll', POLLS)
def test_tally_dispatch(poll):
    result = polltally.evaluate.tally(poll, VOTES[poll.poll_id])
    assert result == RESULTS[poll.poll_id]


def test_tally_generator_input():
    poll = POLLS[0]
    votes = (vote for vote in VOTES['q1'])
    assert polltally.evaluate.tally(poll, votes) == RESULTS['q1']


def test_evaluator_poll_type_mismatch():
    evaluator = polltally.evaluate.core.get_evaluator('median')
    with pytest.raises(ConfigurationError):
        evaluator.evaluate(POLLS[0], VOTES['q1'])


def test_tally_group():
    group = PollGroup('Annual meeting', POLLS)
    results = polltally.evaluate.tally_group(group, VOTES)
    assert list(results.keys()) == ['q1', 'q2', 'q3']
    assert results == RESULTS


def test_tally_group_missing_votes():
    group = PollGroup('Annual meeting', POLLS)
    results = polltally.evaluate.tally_group(group, {'q2': VOTES['q2']})
    assert results['q1'] == BasicResult('q1', BasicOutcome.NO)
    assert results['q2'] == RESULTS['q2']
    assert results['q3'] == SchulzeResult('q3', ((0, 1), ))


def test_tally_group_unknown_poll():
    group = PollGroup('Annual meeting', POLLS[:1])
    with pytest.raises(ConfigurationError):
        polltally.evaluate.tally_group(group, VOTES)


def test_tally_group_custom_function():
    group = PollGroup('Annual meeting', POLLS)
    tallied = []

    def recording_tally(poll, votes):
        tallied.append(poll.poll_id)
        return polltally.evaluate.tally(poll, votes)

    polltally.evaluate.tally_group(group, VOTES, recording_tally)
    assert tallied == ['q1', 'q2', 'q3']


@pytest.mark.parametrize('module', [
    'polltally.evaluate',
    'polltally.evaluate.condorcet',
    'polltally.io.snapshot',
    'polltally.__main__',
])
def test_import_in_fresh_interpreter(module):
    root = os.path.join(os.path.dirname(__file__), '..', '..')
    subprocess.run(
        [sys.executable, '-c', f'import {module}'], cwd=root, check=True
    )
