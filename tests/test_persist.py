import sys
import os

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import polltally.persist
import polltally.evaluate
import polltally.evaluate.basic
import polltally.evaluate.condorcet
from polltally.majority import MajorityRule
from polltally.poll import BasicPoll, MedianPoll, PollGroup, SchulzePoll
from polltally.result import BasicOutcome, BasicResult, MedianResult, \
    SchulzeResult


OBJECTS = [
    MajorityRule(1, 2),
    MajorityRule(2, 3, absolute=True),
    BasicPoll('q1', 'Approve?', MajorityRule(1, 2)),
    MedianPoll(7, 'Fee', MajorityRule(1, 2), value=1200, currency='CZK'),
    MedianPoll(8, 'Open fee', MajorityRule(3, 4, absolute=True)),
    SchulzePoll('q3', 'Venue', MajorityRule(1, 2), ['Hall', 'Park']),
    BasicResult('q1', BasicOutcome.YES, 5, 1, 4, 2, 1, 1),
    BasicResult('q1', BasicOutcome.NO_MAJORITY),
    MedianResult('q2', 1500, 'EUR', 12, ('a', 'b')),
    MedianResult('q2', None),
    SchulzeResult('q3', ((2, ), (0, 1)), (0, 1, 1, 0), (0, 1, 0, 0)),
    polltally.evaluate.basic.BasicPollEvaluator(),
    polltally.evaluate.condorcet.Schulze(),
]


@pytest.mark.parametrize('obj', OBJECTS)
def test_persist_roundtrip(obj):
    reloaded = polltally.persist.from_json(polltally.persist.to_json(obj))
    assert type(reloaded) is type(obj)
    assert polltally.persist.to_dict(reloaded) == \
        polltally.persist.to_dict(obj)


def test_result_audit_fields_kept():
    result = MedianResult('q2', 1500, 'EUR', 12, ('a', 'b'))
    reloaded = polltally.persist.from_dict(polltally.persist.to_dict(result))
    assert reloaded == result
    assert reloaded.truncated == ('a', 'b')
    assert reloaded.total_weight == 12


def test_enum_serialization():
    serialized = polltally.persist.to_dict(BasicResult('q', BasicOutcome.NO))
    assert serialized['class'] == 'polltally.result.BasicResult'
    assert serialized['outcome'] == {
        'type': 'polltally.result.BasicOutcome', 'value': 'no'
    }


def test_majority_serialization():
    assert polltally.persist.to_dict(MajorityRule(2, 3, True)) == {
        'class': 'polltally.majority.MajorityRule',
        'numerator': 2,
        'denominator': 3,
        'absolute': True,
    }


def test_group_serialization():
    group = PollGroup('Meeting', OBJECTS[2:4])
    reloaded = polltally.persist.from_json(polltally.persist.to_json(group))
    assert reloaded.name == 'Meeting'
    assert reloaded.polls == group.polls


def test_recomputed_result_matches_archive():
    poll = BasicPoll('q1', 'Approve?', MajorityRule(1, 2))
    archived = polltally.persist.to_json(polltally.evaluate.tally(poll, []))
    assert polltally.persist.from_json(archived) == \
        polltally.evaluate.tally(poll, [])


@pytest.mark.parametrize('value', [
    [],
    'polltally.majority.MajorityRule',
    {'numerator': 1, 'denominator': 2},
    {'class': '.majority', 'numerator': 1},
])
def test_invalid_from_dict(value):
    with pytest.raises(ValueError):
        polltally.persist.from_dict(value)


@pytest.mark.parametrize('value', [
    {'class': 'polltally.util.checked_sum', 'values': [1, 2]},
    {'class': 'subprocess.Popen', 'args': ['true']},
    {'class': 'builtins.dict', 'a': 1},
    {'class': 42},
    {'class': 'polltally.majority.MajorityRule', 'numerator': 1,
     'denominator': 2, 'command': 'x'},
    {'class': 'polltally.result.BasicResult', 'poll_id': 'q',
     'outcome': {'type': 'builtins.eval', 'value': '1 + 1'}},
    {'class': 'polltally.result.BasicResult', 'poll_id': 'q',
     'outcome': {'type': 'polltally.majority.MajorityRule', 'value': 1}},
    {'class': 'polltally.result.SchulzeResult', 'poll_id': 'q',
     'ranking': {'type': 'list', 'value': []}},
])
def test_unregistered_class_rejected(value):
    with pytest.raises(ValueError):
        polltally.persist.from_dict(value)


def test_registered_classes():
    polltally.persist.from_dict(polltally.persist.to_dict(MajorityRule(1, 2)))
    assert 'polltally.result.BasicOutcome' in polltally.persist.SERIALIZABLE
    assert 'polltally.evaluate.condorcet.Schulze' in \
        polltally.persist.SERIALIZABLE
    assert 'polltally.util.checked_sum' not in polltally.persist.SERIALIZABLE
