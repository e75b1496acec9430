"""JSON poll snapshot format.

A snapshot holds everything needed to tally one poll again: the poll
definition, the register of voters with their weights, and the votes::

    {
        "poll": {
            "type": "schulze", "id": "chair", "name": "Chair election",
            "majority": "1/2", "absolute": false,
            "options": ["Alice", "Bob", "Carol"]
        },
        "voters": [
            {"id": "v1", "name": "Member One", "weight": 3},
            {"id": "v2", "name": "Member Two", "weight": 1}
        ],
        "votes": [
            {"voter": "v1", "ranking": {"Alice": 1, "Carol": 2}},
            {"voter": "v2", "ranking": [2, 1, null], "approved": false}
        ]
    }

Basic poll votes give an ``"answer"`` (``"yes"``, ``"no"`` or
``"abstain"``), median poll votes a ``"value"`` (null to abstain) and the
median poll itself may give ``"value"`` (the requested amount) and
``"currency"``. Schulze rankings are either objects mapping option names to
positions or lists of positions by option index.

Vote weights are resolved from the voter register; a vote referencing an
unknown voter is a :class:`ParseError`.
"""

import json
from typing import Any, Dict, Iterable, List

from polltally.io.core import ParseError, PollSnapshot, loaders, dumpers
from polltally.majority import MajorityRule
from polltally.persist import to_dict
from polltally.poll import Poll, BasicPoll, MedianPoll, SchulzePoll
from polltally.vote import AnyVoteType, BasicAnswer, BasicVote, MedianVote, \
    SchulzeVote, VoteCore, Voter


def load_snapshot(lines: Iterable[str]) -> PollSnapshot:
    """Load a poll snapshot from lines of a JSON document.

    :param lines: Lines of the snapshot file.
    :raises ParseError: If the document is not a valid snapshot.
    """
    try:
        data = json.loads('\n'.join(line.rstrip('\n') for line in lines))
    except json.JSONDecodeError as err:
        raise ParseError(f'invalid JSON in snapshot: {err}') from err
    if not isinstance(data, dict):
        raise ParseError('snapshot must be a JSON object')
    poll = parse_poll(_get(data, 'poll', dict))
    voters = parse_voters(_get(data, 'voters', list))
    votes = [
        parse_vote(poll, voters, vote_data)
        for vote_data in _get(data, 'votes', list)
    ]
    return PollSnapshot(poll=poll, voters=voters, votes=votes)


def parse_poll(data: Dict[str, Any]) -> Poll:
    poll_type = _get(data, 'type', str)
    common = dict(
        poll_id=_get(data, 'id'),
        name=_get(data, 'name', str),
        majority=MajorityRule.parse(
            _get(data, 'majority', str),
            absolute=data.get('absolute', False),
        ),
    )
    if poll_type == 'basic':
        return BasicPoll(**common)
    elif poll_type == 'median':
        return MedianPoll(
            value=data.get('value'),
            currency=data.get('currency', 'EUR'),
            **common
        )
    elif poll_type == 'schulze':
        return SchulzePoll(options=_get(data, 'options', list), **common)
    else:
        raise ParseError(f'unknown poll type: {poll_type!r}')


def parse_voters(data: List[Dict[str, Any]]) -> Dict[Any, Voter]:
    voters = {}
    for voter_data in data:
        if not isinstance(voter_data, dict):
            raise ParseError(f'voter must be an object: {voter_data!r}')
        voter = Voter(
            voter_id=_get(voter_data, 'id'),
            name=voter_data.get('name', ''),
            weight=_get(voter_data, 'weight', int),
        )
        if voter.voter_id in voters:
            raise ParseError(f'duplicate voter id: {voter.voter_id!r}')
        voters[voter.voter_id] = voter
    return voters


def parse_vote(poll: Poll,
               voters: Dict[Any, Voter],
               data: Dict[str, Any],
               ) -> AnyVoteType:
    if not isinstance(data, dict):
        raise ParseError(f'vote must be an object: {data!r}')
    voter_id = _get(data, 'voter')
    try:
        voter = voters[voter_id]
    except (KeyError, TypeError):
        raise ParseError(f'vote references unknown voter {voter_id!r}')
    approved = data.get('approved', True)
    if not isinstance(approved, bool):
        raise ParseError(
            f'invalid approval flag of {voter_id!r}: {approved!r}'
        )
    core = VoteCore.for_voter(voter, approved=approved)
    if isinstance(poll, BasicPoll):
        try:
            answer = BasicAnswer.parse(_get(data, 'answer', str))
        except ValueError as err:
            raise ParseError(str(err)) from err
        return BasicVote(core, answer)
    elif isinstance(poll, MedianPoll):
        if 'value' not in data:
            raise ParseError(f'median vote of {voter_id!r} has no value')
        return MedianVote(core, data['value'])
    else:
        ranking = _get(data, 'ranking')
        if isinstance(ranking, list):
            return SchulzeVote.from_positions(core, ranking)
        elif isinstance(ranking, dict):
            try:
                return SchulzeVote(core, {
                    poll.option_index(name): position
                    for name, position in ranking.items()
                })
            except KeyError as err:
                raise ParseError(f'vote of {voter_id!r}: {err}') from err
        else:
            raise ParseError(f'invalid ranking of {voter_id!r}: {ranking!r}')


def _get(data: Dict[str, Any], key: str, type_: type = object) -> Any:
    try:
        value = data[key]
    except KeyError:
        raise ParseError(f'missing key {key!r} in {data!r}')
    if (not isinstance(value, type_)
            or type_ is int and isinstance(value, bool)):
        raise ParseError(f'invalid {key!r}: {value!r}')
    return value


def dump_result_lines(result: Any, indent: int = 2) -> Iterable[str]:
    """Yield lines of the JSON serialization of a tally result."""
    yield from json.dumps(to_dict(result), indent=indent).split('\n')


load, loads = loaders(load_snapshot)
dump_result, dumps_result = dumpers(dump_result_lines)
