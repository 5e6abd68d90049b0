import json

import pytest

from arena.errors import MalformedMessage
from arena.router import Scope


def test_connect_bootstraps_origin_and_announces_to_peers(make_router, recording_fanout):
    router = make_router()
    router.connect('sid-a')
    sent = recording_fanout.sent
    assert [e for e, _, s, _ in sent if s is Scope.ORIGIN_ONLY] == [
        'current-players', 'collectible-spawned', 'score-updated', 'clock-state',
    ]
    joined = [(p, o) for e, p, s, o in sent if e == 'player-joined']
    assert joined[0][1] == 'sid-a'
    assert sent[-1][2] is Scope.ALL_EXCEPT_ORIGIN


def test_untimed_match_sends_no_clock(make_router, recording_fanout):
    router = make_router(MATCH_DURATION_SEC=0)
    router.connect('sid-a')
    assert 'clock-state' not in recording_fanout.events()
    router.toggle_pause('sid-a')
    router.match_status('sid-a')
    assert router.tick() is False
    assert recording_fanout.events().count('clock-state') == 0


def test_claim_couples_collectible_and_score(make_router, recording_fanout):
    router = make_router()
    router.connect('sid-a')
    router.connect('sid-b')
    recording_fanout.clear()

    assert router.claim('sid-a', {'epoch': 0}) is True
    assert router.claim('sid-b', {'epoch': 0}) is False

    assert recording_fanout.events() == ['collectible-spawned', 'score-updated']
    spawned, score = recording_fanout.sent[0][1], recording_fanout.sent[1][1]
    assert spawned['epoch'] == 1
    assert score == {'teamA': 10, 'teamB': 0}
    assert all(s is Scope.ALL for _, _, s, _ in recording_fanout.sent)


def test_claim_from_unknown_session_ignored(make_router, recording_fanout):
    router = make_router()
    assert router.claim('ghost', {'epoch': 0}) is False
    assert router.collectible.epoch == 0
    assert recording_fanout.sent == []


@pytest.mark.parametrize('payload', [None, {}, {'epoch': '0'}, {'epoch': 0.5}, {'epoch': True}, [0]])
def test_malformed_claim_raises(make_router, payload):
    router = make_router()
    router.connect('sid-a')
    with pytest.raises(MalformedMessage):
        router.claim('sid-a', payload)
    assert router.collectible.epoch == 0


def test_move_after_disconnect_is_silent(make_router, recording_fanout):
    router = make_router()
    router.connect('sid-a')
    router.connect('sid-b')
    router.disconnect('sid-a')
    before = router.players.snapshot()
    recording_fanout.clear()

    router.move('sid-a', {'x': 10, 'y': 20, 'rotation': 0})

    assert recording_fanout.sent == []
    assert router.players.snapshot() == before


def test_move_broadcasts_to_peers_only(make_router, recording_fanout):
    router = make_router()
    router.connect('sid-a')
    recording_fanout.clear()
    router.move('sid-a', {'x': 10, 'y': 20.5, 'rotation': -1.2})
    event, payload, scope, origin = recording_fanout.sent[0]
    assert event == 'player-moved'
    assert scope is Scope.ALL_EXCEPT_ORIGIN and origin == 'sid-a'
    assert payload == {'id': router.player_for('sid-a'), 'x': 10, 'y': 20.5, 'rotation': -1.2}


@pytest.mark.parametrize('payload', [
    {'x': 1, 'y': 2},
    {'x': 'a', 'y': 2, 'rotation': 0},
    {'x': float('nan'), 'y': 2, 'rotation': 0},
    {'x': 1, 'y': float('inf'), 'rotation': 0},
    {'x': 1, 'y': 2, 'rotation': float('-inf')},
    'left',
    None,
])
def test_malformed_move_leaves_state_alone(make_router, recording_fanout, payload):
    router = make_router()
    router.connect('sid-a')
    before = router.players.snapshot()
    recording_fanout.clear()
    with pytest.raises(MalformedMessage):
        router.move('sid-a', payload)
    assert router.players.snapshot() == before
    assert recording_fanout.sent == []


def test_disconnect_twice_announces_once(make_router, recording_fanout):
    router = make_router()
    router.connect('sid-a')
    recording_fanout.clear()
    router.disconnect('sid-a')
    router.disconnect('sid-a')
    assert recording_fanout.events() == ['player-left']


def test_non_finite_json_coordinates_never_relayed(make_router, recording_fanout):
    router = make_router()
    router.connect('sid-a')
    router.connect('sid-b')
    before = router.players.snapshot()
    recording_fanout.clear()
    with pytest.raises(MalformedMessage):
        router.move('sid-a', json.loads('{"x": NaN, "y": Infinity, "rotation": 0}'))
    assert recording_fanout.sent == []
    assert router.players.snapshot() == before
    json.dumps(router.state(), allow_nan=False)


def test_chat_tagged_with_team_and_truncated(make_router, recording_fanout):
    router = make_router(CHAT_MAX_LENGTH=5)
    router.connect('sid-a')
    recording_fanout.clear()
    router.chat('sid-a', {'text': '  hello world  '})
    assert recording_fanout.sent == [('chat-line', {'team': 'A', 'text': 'hello'}, Scope.ALL, None)]


def test_chat_requires_text(make_router):
    router = make_router()
    router.connect('sid-a')
    with pytest.raises(MalformedMessage):
        router.chat('sid-a', {'text': '   '})


def test_pause_pull_policy_is_silent(make_router, recording_fanout):
    router = make_router(CLOCK_BROADCAST='pull')
    router.connect('sid-a')
    recording_fanout.clear()
    router.toggle_pause('sid-a')
    router.tick()
    assert router.clock.paused
    assert router.clock.remaining == 120
    assert recording_fanout.sent == []


def test_pause_push_policy_broadcasts(make_router, recording_fanout):
    router = make_router(CLOCK_BROADCAST='push')
    router.connect('sid-a')
    recording_fanout.clear()
    router.toggle_pause('sid-a')
    router.toggle_pause('sid-a')
    router.tick()
    assert recording_fanout.sent == [
        ('clock-state', {'remaining': 120, 'paused': True}, Scope.ALL, None),
        ('clock-state', {'remaining': 120, 'paused': False}, Scope.ALL, None),
        ('clock-state', {'remaining': 119, 'paused': False}, Scope.ALL, None),
    ]


def test_match_over_freezes_everything(make_router, recording_fanout):
    router = make_router(MATCH_DURATION_SEC=2)
    router.connect('sid-a')
    router.claim('sid-a', {'epoch': 0})
    assert router.tick() is True
    assert router.tick() is False
    before = router.players.snapshot()
    recording_fanout.clear()

    assert router.claim('sid-a', {'epoch': 1}) is False
    router.toggle_pause('sid-a')
    router.move('sid-a', {'x': 1, 'y': 2, 'rotation': 0})
    assert router.players.snapshot() == before
    assert router.scores.snapshot().team_a == 10
    assert router.collectible.epoch == 1
    assert recording_fanout.sent == []

    router.match_status('sid-a')
    assert recording_fanout.sent == [
        ('match-over', {'teamA': 10, 'teamB': 0, 'winner': 'A'}, Scope.ORIGIN_ONLY, 'sid-a'),
    ]


def test_match_status_before_over_reports_clock(make_router, recording_fanout):
    router = make_router()
    router.connect('sid-a')
    recording_fanout.clear()
    router.match_status('sid-a')
    assert recording_fanout.sent == [('clock-state', {'remaining': 120, 'paused': False}, Scope.ORIGIN_ONLY, 'sid-a')]


def test_state_snapshot(make_router):
    router = make_router()
    router.connect('sid-a')
    state = router.state()
    assert list(state['players']) == [router.player_for('sid-a')]
    assert state['collectible']['epoch'] == 0
    assert state['score'] == {'teamA': 0, 'teamB': 0}
    assert state['clock'] == {'remaining': 120, 'paused': False, 'over': False}
    assert state['winner'] is None
