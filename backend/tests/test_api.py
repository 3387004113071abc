def _create(client):
    res = client.post('/api/timers/create')
    assert res.status_code == 201
    return res.get_json()['timer_code']


def _state(client, code):
    res = client.get(f'/api/timers/{code}/state')
    assert res.status_code == 200
    return res.get_json()


def test_create_timer_with_default_players(client):
    code = _create(client)
    state = _state(client, code)
    assert state['timer_code'] == code
    assert [p['name'] for p in state['players']] == ['Player 1', 'Player 2']
    assert state['active_id'] is None
    assert state['running'] is False
    assert state['tier'] is None
    assert state['durations'] == {'display_tick_ms': 200, 'escalation_tick_ms': 1000}


def test_unknown_timer_is_404(client):
    res = client.get('/api/timers/ZZZZ/state')
    assert res.status_code == 404
    assert 'error' in res.get_json()
    assert client.post('/api/timers/ZZZZ/advance').status_code == 404


def test_timer_code_is_case_insensitive(client):
    code = _create(client)
    assert client.get(f'/api/timers/{code.lower()}/state').status_code == 200


def test_turn_flow(client, clock):
    code = _create(client)
    state = _state(client, code)
    first, second = [p['id'] for p in state['players']]

    state = client.post(f'/api/timers/{code}/advance').get_json()
    assert state['active_id'] == first
    assert state['running'] is True
    assert state['tier'] == 2.0

    clock.advance(25000)
    state = client.post(f'/api/timers/{code}/advance').get_json()
    assert state['active_id'] == second
    players = {p['id']: p for p in state['players']}
    assert players[first]['elapsed_ms'] == 25000
    assert players[first]['elapsed_display'] == '00:25.0'

    clock.advance(130000)
    state = _state(client, code)
    assert state['tier'] == 0.4
    assert state['warning'] is True

    state = client.post(f'/api/timers/{code}/pause').get_json()
    assert state['running'] is False
    assert state['active_id'] == second
    assert state['warning'] is False

    state = client.post(f'/api/timers/{code}/toggle').get_json()
    assert state['running'] is True

    state = client.post(f'/api/timers/{code}/reset').get_json()
    assert state['active_id'] is None
    assert all(p['elapsed_ms'] == 0 for p in state['players'])


def test_start_specific_player(client, clock):
    code = _create(client)
    client.post(f'/api/timers/{code}/players')
    ids = [p['id'] for p in _state(client, code)['players']]
    state = client.post(f'/api/timers/{code}/players/{ids[2]}/start').get_json()
    assert state['active_id'] == ids[2]
    # unknown player: silently ignored
    state = client.post(f'/api/timers/{code}/players/999/start').get_json()
    assert state['active_id'] == ids[2]


def test_resume_after_pause(client, clock):
    code = _create(client)
    client.post(f'/api/timers/{code}/advance')
    clock.advance(1000)
    client.post(f'/api/timers/{code}/pause')
    clock.advance(9000)
    state = client.post(f'/api/timers/{code}/resume').get_json()
    assert state['running'] is True
    clock.advance(1000)
    state = client.post(f'/api/timers/{code}/pause').get_json()
    assert state['players'][0]['elapsed_ms'] == 2000


def test_player_management(client):
    code = _create(client)
    state = client.post(f'/api/timers/{code}/players', json={'prefix': 'Gracz'}).get_json()
    added = state['players'][-1]
    assert added['name'] == 'Gracz 3'
    assert added['number'] == 3

    state = client.patch(f"/api/timers/{code}/players/{added['id']}", json={'name': 'Ala'}).get_json()
    assert state['players'][-1]['name'] == 'Ala'

    state = client.post(f"/api/timers/{code}/players/{added['id']}/score", json={'delta': -4}).get_json()
    assert state['players'][-1]['score'] == -4

    first_id = state['players'][0]['id']
    state = client.delete(f'/api/timers/{code}/players/{first_id}').get_json()
    assert [p['number'] for p in state['players']] == [1, 2]
    assert state['players'][-1]['name'] == 'Ala'


def test_capacity_reported(client):
    code = _create(client)
    for _ in range(7):
        state = client.post(f'/api/timers/{code}/players').get_json()
    assert len(state['players']) == 9
    assert state['can_add_player'] is False
    res = client.post(f'/api/timers/{code}/players')
    assert res.status_code == 200
    assert len(res.get_json()['players']) == 9


def test_bad_payloads(client):
    code = _create(client)
    pid = _state(client, code)['players'][0]['id']
    assert client.patch(f'/api/timers/{code}/players/{pid}', json={}).status_code == 400
    assert client.post(f'/api/timers/{code}/players/{pid}/score', json={'delta': 'abc'}).status_code == 400
    assert client.post(f'/api/timers/{code}/players/{pid}/score', json={'delta': True}).status_code == 400
    assert client.post(f'/api/timers/{code}/players', json={'prefix': 5}).status_code == 400


def test_shuffle_rotates_roster(client):
    code = _create(client)
    client.post(f'/api/timers/{code}/players')
    client.post(f'/api/timers/{code}/players')
    before = [p['id'] for p in _state(client, code)['players']]
    state = client.post(f'/api/timers/{code}/shuffle').get_json()
    after = [p['id'] for p in state['players']]
    k = before.index(after[0])
    assert after == before[k:] + before[:k]
    assert [p['number'] for p in state['players']] == [1, 2, 3, 4]
    assert state['active_id'] == after[0]
    assert state['running'] is True


def test_delete_timer(client):
    code = _create(client)
    assert client.delete(f'/api/timers/{code}').status_code == 200
    assert client.get(f'/api/timers/{code}/state').status_code == 404
    assert client.delete(f'/api/timers/{code}').status_code == 404


def test_timers_are_independent(client, clock):
    a = _create(client)
    b = _create(client)
    assert a != b
    client.post(f'/api/timers/{a}/advance')
    assert _state(client, b)['running'] is False


def test_index_and_health(client):
    assert client.get('/').status_code == 200
    _create(client)
    assert client.get('/health').get_json() == {'status': 'ok', 'timers': 1}


def test_unknown_codes_leave_no_locks_behind(client, flask_app):
    registry = flask_app.extensions['timer_registry']
    for n in range(20):
        assert client.delete(f'/api/timers/Q{n:03d}').status_code == 404
        assert client.get(f'/api/timers/Q{n:03d}/state').status_code == 404
        assert client.post(f'/api/timers/Q{n:03d}/pause').status_code == 404
    assert registry._locks == {}


def test_deleted_timer_releases_its_lock(client, flask_app):
    registry = flask_app.extensions['timer_registry']
    code = _create(client)
    assert registry.lock(code) is not None
    client.delete(f'/api/timers/{code}')
    assert registry.lock(code) is None
    assert registry._locks == {}


def test_score_delta_must_be_integer(client):
    code = _create(client)
    pid = _state(client, code)['players'][0]['id']
    for bad in (2.7, '3', None, [1]):
        res = client.post(f'/api/timers/{code}/players/{pid}/score', json={'delta': bad})
        assert res.status_code == 400
    assert _state(client, code)['players'][0]['score'] == 0
    state = client.post(f'/api/timers/{code}/players/{pid}/score', json={'delta': 3}).get_json()
    assert state['players'][0]['score'] == 3
