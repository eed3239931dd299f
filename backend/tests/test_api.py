from roshambo.models import Choice


def _create(client):
    res = client.post('/api/sessions/create')
    assert res.status_code == 201
    return res.get_json()['session_code']


def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert 'message' in res.get_json()


def test_rules(client):
    data = client.get('/api/rules').get_json()
    by_choice = {c['choice']: c for c in data['choices']}
    assert by_choice['rock']['beats'] == 'scissors'
    assert by_choice['paper']['description'].startswith('Paper covers rock')
    assert data['results'] == {'win': 'You win!', 'lose': 'You lose!', 'tie': "It's a tie!"}
    assert data['history_labels']['lose'] == 'Loss'


def test_create_session(client, registry):
    res = client.post('/api/sessions/create')
    assert res.status_code == 201
    data = res.get_json()
    assert len(data['session_code']) == 4
    assert data['session_code'] in registry
    assert data['state']['phase'] == 'idle'
    assert data['state']['thinking_delay'] == 1.0


def test_state_is_case_insensitive(client):
    code = _create(client)
    res = client.get(f'/api/sessions/{code.lower()}/state')
    assert res.status_code == 200
    assert res.get_json()['session_code'] == code


def test_unknown_session_is_404(client):
    res = client.get('/api/sessions/ZZZZ9/state')
    assert res.status_code == 404
    assert res.get_json()['error'] == 'Session not found'
    res = client.post('/api/sessions/ZZZZ9/choice', json={'choice': 'rock'})
    assert res.status_code == 404


def test_choice_resolves_after_delay(client, registry, clock):
    code = _create(client)
    registry.get(code).opponent = lambda: Choice.SCISSORS

    res = client.post(f'/api/sessions/{code}/choice', json={'choice': 'rock'})
    assert res.status_code == 200
    data = res.get_json()
    assert data['accepted'] is True
    assert data['phase'] == 'resolving'
    assert data['turn']['resolving'] is True

    # a second click while the computer is thinking is ignored
    res = client.post(f'/api/sessions/{code}/choice', json={'choice': 'paper'})
    assert res.get_json()['accepted'] is False
    assert res.get_json()['turn']['player_choice'] == 'rock'

    clock.advance(1.0)
    data = client.get(f'/api/sessions/{code}/state').get_json()
    assert data['phase'] == 'resolved'
    assert data['turn']['outcome'] == 'win'
    assert data['score']['player_wins'] == 1
    assert data['history'] == [
        {'number': 1, 'player_choice': 'rock', 'opponent_choice': 'scissors', 'outcome': 'win'}
    ]


def test_invalid_choice_is_400(client):
    code = _create(client)
    res = client.post(f'/api/sessions/{code}/choice', json={'choice': 'spock'})
    assert res.status_code == 400
    assert 'Invalid choice' in res.get_json()['error']
    res = client.post(f'/api/sessions/{code}/choice', json={})
    assert res.status_code == 400
    state = client.get(f'/api/sessions/{code}/state').get_json()
    assert state['phase'] == 'idle'


def test_new_game_and_reset_score(client, registry, clock):
    code = _create(client)
    registry.get(code).opponent = lambda: Choice.PAPER
    for _ in range(3):
        client.post(f'/api/sessions/{code}/choice', json={'choice': 'paper'})
        clock.advance(1.0)

    data = client.post(f'/api/sessions/{code}/new-game').get_json()
    assert data['phase'] == 'idle'
    assert data['score']['ties'] == 3
    assert len(data['history']) == 3

    data = client.post(f'/api/sessions/{code}/reset-score').get_json()
    assert data['score'] == {'player_wins': 0, 'opponent_wins': 0, 'ties': 0, 'total': 0}
    assert data['history'] == []


def test_reset_during_thinking_cancels_turn(client, clock):
    code = _create(client)
    client.post(f'/api/sessions/{code}/choice', json={'choice': 'rock'})
    client.post(f'/api/sessions/{code}/reset-score')
    clock.advance(2.0)
    data = client.get(f'/api/sessions/{code}/state').get_json()
    assert data['phase'] == 'idle'
    assert data['score']['total'] == 0


def test_twelve_turns_keep_ten_history_entries(client, registry, clock):
    code = _create(client)
    moves = ['rock', 'paper', 'scissors'] * 4
    for move in moves:
        client.post(f'/api/sessions/{code}/choice', json={'choice': move})
        clock.advance(1.0)
    data = client.get(f'/api/sessions/{code}/state').get_json()
    assert data['score']['total'] == 12
    assert len(data['history']) == 10
    assert data['history'][0]['player_choice'] == moves[-1]


def test_end_session(client, registry):
    code = _create(client)
    res = client.delete(f'/api/sessions/{code}')
    assert res.status_code == 200
    assert res.get_json() == {'ended': code}
    assert code not in registry
    assert client.delete(f'/api/sessions/{code}').status_code == 404


def test_non_object_body_is_400(client):
    code = _create(client)
    res = client.post(f'/api/sessions/{code}/choice', json=['rock'])
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Request body must be a JSON object'
    res = client.post(f'/api/sessions/{code}/choice', json={'choice': 7})
    assert res.status_code == 400
    state = client.get(f'/api/sessions/{code}/state').get_json()
    assert state['phase'] == 'idle'
