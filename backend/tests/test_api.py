def _auth_post(client, path, player_id, token, data):
    res = client.post(path, json={'id': player_id, 'token': token, 'data': data})
    assert res.status_code == 200
    return res.get_json()


def test_alice_score_flow(client, register):
    player_id, token1 = register('alice')

    first = _auth_post(client, '/score', player_id, token1, {'mode': 'easy', 'score': 0, 'deathCount': 0})
    assert first['authError'] is False
    assert first['successful'] is True
    token2 = first['accessToken']
    assert token2 != token1

    second = _auth_post(client, '/score', player_id, token2, {'mode': 'easy', 'score': 1, 'deathCount': 2})
    assert second['successful'] is True
    token3 = second['accessToken']

    repeat = _auth_post(client, '/score', player_id, token3, {'mode': 'easy', 'score': 1, 'deathCount': 2})
    assert repeat['authError'] is False
    assert repeat['successful'] is False
    token4 = repeat['accessToken']
    assert token4 not in (token1, token2, token3)

    scores = client.get('/playerScores', query_string={'username': 'alice'}).get_json()['scores']
    assert len(scores) == 1
    entry = scores[0]
    assert entry['username'] == 'alice'
    assert entry['mode'] == 'easy'
    assert entry['score'] == 1
    assert entry['deathCount'] == 2
    assert entry['verified'] == 0
    assert entry['playerInfo'] == {'teamMember': 0}
    assert isinstance(entry['timestamp'], int)


def test_score_submission_requires_complete_payload(client, register):
    player_id, token = register('alice')
    body = _auth_post(client, '/score', player_id, token, {'score': 0, 'deathCount': 0})
    assert body['successful'] is False
    body = _auth_post(client, '/score', player_id, body['accessToken'], {'mode': 'unknown', 'score': 0, 'deathCount': 0})
    assert body['successful'] is False
    body = _auth_post(client, '/score', player_id, body['accessToken'], None)
    assert body['successful'] is False
    assert client.get('/playerScores', query_string={'username': 'alice'}).get_json() == {'scores': []}


def test_leaderboard_endpoint(client, register):
    for username, steps in [('alice', 3), ('bob', 1), ('carol', 2)]:
        player_id, token = register(username)
        for score in range(1, steps + 1):
            body = _auth_post(client, '/score', player_id, token, {'mode': 'hard', 'score': score, 'deathCount': 0})
            assert body['successful'] is True
            token = body['accessToken']

    board = client.get('/scores', query_string={'mode': 'hard'}).get_json()['scores']
    assert [(e['username'], e['score']) for e in board] == [('alice', 3), ('carol', 2), ('bob', 1)]

    top = client.get('/scores', query_string={'mode': 'hard', 'limit': 1, 'timeframe': 'day'}).get_json()
    assert [e['username'] for e in top['scores']] == ['alice']

    assert client.get('/scores', query_string={'mode': 'easy'}).get_json() == {'scores': []}
    assert client.get('/scores', query_string={'mode': 'nope'}).get_json() == {'scores': []}
    assert client.get('/scores').get_json() == {'scores': []}
    assert client.get('/scores', query_string={'mode': 'hard', 'limit': 0}).get_json() == {'scores': []}


def test_achievement_endpoints(client, register):
    player_id, token = register('alice')
    first = _auth_post(client, '/addAchievement', player_id, token, {'achievement': 'speedrun'})
    assert first['successful'] is True
    assert first['data'] is True

    again = _auth_post(client, '/addAchievement', player_id, first['accessToken'], {'achievement': 'speedrun'})
    assert again['authError'] is False
    assert again['successful'] is False
    assert again['accessToken'] != first['accessToken']

    body = client.get('/playerAchievements', query_string={'username': 'alice'}).get_json()
    assert body == {'achievements': ['speedrun']}
    assert client.get('/playerAchievements', query_string={'username': 'ghost'}).get_json() == {'achievements': []}
    assert client.get('/playerAchievements').get_json() == {'achievements': []}


def test_oversized_death_count_rotates_and_fails(client, register):
    player_id, token = register('alice')
    body = _auth_post(client, '/score', player_id, token, {'mode': 'easy', 'score': 0, 'deathCount': 10**20})
    assert body['authError'] is False
    assert body['successful'] is False
    assert body['accessToken'] != token

    # The session is still usable for the next request
    follow_up = _auth_post(client, '/score', player_id, body['accessToken'], {'mode': 'easy', 'score': 0, 'deathCount': 1})
    assert follow_up['successful'] is True
