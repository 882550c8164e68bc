from conftest import LIST_WORDS, perfect, play


def test_register_login_and_user(client):
    res = client.post('/api/register', json={'username': 'carol', 'password': 'secret1'})
    assert res.status_code == 201
    assert res.get_json()['stars'] == 0

    assert client.post('/api/logout').status_code == 200
    assert client.get('/api/user').status_code == 401

    res = client.post('/api/login', json={'username': 'carol', 'password': 'wrong'})
    assert res.status_code == 401
    res = client.post('/api/login', json={'username': 'carol', 'password': 'secret1'})
    assert res.status_code == 200

    me = client.get('/api/user').get_json()
    assert me['username'] == 'carol'
    assert me['unlockedThemes'] == ['default']


def test_register_rejects_duplicates_and_short_passwords(client, alice):
    res = client.post('/api/register', json={'username': 'alice', 'password': 'secret1'})
    assert res.status_code == 400
    assert res.get_json()['field'] == 'username'
    res = client.post('/api/register', json={'username': 'dave', 'password': 'abc'})
    assert res.status_code == 400
    assert res.get_json()['field'] == 'password'


def test_theme_requires_ownership(alice):
    res = alice.patch('/api/user', json={'selectedTheme': 'pirate'})
    assert res.status_code == 403
    res = alice.patch('/api/user', json={'selectedTheme': 'nope'})
    assert res.status_code == 400
    res = alice.patch('/api/user', json={'selectedTheme': 'default', 'selectedAvatar': 'owl'})
    assert res.status_code == 200
    assert res.get_json()['selectedAvatar'] == 'owl'


def test_guest_session_issues_id(client):
    res = client.post('/api/guest-session')
    assert res.status_code == 201
    assert len(res.get_json()['guestId']) >= 8


def test_session_requires_identity(client, word_list):
    res = client.post('/api/sessions', json={'wordListId': word_list['id']})
    assert res.status_code == 401


def test_full_session_scoring(alice, word_list):
    answers = perfect(LIST_WORDS[:4]) + [('lemon', 'lemn'), ('mango', 'mango')]
    session = play(alice, word_list['id'], answers)
    assert session['isComplete'] is True
    assert session['correctWords'] == 5
    assert session['incorrectWords'] == ['lemon']
    assert session['score'] == 50
    assert session['bestStreak'] == 4
    assert session['accuracy'] == 83
    assert session['difficulty'] == 'custom'


def test_attempt_rules(alice, word_list):
    res = alice.post('/api/sessions', json={'wordListId': word_list['id'], 'totalWords': 2})
    session_id = res.get_json()['id']
    url = f'/api/sessions/{session_id}/attempts'

    res = alice.post(url, json={'word': 'pineapple', 'userAnswer': 'pineapple'})
    assert res.status_code == 400

    assert alice.post(url, json={'word': 'apple', 'userAnswer': ' APPLE '}).get_json()['attempt']['isCorrect'] is True
    assert alice.post(url, json={'word': 'apple', 'userAnswer': 'apple'}).status_code == 409
    assert alice.post(url, json={'word': 'lemon', 'userAnswer': 'lemmon'}).status_code == 201
    # totalWords reached
    assert alice.post(url, json={'word': 'mango', 'userAnswer': 'mango'}).status_code == 409

    assert alice.post(f'/api/sessions/{session_id}/complete', json={}).status_code == 200
    assert alice.post(f'/api/sessions/{session_id}/complete', json={}).status_code == 409
    assert alice.post(url, json={'word': 'mango', 'userAnswer': 'mango'}).status_code == 409


def test_total_words_cannot_exceed_list(alice, word_list):
    res = alice.post('/api/sessions', json={'wordListId': word_list['id'], 'totalWords': 99})
    assert res.status_code == 400
    assert res.get_json()['field'] == 'totalWords'


def test_session_belongs_to_owner(alice, bob, word_list):
    session = alice.post('/api/sessions', json={'wordListId': word_list['id']}).get_json()
    assert bob.get(f"/api/sessions/{session['id']}").status_code == 403
    res = alice.get(f"/api/sessions/{session['id']}")
    assert res.status_code == 200
    assert res.get_json()['attempts'] == []


def test_guest_can_play_difficulty_tier(client, easy_words, guest_headers):
    session = play(client, answers=perfect(easy_words[:3]), headers=guest_headers, difficulty='easy', total_words=3)
    assert session['userId'] is None
    assert session['score'] == 30
    # A different device cannot read it
    res = client.get(f"/api/sessions/{session['id']}", headers={'X-Guest-Id': 'another-device-02'})
    assert res.status_code == 403


def test_difficulty_session_rejects_other_tiers(client, easy_words, guest_headers, flask_app):
    from champions import db
    from champions.models import Word
    with flask_app.app_context():
        db.session.add(Word(word='rhythm', difficulty='hard'))
        db.session.commit()
    session = client.post('/api/sessions', json={'difficulty': 'easy'}, headers=guest_headers).get_json()
    assert session['totalWords'] == 10
    res = client.post(
        f"/api/sessions/{session['id']}/attempts", json={'word': 'rhythm', 'userAnswer': 'rhythm'}, headers=guest_headers
    )
    assert res.status_code == 400


def test_word_lookup(client, easy_words):
    res = client.get('/api/words/by-text/Cat')
    assert res.status_code == 200
    assert res.get_json()['difficulty'] == 'easy'
    assert client.get('/api/words/by-text/zebra').status_code == 404


def test_unknown_route_is_json(client):
    res = client.get('/api/nowhere')
    assert res.status_code == 404
    assert 'error' in res.get_json()


def test_streaks_follow_attempts(alice, word_list):
    play(alice, word_list['id'], perfect(['apple', 'banana']) + [('cherry', 'chery'), ('grape', 'grape')])
    streak = alice.get('/api/streaks').get_json()
    assert streak == {'currentWordStreak': 1, 'longestWordStreak': 2}


def test_user_search_by_prefix(alice, make_client):
    make_client('albert')
    make_client('bobby')
    res = alice.get('/api/users/search?q=AL')
    assert res.status_code == 200
    assert [u['username'] for u in res.get_json()] == ['albert']
    assert alice.get('/api/users/search?q=%25').get_json() == []
    assert alice.get('/api/users/search').status_code == 400


def test_user_search_requires_login(client):
    assert client.get('/api/users/search?q=a').status_code == 401
