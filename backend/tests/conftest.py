import os
import sys
import pytest

# Ensure the backend root (containing the `champions` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from champions import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    BCRYPT_LOG_ROUNDS = 4
    LOG_LEVEL = 'WARNING'
    CORS_ORIGINS = []
    LEADERBOARD_LIMIT = 10
    LEADERBOARD_INCLUDE_GUESTS = True
    WORD_LIST_MIN_WORDS = 5
    WORD_LIST_MAX_WORDS = 500
    DEFAULT_SESSION_WORDS = 10
    CHALLENGE_WIN_REWARD = 1
    GUEST_ID_HEADER = 'X-Guest-Id'


LIST_WORDS = ['apple', 'banana', 'cherry', 'grape', 'lemon', 'mango']
EASY_WORDS = ['cat', 'dog', 'sun', 'hat', 'pig', 'run']


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import champions.models  # noqa: F401
        db.create_all()
    # Requests must each push their own app context, otherwise `g` (and the
    # user Flask-Login caches on it) leaks from one client to the next.
    # Tests that touch the database directly open a short context themselves.
    yield application
    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def make_client(flask_app):
    """Factory for a logged-in test client; each client keeps its own cookie jar."""
    def _make(username, password='password1'):
        c = flask_app.test_client()
        res = c.post('/api/register', json={'username': username, 'password': password})
        assert res.status_code == 201, res.get_json()
        c.user = res.get_json()
        return c
    return _make


@pytest.fixture()
def alice(make_client):
    return make_client('alice')


@pytest.fixture()
def bob(make_client):
    return make_client('bob')


@pytest.fixture()
def guest_headers():
    return {'X-Guest-Id': 'guest-device-0001'}


@pytest.fixture()
def easy_words(flask_app):
    from champions.models import Word
    with flask_app.app_context():
        for text in EASY_WORDS:
            db.session.add(Word(word=text, difficulty='easy'))
        db.session.commit()
    return EASY_WORDS


@pytest.fixture()
def word_list(alice):
    res = alice.post('/api/word-lists', json={'name': 'Fruit', 'words': LIST_WORDS, 'visibility': 'public'})
    assert res.status_code == 201, res.get_json()
    return res.get_json()


def play(c, word_list_id=None, answers=None, game_mode='standard', headers=None, total_words=None, **extra):
    """Create a session, submit ``answers`` as (word, answer) pairs and complete it."""
    body = {'gameMode': game_mode}
    if word_list_id is not None:
        body['wordListId'] = word_list_id
    if total_words is not None:
        body['totalWords'] = total_words
    body.update(extra)
    res = c.post('/api/sessions', json=body, headers=headers)
    assert res.status_code == 201, res.get_json()
    session = res.get_json()
    for word, answer in answers or []:
        res = c.post(f"/api/sessions/{session['id']}/attempts", json={'word': word, 'userAnswer': answer}, headers=headers)
        assert res.status_code == 201, res.get_json()
    res = c.post(f"/api/sessions/{session['id']}/complete", json={}, headers=headers)
    assert res.status_code == 200, res.get_json()
    return res.get_json()


def perfect(words):
    return [(w, w) for w in words]


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass
