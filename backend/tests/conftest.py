import os
import sys
import pytest

# Ensure the backend root (containing the `leaderboard` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from leaderboard import create_app, db


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = 'DEBUG'
    CORS_ORIGINS = ['*']
    BCRYPT_LOG_ROUNDS = 4
    ACCESS_TOKEN_BYTES = 24
    MAX_SCORE = 999999
    LEADERBOARD_DEFAULT_LIMIT = 50
    LEADERBOARD_MAX_LIMIT = 100
    PRANKED_USERNAMES = frozenset({'FrostTaco'})


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import leaderboard.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def register(client):
    """Register through the API and return (id, accessToken)."""
    def _register(username, password='hunter22'):
        res = client.post('/userRegister', json={'username': username, 'password': password})
        body = res.get_json()
        assert body['successful'], body
        return body['id'], body['accessToken']
    return _register


@pytest.fixture()
def player(flask_app):
    from leaderboard.services.auth.credentials import create_player
    return create_player('alice', 'hunter22')


@pytest.fixture()
def stored_token(flask_app):
    """Read the token currently persisted for an account."""
    from leaderboard.models import Player

    def _stored_token(player_id):
        db.session.expire_all()
        return db.session.get(Player, player_id).access_token
    return _stored_token
