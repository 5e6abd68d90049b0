import os
import sys
import pytest

# Ensure the backend root (containing the `arena` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from arena import create_app, socketio
from config import Config


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret'
    TEAM_POLICY = 'alternate'
    ARENA_SEED = 7
    MATCH_DURATION_SEC = 120
    CLOCK_BROADCAST = 'pull'


class RecordingFanout:
    """Collects outbound messages instead of emitting them."""

    def __init__(self):
        self.sent = []

    def send(self, event, payload, scope, origin=None):
        self.sent.append((event, payload, scope, origin))

    def events(self, scope=None):
        return [e for e, _, s, _ in self.sent if scope is None or s is scope]

    def clear(self):
        self.sent = []


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def router(flask_app):
    return flask_app.extensions['arena_router']


@pytest.fixture()
def connect(flask_app):
    """Factory for connected Socket.IO test clients; all are disconnected on teardown."""
    clients = []

    def _connect():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _connect
    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass


@pytest.fixture()
def recording_fanout():
    return RecordingFanout()


@pytest.fixture()
def make_router(recording_fanout):
    """Build a standalone router over a recording fanout from config overrides."""
    import random
    from arena.router import build_router

    def _make(**overrides):
        settings = {k: getattr(TestConfig, k) for k in dir(TestConfig) if k.isupper()}
        settings.update(overrides)
        return build_router(settings, recording_fanout, rng=random.Random(settings.get('ARENA_SEED')))

    return _make
