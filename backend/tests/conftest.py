import os
import random
import sys
import pytest

# Ensure the backend root (containing the `lightcycle` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from lightcycle import create_app, get_controller, socketio
from lightcycle.services.match import MatchState


class TestConfig:
    TESTING = True
    SECRET_KEY = 'test-secret'
    BOARD_WIDTH = 600
    BOARD_HEIGHT = 600
    CELL_SIZE = 20
    TICKS_PER_SECOND = 15
    START_TRAIL_CAPACITY = 3
    HOST = '127.0.0.1'
    PORT = 3000
    CORS_ORIGINS = '*'
    SOCKETIO_NAMESPACE = '/'
    TICK_HEARTBEAT_SEC = 0
    ALLOW_UNSAFE_WERKZEUG = False


class RecordingEmitter:
    """Collects controller output as (event, payload, to) tuples."""

    def __init__(self):
        self.sent = []

    def __call__(self, event, payload=None, to=None):
        self.sent.append((event, payload, to))

    def names(self):
        return [event for event, _, _ in self.sent]

    def last(self, event):
        for name, payload, to in reversed(self.sent):
            if name == event:
                return payload, to
        return None

    def clear(self):
        self.sent.clear()


@pytest.fixture()
def match():
    return MatchState(600, 600, 20, rng=random.Random(7))


@pytest.fixture()
def emitter():
    return RecordingEmitter()


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def controller(flask_app):
    return get_controller(flask_app)


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    """Factory for Socket.IO test clients; each call is a new connection."""
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
