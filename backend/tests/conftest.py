import os
import sys
import pytest

# Ensure the backend root (containing the `quizroom` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from quizroom import create_app, socketio
from quizroom.broadcast import InMemoryGateway, SocketIOGateway
from quizroom.services.rooms.store import RoomStore


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ORIGINS = ['*']
    ROOM_CODE_LENGTH = 8
    SOCKETIO_NAMESPACE = '/'
    TIMER_HEARTBEAT_SEC = 0


class FakeClock:
    """Settable clock; starts at a fixed epoch and only moves when told to."""

    def __init__(self, now=1_700_000_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class ManualScheduler:
    """Collects scheduled callbacks so tests decide when timers fire."""

    def __init__(self):
        self.scheduled = []

    def schedule(self, delay, callback, label=''):
        self.scheduled.append((delay, callback, label))

    def fire_all(self):
        pending, self.scheduled = self.scheduled, []
        return [callback() for _, callback, _ in pending]


class EventRecorder:
    """Subscriber for InMemoryGateway that keeps every event it receives."""

    def __init__(self):
        self.events = []

    def __call__(self, event, payload):
        self.events.append((event, payload))

    def named(self, name):
        return [payload for event, payload in self.events if event == name]

    @property
    def names(self):
        return [event for event, _ in self.events]


QUESTIONS = [
    {'question': 'Capital of France?', 'options': ['Paris', 'Rome'], 'correctAnswer': 'Paris'},
    {'question': '2 + 2?', 'options': [3, 4], 'correctAnswer': 4},
]


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def gateway():
    return InMemoryGateway()


@pytest.fixture()
def store(gateway, scheduler, clock):
    return RoomStore(gateway=gateway, scheduler=scheduler, clock=clock)


@pytest.fixture()
def recorder():
    return EventRecorder()


@pytest.fixture()
def flask_app(scheduler, clock):
    room_store = RoomStore(
        gateway=SocketIOGateway(socketio, namespace=TestConfig.SOCKETIO_NAMESPACE),
        scheduler=scheduler,
        clock=clock,
    )
    application = create_app(TestConfig, room_store=room_store)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
    yield test_client
    if test_client.is_connected():
        test_client.disconnect()
