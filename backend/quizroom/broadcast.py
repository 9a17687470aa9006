"""Broadcast gateways: fan room events out to subscribed connections.

Rooms only ever talk to the ``BroadcastGateway`` interface. The Socket.IO
gateway is what the web app wires in; the in-memory gateway delivers to
plain callables and is handy for embedding and tests.
"""
import logging
import threading
from collections import defaultdict
from typing import Any, Callable, Dict, List

from flask_socketio import join_room, leave_room

logger = logging.getLogger(__name__)


def room_channel(room_code: str) -> str:
    return f"room:{room_code.upper()}"


class BroadcastGateway:
    """Publish/subscribe capability used by rooms."""

    def publish(self, room_code: str, event: str, payload: Dict[str, Any]) -> None:
        raise NotImplementedError

    def subscribe(self, connection, room_code: str) -> None:
        raise NotImplementedError

    def unsubscribe(self, connection, room_code: str) -> None:
        raise NotImplementedError


class SocketIOGateway(BroadcastGateway):
    """Deliver events to the Socket.IO room ``room:<CODE>``.

    ``connection`` is a Socket.IO session id. Subscribing must happen from a
    Socket.IO event handler, as ``join_room`` requires.
    """

    def __init__(self, socketio, namespace: str = '/'):
        self.socketio = socketio
        self.namespace = namespace

    def publish(self, room_code, event, payload):
        # socketio.emit works outside request context, e.g. from timer tasks
        self.socketio.emit(event, payload, to=room_channel(room_code), namespace=self.namespace)

    def subscribe(self, connection, room_code):
        join_room(room_channel(room_code), sid=connection, namespace=self.namespace)
        logger.info(f"[subscribe] sid={connection} room={room_code}")

    def unsubscribe(self, connection, room_code):
        leave_room(room_channel(room_code), sid=connection, namespace=self.namespace)
        logger.info(f"[unsubscribe] sid={connection} room={room_code}")


class InMemoryGateway(BroadcastGateway):
    """Deliver events synchronously to callables ``connection(event, payload)``.

    Rooms publish while holding their own non-reentrant lock, so a callable
    runs inside that lock. It may read plain room attributes, which already
    reflect the change being announced, but must not call back into a locking
    room method such as ``to_dict`` or ``submit_answer`` on the same room; that
    deadlocks. Hand such work to another thread or queue instead.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers: Dict[str, List[Callable[[str, Dict[str, Any]], None]]] = defaultdict(list)

    def publish(self, room_code, event, payload):
        with self._lock:
            targets = list(self._subscribers.get(room_code.upper(), ()))
        for deliver in targets:
            deliver(event, payload)

    def subscribe(self, connection, room_code):
        with self._lock:
            subs = self._subscribers[room_code.upper()]
            if connection not in subs:
                subs.append(connection)

    def unsubscribe(self, connection, room_code):
        with self._lock:
            subs = self._subscribers.get(room_code.upper(), [])
            if connection in subs:
                subs.remove(connection)
