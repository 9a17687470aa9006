from flask import current_app, request
from flask_socketio import emit
from quizroom import get_room_store, socketio
from quizroom.broadcast import room_channel
from typing import Any, Dict, Optional


def handle_connect(auth=None):
    current_app.logger.info(f"[connect] sid={_get_sid()}")


def handle_disconnect(*args):
    # Socket.IO drops the sid from its rooms on its own
    current_app.logger.info(f"[disconnect] sid={_get_sid()}")


def handle_join_room(data):
    room_code = _room_code_from(data)
    if not room_code:
        emit('error', {'message': 'roomCode is required'})
        return
    # Subscribing does not require the room to exist yet, nor the HTTP join
    get_room_store().gateway.subscribe(_get_sid(), room_code)
    emit('joined', {'room': room_channel(room_code)})


def handle_leave_room(data):
    room_code = _room_code_from(data)
    if not room_code:
        emit('error', {'message': 'roomCode is required'})
        return
    get_room_store().gateway.unsubscribe(_get_sid(), room_code)
    emit('left', {'room': room_channel(room_code)})


def handle_ping(data):
    emit('pong', data or {})


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _room_code_from(data: Any) -> Optional[str]:
    if isinstance(data, str):
        return data.strip().upper() or None
    if isinstance(data, dict):
        code = data.get('roomCode')
        if isinstance(code, str) and code.strip():
            return code.strip().upper()
    return None


_HANDLERS: Dict[str, Any] = {
    'connect': handle_connect,
    'disconnect': handle_disconnect,
    'join-room': handle_join_room,
    'leave-room': handle_leave_room,
    'ping': handle_ping,
}


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on the given namespace."""
    for event, handler in _HANDLERS.items():
        socketio.on_event(event, handler, namespace=namespace)
