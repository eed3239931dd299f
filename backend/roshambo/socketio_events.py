from flask import current_app, request
from flask_socketio import join_room, leave_room, emit
from roshambo import socketio, get_registry
from roshambo.models import InvalidChoiceError
from roshambo.services.game import SessionNotFound
from typing import Dict, Any


_sid_to_ctx: Dict[str, Dict[str, Any]] = {}


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _session_code(data):
    if not isinstance(data, dict):
        emit('error', {'message': 'payload must be an object'})
        return None
    code = data.get('session_code')
    if not isinstance(code, str) or not code:
        emit('error', {'message': 'session_code is required'})
        return None
    return code.upper()


def _lookup(code):
    try:
        return get_registry().get(code)
    except SessionNotFound:
        emit('error', {'message': f'Session {code} not found'})
        return None


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(*_args):
    # The owning socket going away ends its session
    ctx = _sid_to_ctx.pop(_get_sid(), None)
    if not ctx or not ctx.get('is_session_owner'):
        return
    _end_session(ctx['session_code'])


def handle_join_session(data):
    code = _session_code(data)
    if not code:
        return
    session = _lookup(code)
    if session is None:
        return
    room = f"session:{code}"
    join_room(room)
    _sid_to_ctx[_get_sid()] = {
        'session_code': code,
        'is_session_owner': bool(data.get('is_session_owner')),
    }
    emit('joined', {'room': room})
    emit('state_update', {'session_code': code, 'state': session.to_dict()})


def handle_leave_session(data):
    code = _session_code(data)
    if not code:
        return
    room = f"session:{code}"
    leave_room(room)
    emit('left', {'room': room})
    # Explicit quit by the owner ends the session immediately
    ctx = _sid_to_ctx.get(_get_sid())
    if ctx and ctx.get('is_session_owner') and ctx.get('session_code') == code:
        _sid_to_ctx.pop(_get_sid(), None)
        _end_session(code)


def handle_select_choice(data):
    code = _session_code(data)
    if not code:
        return
    session = _lookup(code)
    if session is None:
        return
    try:
        session.select_choice(data.get('choice'))
    except InvalidChoiceError as exc:
        emit('error', {'message': str(exc)})


def handle_new_game(data):
    code = _session_code(data)
    session = _lookup(code) if code else None
    if session is not None:
        session.new_game()


def handle_reset_score(data):
    code = _session_code(data)
    session = _lookup(code) if code else None
    if session is not None:
        session.reset_score()


def handle_ping(data):
    emit('pong', data or {})


def notify_session_ended(session_code: str) -> None:
    # Use socketio.emit since this may be called outside a socket handler
    socketio.emit('session_ended', {'session_code': session_code}, to=f"session:{session_code}", namespace='/ws')


def _end_session(session_code: str) -> None:
    notify_session_ended(session_code)
    if get_registry().end(session_code):
        current_app.logger.info(f"[session-end] session={session_code} reason=owner-left")


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    handlers = {
        'connect': handle_connect,
        'disconnect': handle_disconnect,
        'join_session': handle_join_session,
        'leave_session': handle_leave_session,
        'select_choice': handle_select_choice,
        'new_game': handle_new_game,
        'reset_score': handle_reset_score,
        'ping': handle_ping,
    }
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        for event, handler in handlers.items():
            socketio.on_event(event, handler, namespace=namespace)
