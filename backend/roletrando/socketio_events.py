from flask import current_app, request
from flask_socketio import disconnect, emit
from roletrando import socketio
from roletrando.protocol import MalformedRequest, decode_message
from roletrando.ranking import RankingLoadError
from roletrando.services import get_services
from roletrando.session import GameSession, SessionClosed
from roletrando.words import WordSupplyError
from typing import Dict, Optional

# One game session per connected socket, keyed by Socket.IO sid
_sessions: Dict[str, GameSession] = {}


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _end_session(sid: str, reason: str) -> Optional[GameSession]:
    session = _sessions.pop(sid, None)
    if session is not None:
        session.close()
        current_app.logger.info(f"[session-end] sid={sid} user={session.username} reason={reason}")
    return session


def handle_connect():
    try:
        session = get_services().new_session()
    except (WordSupplyError, RankingLoadError) as exc:
        current_app.logger.error(f"[connect] refusing connection, game data unavailable: {exc}")
        return False
    _sessions[_get_sid()] = session
    current_app.logger.info(f"[connect] sid={_get_sid()} sessions={len(_sessions)}")
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(*args):
    _end_session(_get_sid(), 'disconnect')


def handle_request(data):
    """Dispatch one request; the return value is the acknowledgement."""
    sid = _get_sid()
    session = _sessions.get(sid)
    if session is None:
        current_app.logger.warning(f"[request] sid={sid} has no session")
        disconnect()
        return None
    try:
        req = decode_message(data)
        value = session.handle(req)
    except (MalformedRequest, SessionClosed) as exc:
        current_app.logger.warning(f"[request] sid={sid} aborting session: {exc}")
        _end_session(sid, 'malformed')
        disconnect()
        return None
    except Exception:
        current_app.logger.exception(f"[request] sid={sid} request failed, aborting session")
        _end_session(sid, 'error')
        disconnect()
        return None
    if session.closed:
        _end_session(sid, 'terminate')
        disconnect()
    return value


def session_count() -> int:
    return len(_sessions)


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    socketio.on_event('connect', handle_connect, namespace='/ws')
    socketio.on_event('disconnect', handle_disconnect, namespace='/ws')
    socketio.on_event('request', handle_request, namespace='/ws')

    if testing:
        socketio.on_event('connect', handle_connect, namespace='/')
        socketio.on_event('disconnect', handle_disconnect, namespace='/')
        socketio.on_event('request', handle_request, namespace='/')
