from flask import current_app, request

from arena import socketio
from arena.errors import ArenaError


def _router():
    return current_app.extensions['arena_router']


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _dispatch(event, handler, *args):
    sid = _get_sid()
    try:
        handler(sid, *args)
    except ArenaError as exc:
        current_app.logger.debug(f"[drop] sid={sid} event={event} reason={exc}")


def handle_connect(auth=None):
    _router().connect(_get_sid())


def handle_disconnect(reason=None):
    _router().disconnect(_get_sid())


def handle_player_moved(data=None):
    _dispatch('player-moved', _router().move, data)


def handle_collectible_claim(data=None):
    _dispatch('collectible-claim', _router().claim, data)


def handle_chat(data=None):
    _dispatch('chat', _router().chat, data)


def handle_pause_toggle(data=None):
    _dispatch('pause-toggle', _router().toggle_pause)


def handle_match_status(data=None):
    _dispatch('match-status', _router().match_status)


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register the arena's Socket.IO event handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('player-moved', handle_player_moved, namespace=namespace)
    socketio.on_event('collectible-claim', handle_collectible_claim, namespace=namespace)
    socketio.on_event('chat', handle_chat, namespace=namespace)
    socketio.on_event('pause-toggle', handle_pause_toggle, namespace=namespace)
    socketio.on_event('match-status', handle_match_status, namespace=namespace)
