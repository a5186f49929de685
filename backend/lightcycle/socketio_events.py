from flask import request

from lightcycle import get_controller, socketio


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect(auth=None):
    get_controller().connect(_get_sid())


def handle_disconnect(reason=None):
    get_controller().disconnect(_get_sid())


def handle_direction(data=None):
    get_controller().direction(_get_sid(), data)


def handle_start(data=None):
    get_controller().start(_get_sid())


def handle_restart(data=None):
    get_controller().restart(_get_sid())


def socket_emitter(namespace: str = '/'):
    """Controller output -> Socket.IO. `to=None` broadcasts to every connection."""

    def _emit(event, payload=None, to=None):
        args = () if payload is None else (payload,)
        socketio.emit(event, *args, to=to, namespace=namespace)

    return _emit


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on the given namespace.

    `dir` is the short event name used by the reference browser client and is
    handled the same as `direction`.
    """
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('direction', handle_direction, namespace=namespace)
    socketio.on_event('dir', handle_direction, namespace=namespace)
    socketio.on_event('start', handle_start, namespace=namespace)
    socketio.on_event('restart', handle_restart, namespace=namespace)
