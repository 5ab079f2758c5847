# xts_interactive/socket_client.py
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional
from urllib.parse import urlencode

import socketio

from . import config
from .emitter import EventEmitter
from .scheduler import TimerScheduler

logger = logging.getLogger("xts_interactive.socket_client")
logger.setLevel(logging.INFO)

CONNECT = "connect"
ERROR = "error"
DISCONNECT = "disconnect"
CONNECT_ERROR = "connect_error"


def default_socket_factory() -> socketio.Client:
    return socketio.Client(reconnection=False)


@dataclass
class StreamConnection:
    is_connected: bool = False
    socket: Optional[Any] = None
    interval: Optional[Any] = None


class InteractiveSocket:
    """
    Push notifications (order / trade / position / logout) for one user.
    Keeps at most one socket open; after a disconnect, retries init() every
    reconnect_interval seconds until the socket reports connect again.
    """
    def __init__(self, url: Optional[str] = None, scheduler=None,
                 socket_factory: Optional[Callable[[], Any]] = None,
                 reconnect_interval: float = config.RECONNECT_INTERVAL):
        self.url = url if url is not None else config.DEFAULT_URL
        self.user_id: Optional[str] = None
        self.token: Optional[str] = None
        self.connection = StreamConnection()
        self.events = EventEmitter()
        self.scheduler = scheduler or TimerScheduler()
        self.socket_factory = socket_factory or default_socket_factory
        self.reconnect_interval = reconnect_interval

    @property
    def is_connected(self) -> bool:
        return self.connection.is_connected

    # -------------------- connection --------------------
    def init(self, user_id: str, token: str):
        self.user_id = user_id
        self.token = token

        if self.connection.socket is not None:
            old, self.connection.socket = self.connection.socket, None
            try:
                old.disconnect()
            except Exception:
                logger.exception("failed to disconnect previous socket")

        sio = self.socket_factory()
        self.connection.socket = sio
        self._register_handlers(sio)

        query = urlencode({"token": self.token, "userID": self.user_id})
        logger.info("socket is initialized with the following parameters url %s token %s userID %s",
                    self.url, self.token, self.user_id)
        try:
            sio.connect(f"{self.url}?{query}", socketio_path=config.SOCKET_PATH)
        except socketio.exceptions.ConnectionError as e:
            # connect_error handler has already published the error event
            logger.info("socket connect failed: %s", e)
        return sio

    def _register_handlers(self, sio):
        sio.on(CONNECT, self._on_connect)
        sio.on(config.SOCKET_EVENTS["joined"], self._on_joined)
        sio.on(CONNECT_ERROR, self._on_connect_error)
        sio.on(ERROR, self._on_error)
        sio.on(DISCONNECT, self._on_disconnect)
        for key in ("order", "trade", "position", "logout"):
            sio.on(config.SOCKET_EVENTS[key], self._relay(key))

    # -------------------- socket handlers --------------------
    def _on_connect(self, *args):
        self.connection.is_connected = True
        logger.info("socket connected successfully")
        self.events.emit(CONNECT, args[0] if args else None)

    def _on_joined(self, data=None):
        logger.info("socket joined successfully")
        self.events.emit(config.SOCKET_EVENTS["joined"], data)

    def _on_connect_error(self, err=None):
        if isinstance(err, dict):
            message = err.get("message")
            description = err.get("description", err.get("data"))
            cause = err.get("cause")
        else:
            message, description, cause = (str(err) if err is not None else None), None, None
        logger.error("socket connection error: %s", message)
        # reconnection=False, nothing retries from here
        self.events.emit(ERROR, {"type": CONNECT_ERROR, "message": message,
                                 "description": description, "cause": cause})

    def _on_error(self, data=None):
        logger.info("socket error occurred")
        self.events.emit(ERROR, data)

    def _on_disconnect(self, *args):
        logger.info("socket got disconnected")
        self.connection.is_connected = False
        self._schedule_reconnect()
        self.events.emit(DISCONNECT, args[0] if args else None)

    def _schedule_reconnect(self):
        # an earlier pending check is not cancelled here; it stops on its own
        # once the socket is connected again
        def tick():
            if self.connection.is_connected:
                handle.cancel()
                if self.connection.interval is handle:
                    self.connection.interval = None
                return
            logger.info("socket reconnect attempt for userID %s", self.user_id)
            self.init(self.user_id, self.token)

        handle = self.scheduler.call_every(self.reconnect_interval, tick)
        self.connection.interval = handle

    def _relay(self, key: str):
        event = config.SOCKET_EVENTS[key]

        def handler(data=None):
            logger.info("inside %s response channel", key)
            self.events.emit(event, data)
        return handler

    # -------------------- listeners --------------------
    def _parsed(self, key: str, fn: Callable[[Any], None]):
        def listener(data):
            try:
                payload = json.loads(data)
            except (TypeError, ValueError) as e:
                logger.info("Error parsing %s data: %s, raw data: %s", key, e, data)
                fn(data)
                return
            fn(payload)
        return self.events.on(config.SOCKET_EVENTS[key], listener)

    def on_connect(self, fn: Callable[[Any], None]):
        return self.events.on(CONNECT, fn)

    def on_joined(self, fn: Callable[[Any], None]):
        return self.events.on(config.SOCKET_EVENTS["joined"], fn)

    def on_error(self, fn: Callable[[Any], None]):
        return self.events.on(ERROR, fn)

    def on_disconnect(self, fn: Callable[[Any], None]):
        return self.events.on(DISCONNECT, fn)

    def on_order(self, fn: Callable[[Any], None]):
        return self._parsed("order", fn)

    def on_trade(self, fn: Callable[[Any], None]):
        return self._parsed("trade", fn)

    def on_position(self, fn: Callable[[Any], None]):
        return self._parsed("position", fn)

    def on_logout(self, fn: Callable[[Any], None]):
        return self._parsed("logout", fn)
