"""Shared fixtures for the xts_interactive test suite.

FakeSocket stands in for socketio.Client and ManualScheduler replaces the
threaded reconnect timer, so the socket client runs without a server and
without real time passing.
"""

from typing import Any, Callable, Dict, List
from unittest.mock import MagicMock

import pytest

from xts_interactive.api_client import APIClient
from xts_interactive.session import InteractiveSession

TEST_URL = "http://test-api.com"


class FakeSocket:
    def __init__(self):
        self.handlers: Dict[str, Callable] = {}
        self.connect_calls: List[tuple] = []
        self.disconnected = False
        self.connect_error = None

    def on(self, event, handler):
        self.handlers[event] = handler

    def connect(self, url, **kwargs):
        self.connect_calls.append((url, kwargs))
        if self.connect_error is not None:
            # socketio.Client fires connect_error with the message, then raises
            handler = self.handlers.get("connect_error")
            if handler:
                handler(str(self.connect_error))
            raise self.connect_error

    def disconnect(self):
        self.disconnected = True

    def fire(self, event, *args):
        return self.handlers[event](*args)


class FakeSocketFactory:
    def __init__(self):
        self.created: List[FakeSocket] = []
        self.connect_error = None

    def __call__(self):
        sock = FakeSocket()
        sock.connect_error = self.connect_error
        self.created.append(sock)
        return sock

    @property
    def last(self) -> FakeSocket:
        return self.created[-1]


class ManualHandle:
    def __init__(self, scheduler, interval, callback):
        self.scheduler = scheduler
        self.interval = interval
        self.callback = callback
        self.next_due = scheduler.now + interval
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Virtual-time stand-in for TimerScheduler."""
    def __init__(self):
        self.now = 0.0
        self.handles: List[ManualHandle] = []

    def call_every(self, interval, callback):
        h = ManualHandle(self, interval, callback)
        self.handles.append(h)
        return h

    @property
    def active(self) -> List[ManualHandle]:
        return [h for h in self.handles if not h.cancelled]

    def advance(self, seconds: float):
        target = self.now + seconds
        while True:
            due = [h for h in self.active if h.next_due <= target]
            if not due:
                break
            h = min(due, key=lambda x: x.next_due)
            self.now = h.next_due
            h.next_due += h.interval
            h.callback()
        self.now = target


@pytest.fixture
def client():
    return MagicMock(spec=APIClient)


@pytest.fixture
def session(client):
    return InteractiveSession(url=TEST_URL, client=client)


def login_response(token="T", enums=None, client_codes=None, investor=False) -> Dict[str, Any]:
    return {
        "type": "success",
        "result": {
            "token": token,
            "enums": enums if enums is not None else {},
            "clientCodes": client_codes if client_codes is not None else ["C1"],
            "isInvestorClient": investor,
        },
    }


@pytest.fixture
def logged_in(session, client):
    client.request.return_value = login_response(token="mockToken")
    session.login({"userID": "u", "password": "p", "publicKey": "k", "source": "s"})
    client.request.reset_mock()
    client.request.return_value = {"type": "success", "result": {}}
    return session


@pytest.fixture
def investor(session, client):
    client.request.return_value = login_response(token="mockToken", investor=True)
    session.login({"userID": "u", "password": "p", "publicKey": "k", "source": "s"})
    client.request.reset_mock()
    client.request.return_value = {"type": "success", "result": {}}
    return session


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def sockets():
    return FakeSocketFactory()
