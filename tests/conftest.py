"""Shared fixtures: socket doubles and a fresh app per test."""
from unittest.mock import AsyncMock, MagicMock

import pytest
from starlette.websockets import WebSocketState

from colorrelay.config import Settings
from colorrelay.main import create_app


def fake_socket(open_=True):
    """A stand-in for a Starlette WebSocket with awaitable send/close."""
    ws = MagicMock()
    state = WebSocketState.CONNECTED if open_ else WebSocketState.DISCONNECTED
    ws.client_state = state
    ws.application_state = state
    ws.send_text = AsyncMock()
    ws.close = AsyncMock()
    return ws


@pytest.fixture
def make_socket():
    return fake_socket


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def app(settings):
    return create_app(settings)
