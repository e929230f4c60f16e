"""
Pytest configuration and fixtures for Rocket Handler tests.
"""

import json
import logging
from collections.abc import Iterator
from typing import Any
from unittest.mock import MagicMock

import pytest

from rockethandler.config import HandlerConfig
from rockethandler.event import Event
from rockethandler.logging_config import ROOT_LOGGER


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Undo setup_logging() so caplog sees records in every test."""
    yield
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def make_event(status: int = 2, output: str = "CPU at 98%", **annotations: str) -> Event:
    """Build a validated event for entity 'web-01' and check 'check-cpu'."""
    return Event.model_validate({
        "timestamp": 1700000000,
        "entity": {
            "entity_class": "agent",
            "metadata": {"name": "web-01", "namespace": "default"},
        },
        "check": {
            "metadata": {"name": "check-cpu", "annotations": annotations},
            "output": output,
            "status": status,
        },
    })


def api_response(body: dict[str, Any] | str, status_code: int = 200) -> MagicMock:
    """Fake requests.Response carrying a JSON (or raw text) body."""
    response = MagicMock()
    response.status_code = status_code
    response.text = body if isinstance(body, str) else json.dumps(body)
    return response


LOGIN_OK = {
    "status": "success",
    "data": {
        "authToken": "T1",
        "userId": "U1",
        "me": {"username": "alice", "roles": ["user"]},
    },
}
LOGIN_FAILED = {"status": "failed", "error": 401, "message": "invalid credentials"}
USER_INFO_BOT = {"success": True, "user": {"type": "bot", "roles": ["bot", "user"]}}
USER_INFO_PLAIN = {"success": True, "user": {"type": "user", "roles": ["user"]}}
POST_OK = {"success": True}
LOGOUT_OK = {"status": "success", "data": {"message": "You've been logged out!"}}


@pytest.fixture
def event() -> Event:
    """A critical check-cpu event."""
    return make_event()


@pytest.fixture
def user_config() -> HandlerConfig:
    """User/password config for channel 'ops'."""
    return HandlerConfig(
        url="https://chat.example.com",
        channel="ops",
        user="alice",
        password="pw",
    )


@pytest.fixture
def token_config() -> HandlerConfig:
    """Token/userID config for channel 'ops'."""
    return HandlerConfig(
        url="https://chat.example.com",
        channel="ops",
        token="T2",
        user_id="U2",
    )
