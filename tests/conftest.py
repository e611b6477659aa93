from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from forward_relay.common.config import MetricsConfig, RelayConfig
from forward_relay.forwarder.client import EventForwarder
from forward_relay.forwarder.scheduler import ForwardScheduler
from forward_relay.receiver.handler import ForwardActionsHandler
from forward_relay.receiver.server import create_app


FORWARD_URL_1 = "http://subscriber-one:8080/neeo/events"
FORWARD_URL_2 = "http://subscriber-two:9000/hooks/forward?token=abc"


class RecordingCallback:
    """Callback that remembers every event it was given."""

    def __init__(self):
        self.events = []

    def __call__(self, json):
        self.events.append(json)


def make_response_cm(status):
    """Async context manager yielding a response with the given status."""
    response = MagicMock()
    response.status = status
    cm = MagicMock()
    cm.__aenter__ = AsyncMock(return_value=response)
    cm.__aexit__ = AsyncMock(return_value=None)
    return cm


def make_request(body):
    """Stand-in for a FastAPI request carrying ``body``."""
    request = MagicMock()
    request.body = AsyncMock(return_value=body)
    return request


@pytest.fixture
def sample_body():
    """Fixture that provides a forward action payload as posted by the hub."""
    return (
        b'{"action":"POWER ON","actionparameter":null,'
        b'"recipe":"Watch TV","device":"Living Room TV","room":"Wohnzimmer K\xc3\xbcche"}'
    )


@pytest.fixture
def callback():
    return RecordingCallback()


@pytest.fixture
def mock_session():
    """Fixture that provides a mock aiohttp client session answering 200."""
    session = MagicMock()
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=None)
    session.post.side_effect = lambda url, **kwargs: make_response_cm(200)
    return session


@pytest.fixture
def session_factory(mock_session):
    return MagicMock(return_value=mock_session)


@pytest.fixture
def forwarder(session_factory):
    return EventForwarder(session_factory=session_factory)


@pytest.fixture
def scheduler():
    return ForwardScheduler(max_workers=2)


@pytest.fixture
def handler(scheduler, callback, forwarder):
    """Fixture that provides a handler relaying to two subscribers."""
    return ForwardActionsHandler(
        scheduler=scheduler,
        callback=callback,
        forward_chain=f"{FORWARD_URL_1},{FORWARD_URL_2}",
        forwarder=forwarder,
    )


@pytest.fixture
def relay_config():
    """Fixture that provides a sample relay configuration."""
    return RelayConfig(
        host="0.0.0.0",
        port=8000,
        log_level="INFO",
        path="/forwardactions",
        forward_chain=f"{FORWARD_URL_1},{FORWARD_URL_2}",
        max_workers=2,
        timeout=5,
        metrics=MetricsConfig(enabled=False),
    )


@pytest.fixture
def mock_scheduler():
    scheduler = MagicMock(spec=ForwardScheduler)
    scheduler.shutdown = AsyncMock()
    return scheduler


@pytest.fixture
def receiver_handler(mock_scheduler, callback, forwarder, relay_config):
    """Handler whose background jobs are recorded instead of run."""
    return ForwardActionsHandler(
        scheduler=mock_scheduler,
        callback=callback,
        forward_chain=relay_config.forward_chain,
        forwarder=forwarder,
    )


@pytest.fixture
def receiver_app(relay_config, receiver_handler):
    """Fixture that provides a configured receiver FastAPI app."""
    with patch("forward_relay.receiver.app.get_handler") as mock_get_handler:
        mock_get_handler.return_value = receiver_handler
        app = create_app(relay_config)
        yield app


@pytest.fixture
def receiver_client(receiver_app):
    """Fixture that provides a test client for the receiver API."""
    return TestClient(receiver_app)
