"""
Shared fixtures for the event handler test suite.

Unit tests build routers and handlers directly; integration tests go through
the FastAPI app or the Lambda entry point with the injector configured from
``test_settings``.
"""

import inject
import pytest

from src.event_handler.domain.models.invocation_context import InvocationContext
from src.event_handler.infrastructure.routing.router import EventRouter
from src.event_handler.infrastructure.streams.publisher import StreamsPublisher
from src.setup.api_config import ApiSettings
from src.setup.app_config import configure_di
from src.setup.router_config import configure_router


@pytest.fixture
def test_settings():
    """Settings with simulated delays disabled and no .env lookup."""
    return ApiSettings(
        _env_file=None,
        ENVIRONMENT="test",
        SIMULATED_DELAY_SCALE=0,
        FUNCTION_NAME="event-handler-test",
        EVENT_TIMEOUT_SECONDS=None,
    )


@pytest.fixture
def context():
    return InvocationContext(function_name="event-handler-test", aws_request_id="req-123")


@pytest.fixture
def app_router(test_settings):
    """The production router wiring, with instant handlers."""
    return configure_router(test_settings)


@pytest.fixture
def configure_injector(test_settings):
    """Return a function that wires the injector; cleared after the test."""

    def _configure(
        settings: ApiSettings | None = None,
        router: EventRouter | None = None,
        publisher: StreamsPublisher | None = None,
    ) -> None:
        settings = settings or test_settings
        configure_di(settings, router or configure_router(settings), publisher)

    yield _configure
    inject.clear()
