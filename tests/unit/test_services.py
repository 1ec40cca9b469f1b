"""
Tests for the dispatch service: envelopes, status mapping and timeouts.
"""

import asyncio

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from src.event_handler.application.services import EventDispatchService, classify_error
from src.event_handler.domain.events.event_request import EventRequest
from src.event_handler.domain.exceptions import (
    EventProcessingError,
    HandlerError,
    ProcessingTimeoutError,
    UnhandledEventType,
    UnsupportedEventTypeError,
    ValidationError,
)
from src.event_handler.infrastructure.routing.router import EventRouter
from src.event_handler.infrastructure.streams.client import StreamsClient
from src.event_handler.infrastructure.streams.publisher import StreamsPublisher
from tests.doubles import FakeRedis


class StubHandler:
    def __init__(self, result=None, error=None, delay=0.0):
        self.result = result
        self.error = error
        self.delay = delay

    async def handle(self, event_type, data, context):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result


class TestClassifyError:
    """Tests for mapping failures to status and error codes."""

    def test_unhandled_event_type_is_client_error(self):
        assert classify_error(UnhandledEventType("x.y")) == (404, "HANDLER_NOT_FOUND")

    def test_handler_error_defaults_to_server_error(self):
        assert classify_error(HandlerError("x.y", RuntimeError("boom"))) == (500, "HANDLER_ERROR")

    def test_handler_error_uses_cause_classification(self):
        cause = UnsupportedEventTypeError("project", "project.archived")
        assert classify_error(HandlerError("project.archived", cause)) == (
            400,
            "UNSUPPORTED_EVENT_TYPE",
        )

    def test_processing_errors(self):
        assert classify_error(ValidationError("bad")) == (400, "VALIDATION_ERROR")
        assert classify_error(ProcessingTimeoutError("x.y", 1.0)) == (504, "PROCESSING_TIMEOUT")
        assert classify_error(EventProcessingError("conflict", 409, "CONFLICT")) == (409, "CONFLICT")

    def test_unknown_exception(self):
        assert classify_error(KeyError("x")) == (500, "INTERNAL_ERROR")


class TestEventDispatchService:
    """Tests for processing events through a configured router."""

    @pytest.fixture
    def router(self):
        router = EventRouter()
        router.register("system.*", StubHandler(result={"status": "healthy"}))
        router.register("project.*", StubHandler(error=RuntimeError("disk full")))
        return router

    @pytest.mark.asyncio
    async def test_success_envelope(self, configure_injector, router, context):
        configure_injector(router=router)
        service = EventDispatchService()

        outcome = await service.process(EventRequest(type="system.health_check"), context)

        assert outcome.status_code == 200
        assert outcome.body == {
            "success": True,
            "message": "Event system.health_check processed successfully",
            "requestId": "req-123",
            "result": {"status": "healthy"},
        }
        assert outcome.headers == {"Content-Type": "application/json", "X-Request-Id": "req-123"}

    @pytest.mark.asyncio
    async def test_model_results_are_serialized_with_camel_case(
        self, configure_injector, app_router, context
    ):
        configure_injector(router=app_router)
        service = EventDispatchService()

        outcome = await service.process(
            EventRequest(type="project.created", data={"name": "demo"}), context
        )

        result = outcome.body["result"]
        assert result["name"] == "demo"
        assert result["processedBy"] == "event-handler-test"
        assert "projectId" in result
        assert "createdAt" in result

    @pytest.mark.asyncio
    async def test_unhandled_event_type(self, configure_injector, router, context):
        configure_injector(router=router)
        service = EventDispatchService()

        outcome = await service.process(EventRequest(type="unknown.event"), context)

        assert outcome.status_code == 404
        assert outcome.body == {
            "success": False,
            "message": "No handler registered for event type: unknown.event",
            "requestId": "req-123",
            "code": "HANDLER_NOT_FOUND",
        }

    @pytest.mark.asyncio
    async def test_handler_failure_hides_stack_outside_development(
        self, configure_injector, router, context
    ):
        configure_injector(router=router)
        service = EventDispatchService()

        outcome = await service.process(EventRequest(type="project.created"), context)

        assert outcome.status_code == 500
        assert outcome.body["message"] == "disk full"
        assert outcome.body["code"] == "HANDLER_ERROR"
        assert "error" not in outcome.body

    @pytest.mark.asyncio
    async def test_handler_failure_includes_stack_in_development(
        self, configure_injector, test_settings, router, context
    ):
        settings = test_settings.model_copy(update={"ENVIRONMENT": "development"})
        configure_injector(settings=settings, router=router)
        service = EventDispatchService()

        outcome = await service.process(EventRequest(type="project.created"), context)

        assert "RuntimeError: disk full" in outcome.body["error"]

    @pytest.mark.asyncio
    async def test_unsupported_type_from_real_handler_is_client_error(
        self, configure_injector, app_router, context
    ):
        configure_injector(router=app_router)
        service = EventDispatchService()

        outcome = await service.process(EventRequest(type="system.reboot"), context)

        assert outcome.status_code == 400
        assert outcome.body["code"] == "UNSUPPORTED_EVENT_TYPE"

    @pytest.mark.asyncio
    async def test_timeout(self, configure_injector, test_settings, context):
        router = EventRouter()
        router.register("project.*", StubHandler(result={}, delay=1.0))
        settings = test_settings.model_copy(update={"EVENT_TIMEOUT_SECONDS": 0.01})
        configure_injector(settings=settings, router=router)
        service = EventDispatchService()

        outcome = await service.process(EventRequest(type="project.created"), context)

        assert outcome.status_code == 504
        assert outcome.body["code"] == "PROCESSING_TIMEOUT"
        assert outcome.body["message"] == "Event processing timeout for project.created after 10ms"

    @pytest.mark.asyncio
    async def test_dispatch_within_timeout(self, configure_injector, test_settings, router, context):
        settings = test_settings.model_copy(update={"EVENT_TIMEOUT_SECONDS": 5.0})
        configure_injector(settings=settings, router=router)
        service = EventDispatchService()

        result = await service.dispatch(EventRequest(type="system.metrics"), context)

        assert result == {"status": "healthy"}

    @pytest.mark.asyncio
    async def test_process_http_invalid_body(self, configure_injector, router, context):
        configure_injector(router=router)
        service = EventDispatchService()

        outcome = await service.process_http("{oops", {}, context)

        assert outcome.status_code == 400
        assert outcome.body["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_request_id_fallback(self, configure_injector, router):
        configure_injector(router=router)
        service = EventDispatchService()

        outcome = await service.process(EventRequest(type="system.metrics"), object())

        assert outcome.body["requestId"] == "unknown"


class TestEnqueue:
    """Tests for publishing inbound events to the events stream."""

    @pytest.fixture
    def streams_settings(self, test_settings):
        return test_settings.model_copy(update={"STREAMS_ENABLED": True})

    @pytest.mark.asyncio
    async def test_enqueue_publishes_event(self, configure_injector, streams_settings, context):
        redis = FakeRedis()
        publisher = StreamsPublisher(StreamsClient(redis), "events")
        configure_injector(settings=streams_settings, publisher=publisher)
        service = EventDispatchService()

        outcome = await service.enqueue_http(
            '{"type": "system.backup", "data": {}}', {}, context
        )

        assert outcome.status_code == 202
        assert outcome.body == {
            "success": True,
            "message": "Event system.backup enqueued",
            "requestId": "req-123",
            "result": {"entryId": "1-0"},
        }
        assert redis.added == [("events", {"type": "system.backup", "data": "{}"})]

    @pytest.mark.asyncio
    async def test_enqueue_with_streams_disabled(self, configure_injector, context):
        configure_injector()
        service = EventDispatchService()

        outcome = await service.enqueue_http('{"type": "system.metrics"}', {}, context)

        assert outcome.status_code == 503
        assert outcome.body["code"] == "STREAMS_DISABLED"

    @pytest.mark.asyncio
    async def test_enqueue_invalid_body(self, configure_injector, streams_settings, context):
        redis = FakeRedis()
        configure_injector(
            settings=streams_settings,
            publisher=StreamsPublisher(StreamsClient(redis), "events"),
        )
        service = EventDispatchService()

        outcome = await service.enqueue_http("{oops", {}, context)

        assert outcome.status_code == 400
        assert redis.added == []

    @pytest.mark.asyncio
    async def test_enqueue_redis_failure(self, configure_injector, streams_settings, context):
        redis = FakeRedis(add_error=RedisConnectionError("connection refused"))
        configure_injector(
            settings=streams_settings,
            publisher=StreamsPublisher(StreamsClient(redis), "events"),
        )
        service = EventDispatchService()

        outcome = await service.enqueue_http('{"type": "system.metrics"}', {}, context)

        assert outcome.status_code == 500
        assert outcome.body["code"] == "INTERNAL_ERROR"
