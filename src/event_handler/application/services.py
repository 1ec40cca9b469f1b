from __future__ import annotations

import asyncio
import logging
import time
import traceback
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import inject
from pydantic import BaseModel
from redis.exceptions import RedisError

from src.event_handler.domain.events.event_request import EventRequest
from src.event_handler.domain.exceptions import (
    EventProcessingError,
    HandlerError,
    ProcessingTimeoutError,
    StreamsDisabledError,
    UnhandledEventType,
    ValidationError,
)
from src.event_handler.domain.models.envelopes import ErrorEnvelope, SuccessEnvelope
from src.event_handler.infrastructure.routing.router import EventRouter
from src.event_handler.infrastructure.streams.publisher import StreamsPublisher
from src.setup.api_config import ApiSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchOutcome:
    """Status code and JSON body produced for one inbound event."""
    status_code: int
    body: dict[str, Any]
    request_id: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json", "X-Request-Id": self.request_id}


def classify_error(exc: BaseException) -> tuple[int, str]:
    """Map a dispatch failure to an HTTP status code and error code."""
    if isinstance(exc, EventProcessingError):
        return exc.status_code, exc.code
    if isinstance(exc, UnhandledEventType):
        return 404, "HANDLER_NOT_FOUND"
    if isinstance(exc, HandlerError):
        if isinstance(exc.cause, EventProcessingError):
            return exc.cause.status_code, exc.cause.code
        return 500, "HANDLER_ERROR"
    return 500, "INTERNAL_ERROR"


def request_id_of(context: Any) -> str:
    return getattr(context, "aws_request_id", None) or "unknown"


class EventDispatchService:
    """Routes inbound events and turns the outcome into response envelopes."""

    def __init__(self) -> None:
        self._router: EventRouter = inject.instance(EventRouter)
        self._settings: ApiSettings = inject.instance(ApiSettings)

    async def dispatch(self, request: EventRequest, context: Any) -> Any:
        """Route an event, bounded by the configured timeout if any."""
        timeout = self._settings.EVENT_TIMEOUT_SECONDS
        routed = self._router.route(request.type, request.data, context)
        if timeout is None:
            return await routed
        try:
            return await asyncio.wait_for(routed, timeout=timeout)
        except asyncio.TimeoutError as exc:
            raise ProcessingTimeoutError(request.type, timeout) from exc

    async def process(self, request: EventRequest, context: Any) -> DispatchOutcome:
        """Dispatch an event and build the success or error response."""
        request_id = request_id_of(context)
        logger.info(
            "Processing event",
            extra={
                "event_type": request.type,
                "request_id": request_id,
                "function_name": getattr(context, "function_name", None),
            },
        )

        started = time.perf_counter()
        try:
            result = await self.dispatch(request, context)
        except Exception as exc:
            self._log_processed(request.type, request_id, started, success=False)
            return self.failure(exc, context, event_type=request.type)
        self._log_processed(request.type, request_id, started, success=True)

        if isinstance(result, BaseModel):
            result = result.model_dump(mode="json", by_alias=True)
        envelope = SuccessEnvelope(
            message=f"Event {request.type} processed successfully",
            request_id=request_id,
            result=result,
        )
        return DispatchOutcome(status_code=200, body=envelope.to_wire(), request_id=request_id)

    async def process_http(
        self,
        body: str | bytes | None,
        headers: Mapping[str, str] | None,
        context: Any,
    ) -> DispatchOutcome:
        """Parse an HTTP-style body and headers, then process the event."""
        try:
            request = EventRequest.from_http(body, headers)
        except ValidationError as exc:
            return self.failure(exc, context)
        return await self.process(request, context)

    async def enqueue_http(
        self,
        body: str | bytes | None,
        headers: Mapping[str, str] | None,
        context: Any,
    ) -> DispatchOutcome:
        """
        Parse an HTTP-style body and headers, then publish the event to the
        events stream instead of dispatching it in-process.

        Answers 202 with the stream entry id; 503 when streams are disabled.
        """
        request_id = request_id_of(context)
        try:
            if not self._settings.STREAMS_ENABLED:
                raise StreamsDisabledError()
            request = EventRequest.from_http(body, headers)
            publisher = inject.instance(StreamsPublisher)
            (entry_id,) = await publisher.publish(request)
        except (EventProcessingError, RedisError) as exc:
            return self.failure(exc, context)

        logger.info(
            "Event enqueued",
            extra={"event_type": request.type, "request_id": request_id, "entry_id": entry_id},
        )
        envelope = SuccessEnvelope(
            message=f"Event {request.type} enqueued",
            request_id=request_id,
            result={"entryId": entry_id},
        )
        return DispatchOutcome(status_code=202, body=envelope.to_wire(), request_id=request_id)

    def failure(
        self,
        exc: Exception,
        context: Any,
        event_type: str | None = None,
    ) -> DispatchOutcome:
        """Build the error response for a failed parse or dispatch."""
        request_id = request_id_of(context)
        status_code, code = classify_error(exc)
        log_extra = {
            "event_type": event_type,
            "request_id": request_id,
            "status_code": status_code,
            "error_code": code,
        }
        if status_code < 500:
            logger.warning("Event rejected: %s", exc, extra=log_extra)
        else:
            logger.error("Error processing event", extra=log_extra, exc_info=exc)

        envelope = ErrorEnvelope(
            message=str(exc) or "Internal server error",
            request_id=request_id,
            code=code,
            error=self._stack_trace(exc),
        )
        return DispatchOutcome(status_code=status_code, body=envelope.to_wire(), request_id=request_id)

    def _stack_trace(self, exc: BaseException) -> str | None:
        if not self._settings.is_development:
            return None
        return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    @staticmethod
    def _log_processed(event_type: str, request_id: str, started: float, *, success: bool) -> None:
        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.info(
            "Event processed",
            extra={
                "event_type": event_type,
                "request_id": request_id,
                "duration_ms": duration_ms,
                "success": success,
            },
        )
