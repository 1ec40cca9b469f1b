from __future__ import annotations

from typing import Any


class EventRoutingError(Exception):
    """Base class for failures raised by the event router."""

    def __init__(self, event_type: str, message: str) -> None:
        super().__init__(message)
        self.event_type = event_type


class UnhandledEventType(EventRoutingError):
    """No registered pattern matches the event type."""

    def __init__(self, event_type: str) -> None:
        super().__init__(event_type, f"No handler registered for event type: {event_type}")


class HandlerError(EventRoutingError):
    """The resolved handler raised while processing the event."""

    def __init__(self, event_type: str, cause: BaseException) -> None:
        super().__init__(event_type, str(cause) or type(cause).__name__)
        self.cause = cause


class EventProcessingError(Exception):
    """
    Failure carrying its own HTTP classification.

    Handlers raise subclasses of this to report client errors; the dispatch
    service reads ``status_code`` and ``code`` when building the response.
    """

    status_code: int = 500
    code: str = "EVENT_ERROR"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        self.details = details


class ValidationError(EventProcessingError):
    """Inbound request could not be parsed into an event."""

    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__(message, details=details)


class UnsupportedEventTypeError(EventProcessingError):
    """A handler received an event type inside its namespace that it does not know."""

    status_code = 400
    code = "UNSUPPORTED_EVENT_TYPE"

    def __init__(self, domain: str, event_type: str) -> None:
        super().__init__(f"Unsupported {domain} event type: {event_type}")
        self.event_type = event_type


class ProcessingTimeoutError(EventProcessingError):
    """Dispatch did not complete within the configured timeout."""

    status_code = 504
    code = "PROCESSING_TIMEOUT"

    def __init__(self, event_type: str, timeout_seconds: float) -> None:
        super().__init__(
            f"Event processing timeout for {event_type} after {int(timeout_seconds * 1000)}ms"
        )
        self.event_type = event_type
        self.timeout_seconds = timeout_seconds


class StreamsDisabledError(EventProcessingError):
    """An event was submitted for queueing while the Redis stream is not configured."""

    status_code = 503
    code = "STREAMS_DISABLED"

    def __init__(self) -> None:
        super().__init__("Event streaming is disabled")
