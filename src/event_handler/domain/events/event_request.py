from __future__ import annotations

import json
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from src.event_handler.domain.exceptions import ValidationError

EVENT_TYPE_HEADER = "x-event-type"
UNKNOWN_EVENT_TYPE = "unknown"


class EventType(str, Enum):
    """Event types understood by the bundled handlers."""
    PROJECT_CREATED = "project.created"
    PROJECT_UPDATED = "project.updated"
    PROJECT_DELETED = "project.deleted"
    PROJECT_BUILT = "project.built"
    PROJECT_DEPLOYED = "project.deployed"
    CONFIGURATION_CHANGED = "configuration.changed"
    CONFIGURATION_VALIDATED = "configuration.validated"
    CONFIGURATION_APPLIED = "configuration.applied"
    CONFIGURATION_ROLLBACK = "configuration.rollback"
    SYSTEM_HEALTH_CHECK = "system.health_check"
    SYSTEM_METRICS = "system.metrics"
    SYSTEM_ALERT = "system.alert"
    SYSTEM_BACKUP = "system.backup"
    SYSTEM_MAINTENANCE = "system.maintenance"


class EventRequest(BaseModel):
    """An event type plus its payload, extracted from an inbound request."""
    type: str = Field(min_length=1)
    data: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_body(
        cls,
        body: Mapping[str, Any],
        headers: Mapping[str, str] | None = None,
    ) -> EventRequest:
        """
        Build a request from a decoded ``{type, data}`` body.

        The event type falls back to the ``x-event-type`` header and then to
        ``"unknown"``; when ``data`` is missing or null the whole body is the
        payload.
        """
        event_type = body.get("type") or _header(headers, EVENT_TYPE_HEADER) or UNKNOWN_EVENT_TYPE
        if not isinstance(event_type, str):
            raise ValidationError("Event type must be a string", details={"type": event_type})

        data = body.get("data")
        if data is None:
            data = dict(body)
        if not isinstance(data, Mapping):
            raise ValidationError("Event data must be a JSON object", details={"type": event_type})
        return cls(type=event_type, data=dict(data))

    @classmethod
    def from_http(
        cls,
        body: str | bytes | None,
        headers: Mapping[str, str] | None = None,
    ) -> EventRequest:
        """Parse a raw HTTP body (JSON text) and headers into a request."""
        if not body:
            return cls.from_body({}, headers)
        try:
            decoded = json.loads(body)
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"Request body is not valid JSON: {exc}") from exc
        if not isinstance(decoded, dict):
            raise ValidationError("Request body must be a JSON object")
        return cls.from_body(decoded, headers)


def _header(headers: Mapping[str, str] | None, name: str) -> str | None:
    if not headers:
        return None
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None
