from __future__ import annotations

import json
from collections.abc import Mapping

from src.event_handler.domain.events.event_request import UNKNOWN_EVENT_TYPE, EventRequest
from src.event_handler.domain.exceptions import ValidationError


def encode_event(request: EventRequest) -> dict[str, str]:
    """Flatten an event into stream entry fields."""
    return {"type": request.type, "data": json.dumps(request.data)}


def decode_event(fields: Mapping[str, str]) -> EventRequest:
    """Rebuild an event from stream entry fields."""
    raw_data = fields.get("data")
    try:
        data = json.loads(raw_data) if raw_data else {}
    except ValueError as exc:
        raise ValidationError(f"Stream entry data is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ValidationError("Stream entry data must be a JSON object")
    return EventRequest(type=fields.get("type") or UNKNOWN_EVENT_TYPE, data=data)
