from __future__ import annotations

import asyncio
import base64
import json
from typing import Any

import inject

from src.event_handler.application.services import DispatchOutcome, EventDispatchService
from src.setup.app_config import configure_di


def to_proxy_response(outcome: DispatchOutcome) -> dict[str, Any]:
    """Render an outcome in the API Gateway proxy response format."""
    return {
        "statusCode": outcome.status_code,
        "headers": outcome.headers,
        "body": json.dumps(outcome.body),
    }


async def handle_proxy_event(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Process an API Gateway proxy event with an already configured injector."""
    body = event.get("body")
    if body and event.get("isBase64Encoded"):
        body = base64.b64decode(body)
    service = EventDispatchService()
    outcome = await service.process_http(body, event.get("headers"), context)
    return to_proxy_response(outcome)


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """AWS Lambda entry point."""
    # Warm invocations reuse the router built on cold start.
    if not inject.is_configured():
        configure_di()
    return asyncio.run(handle_proxy_event(event, context))
