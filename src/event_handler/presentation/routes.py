import inject
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from src.event_handler.application.services import EventDispatchService
from src.event_handler.domain.models.invocation_context import InvocationContext
from src.event_handler.infrastructure.routing.router import EventRouter
from src.setup.api_config import ApiSettings

router = APIRouter()


@router.post("/event")
async def receive_event(request: Request) -> JSONResponse:
    """
    Process an event posted as ``{"type": ..., "data": ...}``.

    The event type may also be supplied through the ``X-Event-Type`` header.
    """
    settings = inject.instance(ApiSettings)
    context = InvocationContext.development(settings.FUNCTION_NAME, settings.APP_VERSION)
    service = EventDispatchService()
    outcome = await service.process_http(await request.body(), request.headers, context)
    return JSONResponse(
        status_code=outcome.status_code,
        content=outcome.body,
        headers={"X-Request-Id": outcome.request_id},
    )


@router.post("/events/enqueue")
async def enqueue_event(request: Request) -> JSONResponse:
    """Publish an event to the Redis stream for the streams consumer to process."""
    settings = inject.instance(ApiSettings)
    context = InvocationContext.development(settings.FUNCTION_NAME, settings.APP_VERSION)
    service = EventDispatchService()
    outcome = await service.enqueue_http(await request.body(), request.headers, context)
    return JSONResponse(
        status_code=outcome.status_code,
        content=outcome.body,
        headers={"X-Request-Id": outcome.request_id},
    )


@router.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    settings = inject.instance(ApiSettings)
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
    }


@router.get("/patterns")
async def registered_patterns() -> dict:
    """List the event patterns the router accepts."""
    event_router = inject.instance(EventRouter)
    return {"patterns": event_router.registered_patterns()}
