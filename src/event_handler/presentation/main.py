import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from src.event_handler.presentation.routes import router as api_router
from src.setup.api_config import get_api_settings
from src.setup.app_config import configure_di
from src.setup.stream_config import configure_stream_consumer

settings = get_api_settings()
configure_di(settings)

consumer = configure_stream_consumer(settings)


async def _start_consumer() -> None:
    # Run the Redis streams consumer alongside the HTTP server when enabled.
    if consumer is not None:
        await consumer.start()


async def _stop_consumer() -> None:
    if consumer is not None:
        await consumer.stop()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    await _start_consumer()
    yield
    await _stop_consumer()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Routes typed events to domain handlers",
    lifespan=lifespan,
)

app.include_router(api_router, prefix="")


def run() -> None:
    """Start the development server."""
    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3001")),
        log_config=None,
    )


if __name__ == "__main__":
    run()
