import inject

from src.event_handler.infrastructure.routing.router import EventRouter
from src.event_handler.infrastructure.streams.publisher import StreamsPublisher
from src.setup.api_config import ApiSettings, get_api_settings
from src.setup.logging_config import configure_logging
from src.setup.router_config import configure_router
from src.setup.stream_config import configure_stream_publisher


def configure_di(
    settings: ApiSettings | None = None,
    router: EventRouter | None = None,
    publisher: StreamsPublisher | None = None,
) -> None:
    """
    Wire settings, the event router and (with streams enabled) the stream
    publisher into the injector.

    Replaces any previous configuration, so tests can call it with their own
    settings, router or publisher.
    """
    settings = settings or get_api_settings()
    router = router or configure_router(settings)
    publisher = publisher or configure_stream_publisher(settings)
    configure_logging(settings.LOG_LEVEL, settings.LOG_JSON, service=settings.APP_NAME)

    def _config(binder: inject.Binder) -> None:
        binder.bind(ApiSettings, settings)
        binder.bind(EventRouter, router)
        if publisher is not None:
            binder.bind(StreamsPublisher, publisher)

    inject.clear_and_configure(_config)
