from src.event_handler.application.services import EventDispatchService
from src.event_handler.infrastructure.streams.client import StreamsClient
from src.event_handler.infrastructure.streams.consumer import StreamsConsumer
from src.event_handler.infrastructure.streams.publisher import StreamsPublisher
from src.setup.api_config import ApiSettings


def configure_stream_publisher(settings: ApiSettings) -> StreamsPublisher | None:
    """Build the publisher behind ``POST /events/enqueue``, or ``None`` when streams are disabled."""
    if not settings.STREAMS_ENABLED:
        return None
    return StreamsPublisher(StreamsClient.from_url(settings.REDIS_URL), settings.EVENT_STREAM)


def configure_stream_consumer(settings: ApiSettings) -> StreamsConsumer | None:
    """Build the Redis streams consumer, or ``None`` when streams are disabled.

    Must run after ``configure_di`` since the dispatch service resolves its
    dependencies from the injector.
    """
    if not settings.STREAMS_ENABLED:
        return None
    return StreamsConsumer(
        StreamsClient.from_url(settings.REDIS_URL),
        EventDispatchService(),
        stream=settings.EVENT_STREAM,
        group=settings.CONSUMER_GROUP,
        consumer_name=settings.CONSUMER_NAME,
        function_name=settings.FUNCTION_NAME,
        block_ms=settings.STREAM_BLOCK_MS,
    )
