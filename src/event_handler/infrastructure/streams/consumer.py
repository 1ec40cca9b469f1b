from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping

from redis.exceptions import RedisError, ResponseError

from src.event_handler.application.services import EventDispatchService
from src.event_handler.domain.exceptions import ValidationError
from src.event_handler.domain.models.invocation_context import InvocationContext
from src.event_handler.infrastructure.streams.client import StreamsClient
from src.event_handler.infrastructure.streams.serializers import decode_event

logger = logging.getLogger(__name__)

RETRY_DELAY_SECONDS = 1.0


class StreamsConsumer:
    """
    Feed events from a Redis stream consumer group into the dispatch service.

    Every entry is acknowledged once processed, whether it succeeded or not;
    failed dispatches are logged by the service and never redelivered.
    """

    def __init__(
        self,
        client: StreamsClient,
        service: EventDispatchService,
        *,
        stream: str,
        group: str,
        consumer_name: str,
        function_name: str,
        block_ms: int = 5000,
        count: int = 10,
    ) -> None:
        self._client = client
        self._service = service
        self._stream = stream
        self._group = group
        self._consumer_name = consumer_name
        self._function_name = function_name
        self._block_ms = block_ms
        self._count = count
        self._task: asyncio.Task | None = None

    async def ensure_group(self) -> None:
        """Create the consumer group (and stream) if it does not exist yet."""
        try:
            await self._client.redis.xgroup_create(self._stream, self._group, id="0", mkstream=True)
        except ResponseError as exc:
            if "BUSYGROUP" not in str(exc):
                raise

    async def start(self) -> None:
        """Start consuming in a background task."""
        if self._task is not None:
            return
        await self.ensure_group()
        self._task = asyncio.create_task(self._run(), name="event-stream-consumer")
        logger.info(
            "Streams consumer started",
            extra={"stream": self._stream, "group": self._group, "consumer": self._consumer_name},
        )

    async def stop(self) -> None:
        """Cancel the background task and close the Redis connection."""
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        await self._client.close()
        logger.info("Streams consumer stopped", extra={"stream": self._stream})

    async def poll_once(self) -> int:
        """Read one batch, process and acknowledge it; return the entry count."""
        response = await self._client.redis.xreadgroup(
            self._group,
            self._consumer_name,
            {self._stream: ">"},
            count=self._count,
            block=self._block_ms,
        )
        processed = 0
        for _stream, entries in response or []:
            for entry_id, fields in entries:
                await self._handle_entry(entry_id, fields)
                await self._client.redis.xack(self._stream, self._group, entry_id)
                processed += 1
        return processed

    async def _handle_entry(self, entry_id: str, fields: Mapping[str, str]) -> None:
        context = InvocationContext(function_name=self._function_name, aws_request_id=entry_id)
        try:
            request = decode_event(fields)
        except ValidationError as exc:
            self._service.failure(exc, context)
            return
        await self._service.process(request, context)

    async def _run(self) -> None:
        while True:
            try:
                await self.poll_once()
            except RedisError:
                logger.exception("Streams consumer read failed", extra={"stream": self._stream})
                await asyncio.sleep(RETRY_DELAY_SECONDS)
            except Exception:
                logger.exception("Streams consumer poll failed", extra={"stream": self._stream})
                await asyncio.sleep(RETRY_DELAY_SECONDS)
