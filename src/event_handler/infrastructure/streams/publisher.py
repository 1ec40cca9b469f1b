from __future__ import annotations

from typing import Iterable, Sequence

from src.event_handler.domain.events.event_request import EventRequest
from src.event_handler.infrastructure.streams.client import StreamsClient
from src.event_handler.infrastructure.streams.serializers import encode_event


class StreamsPublisher:
    """Async publisher that enqueues events for the streams consumer."""
    def __init__(self, client: StreamsClient, stream: str) -> None:
        self._client = client
        self._stream = stream

    async def publish(
        self,
        events: EventRequest | Sequence[EventRequest],
        *,
        maxlen: int | None = None,
        approximate: bool = True,
    ) -> list[str]:
        """Publish one or more events and return their stream entry ids."""
        batch: Iterable[EventRequest]
        if isinstance(events, EventRequest):
            batch = [events]
        else:
            batch = events

        entry_ids = []
        for event in batch:
            entry_id = await self._client.redis.xadd(
                self._stream,
                encode_event(event),
                maxlen=maxlen,
                approximate=approximate,
            )
            entry_ids.append(entry_id)
        return entry_ids
