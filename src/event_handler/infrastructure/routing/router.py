from __future__ import annotations

from typing import Any

from src.event_handler.application.event_handler import EventHandler
from src.event_handler.domain.exceptions import HandlerError, UnhandledEventType

WILDCARD_SUFFIX = ".*"


class EventRouter:
    """
    Dispatch events to the handler registered for the most specific pattern.

    Patterns are either exact event types (``project.created``) or a prefix
    followed by ``.*`` (``project.*``), which matches the prefix itself and
    anything below it. Exact registrations win over wildcards; among
    wildcards the longest prefix wins. Only a single trailing wildcard is
    understood; any other use of ``*`` is treated as a literal pattern.

    The router performs no logging, retries or timeouts; callers own those.
    """
    def __init__(self) -> None:
        self._handlers: dict[str, EventHandler] = {}

    def register(self, pattern: str, handler: EventHandler) -> None:
        """Register a handler for a pattern, replacing any previous one."""
        self._handlers[pattern] = handler

    def registered_patterns(self) -> list[str]:
        """Return registered patterns in registration order."""
        return list(self._handlers)

    def resolve(self, event_type: str) -> EventHandler | None:
        """Return the handler an event type would be routed to, if any."""
        handler = self._handlers.get(event_type)
        if handler is not None:
            return handler

        best_prefix: str | None = None
        for pattern in self._handlers:
            if not pattern.endswith(WILDCARD_SUFFIX):
                continue
            prefix = pattern[: -len(WILDCARD_SUFFIX)]
            if event_type != prefix and not event_type.startswith(prefix + "."):
                continue
            if best_prefix is None or len(prefix) > len(best_prefix):
                best_prefix = prefix

        if best_prefix is None:
            return None
        return self._handlers[best_prefix + WILDCARD_SUFFIX]

    async def route(self, event_type: str, data: Any, context: Any) -> Any:
        """
        Invoke the matching handler and return its result unmodified.

        Raises ``UnhandledEventType`` when nothing matches and
        ``HandlerError`` wrapping the original exception when the handler
        fails.
        """
        handler = self.resolve(event_type)
        if handler is None:
            raise UnhandledEventType(event_type)
        try:
            return await handler.handle(event_type, data, context)
        except Exception as exc:
            raise HandlerError(event_type, exc) from exc
