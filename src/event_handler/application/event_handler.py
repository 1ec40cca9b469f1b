from __future__ import annotations

from typing import Any, Protocol


class EventHandler(Protocol):
    """Interface for components that process events routed to them."""
    async def handle(self, event_type: str, data: dict[str, Any], context: Any) -> Any:
        """Process an event and return its result."""
