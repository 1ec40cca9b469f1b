from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any

from src.event_handler.domain.exceptions import UnsupportedEventTypeError

logger = logging.getLogger(__name__)

Operation = Callable[[dict[str, Any], Any], Awaitable[Any]]


def utc_now() -> str:
    return datetime.now(tz=UTC).isoformat()


def processed_by(context: Any) -> str | None:
    """Read the function name from a Lambda-style context, if present."""
    return getattr(context, "function_name", None)


class SimulatedEventHandler:
    """
    Base for handlers that fan an event type out to one coroutine per type.

    Subclasses set ``domain`` and return their operation table from
    ``operations``. Work is simulated with ``asyncio.sleep``; ``delay_scale``
    multiplies every delay, so ``0`` makes handlers return immediately.
    """

    domain: str = "event"

    def __init__(self, delay_scale: float = 1.0) -> None:
        self._delay_scale = delay_scale

    def operations(self) -> dict[str, Operation]:
        raise NotImplementedError

    async def handle(self, event_type: str, data: dict[str, Any], context: Any) -> Any:
        operation = self.operations().get(event_type)
        if operation is None:
            raise UnsupportedEventTypeError(self.domain, event_type)
        logger.info(
            "%s processing event",
            type(self).__name__,
            extra={"event_type": event_type},
        )
        return await operation(data, context)

    async def _simulate_delay(self, ms: float) -> None:
        if self._delay_scale > 0:
            await asyncio.sleep(ms * self._delay_scale / 1000)

    async def _run_steps(self, steps: list[str], status: str, delay_ms: float) -> list[dict[str, str]]:
        """Log and time each step, returning one outcome record per step."""
        outcomes = []
        for step in steps:
            logger.debug("  - %s", step, extra={"domain": self.domain})
            outcomes.append({"step": step, "status": status, "timestamp": utc_now()})
            await self._simulate_delay(delay_ms)
        return outcomes
