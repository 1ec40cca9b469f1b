from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for models serialized with camelCase keys on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class SuccessEnvelope(CamelModel):
    """Response body for a successfully processed event."""
    success: Literal[True] = True
    message: str
    request_id: str
    result: Any = None


class ErrorEnvelope(CamelModel):
    """Response body for a failed dispatch."""
    success: Literal[False] = False
    message: str
    request_id: str
    code: str = Field(description="Machine-readable error code.")
    error: str | None = Field(
        default=None,
        description="Stack trace, only populated in development.",
    )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
