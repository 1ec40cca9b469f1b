from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, Field


class InvocationContext(BaseModel):
    """
    Runtime metadata for a single event invocation.

    Mirrors the attribute names of the AWS Lambda context object so handlers
    can read either one.
    """

    function_name: str = Field(description="Name of the function processing the event.")
    function_version: str = Field(default="$LATEST")
    invoked_function_arn: str | None = None
    memory_limit_in_mb: int = 128
    aws_request_id: str = Field(default_factory=lambda: f"dev-{uuid4()}")
    log_group_name: str | None = None
    log_stream_name: str | None = None
    timeout_ms: int = Field(default=30_000, description="Invocation time budget.")
    started_at: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))

    @classmethod
    def development(cls, function_name: str, function_version: str = "1.0.0") -> InvocationContext:
        """Create a context for the local development server."""
        now = datetime.now(tz=UTC)
        return cls(
            function_name=function_name,
            function_version=function_version,
            invoked_function_arn=f"arn:aws:lambda:us-east-1:123456789012:function:{function_name}",
            log_group_name=f"/aws/lambda/{function_name}",
            log_stream_name=f"{now.date().isoformat()}/[1]/{int(now.timestamp() * 1000)}",
            started_at=now,
        )

    def get_remaining_time_in_millis(self) -> int:
        elapsed = datetime.now(tz=UTC) - self.started_at
        return max(0, self.timeout_ms - int(elapsed.total_seconds() * 1000))
