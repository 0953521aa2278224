from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from healthcheck.checks.results import CheckResult, Status


class CheckResultRecord(BaseModel):
    """One element of the JSON results document."""

    model_config = ConfigDict(extra="forbid")

    url: str
    status: Literal["UP", "DOWN"]
    status_code: int | None = Field(default=None, ge=100, le=599)
    response_time_ms: int = Field(ge=0)
    timestamp: datetime = Field(description="UTC capture time, millisecond precision")
    error: str | None = None

    @field_validator("timestamp")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def to_result(self) -> CheckResult:
        return CheckResult(
            url=self.url,
            status=Status(self.status),
            status_code=self.status_code,
            response_time_ms=self.response_time_ms,
            timestamp=self.timestamp,
            error=self.error,
        )


RESULTS_ADAPTER = TypeAdapter(List[CheckResultRecord])
