from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class Status(str, Enum):
    UP = "UP"
    DOWN = "DOWN"


def utcnow_ms() -> datetime:
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def is_success_code(status_code: int) -> bool:
    return 200 <= status_code < 400


@dataclass(frozen=True)
class CheckResult:
    url: str
    status: Status
    response_time_ms: int
    status_code: int | None = None
    error: str | None = None
    timestamp: datetime = field(default_factory=utcnow_ms)

    def __post_init__(self) -> None:
        if self.response_time_ms < 0:
            raise ValueError("response_time_ms must not be negative")
        if self.status is Status.UP:
            if self.error is not None:
                raise ValueError("UP result cannot carry an error")
            if self.status_code is None or not is_success_code(self.status_code):
                raise ValueError(f"UP result needs a 2xx/3xx status code, got {self.status_code}")
        elif not self.error:
            raise ValueError("DOWN result needs an error description")

    @classmethod
    def up(cls, url: str, status_code: int, response_time_ms: int) -> CheckResult:
        return cls(
            url=url,
            status=Status.UP,
            status_code=status_code,
            response_time_ms=response_time_ms,
        )

    @classmethod
    def down(
        cls,
        url: str,
        error: str,
        response_time_ms: int,
        status_code: int | None = None,
    ) -> CheckResult:
        return cls(
            url=url,
            status=Status.DOWN,
            status_code=status_code,
            response_time_ms=response_time_ms,
            error=error,
        )

    @property
    def ok(self) -> bool:
        return self.status is Status.UP
