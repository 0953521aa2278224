from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence

from healthcheck.checks.results import CheckResult


def serialize_ts(dt: datetime | None) -> str | None:
    if dt is None:
        return None
    return (
        dt.astimezone(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def display_ts(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def summarize_results(
    results: Sequence[CheckResult],
) -> tuple[int, int, list[str]]:
    up = 0
    down = 0
    down_list: list[str] = []

    for result in results:
        if result.ok:
            up += 1
        else:
            down += 1
            down_list.append(result.url)

    return up, down, down_list
