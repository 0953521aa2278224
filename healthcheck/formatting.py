from __future__ import annotations

from healthcheck.checks.results import CheckResult
from healthcheck.ops_logic import display_ts

RULE = "=" * 60
TITLE = "Health Check Results"


def format_headline(result: CheckResult) -> str:
    return (
        f"{result.status.value} {result.url} "
        f"[{result.response_time_ms} ms] - {display_ts(result.timestamp)}"
    )


def format_details(result: CheckResult) -> list[str]:
    lines = []
    if result.error:
        lines.append(f"  Error: {result.error}")
    if result.status_code is not None:
        lines.append(f"  Status Code: {result.status_code}")
    return lines


def format_result(result: CheckResult) -> list[str]:
    # Block ends with a blank separator line.
    return [format_headline(result), *format_details(result), ""]


def format_summary(total: int, up: int, down: int) -> str:
    return f"{total} checked, {up} up, {down} down"
