from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Sequence

from healthcheck.checks.results import CheckResult
from healthcheck.formatting import RULE, TITLE, format_result, format_summary
from healthcheck.ops_logic import serialize_ts, summarize_results
from healthcheck.schemas import RESULTS_ADAPTER

logger = logging.getLogger(__name__)


def render(results: Sequence[CheckResult]) -> str:
    lines = [TITLE, RULE]
    for result in results:
        lines.extend(format_result(result))

    up, down, _ = summarize_results(results)
    lines.append(format_summary(len(results), up, down))
    return "\n".join(lines) + "\n"


def result_to_dict(result: CheckResult) -> dict[str, Any]:
    # Key order is part of the output contract.
    return {
        "url": result.url,
        "status": result.status.value,
        "status_code": result.status_code,
        "response_time_ms": result.response_time_ms,
        "timestamp": serialize_ts(result.timestamp),
        "error": result.error,
    }


def serialize(results: Sequence[CheckResult]) -> bytes:
    payload = [result_to_dict(r) for r in results]
    return (json.dumps(payload, indent=2, ensure_ascii=False) + "\n").encode("utf-8")


def deserialize(data: bytes | str) -> list[CheckResult]:
    records = RESULTS_ADAPTER.validate_json(data)
    return [record.to_result() for record in records]


def write_results(path: str | Path, results: Sequence[CheckResult]) -> Path:
    """
    Replace the file at ``path`` with the serialized results.

    The document is written to a temporary sibling first so readers never
    see a half-written file.
    """
    target = Path(path).expanduser()
    target.parent.mkdir(parents=True, exist_ok=True)
    data = serialize(results)

    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        os.replace(tmp_name, target)
    except OSError:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.debug("Wrote %d results to %s", len(results), target)
    return target
