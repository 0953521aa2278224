from __future__ import annotations

import logging
import threading
import time
from enum import Enum
from typing import Callable, Sequence

from healthcheck.checks.http_check import TIMEOUT_ERROR, probe
from healthcheck.checks.results import CheckResult
from healthcheck.ops_logic import summarize_results

logger = logging.getLogger(__name__)

# Slack between a probe's own deadline and the point the cycle stops waiting.
JOIN_GRACE_S = 0.1

CycleFn = Callable[[Sequence[str], float], list[CheckResult]]
ResultsCallback = Callable[[list[CheckResult]], None]


def run_cycle(urls: Sequence[str], timeout_s: float) -> list[CheckResult]:
    if not urls:
        return []

    start = time.perf_counter()
    deadline = start + timeout_s + JOIN_GRACE_S
    slots: list[CheckResult | None] = [None] * len(urls)

    def _probe_into(index: int, url: str) -> None:
        slots[index] = probe(url, timeout_s)

    threads = [
        threading.Thread(
            target=_probe_into,
            args=(i, url),
            name=f"probe-{i}",
            daemon=True,
        )
        for i, url in enumerate(urls)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join(max(0.0, deadline - time.perf_counter()))

    results: list[CheckResult] = []
    for url, result in zip(urls, slots):
        if result is None:
            # Still blocked in I/O past the deadline; its thread is left behind.
            logger.warning("Probe of %s did not finish within %ss", url, timeout_s)
            result = CheckResult.down(
                url,
                error=TIMEOUT_ERROR,
                response_time_ms=int((time.perf_counter() - start) * 1000),
            )
        results.append(result)

    up, down, _ = summarize_results(results)
    logger.info(
        "Cycle finished: %d checked, %d up, %d down in %d ms",
        len(results),
        up,
        down,
        int((time.perf_counter() - start) * 1000),
    )
    return results


class SchedulerState(str, Enum):
    IDLE = "IDLE"
    RUNNING_CYCLE = "RUNNING_CYCLE"
    SLEEPING = "SLEEPING"
    STOPPED = "STOPPED"


class Scheduler:
    """
    Runs cycles back to back with ``interval_s`` of sleep between the end
    of one cycle and the start of the next, or a single cycle in once mode.

    ``stop()`` is honoured at cycle boundaries and during the sleep; a
    cycle that has started always runs to completion.
    """

    def __init__(
        self,
        urls: Sequence[str],
        timeout_s: float,
        interval_s: float,
        *,
        once: bool = False,
        on_results: ResultsCallback | None = None,
        stop_event: threading.Event | None = None,
        cycle: CycleFn | None = None,
    ) -> None:
        self.urls = tuple(urls)
        self.timeout_s = timeout_s
        self.interval_s = interval_s
        self.once = once
        self.on_results = on_results
        self._stop = stop_event or threading.Event()
        self._cycle = cycle or run_cycle
        self._state = SchedulerState.IDLE
        self.cycles = 0

    @property
    def state(self) -> SchedulerState:
        return self._state

    def stop(self) -> None:
        self._stop.set()

    def _emit(self, results: list[CheckResult]) -> None:
        if self.on_results is None:
            return
        try:
            self.on_results(results)
        except OSError as exc:
            # Output sink failures should never stop the check loop.
            logger.warning("Failed to emit cycle results: %s", exc)

    def run(self) -> int:
        while not self._stop.is_set():
            self._state = SchedulerState.RUNNING_CYCLE
            results = self._cycle(self.urls, self.timeout_s)
            self.cycles += 1
            self._emit(results)

            if self.once or self._stop.is_set():
                break

            self._state = SchedulerState.SLEEPING
            logger.debug("Sleeping %ss before next cycle", self.interval_s)
            self._stop.wait(self.interval_s)

        self._state = SchedulerState.STOPPED
        logger.info("Scheduler stopped after %d cycle(s)", self.cycles)
        return self.cycles
