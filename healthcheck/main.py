"""Command line entry point for the HTTP health checker."""

from __future__ import annotations

import argparse
import logging
import signal
import sys
from typing import Sequence

from rich.console import Console
from rich.text import Text

from healthcheck.checks.results import CheckResult, Status
from healthcheck.config import DEFAULT_URLS, VERSION, settings, split_urls
from healthcheck.formatting import TITLE
from healthcheck.models import ConfigError, MonitorConfig
from healthcheck.registry import resolve_config
from healthcheck.reporting import render, write_results
from healthcheck.runner import Scheduler, run_cycle

EXIT_OK = 0
EXIT_CONFIG_ERROR = 2

logger = logging.getLogger(__name__)

STATUS_STYLES = {
    Status.UP: "bold green",
    Status.DOWN: "bold red",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="http-health-checker",
        description="A concurrent HTTP health checker",
    )
    parser.add_argument(
        "-u",
        "--urls",
        action="append",
        metavar="URLS",
        help="Comma-separated URLs to check (may be repeated)",
    )
    parser.add_argument(
        "-i",
        "--interval",
        type=float,
        help="Seconds to wait between checks in repeat mode (default: 30)",
    )
    parser.add_argument(
        "-t",
        "--timeout",
        type=float,
        help="Per-request timeout in seconds (default: 10)",
    )
    parser.add_argument("-o", "--output", help="Write results as JSON to this file after each cycle")
    parser.add_argument("--once", action="store_true", help="Run only once (don't loop)")
    parser.add_argument("-c", "--config", help="YAML targets file")
    parser.add_argument(
        "--log-level",
        default=settings.HEALTHCHECK_LOG_LEVEL,
        help="Logging level (default: %(default)s)",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    return parser


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )


def print_results(console: Console, results: Sequence[CheckResult]) -> None:
    text = Text(render(results).rstrip("\n"))
    text.highlight_regex(rf"(?m)^{TITLE}$", "bold underline")
    text.highlight_regex(r"(?m)^UP\b", STATUS_STYLES[Status.UP])
    text.highlight_regex(r"(?m)^DOWN\b", STATUS_STYLES[Status.DOWN])
    text.highlight_regex(r"(?m)(?<=^UP )\S+|(?<=^DOWN )\S+", "cyan")
    text.highlight_regex(r"(?m)^  Error: .*$", "red")
    text.highlight_regex(r"(?m)^\d+ checked, .*$", "dim")
    console.print()
    console.print(text)


def save_results(
    console: Console,
    err_console: Console,
    output: str,
    results: list[CheckResult],
) -> None:
    try:
        path = write_results(output, results)
    except OSError as exc:
        err_console.print(Text.assemble("Failed to save results: ", (str(exc), "red")))
        logger.warning("Failed to save results to %s: %s", output, exc)
        return
    console.print(Text.assemble("Results saved to ", (str(path), "green")))


def print_banner(console: Console, cfg: MonitorConfig, used_defaults: bool) -> None:
    if used_defaults:
        console.print("No URLs provided, using default test URLs ...", style="yellow")
    console.print("HTTP Health Checker Starting...", style="bold green")
    console.print(f"Checking {len(cfg.urls)} URLs every {cfg.interval_s:g} seconds")
    console.print(Text.assemble("URLs: ", (", ".join(cfg.urls), "cyan")))
    if cfg.once:
        console.print("\nRunning single check...", style="yellow")
    else:
        console.print("\nPress Ctrl+C to stop", style="yellow")


def _install_signal_handlers(scheduler: Scheduler) -> dict:
    def _handle(signum, _frame) -> None:
        logger.info("Received signal %s, stopping after the current cycle", signum)
        scheduler.stop()

    previous = {}
    for signum in (signal.SIGINT, signal.SIGTERM):
        previous[signum] = signal.signal(signum, _handle)
    return previous


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    console = Console(no_color=args.no_color, highlight=False)
    err_console = Console(stderr=True, no_color=args.no_color, highlight=False)

    cli_urls = None
    if args.urls is not None:
        cli_urls = [url for raw in args.urls for url in split_urls(raw)]
    try:
        cfg = resolve_config(
            urls=cli_urls,
            interval_s=args.interval,
            timeout_s=args.timeout,
            output=args.output,
            once=args.once,
            targets_path=args.config,
        )
    except ConfigError as exc:
        err_console.print(Text.assemble(("Configuration error: ", "bold red"), str(exc)))
        return EXIT_CONFIG_ERROR

    print_banner(console, cfg, used_defaults=tuple(cfg.urls) == DEFAULT_URLS)

    def on_results(results: list[CheckResult]) -> None:
        print_results(console, results)
        if cfg.output is not None:
            save_results(console, err_console, str(cfg.output), results)

    scheduler = Scheduler(
        cfg.urls,
        timeout_s=cfg.timeout_s,
        interval_s=cfg.interval_s,
        once=cfg.once,
        on_results=on_results,
        cycle=run_cycle,
    )
    previous = _install_signal_handlers(scheduler)
    try:
        scheduler.run()
    finally:
        for signum, handler in previous.items():
            signal.signal(signum, handler)

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
