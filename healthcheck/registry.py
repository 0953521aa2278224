from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence

import yaml
from pydantic import ValidationError

from healthcheck.config import DEFAULT_URLS, Settings, settings as default_settings
from healthcheck.models import ConfigError, MonitorConfig, TargetsFile


def load_targets(path: Path) -> TargetsFile:
    if not path.exists():
        raise ConfigError(f"Missing targets file at {path}")

    try:
        data = yaml.safe_load(path.read_text()) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot read targets file {path}: {exc}") from exc

    try:
        targets = TargetsFile.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid targets file {path}: {exc}") from exc

    # Ensure unique URLs
    seen = set()
    for url in targets.urls:
        if url in seen:
            raise ConfigError(f"Duplicate URL in {path}: {url}")
        seen.add(url)

    return targets


def _first(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def resolve_config(
    *,
    urls: Sequence[str] | None = None,
    interval_s: float | None = None,
    timeout_s: float | None = None,
    output: str | None = None,
    once: bool = False,
    targets_path: str | None = None,
    env: Settings = default_settings,
) -> MonitorConfig:
    """
    Merge CLI values, the optional targets file, environment and built-in
    defaults (in that order of precedence) into a validated MonitorConfig.
    """
    if urls is not None and not list(urls):
        raise ConfigError("--urls was given but contains no URLs")

    targets_path = targets_path or env.HEALTHCHECK_TARGETS_FILE
    targets = load_targets(Path(targets_path).expanduser()) if targets_path else None

    resolved_urls = (
        list(urls or [])
        or (targets.urls if targets else [])
        or list(env.HEALTHCHECK_URLS)
        or list(DEFAULT_URLS)
    )
    defaults = targets.defaults if targets else None

    try:
        return MonitorConfig(
            urls=resolved_urls,
            interval_s=_first(
                interval_s,
                defaults.interval_s if defaults else None,
                env.HEALTHCHECK_INTERVAL,
                MonitorConfig.model_fields["interval_s"].default,
            ),
            timeout_s=_first(
                timeout_s,
                defaults.timeout_s if defaults else None,
                env.HEALTHCHECK_TIMEOUT,
                MonitorConfig.model_fields["timeout_s"].default,
            ),
            output=_first(output, env.HEALTHCHECK_OUTPUT),
            once=once,
        )
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
