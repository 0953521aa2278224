from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from healthcheck.config import DEFAULT_INTERVAL_S, DEFAULT_TIMEOUT_S

_http_url = TypeAdapter(AnyHttpUrl)


class ConfigError(ValueError):
    pass


def check_url(url: str) -> str:
    """Validate an http(s) URL but hand back the caller's exact text."""
    url = url.strip()
    if not url:
        raise ValueError("URL must not be empty")
    try:
        _http_url.validate_python(url)
    except ValidationError as exc:
        raise ValueError(f"invalid URL {url!r}: {exc.errors()[0]['msg']}") from None
    return url


class TargetDefaults(BaseModel):
    model_config = ConfigDict(extra="forbid")

    interval_s: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)
    timeout_s: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)


class TargetsFile(BaseModel):
    model_config = ConfigDict(extra="forbid")

    defaults: TargetDefaults = TargetDefaults()
    urls: List[str] = Field(default_factory=list)

    @field_validator("urls")
    @classmethod
    def _validate_urls(cls, urls: List[str]) -> List[str]:
        return [check_url(u) for u in urls]


class MonitorConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    urls: List[str] = Field(..., min_length=1)
    interval_s: float = Field(default=DEFAULT_INTERVAL_S, gt=0, allow_inf_nan=False)
    timeout_s: float = Field(default=DEFAULT_TIMEOUT_S, gt=0, allow_inf_nan=False)
    output: Optional[Path] = None
    once: bool = False

    @field_validator("urls")
    @classmethod
    def _validate_urls(cls, urls: List[str]) -> List[str]:
        return [check_url(u) for u in urls]
