import os
from dotenv import load_dotenv

load_dotenv()

VERSION = "0.1.0"
USER_AGENT = f"http-health-checker/{VERSION}"

DEFAULT_URLS: tuple[str, ...] = (
    "https://httpbin.org/status/200",
    "https://google.com",
    "https://github.com",
)
DEFAULT_INTERVAL_S = 30.0
DEFAULT_TIMEOUT_S = 10.0


def split_urls(raw: str | None) -> tuple[str, ...]:
    return tuple(url.strip() for url in (raw or "").split(",") if url.strip())


class Settings:
    # Numbers stay raw strings here; MonitorConfig validates them.
    HEALTHCHECK_URLS: tuple[str, ...] = split_urls(os.getenv("HEALTHCHECK_URLS"))
    HEALTHCHECK_INTERVAL: str | None = os.getenv("HEALTHCHECK_INTERVAL") or None
    HEALTHCHECK_TIMEOUT: str | None = os.getenv("HEALTHCHECK_TIMEOUT") or None
    HEALTHCHECK_OUTPUT: str | None = os.getenv("HEALTHCHECK_OUTPUT") or None
    HEALTHCHECK_TARGETS_FILE: str | None = os.getenv("HEALTHCHECK_TARGETS_FILE") or None
    HEALTHCHECK_LOG_LEVEL: str = os.getenv("HEALTHCHECK_LOG_LEVEL", "WARNING").upper()


settings = Settings()
