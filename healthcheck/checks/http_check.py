from __future__ import annotations

import logging
import time
from urllib.parse import urljoin

import requests

from healthcheck.checks.results import CheckResult, is_success_code
from healthcheck.config import USER_AGENT

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192
MAX_REDIRECTS = 30
TIMEOUT_ERROR = "timeout"


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def describe_request_error(exc: requests.RequestException) -> str:
    if isinstance(exc, requests.Timeout):
        return TIMEOUT_ERROR
    if isinstance(exc, requests.exceptions.SSLError):
        return f"ssl error: {exc}"
    if isinstance(exc, requests.ConnectionError):
        text = str(exc)
        if "refused" in text.lower():
            return "connection refused"
        return f"connection error: {text}"
    if isinstance(
        exc,
        (
            requests.exceptions.MissingSchema,
            requests.exceptions.InvalidSchema,
            requests.exceptions.InvalidURL,
        ),
    ):
        return f"invalid url: {exc}"
    return str(exc) or exc.__class__.__name__


def _drain(resp: requests.Response, deadline: float) -> bool:
    """Read the body until it ends. Returns False once the deadline passes."""
    for _ in resp.iter_content(CHUNK_SIZE):
        if time.perf_counter() > deadline:
            return False
    return time.perf_counter() <= deadline


def _follow(url: str, deadline: float) -> int | None:
    """
    GET ``url`` and any redirects it leads to, each hop limited to the time
    left before ``deadline``. Returns the final status code, or None when
    the deadline passed first.
    """
    current = url
    for _ in range(MAX_REDIRECTS + 1):
        remaining = deadline - time.perf_counter()
        if remaining <= 0:
            return None
        # A fresh connection per hop; nothing (cookies included) carries over.
        resp = requests.get(
            current,
            timeout=(remaining, remaining),
            headers={"User-Agent": USER_AGENT},
            stream=True,
            allow_redirects=False,
        )
        try:
            if resp.is_redirect:
                current = urljoin(current, resp.headers["location"])
                continue
            if not _drain(resp, deadline):
                return None
            return resp.status_code
        finally:
            resp.close()
    raise requests.TooManyRedirects(f"exceeded {MAX_REDIRECTS} redirects")


def probe(url: str, timeout_s: float) -> CheckResult:
    start = time.perf_counter()
    try:
        status_code = _follow(url, start + timeout_s)
        latency_ms = _elapsed_ms(start)
    except requests.RequestException as exc:
        latency_ms = _elapsed_ms(start)
        error = describe_request_error(exc)
        logger.debug("GET %s failed after %d ms: %s", url, latency_ms, error)
        return CheckResult.down(url, error=error, response_time_ms=latency_ms)
    except Exception as exc:
        latency_ms = _elapsed_ms(start)
        logger.exception("Unexpected error probing %s", url)
        return CheckResult.down(
            url, error=str(exc) or exc.__class__.__name__, response_time_ms=latency_ms
        )

    if status_code is None:
        logger.debug("GET %s did not complete within %ss", url, timeout_s)
        return CheckResult.down(url, error=TIMEOUT_ERROR, response_time_ms=latency_ms)

    if is_success_code(status_code):
        return CheckResult.up(url, status_code=status_code, response_time_ms=latency_ms)

    logger.debug("GET %s returned HTTP %s", url, status_code)
    return CheckResult.down(
        url,
        error=f"HTTP {status_code}",
        response_time_ms=latency_ms,
        status_code=status_code,
    )
