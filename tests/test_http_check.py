import unittest
from unittest.mock import Mock, patch

import requests

from healthcheck.checks.http_check import describe_request_error, probe
from healthcheck.checks.results import Status
from healthcheck.config import USER_AGENT


def _response(status_code: int, body: bytes = b"ok") -> Mock:
    resp = Mock(status_code=status_code, is_redirect=False)
    resp.iter_content.return_value = [body]
    return resp


def _redirect(location: str, status_code: int = 302) -> Mock:
    resp = Mock(status_code=status_code, is_redirect=True, headers={"location": location})
    return resp


class ProbeTests(unittest.TestCase):
    def test_success_response_is_up(self) -> None:
        with patch("healthcheck.checks.http_check.requests.get", return_value=_response(200)):
            res = probe("http://example.local/health", timeout_s=3)

        self.assertEqual(res.status, Status.UP)
        self.assertEqual(res.status_code, 200)
        self.assertIsNone(res.error)
        self.assertGreaterEqual(res.response_time_ms, 0)

    def test_each_request_gets_only_the_time_left(self) -> None:
        with patch(
            "healthcheck.checks.http_check.requests.get", return_value=_response(200)
        ) as mock_get:
            probe("http://example.local/health", timeout_s=3)

        args, kwargs = mock_get.call_args
        self.assertEqual(args, ("http://example.local/health",))
        connect_timeout, read_timeout = kwargs["timeout"]
        self.assertTrue(0 < connect_timeout <= 3)
        self.assertEqual(connect_timeout, read_timeout)
        self.assertEqual(kwargs["headers"], {"User-Agent": USER_AGENT})
        self.assertTrue(kwargs["stream"])
        self.assertFalse(kwargs["allow_redirects"])

    def test_server_error_is_down_with_code(self) -> None:
        with patch("healthcheck.checks.http_check.requests.get", return_value=_response(500)):
            res = probe("http://example.local/health", timeout_s=3)

        self.assertEqual(res.status, Status.DOWN)
        self.assertEqual(res.status_code, 500)
        self.assertEqual(res.error, "HTTP 500")

    def test_client_error_is_down(self) -> None:
        with patch("healthcheck.checks.http_check.requests.get", return_value=_response(404)):
            res = probe("http://example.local/missing", timeout_s=3)

        self.assertEqual(res.status, Status.DOWN)
        self.assertEqual(res.error, "HTTP 404")

    def test_timeout_is_down_without_code(self) -> None:
        with patch(
            "healthcheck.checks.http_check.requests.get",
            side_effect=requests.ReadTimeout("read timed out"),
        ):
            res = probe("http://example.local/slow", timeout_s=1)

        self.assertEqual(res.status, Status.DOWN)
        self.assertIsNone(res.status_code)
        self.assertEqual(res.error, "timeout")

    def test_connection_refused(self) -> None:
        with patch(
            "healthcheck.checks.http_check.requests.get",
            side_effect=requests.ConnectionError("[Errno 111] Connection refused"),
        ):
            res = probe("http://127.0.0.1:9", timeout_s=1)

        self.assertEqual(res.status, Status.DOWN)
        self.assertIsNone(res.status_code)
        self.assertEqual(res.error, "connection refused")

    def test_unexpected_exception_never_raises(self) -> None:
        with patch(
            "healthcheck.checks.http_check.requests.get",
            side_effect=RuntimeError("kaboom"),
        ), self.assertLogs("healthcheck.checks.http_check", level="ERROR"):
            res = probe("http://example.local/health", timeout_s=1)

        self.assertEqual(res.status, Status.DOWN)
        self.assertEqual(res.error, "kaboom")

    def test_body_past_deadline_is_timeout(self) -> None:
        resp = _response(200)
        with patch(
            "healthcheck.checks.http_check.requests.get", return_value=resp
        ), patch(
            "healthcheck.checks.http_check.time.perf_counter",
            side_effect=[0.0, 0.0] + [5.0] * 10,
        ):
            res = probe("http://example.local/trickle", timeout_s=1)

        self.assertEqual(res.status, Status.DOWN)
        self.assertIsNone(res.status_code)
        self.assertEqual(res.error, "timeout")
        resp.close.assert_called_once()

    def test_invalid_url_is_down(self) -> None:
        res = probe("not-a-valid-url", timeout_s=1)

        self.assertEqual(res.status, Status.DOWN)
        self.assertTrue(res.error.startswith("invalid url"))

    def test_redirects_are_followed_with_relative_location(self) -> None:
        with patch(
            "healthcheck.checks.http_check.requests.get",
            side_effect=[_redirect("/next"), _redirect("https://other.local/final", 301), _response(200)],
        ) as mock_get:
            res = probe("http://example.local/start", timeout_s=3)

        urls = [c.args[0] for c in mock_get.call_args_list]
        self.assertEqual(
            urls,
            ["http://example.local/start", "http://example.local/next", "https://other.local/final"],
        )
        self.assertEqual(res.status, Status.UP)
        self.assertEqual(res.url, "http://example.local/start")

    def test_redirect_chain_past_deadline_is_timeout(self) -> None:
        with patch(
            "healthcheck.checks.http_check.requests.get", return_value=_redirect("/again")
        ) as mock_get, patch(
            "healthcheck.checks.http_check.time.perf_counter",
            side_effect=[0.0, 0.0] + [5.0] * 10,
        ):
            res = probe("http://example.local/loop", timeout_s=1)

        mock_get.assert_called_once()
        self.assertEqual(res.status, Status.DOWN)
        self.assertIsNone(res.status_code)
        self.assertEqual(res.error, "timeout")

    def test_endless_redirects_are_down(self) -> None:
        with patch(
            "healthcheck.checks.http_check.requests.get", return_value=_redirect("/again")
        ):
            res = probe("http://example.local/loop", timeout_s=30)

        self.assertEqual(res.status, Status.DOWN)
        self.assertIn("redirects", res.error)


class DescribeRequestErrorTests(unittest.TestCase):
    def test_descriptions(self) -> None:
        cases = [
            (requests.ConnectTimeout("x"), "timeout"),
            (requests.ReadTimeout("x"), "timeout"),
            (requests.exceptions.SSLError("bad cert"), "ssl error: bad cert"),
            (requests.ConnectionError("Name or service not known"), "connection error: Name or service not known"),
            (requests.exceptions.MissingSchema("no scheme"), "invalid url: no scheme"),
        ]
        for exc, expected in cases:
            with self.subTest(exc=exc):
                self.assertEqual(describe_request_error(exc), expected)


if __name__ == "__main__":
    unittest.main()
