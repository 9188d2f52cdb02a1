"""
HTTP execution service for sending a single request.

This service handles the actual HTTP exchange using httpx, including
elapsed-time measurement, response body formatting and turning transport
failures into a displayable result.
"""

import json
import logging
import threading
import time

import httpx

from ..config import Settings
from ..exceptions import RequestInFlightError
from ..schemas.execute import BODY_METHODS, ExecutionResult, HttpMethod

logger = logging.getLogger(__name__)

ERROR_LABEL = "Error"

# (threshold in nanoseconds, unit suffix), largest first
_ELAPSED_UNITS = (
    (1_000_000_000, "s"),
    (1_000_000, "ms"),
    (1_000, "µs"),
    (1, "ns"),
)


def format_elapsed(elapsed_ns: int) -> str:
    """
    Format a duration for display using the largest unit it reaches.

    Example:
        >>> format_elapsed(123_456_789)
        '123ms'
        >>> format_elapsed(2_400_000_000)
        '2s'
    """
    for threshold, unit in _ELAPSED_UNITS:
        if elapsed_ns >= threshold:
            return f"{round(elapsed_ns / threshold)}{unit}"
    return "0ns"


def format_body(text: str) -> str:
    """
    Pretty-print text that parses as JSON, otherwise return it verbatim.

    Args:
        text: Raw response body

    Returns:
        JSON re-serialised with a 2-space indent, or the original text
    """
    if not text:
        return text
    try:
        parsed = json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return text
    return json.dumps(parsed, indent=2, ensure_ascii=False)


def status_label(response: httpx.Response) -> str:
    """Return "<code> <reason>", e.g. "404 Not Found"."""
    return f"{response.status_code} {response.reason_phrase or ''}".strip()


def describe_transport_error(exc: Exception, timeout: float) -> str:
    """Build the human-readable text shown in place of a response body."""
    detail = str(exc) or type(exc).__name__
    if isinstance(exc, httpx.TimeoutException):
        return f"Request timed out after {timeout:g} seconds: {detail}"
    if isinstance(exc, httpx.ConnectError):
        return f"Failed to connect to server: {detail}"
    if isinstance(exc, (httpx.InvalidURL, httpx.UnsupportedProtocol)):
        return f"Invalid URL: {detail}"
    return f"HTTP error occurred: {detail}"


class RequestExecutor:
    """
    Sends one request at a time and reports the outcome as a result value.

    A call made while another is still running raises RequestInFlightError
    instead of racing it.
    """

    def __init__(self, settings: Settings, transport: httpx.BaseTransport | None = None):
        self._settings = settings
        self._transport = transport
        self._in_flight = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._in_flight.locked()

    def execute(self, method: HttpMethod, url: str, body: str | None = None) -> ExecutionResult:
        """
        Execute an HTTP request and return the formatted outcome.

        Args:
            method: One of GET, POST, PUT, DELETE, PATCH
            url: Target URL, checked for emptiness by the caller
            body: Request body, sent only for POST, PUT and PATCH

        Returns:
            ExecutionResult for any completed exchange or transport failure

        Raises:
            RequestInFlightError: if another request has not returned yet
        """
        if not self._in_flight.acquire(blocking=False):
            raise RequestInFlightError()
        try:
            return self._send(method, url, body)
        finally:
            self._in_flight.release()

    def _send(self, method: str, url: str, body: str | None) -> ExecutionResult:
        headers: dict[str, str] = {}
        content: str | None = None
        if body and method in BODY_METHODS:
            headers["Content-Type"] = "application/json"
            content = body

        timeout = self._settings.request_timeout
        start_time = time.perf_counter_ns()
        try:
            with httpx.Client(
                timeout=timeout,
                follow_redirects=self._settings.follow_redirects,
                transport=self._transport,
            ) as client:
                response = client.request(method, url, headers=headers, content=content)
                response_text = response.text
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            elapsed = format_elapsed(time.perf_counter_ns() - start_time)
            logger.info("%s %s failed after %s: %s", method, url, elapsed, e)
            return ExecutionResult(
                status_label=ERROR_LABEL,
                response_body=describe_transport_error(e, timeout),
                elapsed=elapsed,
            )

        elapsed = format_elapsed(time.perf_counter_ns() - start_time)
        logger.debug("%s %s -> %s in %s", method, url, response.status_code, elapsed)
        return ExecutionResult(
            status_label=status_label(response),
            response_body=format_body(response_text),
            elapsed=elapsed,
        )
