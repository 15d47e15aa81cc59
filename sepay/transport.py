from __future__ import annotations
from typing import Any, Dict, Mapping, Optional, Tuple
import json
import logging
import threading
import time

import requests

from .config import ClientConfig, RetryPolicy
from .errors import (
    ApiError,
    AuthError,
    ClientError,
    NotFoundError,
    ParseError,
    RateLimitError,
    RequestInterrupted,
    SePayError,
    ServerError,
    TransportError,
)
from .headers import build_api_headers

logger = logging.getLogger(__name__)


def is_retryable(status_code: int) -> bool:
    return status_code == 429 or status_code >= 500


def _parse_error_body(body: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    if not body:
        return None, None
    try:
        data = json.loads(body)
    except ValueError:
        return None, None
    if not isinstance(data, dict):
        return None, None
    code, message = data.get("error"), data.get("message")
    return (
        str(code) if code is not None else None,
        str(message) if message is not None else None,
    )


def _parse_retry_after(headers: Optional[Mapping[str, str]]) -> Optional[int]:
    raw = (headers or {}).get("Retry-After")
    if raw is None:
        return None
    raw = str(raw).strip()
    return int(raw) if raw.isdigit() else None


def error_for_response(status_code: int, body: Optional[str], headers: Optional[Mapping[str, str]] = None) -> ApiError:
    code, message = _parse_error_body(body)
    if status_code == 401:
        return AuthError(message or "Authentication failed", status_code, code)
    if status_code == 404:
        return NotFoundError(message or "Resource not found")
    if status_code == 429:
        return RateLimitError(message or "Rate limit exceeded", _parse_retry_after(headers), code)
    if status_code >= 500:
        return ServerError(message or "Server error", status_code, code)
    if status_code == 400:
        return ClientError(message or "Validation error", status_code, code)
    if 400 <= status_code < 500:
        return ClientError(message or "API error", status_code, code)
    return ApiError(message or "API error", status_code, code)


class HttpTransport:
    """Sends authenticated JSON requests to the gateway API with bounded retry.

    Failed attempts with a retryable status (429, 5xx), a connection error or
    a timeout are retried up to ``retry_policy.max_retries`` times with a
    linear backoff of ``retry_delay * (attempt + 1)``. Other failures raise on first occurrence.

    ``session`` is any object with a ``requests.Session``-style
    ``request(method, url, **kwargs)`` method.
    """

    def __init__(self, config: ClientConfig, session: Optional[Any] = None) -> None:
        self._base_url = config.api_base_url
        self._policy = config.retry_policy
        self._headers = build_api_headers(config.merchant_id, config.secret_key)
        self._session = session if session is not None else requests.Session()

    def __repr__(self) -> str:
        return f"HttpTransport(base_url={self._base_url!r}, retry_policy={self._policy!r})"

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._policy

    def get(self, path: str, params: Optional[Dict[str, str]] = None, cancel: Optional[threading.Event] = None) -> Any:
        return self._decode(self._send("GET", path, params=params, cancel=cancel))

    def post(self, path: str, body: Any = None, cancel: Optional[threading.Event] = None) -> Any:
        try:
            payload = json.dumps(body if body is not None else {})
        except (TypeError, ValueError) as e:
            raise SePayError("Failed to serialize request body") from e
        return self._decode(self._send("POST", path, data=payload, cancel=cancel))

    def get_raw(self, path: str, params: Optional[Dict[str, str]] = None, cancel: Optional[threading.Event] = None) -> str:
        return self._send("GET", path, params=params, cancel=cancel)

    def close(self) -> None:
        close = getattr(self._session, "close", None)
        if close is not None:
            close()

    def _url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return self._base_url + "/" + path.lstrip("/")

    def _decode(self, text: str) -> Any:
        if not text:
            return None
        try:
            return json.loads(text)
        except ValueError as e:
            raise ParseError(f"Failed to parse response: {text[:200]}") from e

    def _send(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, str]] = None,
        data: Optional[str] = None,
        cancel: Optional[threading.Event] = None,
    ) -> str:
        url = self._url(path)
        policy = self._policy
        timeout = (policy.connect_timeout, policy.read_timeout)
        for attempt in range(policy.max_retries + 1):
            if cancel is not None and cancel.is_set():
                raise RequestInterrupted("Request interrupted")
            try:
                resp = self._session.request(
                    method,
                    url,
                    headers=dict(self._headers),
                    params=params,
                    data=data,
                    timeout=timeout,
                )
            except (requests.ConnectionError, requests.Timeout) as e:
                if attempt >= policy.max_retries:
                    logger.debug("%s %s failed after %d attempts: %s", method, path, attempt + 1, e.__class__.__name__)
                    raise TransportError(f"HTTP request failed: {e}") from e
                delay = self._backoff(attempt)
                logger.warning(
                    "%s %s attempt %d failed (%s), retrying in %.2fs",
                    method, path, attempt + 1, e.__class__.__name__, delay,
                )
                self._wait(delay, cancel)
                continue
            except requests.RequestException as e:
                logger.debug("%s %s failed: %s", method, path, e.__class__.__name__)
                raise TransportError(f"HTTP request failed: {e}") from e

            status = resp.status_code
            if 200 <= status < 300:
                return resp.text or ""
            if is_retryable(status) and attempt < policy.max_retries:
                delay = self._backoff(attempt)
                logger.warning(
                    "%s %s attempt %d returned %d, retrying in %.2fs",
                    method, path, attempt + 1, status, delay,
                )
                self._wait(delay, cancel)
                continue
            logger.debug("%s %s returned %d after %d attempts", method, path, status, attempt + 1)
            raise error_for_response(status, resp.text, resp.headers)
        # max_retries >= 0 guarantees at least one pass through the loop
        raise TransportError("Request failed after retries")

    def _backoff(self, attempt: int) -> float:
        return self._policy.retry_delay * (attempt + 1)

    def _wait(self, delay: float, cancel: Optional[threading.Event]) -> None:
        if cancel is None:
            time.sleep(delay)
            return
        if cancel.wait(delay):
            logger.debug("retry wait cancelled")
            raise RequestInterrupted("Request interrupted")
