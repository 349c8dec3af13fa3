"""requests-based transport with Google error mapping and retry."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

import requests

from gsheetsclient.auth import DEFAULT_SCOPES, AuthInfo, OAuthClient
from gsheetsclient.errors import (
    ApiError,
    GSheetsClientError,
    NetworkError,
    RateLimitError,
    map_http_error,
    parse_error_body,
)

logger = logging.getLogger(__name__)


# Not safe to replay once the server may have applied them.
_NON_IDEMPOTENT_METHODS: frozenset[str] = frozenset({"POST"})


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = 3
    initial_delay_sec: float = 1.0
    timeout_sec: Optional[float] = 120.0


class AuthorizedTransport:
    """
    Send requests through an authorized `requests.Session`.

    Notes:
        - Non-2xx responses are raised as mapped GSheetsClientError subclasses.
        - 429, 5xx and network failures are retried with exponential backoff.
        - POST is only retried when the server cannot have applied it (429 or
          a failed connection); read timeouts and 5xx surface immediately.
    """

    def __init__(
        self,
        session: requests.Session,
        *,
        retry_policy: Optional[RetryPolicy] = None,
    ) -> None:
        self._session = session
        self._retry_policy = retry_policy or RetryPolicy()

    @classmethod
    def from_auth_info(
        cls,
        auth_info: AuthInfo,
        *,
        scopes: Optional[Sequence[str]] = None,
        retry_policy: Optional[RetryPolicy] = None,
    ) -> "AuthorizedTransport":
        use_scopes = list(scopes) if scopes is not None else list(DEFAULT_SCOPES)
        session = OAuthClient(auth_info).build_session(use_scopes, ensure_valid=True)
        return cls(session, retry_policy=retry_policy)

    def request(
        self,
        uri: str,
        method: str = "GET",
        headers: Optional[Mapping[str, str]] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> requests.Response:
        kwargs = _request_kwargs(options or {}, self._retry_policy.timeout_sec)
        body = kwargs.get("data")
        start = body.tell() if hasattr(body, "seek") else None

        delay = self._retry_policy.initial_delay_sec
        for attempt in range(self._retry_policy.max_retries + 1):
            try:
                return self._send(uri, method, headers, kwargs)
            except GSheetsClientError as exc:
                if not self._should_retry(exc, method) or attempt >= self._retry_policy.max_retries:
                    raise
                logger.warning(
                    "%s %s failed (%s), retry %d in %.1fs",
                    method, uri, exc, attempt + 1, delay,
                )
                time.sleep(delay)
                delay *= 2
                if start is not None:
                    body.seek(start)

        raise ApiError("Unexpected retry loop termination")

    def _send(
        self,
        uri: str,
        method: str,
        headers: Optional[Mapping[str, str]],
        kwargs: dict[str, Any],
    ) -> requests.Response:
        logger.debug("%s %s", method, uri)
        try:
            resp = self._session.request(
                method,
                uri,
                headers=dict(headers) if headers else None,
                **kwargs,
            )
        except requests.exceptions.ReadTimeout as exc:
            raise NetworkError(
                "Read timed out", details={"uri": uri, "read_timeout": True}, cause=exc
            ) from exc
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as exc:
            raise NetworkError("Network error", details={"uri": uri}, cause=exc) from exc
        except requests.exceptions.RequestException as exc:
            raise ApiError("HTTP request failed", details={"uri": uri}, cause=exc) from exc

        if 200 <= resp.status_code <= 299:
            return resp

        info = parse_error_body(resp.status_code, resp.content, reason=resp.reason)
        raise map_http_error(info)

    def _should_retry(self, exc: GSheetsClientError, method: str) -> bool:
        if isinstance(exc, RateLimitError):
            return True
        if method.upper() in _NON_IDEMPOTENT_METHODS:
            return isinstance(exc, NetworkError) and not exc.details.get("read_timeout")
        if isinstance(exc, NetworkError):
            return True
        if isinstance(exc, ApiError):
            status_code = exc.status_code
            return status_code is not None and 500 <= status_code <= 599
        return False


def _request_kwargs(
    options: Mapping[str, Any],
    default_timeout: Optional[float],
) -> dict[str, Any]:
    kwargs: dict[str, Any] = {}
    if "json" in options:
        kwargs["json"] = options["json"]
    if "body" in options:
        kwargs["data"] = options["body"]
    if "timeout" in options:
        kwargs["timeout"] = options["timeout"]
    elif default_timeout is not None:
        kwargs["timeout"] = default_timeout
    return kwargs
