"""Exception hierarchy and HTTP error mapping for gsheetsclient."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional


class GSheetsClientError(Exception):
    """
    Base exception for gsheetsclient.

    Attributes:
        details: Optional structured information (e.g., HTTP status, reason).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause

    @property
    def status_code(self) -> Optional[int]:
        """HTTP status of the failed response, if the error came from one."""
        value = self.details.get("status_code")
        return value if isinstance(value, int) else None


class AuthError(GSheetsClientError):
    """Raised when OAuth authentication/refresh fails (or HTTP 401)."""


class PermissionError(GSheetsClientError):
    """Raised when access is denied (HTTP 403 non-quota)."""


class InvalidArgumentError(GSheetsClientError):
    """Raised when request arguments are invalid (HTTP 400, etc.)."""


class NotFoundError(GSheetsClientError):
    """Raised when a Drive/Sheets resource is not found (HTTP 404)."""


class ConflictError(GSheetsClientError):
    """Raised when a conflict occurs (HTTP 409/412)."""


class RateLimitError(GSheetsClientError):
    """Raised when rate-limited (HTTP 429)."""


class QuotaExceededError(GSheetsClientError):
    """Raised when quota is exceeded (HTTP 403 with quota-related reason)."""


class NetworkError(GSheetsClientError):
    """Raised when network/timeout issues prevent the request."""


class ApiError(GSheetsClientError):
    """Raised for unclassified API errors (5xx, unknown 4xx, etc.)."""


class UploadInitError(GSheetsClientError):
    """Raised when a resumable upload session could not be opened."""


@dataclass(frozen=True)
class HttpErrorInfo:
    """Lightweight HTTP error information for mapping to gsheetsclient exceptions."""

    status_code: int
    reason: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


_QUOTA_REASON_KEYWORDS: tuple[str, ...] = (
    "quota",
    "rateLimitExceeded",
    "userRateLimitExceeded",
    "dailyLimitExceeded",
    "usageLimits",
    "storageQuotaExceeded",
)


def _is_quota_reason(reason: str | None) -> bool:
    if not reason:
        return False
    return any(key.lower() in reason.lower() for key in _QUOTA_REASON_KEYWORDS)


def parse_error_body(
    status_code: int,
    content: bytes | None,
    *,
    reason: str | None = None,
) -> HttpErrorInfo:
    """
    Build HttpErrorInfo from a Google API error response body.

    Google APIs answer with `{"error": {"message": ..., "errors": [{"reason": ...}]}}`;
    the first error's reason wins over the HTTP reason phrase. Bodies that are
    not JSON (or not in that shape) leave message/details empty.
    """
    message = None
    details: dict[str, Any] = {}

    if content:
        try:
            payload = json.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            payload = None

        err = payload.get("error") if isinstance(payload, dict) else None
        if isinstance(err, dict):
            message = err.get("message") or None
            if isinstance(err.get("status"), str):
                details["status"] = err["status"]
            errors = err.get("errors") or []
            if errors and isinstance(errors, list) and isinstance(errors[0], dict):
                details["domain"] = errors[0].get("domain")
                details["reason_detail"] = errors[0].get("reason")
                if isinstance(errors[0].get("reason"), str):
                    reason = errors[0]["reason"]

    return HttpErrorInfo(
        status_code=status_code,
        reason=reason if isinstance(reason, str) else None,
        message=message if isinstance(message, str) else None,
        details=details or None,
    )


def map_http_error(
    info: HttpErrorInfo,
    *,
    cause: Optional[BaseException] = None,
) -> GSheetsClientError:
    """
    Map an HTTP error to a gsheetsclient exception.

    Policy:
        - 401 -> AuthError
        - 403 -> PermissionError (default), but QuotaExceededError if quota-related
        - 404 -> NotFoundError
        - 409/412 -> ConflictError
        - 429 -> RateLimitError
        - 400 -> InvalidArgumentError
        - otherwise -> ApiError
    """
    details: dict[str, Any] = {
        "status_code": info.status_code,
        "reason": info.reason,
    }
    if info.details:
        details.update(info.details)

    message = info.message or f"HTTP error {info.status_code}"

    if info.status_code == 400:
        return InvalidArgumentError(message, details=details, cause=cause)
    if info.status_code == 401:
        return AuthError(message, details=details, cause=cause)
    if info.status_code == 403:
        if _is_quota_reason(info.reason):
            return QuotaExceededError(message, details=details, cause=cause)
        return PermissionError(message, details=details, cause=cause)
    if info.status_code == 404:
        return NotFoundError(message, details=details, cause=cause)
    if info.status_code in (409, 412):
        return ConflictError(message, details=details, cause=cause)
    if info.status_code == 429:
        return RateLimitError(message, details=details, cause=cause)

    return ApiError(message, details=details, cause=cause)
