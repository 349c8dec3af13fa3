"""Public error exports for gsheetsclient."""

from __future__ import annotations

from .exceptions import (
    ApiError,
    AuthError,
    ConflictError,
    GSheetsClientError,
    HttpErrorInfo,
    InvalidArgumentError,
    NetworkError,
    NotFoundError,
    PermissionError,
    QuotaExceededError,
    RateLimitError,
    UploadInitError,
    map_http_error,
    parse_error_body,
)

__all__ = [
    "GSheetsClientError",
    "AuthError",
    "PermissionError",
    "InvalidArgumentError",
    "NotFoundError",
    "ConflictError",
    "RateLimitError",
    "QuotaExceededError",
    "NetworkError",
    "ApiError",
    "UploadInitError",
    "HttpErrorInfo",
    "map_http_error",
    "parse_error_body",
]
