"""gsheetsclient public API."""

from __future__ import annotations

from gsheetsclient.auth import AuthInfo, OAuthClient
from gsheetsclient.client import GoogleSheetsClient
from gsheetsclient.errors import (
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
)
from gsheetsclient.models import ClientConfig, FileLookup, UploadSession
from gsheetsclient.transport import AuthorizedTransport, RetryPolicy, Transport
from gsheetsclient.util.mime import MIME_TYPE_FOLDER, MIME_TYPE_SPREADSHEET

__all__ = [
    # High-level
    "GoogleSheetsClient",
    "ClientConfig",
    # Auth / transport
    "AuthInfo",
    "OAuthClient",
    "Transport",
    "AuthorizedTransport",
    "RetryPolicy",
    # Models
    "FileLookup",
    "UploadSession",
    "MIME_TYPE_FOLDER",
    "MIME_TYPE_SPREADSHEET",
    # Errors
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
]
