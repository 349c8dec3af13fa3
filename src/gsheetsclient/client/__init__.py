"""Client facade exports for gsheetsclient."""

from __future__ import annotations

from .client import USER_ENTERED, GoogleSheetsClient
from .urls import URI_DRIVE_FILES, URI_DRIVE_UPLOAD, URI_SPREADSHEETS

__all__ = [
    "GoogleSheetsClient",
    "USER_ENTERED",
    "URI_DRIVE_FILES",
    "URI_DRIVE_UPLOAD",
    "URI_SPREADSHEETS",
]
