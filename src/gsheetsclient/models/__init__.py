"""Public model exports for gsheetsclient."""

from __future__ import annotations

from .config import DEFAULT_FILE_FIELDS, DEFAULT_REVISION_FIELDS, ClientConfig
from .results import FileLookup, LookupStatus
from .upload import UploadSession

__all__ = [
    "ClientConfig",
    "DEFAULT_FILE_FIELDS",
    "DEFAULT_REVISION_FIELDS",
    "FileLookup",
    "LookupStatus",
    "UploadSession",
]
