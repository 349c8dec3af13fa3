"""Resumable upload session handle."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class UploadSession:
    """
    A server-issued upload URL returned by the initiation request.

    Bytes may only be sent once a session exists; the URL stays valid for a
    limited time (about a week) on Google's side.
    """

    url: str
    content_type: str
    file_id: Optional[str] = None
