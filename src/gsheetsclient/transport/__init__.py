"""Transport exports for gsheetsclient."""

from __future__ import annotations

from .authorized import AuthorizedTransport, RetryPolicy
from .base import Response, Transport

__all__ = ["Transport", "Response", "AuthorizedTransport", "RetryPolicy"]
