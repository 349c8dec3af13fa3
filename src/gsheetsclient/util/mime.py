from __future__ import annotations

import mimetypes

MIME_TYPE_FOLDER: str = "application/vnd.google-apps.folder"
MIME_TYPE_SPREADSHEET: str = "application/vnd.google-apps.spreadsheet"
DEFAULT_CONTENT_TYPE: str = "application/octet-stream"


def guess_content_type(path: str) -> str:
    """
    Content type for an upload, derived from the file extension.

    Unknown extensions fall back to application/octet-stream.
    """
    content_type, _ = mimetypes.guess_type(path, strict=False)
    return content_type or DEFAULT_CONTENT_TYPE
