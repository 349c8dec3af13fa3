from .mime import (
    DEFAULT_CONTENT_TYPE,
    MIME_TYPE_FOLDER,
    MIME_TYPE_SPREADSHEET,
    guess_content_type,
)

__all__ = [
    "DEFAULT_CONTENT_TYPE",
    "MIME_TYPE_FOLDER",
    "MIME_TYPE_SPREADSHEET",
    "guess_content_type",
]
