"""Endpoint constants and query-string builders."""

from __future__ import annotations

from typing import Any, Mapping, Sequence, Union
from urllib.parse import quote, urlencode

URI_DRIVE_FILES: str = "https://www.googleapis.com/drive/v3/files"
URI_DRIVE_UPLOAD: str = "https://www.googleapis.com/upload/drive/v3/files"
URI_SPREADSHEETS: str = "https://sheets.googleapis.com/v4/spreadsheets"

Fields = Union[str, Sequence[str]]


def _delimiter(uri: str) -> str:
    return "&" if "?" in uri else "?"


def append_query(uri: str, key: str, value: Any) -> str:
    """Append `key=value`, starting the query string if the URI has none."""
    return f"{uri}{_delimiter(uri)}{key}={value}"


def append_params(uri: str, params: Mapping[str, Any]) -> str:
    """Append URL-encoded params; booleans are written as true/false, `/` stays literal."""
    if not params:
        return uri
    encoded = urlencode(
        {k: (str(v).lower() if isinstance(v, bool) else v) for k, v in params.items()},
        doseq=True,
        safe="/",
    )
    return f"{uri}{_delimiter(uri)}{encoded}"


def join_fields(fields: Fields) -> str:
    if isinstance(fields, str):
        return fields
    return ",".join(fields)


def add_fields(uri: str, fields: Fields) -> str:
    return append_query(uri, "fields", join_fields(fields))


def add_all_drives(uri: str, *, listing: bool = False) -> str:
    uri = append_query(uri, "supportsAllDrives", "true")
    if listing:
        uri = append_query(uri, "includeItemsFromAllDrives", "true")
    return uri


def list_projection(container: str, fields: Fields) -> str:
    """Project items inside a paged list envelope, e.g. nextPageToken,files(id,name)."""
    return f"nextPageToken,{container}({join_fields(fields)})"


def range_path(range_: str) -> str:
    """Percent-encode an A1 range (or sheet title) for use as a path segment."""
    return quote(range_, safe="!:")
