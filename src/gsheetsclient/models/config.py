"""Per-client request configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

DEFAULT_FILE_FIELDS: tuple[str, ...] = ("kind", "id", "name", "mimeType", "parents")
DEFAULT_REVISION_FIELDS: tuple[str, ...] = ("kind", "id", "mimeType", "modifiedTime")


def _as_fields(value: Sequence[str], label: str) -> tuple[str, ...]:
    if isinstance(value, str):
        raise TypeError(f"{label} must be a sequence of field names, not a string")
    fields = tuple(value)
    if not fields or not all(isinstance(f, str) and f.strip() for f in fields):
        raise ValueError(f"{label} must be a non-empty sequence of field names")
    return fields


@dataclass(frozen=True)
class ClientConfig:
    """
    Settings applied to every request of one GoogleSheetsClient.

    Attributes:
        default_fields: Drive file projection used when a call passes no fields.
        revision_fields: Projection for revision calls without explicit fields.
        supports_all_drives: Include shared drives in the scope of file calls.
    """

    default_fields: tuple[str, ...] = field(default=DEFAULT_FILE_FIELDS)
    revision_fields: tuple[str, ...] = field(default=DEFAULT_REVISION_FIELDS)
    supports_all_drives: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "default_fields", _as_fields(self.default_fields, "default_fields")
        )
        object.__setattr__(
            self, "revision_fields", _as_fields(self.revision_fields, "revision_fields")
        )
