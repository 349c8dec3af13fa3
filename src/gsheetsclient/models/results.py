"""Result models for lookups."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Optional

LookupStatus = Literal["found", "not_found"]


@dataclass(slots=True)
class FileLookup:
    """Outcome of fetching a file that may not exist."""

    file_id: str
    status: LookupStatus
    file: Optional[dict[str, Any]] = None

    @property
    def found(self) -> bool:
        return self.status == "found"
