from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ImportErrorRecord model for import error logging.

Each record describes one failed import source. It supports row=-1 as a
sentinel value for source-level errors where no specific row applies.
"""

__all__ = [
    "ImportErrorRecord",
    "EMPTY_SOURCE",
    "NO_DATA_ROWS",
    "READ_ERROR",
    "PARSE_ERROR",
]

EMPTY_SOURCE = "EMPTY_SOURCE"
NO_DATA_ROWS = "NO_DATA_ROWS"
READ_ERROR = "READ_ERROR"
PARSE_ERROR = "PARSE_ERROR"


@dataclass(frozen=True)
class ImportErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        source: name of the CSV source being imported
        row: Row number (1-based). Use -1 for source-level errors
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Human readable description
    """
    timestamp: str  # ISO8601 UTC
    source: str
    row: int  # -1 when unknown
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(source: str, row: int, error_type: str, message: str) -> ImportErrorRecord:
        """Create a new record stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ImportErrorRecord(
            timestamp=ts,
            source=source,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        """Serialize to one JSON Lines entry (fixed key set)."""
        return json.dumps(asdict(self), ensure_ascii=False)
