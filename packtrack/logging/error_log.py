from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ..models.error_record import ImportErrorRecord

"""Import error log buffering.

- JSON Lines with a fixed key set (see ImportErrorRecord)
- one file per run: ``<logs_dir>/import-errors-YYYYMMDD-HHMMSS.log`` (UTC)
- the file is only created when there is something to write
"""

__all__ = [
    "ImportErrorRecord",
    "ErrorLogBuffer",
    "SCHEMA_PATH",
]

DEFAULT_LOGS_DIR = Path("./logs")
SCHEMA_PATH = Path(__file__).with_name("error_log_schema.json")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    """In-memory buffer for error records. flush() appends JSON Lines.

    No thread safety: records are appended after all sources have settled.
    """

    def __init__(self, logs_dir: Path | None = None) -> None:
        self._records: list[ImportErrorRecord] = []
        self._logs_dir = Path(logs_dir) if logs_dir is not None else DEFAULT_LOGS_DIR
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"import-errors-{stamp}.log"
        return self._file_path

    @property
    def records(self) -> list[ImportErrorRecord]:
        return list(self._records)

    def append(self, record: ImportErrorRecord) -> None:
        self._records.append(record)

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        """Write buffered records; returns the log path, or None when empty."""
        if not self._records:
            return None
        fp = self.file_path
        fp.parent.mkdir(parents=True, exist_ok=True)
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
