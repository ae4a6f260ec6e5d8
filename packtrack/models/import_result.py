from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

"""Import result models.

SourceResult describes the outcome of one import source (one CSV file);
ImportReport aggregates every source of one import run and feeds the
SUMMARY line.
"""

__all__ = [
    "SourceStatus",
    "SourceResult",
    "ImportReport",
]


class SourceStatus(Enum):
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class SourceResult:
    """Outcome of importing a single source."""
    source: str  # file name shown to the operator
    status: SourceStatus
    imported_rows: int = 0
    columns: int = 0  # resolved header width
    ragged_rows: int = 0  # rows whose width differs from the header
    error_type: str | None = None
    error: str | None = None  # failure message

    @property
    def failure_message(self) -> str | None:
        if self.error is None:
            return None
        return f"{self.source}: {self.error}"


@dataclass(frozen=True)
class ImportReport:
    """Aggregated results of one import run."""
    start_time: datetime
    end_time: datetime
    sources: list[SourceResult] = field(default_factory=list)

    @property
    def total_sources(self) -> int:
        return len(self.sources)

    @property
    def success_sources(self) -> int:
        return sum(1 for s in self.sources if s.status is SourceStatus.SUCCESS)

    @property
    def failed_sources(self) -> int:
        return sum(1 for s in self.sources if s.status is SourceStatus.FAILED)

    @property
    def imported_rows(self) -> int:
        return sum(s.imported_rows for s in self.sources)

    @property
    def elapsed_seconds(self) -> float:
        return (self.end_time - self.start_time).total_seconds()

    @property
    def failures(self) -> list[str]:
        """Per-source failure messages, in source order."""
        return [s.failure_message for s in self.sources if s.failure_message is not None]
