from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the packing tracker.

These are the typed domain view of config/packtrack.yml; loading and
validation live in packtrack/config/loader.py.
"""

DEFAULT_HEADER_MARKERS: tuple[str, ...] = ("postage", "payment proof")
DEFAULT_DATE_PATTERN = r"^\d{2}/\d{2}/\d{4}"
DEFAULT_EXPORT_LABEL = "已打包订单"


@dataclass(frozen=True)
class HeaderRules:
    """Heuristics used to detect a two-row header.

    A second row is treated as header continuation when its lower-cased text
    contains one of ``markers`` or its first cell does not match
    ``date_pattern``.
    """
    markers: tuple[str, ...] = DEFAULT_HEADER_MARKERS
    date_pattern: str = DEFAULT_DATE_PATTERN


@dataclass(frozen=True)
class TrackerConfig:
    """Root configuration object."""
    state_directory: str = ".packtrack"  # persisted orders / id counter
    export_directory: str = "exports"  # default target of `export`
    logs_directory: str = "logs"  # JSON Lines import error logs
    encoding: str = "utf-8-sig"  # source decoding (BOM tolerant)
    max_workers: int = 4  # concurrent source reads
    export_label: str = DEFAULT_EXPORT_LABEL  # export file name prefix
    header_rules: HeaderRules = field(default_factory=HeaderRules)
