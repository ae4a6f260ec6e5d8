from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass

from ..models.config_models import HeaderRules
from ..models.order import Header

"""CSV reader: tokenizer, header resolver and row normalizer.

Pipeline for one source:
1. tokenize(): raw text -> rows of string fields (quote aware)
2. resolve_header(): decide between a one-row and a two-row header
3. normalize_row(): pad each data row to the header width

The tokenizer is lenient: an unterminated quote at end of input is not an
error, whatever was accumulated is flushed as the last field.
"""

__all__ = [
    "CsvSourceError",
    "EmptySourceError",
    "NoDataRowsError",
    "ParsedBatch",
    "tokenize",
    "resolve_header",
    "normalize_row",
    "find_ragged_rows",
    "parse_source",
]

logger = logging.getLogger(__name__)


class CsvSourceError(Exception):
    """Base class for per-source input errors."""

    error_type = "PARSE_ERROR"


class EmptySourceError(CsvSourceError):
    """Raised when the source text is empty or whitespace only."""

    error_type = "EMPTY_SOURCE"


class NoDataRowsError(CsvSourceError):
    """Raised when no data row remains after header resolution."""

    error_type = "NO_DATA_ROWS"


@dataclass(frozen=True)
class ParsedBatch:
    header: Header
    rows: list[list[str]]  # normalized data rows
    ragged: list[tuple[int, int]]  # (1-based data row, actual width) of rows wider than header


def _is_blank_row(row: Sequence[str]) -> bool:
    return not any(f.strip() for f in row)


def tokenize(text: str) -> list[list[str]]:
    """Split CSV text into rows of fields.

    Handles quoted fields with embedded commas and newlines and doubled
    quotes as escapes. Rows whose fields are all blank are skipped.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")

    rows: list[list[str]] = []
    row: list[str] = []
    buf: list[str] = []
    in_quotes = False

    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == '"':
            if in_quotes and i + 1 < n and text[i + 1] == '"':
                buf.append('"')
                i += 2
                continue
            in_quotes = not in_quotes
        elif ch == "," and not in_quotes:
            row.append("".join(buf))
            buf = []
        elif ch == "\n" and not in_quotes:
            row.append("".join(buf))
            if not _is_blank_row(row):
                rows.append(row)
            row = []
            buf = []
        else:
            buf.append(ch)
        i += 1

    if buf or row:
        row.append("".join(buf))
        if not _is_blank_row(row):
            rows.append(row)

    if in_quotes:
        logger.debug("unterminated quote at end of input; flushed as-is")
    logger.debug(f"tokenize: {n} chars -> {len(rows)} rows")
    return rows


def resolve_header(
    rows: Sequence[Sequence[str]], rules: HeaderRules | None = None
) -> tuple[Header, int]:
    """Resolve the header of a tokenized source.

    Returns:
        (header, data_start_index). With fewer than two rows the result is
        an empty header and index 0, meaning "no header, no data".
    """
    if len(rows) < 2:
        return (), 0
    rules = rules or HeaderRules()

    header = list(rows[0])
    second = rows[1]
    second_text = " ".join(second).lower()
    has_marker = any(m in second_text for m in rules.markers)
    first_cell = second[0] if second else ""
    looks_like_data = re.match(rules.date_pattern, first_cell) is not None

    start = 1
    if has_marker or not looks_like_data:
        # Second physical row continues the header: fill blank header cells
        for i, name in enumerate(header):
            if name.strip():
                continue
            if i < len(second) and second[i].strip():
                header[i] = second[i]
        start = 2

    logger.debug(f"header: {len(header)} columns, data starts at row {start}")
    return tuple(header), start


def normalize_row(row: Sequence[str], header: Header) -> list[str]:
    """Pad ``row`` with empty strings up to the header width.

    Never truncates: a row wider than the header is returned unchanged.
    """
    out = list(row)
    if len(out) < len(header):
        out.extend([""] * (len(header) - len(out)))
    return out


def find_ragged_rows(rows: Sequence[Sequence[str]], header: Header) -> list[tuple[int, int]]:
    """Return (1-based index, width) of rows whose width differs from the header."""
    return [(i + 1, len(r)) for i, r in enumerate(rows) if len(r) != len(header)]


def parse_source(text: str, rules: HeaderRules | None = None) -> ParsedBatch:
    """Run the full reader pipeline on one source.

    Raises:
        EmptySourceError: text is empty or whitespace only
        NoDataRowsError: no data rows remain after the header
    """
    if not text or not text.strip():
        raise EmptySourceError("文件为空")

    rows = tokenize(text)
    header, start = resolve_header(rows, rules)
    data_rows = rows[start:] if start else []
    if not data_rows:
        raise NoDataRowsError("没有找到有效的数据行")

    normalized = [normalize_row(r, header) for r in data_rows]
    ragged = find_ragged_rows(normalized, header)
    return ParsedBatch(header=header, rows=normalized, ragged=ragged)
