from .reader import (
    CsvSourceError,
    EmptySourceError,
    NoDataRowsError,
    ParsedBatch,
    find_ragged_rows,
    normalize_row,
    parse_source,
    resolve_header,
    tokenize,
)
from .writer import align_row, export_csv, export_filename, write_export

__all__ = [
    "CsvSourceError",
    "EmptySourceError",
    "NoDataRowsError",
    "ParsedBatch",
    "align_row",
    "export_csv",
    "export_filename",
    "find_ragged_rows",
    "normalize_row",
    "parse_source",
    "resolve_header",
    "tokenize",
    "write_export",
]
