from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import date
from pathlib import Path
from typing import Any

from ..models.order import Header, Order

"""CSV writer for packed-order exports.

Quote-all policy: every cell is wrapped in double quotes and embedded quotes
are doubled, so tokenize() in packtrack.csvio.reader reads the output back
losslessly.
"""

__all__ = [
    "ID_COLUMN",
    "STATUS_COLUMN",
    "BOM",
    "quote_cell",
    "align_row",
    "export_csv",
    "export_filename",
    "write_export",
]

logger = logging.getLogger(__name__)

ID_COLUMN = "序号"
STATUS_COLUMN = "打包状态"
BOM = "\ufeff"


def quote_cell(value: Any) -> str:
    text = "" if value is None else str(value)
    return '"' + text.replace('"', '""') + '"'


def align_row(order: Order, header: Header) -> tuple[str, ...]:
    """Return the order's cells laid out against ``header``.

    Orders whose own header equals ``header`` are returned verbatim (wider
    rows included). Otherwise each target column takes the value of the
    order's first column with the same name, or "".
    """
    if order.headers == header:
        return order.row_data
    return tuple(order.value(name) if name else "" for name in header)


def _format_row(cells: Iterable[Any]) -> str:
    return ",".join(quote_cell(c) for c in cells)


def export_csv(orders: Sequence[Order], header: Header) -> str:
    """Serialize orders as quote-all CSV text (no trailing newline).

    Layout:
        header row: 序号, <header...>, 打包状态
        data rows:  id, <row values...>, status label
    """
    lines = [_format_row([ID_COLUMN, *header, STATUS_COLUMN])]
    mismatched = 0
    for order in orders:
        if order.headers != header:
            mismatched += 1
        lines.append(_format_row([order.id, *align_row(order, header), order.status.label]))
    if mismatched:
        logger.warning(f"export: {mismatched} order(s) re-aligned to the current header")
    return "\n".join(lines)


def export_filename(label: str, today: date | None = None) -> str:
    """Return ``<label>_<YYYY-MM-DD>.csv``."""
    today = today or date.today()
    return f"{label}_{today.isoformat()}.csv"


def write_export(path: Path, csv_text: str) -> Path:
    """Write export text prefixed with a UTF-8 BOM."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(BOM + csv_text, encoding="utf-8", newline="")
    return path
