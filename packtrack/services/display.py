from __future__ import annotations

from collections.abc import Sequence

import pandas as pd

from ..csvio.writer import ID_COLUMN, STATUS_COLUMN, align_row
from ..models.order import Header, Order
from ..store.order_store import OrderStore

"""Text rendering of orders for the CLI (display collaborator).

Orders are laid out against the store's current header with a pandas
DataFrame: 序号, one column per header name, 打包状态, 备注.
"""

__all__ = [
    "SchemaMissingError",
    "EMPTY_MESSAGE",
    "SCHEMA_MISSING_MESSAGE",
    "NOTES_COLUMN",
    "require_header",
    "column_labels",
    "orders_frame",
    "render_table",
    "render_stats",
    "render_debug_info",
]

EMPTY_MESSAGE = "暂无数据，请导入CSV文件"
SCHEMA_MISSING_MESSAGE = "CSV表头数据丢失，请重新导入文件"
NOTES_COLUMN = "备注"
DEFAULT_MAX_COLWIDTH = 40


class SchemaMissingError(Exception):
    """Raised when orders must be shown or exported but no header is known."""

    def __init__(self, message: str = SCHEMA_MISSING_MESSAGE) -> None:
        super().__init__(message)


def require_header(store: OrderStore) -> Header:
    if not store.header:
        raise SchemaMissingError()
    return store.header


def column_labels(header: Header, width: int | None = None) -> list[str]:
    """Display names for ``width`` columns; blank names become 列<N>."""
    width = len(header) if width is None else width
    labels = []
    for i in range(width):
        name = header[i] if i < len(header) else ""
        labels.append(name if name.strip() else f"列{i + 1}")
    return labels


def _display_cell(value: str) -> str:
    return value.replace("\n", "\\n")


def orders_frame(orders: Sequence[Order], header: Header) -> pd.DataFrame:
    """Build the display table; rows wider than the header get extra 列<N> columns."""
    aligned = [align_row(o, header) for o in orders]
    width = max([len(header), *(len(r) for r in aligned)])
    labels = column_labels(header, width)

    records = []
    for order, cells in zip(orders, aligned):
        padded = list(cells) + [""] * (width - len(cells))
        records.append(
            [order.id, *(_display_cell(c) for c in padded), order.status.label, order.notes]
        )
    columns = [ID_COLUMN, *labels, STATUS_COLUMN, NOTES_COLUMN]
    # duplicate header names are legal in the source sheet
    return pd.DataFrame(records, columns=columns)


def render_table(
    orders: Sequence[Order], header: Header, max_colwidth: int = DEFAULT_MAX_COLWIDTH
) -> str:
    """Render orders as a text table.

    Raises:
        SchemaMissingError: if there are orders but no header
    """
    if not orders:
        return EMPTY_MESSAGE
    if not header:
        raise SchemaMissingError()
    frame = orders_frame(orders, header)
    return frame.to_string(index=False, max_colwidth=max_colwidth)


def render_stats(store: OrderStore) -> str:
    s = store.stats()
    return f"总订单数: {s.total}  待打包: {s.pending}  已打包: {s.packed}"


def _preview(value: str, limit: int = 40) -> str:
    if not value:
        return "(空)"
    shown = value.replace("\n", "\\n")[:limit]
    return shown + ("..." if len(value) > limit else "")


def render_debug_info(store: OrderStore) -> str:
    """Diagnostic dump: counts, header summary and two sample orders."""
    stats = store.stats()
    header = store.header
    lines = [
        "=== 调试信息 ===",
        "",
        f"总订单数: {stats.total}",
        f"待打包: {stats.pending}",
        f"已打包: {stats.packed}",
        "",
        f"CSV列数: {len(header)}",
        "CSV表头前5列:",
    ]
    for i, name in enumerate(header[:5]):
        lines.append(f"  {i + 1}. {name or '(空)'}")
    if len(header) > 5:
        lines.append(f"  ... 还有 {len(header) - 5} 列")

    orders = store.snapshot()
    if orders:
        lines += ["", "前2个订单数据样本:"]
        for i, order in enumerate(orders[:2]):
            lines += [
                "",
                f"【订单 {i + 1}】ID: {order.id}, 状态: {order.status.value}",
                f"列数: {len(order.row_data)}",
            ]
            for idx, value in enumerate(order.row_data[:3]):
                name = order.headers[idx] if idx < len(order.headers) and order.headers[idx] else "未命名"
                lines.append(f"  [{idx}] {name}: {_preview(value)}")
            if len(order.row_data) > 3:
                lines.append(f"  ... 还有 {len(order.row_data) - 3} 列")
    return "\n".join(lines)
