from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

from ..csvio.writer import export_csv, export_filename, write_export
from ..models.config_models import TrackerConfig
from ..models.order import OrderStatus
from ..store.order_store import OrderStore
from .display import EMPTY_MESSAGE, require_header

"""Export of packed orders to a BOM-prefixed CSV file."""

__all__ = [
    "NothingToExportError",
    "NOTHING_TO_EXPORT_MESSAGE",
    "export_orders",
]

logger = logging.getLogger(__name__)

NOTHING_TO_EXPORT_MESSAGE = "没有已打包的订单"


class NothingToExportError(Exception):
    def __init__(self, message: str = NOTHING_TO_EXPORT_MESSAGE) -> None:
        super().__init__(message)


def export_orders(
    store: OrderStore,
    config: TrackerConfig | None = None,
    output: Path | None = None,
    *,
    include_all: bool = False,
    today: date | None = None,
) -> tuple[Path, int]:
    """Write the packed orders (or all orders) to CSV.

    Returns:
        (written path, exported order count)

    Raises:
        NothingToExportError: no order to export (no packed order, or an empty
            store with include_all)
        SchemaMissingError: orders exist but no header is known
    """
    config = config or TrackerConfig()
    orders = list(store.snapshot())
    if not include_all:
        orders = [o for o in orders if o.status is OrderStatus.PACKED]
    if not orders:
        raise NothingToExportError(EMPTY_MESSAGE if include_all else NOTHING_TO_EXPORT_MESSAGE)
    header = require_header(store)

    if output is None:
        output = Path(config.export_directory) / export_filename(config.export_label, today)
    path = write_export(output, export_csv(orders, header))
    logger.info(f"exported {len(orders)} orders -> {path}")
    return path, len(orders)
