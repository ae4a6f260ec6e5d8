from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

"""Order domain model and OrderStatus enum.

An Order is one packing-tracked record derived from one normalized CSV data
row. The row values and the header they were parsed against travel together
on the same object, so column access always goes through the order's own
header.

State transitions: pending <-> packed (toggled by the operator).
"""

__all__ = [
    "Header",
    "Order",
    "OrderStatus",
    "STATUS_LABELS",
]

# Resolved column names of one import batch. Shared by reference across the
# orders created from that batch.
Header = tuple[str, ...]


class OrderStatus(Enum):
    """Packing status of an order.

    - PENDING: imported, not yet packed
    - PACKED: marked packed by the operator
    """
    PENDING = "pending"
    PACKED = "packed"

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]

    def toggled(self) -> OrderStatus:
        return OrderStatus.PACKED if self is OrderStatus.PENDING else OrderStatus.PENDING


STATUS_LABELS: dict[OrderStatus, str] = {
    OrderStatus.PENDING: "待打包",
    OrderStatus.PACKED: "已打包",
}


def _now_iso() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


@dataclass
class Order:
    """One imported order row.

    Only ``status`` and ``notes`` are mutated after creation, and only via the
    OrderStore operations.
    """
    id: int
    row_data: tuple[str, ...]  # normalized row values, source column order
    headers: Header  # header of the batch this row came from
    status: OrderStatus = OrderStatus.PENDING
    notes: str = ""
    import_time: str = field(default_factory=_now_iso)

    @property
    def row_text(self) -> str:
        """All cells joined by single spaces and case-folded (used for matching)."""
        return " ".join(self.row_data).casefold()

    def value(self, column: str, default: str = "") -> str:
        """Return the cell under the first column named ``column``."""
        try:
            index = self.headers.index(column)
        except ValueError:
            return default
        if index >= len(self.row_data):
            return default
        return self.row_data[index]

    def to_dict(self) -> dict[str, Any]:
        # Keys follow the persisted layout (camelCase, one header per order)
        return {
            "id": self.id,
            "rowData": list(self.row_data),
            "headers": list(self.headers),
            "status": self.status.value,
            "notes": self.notes,
            "importTime": self.import_time,
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> Order:
        """Rebuild an Order from its persisted form.

        Raises:
            KeyError / ValueError / TypeError: if required keys are missing or malformed
        """
        return Order(
            id=int(data["id"]),
            row_data=tuple(str(v) for v in data["rowData"]),
            headers=tuple(str(h) for h in data.get("headers") or ()),
            status=OrderStatus(data.get("status", OrderStatus.PENDING.value)),
            notes=str(data.get("notes") or ""),
            import_time=str(data.get("importTime") or _now_iso()),
        )
