from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ..csvio.reader import normalize_row
from ..models.order import Header, Order, OrderStatus

"""In-memory order store.

The store exclusively owns the order collection, the next-id counter and the
current display header. It is an explicit object with injectable initial
state; nothing here is module-global.

Invariants:
- ids are unique and strictly increasing in assignment order
- insertion order is preserved and is the default display order
- the id counter goes back to 1 only on clear()
"""

__all__ = [
    "OrderStore",
    "StoreStats",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreStats:
    total: int
    pending: int
    packed: int


class OrderStore:
    def __init__(
        self,
        orders: Iterable[Order] | None = None,
        next_id: int | None = None,
        header: Header | None = None,
    ) -> None:
        self._orders: list[Order] = list(orders or [])
        self._by_id: dict[int, Order] = {o.id: o for o in self._orders}
        highest = max(self._by_id, default=0)
        # A stale counter must never hand out an id already in use
        self._next_id = max(next_id or 1, highest + 1)
        if header is None and self._orders:
            header = self._orders[-1].headers
        self._header: Header = header or ()

    @classmethod
    def from_state(cls, orders: Sequence[Order], next_id: int | None) -> OrderStore:
        """Rehydrate from persisted orders, sharing equal headers by reference."""
        interned: dict[Header, Header] = {}
        shared = []
        for o in orders:
            h = interned.setdefault(o.headers, o.headers)
            if h is not o.headers:
                o = Order(
                    id=o.id,
                    row_data=o.row_data,
                    headers=h,
                    status=o.status,
                    notes=o.notes,
                    import_time=o.import_time,
                )
            shared.append(o)
        return cls(shared, next_id=next_id)

    # -- read side -------------------------------------------------------

    @property
    def header(self) -> Header:
        """Header of the most recent import (the display schema)."""
        return self._header

    @property
    def next_id(self) -> int:
        return self._next_id

    def __len__(self) -> int:
        return len(self._orders)

    def get(self, order_id: int) -> Order | None:
        return self._by_id.get(order_id)

    def snapshot(self) -> tuple[Order, ...]:
        return tuple(self._orders)

    def stats(self) -> StoreStats:
        packed = sum(1 for o in self._orders if o.status is OrderStatus.PACKED)
        return StoreStats(total=len(self._orders), pending=len(self._orders) - packed, packed=packed)

    def has_mixed_headers(self) -> bool:
        return any(o.headers != self._header for o in self._orders)

    # -- mutations -------------------------------------------------------

    def import_batch(self, rows: Iterable[Sequence[str]], header: Header) -> list[Order]:
        """Append one pending order per row and make ``header`` current."""
        header = tuple(header)
        created: list[Order] = []
        for row in rows:
            order = Order(
                id=self._next_id,
                row_data=tuple(normalize_row(row, header)),
                headers=header,
            )
            self._next_id += 1
            self._orders.append(order)
            self._by_id[order.id] = order
            created.append(order)
        if self._header and self._header != header:
            logger.warning(
                f"header changed ({len(self._header)} -> {len(header)} columns); "
                "earlier orders keep their own header"
            )
        self._header = header
        return created

    def set_status(self, order_id: int, status: OrderStatus) -> bool:
        """Set an order's status. Unknown ids are ignored (returns False)."""
        order = self._by_id.get(order_id)
        if order is None:
            return False
        order.status = status
        return True

    def toggle_status(self, order_id: int) -> OrderStatus | None:
        order = self._by_id.get(order_id)
        if order is None:
            return None
        order.status = order.status.toggled()
        return order.status

    def set_notes(self, order_id: int, text: str) -> bool:
        """Replace an order's notes. Unknown ids are ignored (returns False)."""
        order = self._by_id.get(order_id)
        if order is None:
            return False
        order.notes = text
        return True

    def clear(self) -> None:
        self._orders.clear()
        self._by_id.clear()
        self._next_id = 1
        self._header = ()
