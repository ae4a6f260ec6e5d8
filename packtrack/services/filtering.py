from __future__ import annotations

from collections.abc import Iterable

from ..models.order import Order, OrderStatus

"""Filter/search over orders.

Three predicates applied in order (status, category, search term), each
narrowing the previous result; surviving orders keep their insertion order.
Category and search both match against the whole row text, not a dedicated
column.
"""

__all__ = [
    "STATUS_FILTERS",
    "CATEGORY_FILTERS",
    "filter_orders",
]

ALL = "all"
STATUS_FILTERS = (ALL, OrderStatus.PENDING.value, OrderStatus.PACKED.value)
CATEGORY_FILTERS = (ALL, "pickup", "delivery")


def filter_orders(
    orders: Iterable[Order],
    search_term: str | None = "",
    status_filter: str = ALL,
    category_filter: str = ALL,
) -> list[Order]:
    """Return the orders matching all three filters.

    Raises:
        ValueError: on an unknown status or category filter value
    """
    if status_filter not in STATUS_FILTERS:
        raise ValueError(f"unknown status filter: {status_filter!r}")
    if category_filter not in CATEGORY_FILTERS:
        raise ValueError(f"unknown category filter: {category_filter!r}")

    result = list(orders)

    if status_filter != ALL:
        wanted = OrderStatus(status_filter)
        result = [o for o in result if o.status is wanted]

    if category_filter != ALL:
        result = [o for o in result if category_filter in o.row_text]

    term = search_term or ""
    if term.strip():
        needle = term.casefold()
        result = [o for o in result if needle in o.row_text]

    return result
