from __future__ import annotations

import json
import logging
from pathlib import Path

from ..models.order import Order
from .order_store import OrderStore

"""Key-value persistence for the order store.

The store snapshot is kept under two keys:
- ``orders``: JSON array of serialized orders (each with its own header)
- ``currentId``: the next id to assign, as text

JsonFileKeyValueStore keeps one UTF-8 file per key in the state directory.
"""

__all__ = [
    "ORDERS_KEY",
    "CURRENT_ID_KEY",
    "PersistenceError",
    "JsonFileKeyValueStore",
    "save_store",
    "load_store",
    "remove_store",
]

logger = logging.getLogger(__name__)

ORDERS_KEY = "orders"
CURRENT_ID_KEY = "currentId"


class PersistenceError(Exception):
    """Raised when persisted state cannot be read back."""


class JsonFileKeyValueStore:
    """Minimal textual key-value store backed by a directory."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(value, encoding="utf-8")
        tmp.replace(path)

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


def save_store(store: OrderStore, kv: JsonFileKeyValueStore) -> None:
    payload = [o.to_dict() for o in store.snapshot()]
    kv.set(ORDERS_KEY, json.dumps(payload, ensure_ascii=False))
    kv.set(CURRENT_ID_KEY, str(store.next_id))
    logger.debug(f"saved {len(payload)} orders (next id {store.next_id})")


def load_store(kv: JsonFileKeyValueStore) -> OrderStore:
    """Rehydrate an OrderStore; an empty store when nothing was saved.

    Raises:
        PersistenceError: if a persisted key is unreadable or holds malformed data
    """
    try:
        raw_orders = kv.get(ORDERS_KEY)
        raw_id = kv.get(CURRENT_ID_KEY)
    except (OSError, UnicodeDecodeError) as e:
        raise PersistenceError(f"unreadable persisted state in {kv.directory}: {e}") from e

    orders: list[Order] = []
    if raw_orders:
        try:
            data = json.loads(raw_orders)
            if not isinstance(data, list):
                raise TypeError("orders must be a JSON array")
            orders = [Order.from_dict(item) for item in data]
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise PersistenceError(f"invalid persisted orders: {e}") from e

    next_id: int | None = None
    if raw_id:
        try:
            next_id = int(raw_id.strip())
        except ValueError as e:
            raise PersistenceError(f"invalid persisted {CURRENT_ID_KEY}: {raw_id!r}") from e

    logger.debug(f"loaded {len(orders)} orders from {kv.directory}")
    return OrderStore.from_state(orders, next_id)


def remove_store(kv: JsonFileKeyValueStore) -> None:
    kv.remove(ORDERS_KEY)
    kv.remove(CURRENT_ID_KEY)
