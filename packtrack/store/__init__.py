from .order_store import OrderStore, StoreStats
from .persistence import JsonFileKeyValueStore, PersistenceError, load_store, remove_store, save_store

__all__ = [
    "JsonFileKeyValueStore",
    "OrderStore",
    "PersistenceError",
    "StoreStats",
    "load_store",
    "remove_store",
    "save_store",
]
