"""Key-value persistence for per-user state (cart, wishlist, settings).

Values are JSON snapshots; the last write wins and there is no versioning.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from config import STORAGE_COLLECTION, STORAGE_PREFIX

logger = logging.getLogger(__name__)

GUEST_ID = "guest"


class KeyValueStore(ABC):
    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        ...


class MemoryStore(KeyValueStore):
    def __init__(self):
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class MongoStore(KeyValueStore):
    """One document per key: {_id: key, value: <json string>}."""

    def __init__(self, database, collection_name: str = STORAGE_COLLECTION):
        self.collection = database[collection_name]

    def get(self, key: str) -> Optional[str]:
        doc = self.collection.find_one({"_id": key})
        return doc.get("value") if doc else None

    def set(self, key: str, value: str) -> None:
        self.collection.replace_one({"_id": key}, {"_id": key, "value": value}, upsert=True)

    def delete(self, key: str) -> None:
        self.collection.delete_one({"_id": key})


def build_store(backend: str) -> KeyValueStore:
    if backend == "mongo":
        from database import db
        if db is None:
            raise RuntimeError("STORAGE_BACKEND=mongo needs DATABASE_URL and DATABASE_NAME")
        return MongoStore(db)
    return MemoryStore()


def storage_key(kind: str, user_id: Optional[str] = None, prefix: str = STORAGE_PREFIX) -> str:
    return f"{prefix}{kind}_{user_id or GUEST_ID}"


def load_snapshot(store: KeyValueStore, key: str, default: Any) -> Any:
    raw = store.get(key)
    if raw is None:
        return default
    try:
        return json.loads(raw)
    except ValueError as e:
        logger.warning(f"Discarding corrupt snapshot {key}: {e}")
        return default


def save_snapshot(store: KeyValueStore, key: str, value: Any) -> None:
    store.set(key, json.dumps(value))
