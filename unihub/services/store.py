# unihub/services/store.py
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from pymongo import MongoClient

from unihub.errors import StorageCorruption

logger = logging.getLogger(__name__)


class KeyValueBackend(ABC):
    """String key to string value persistence substrate."""

    @abstractmethod
    def get_raw(self, key: str) -> Optional[str]:
        """Return the stored text for `key`, or None if nothing is stored."""

    @abstractmethod
    def set_raw(self, key: str, value: str) -> None:
        """Replace the stored text for `key` in a single write."""


class InMemoryBackend(KeyValueBackend):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(initial or {})

    def get_raw(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set_raw(self, key: str, value: str) -> None:
        self._values[key] = value


class FileBackend(KeyValueBackend):
    """
    All keys live in one JSON object file. Writes go through a temp file and
    os.replace so readers only ever see a complete file.
    """

    def __init__(self, path: str):
        self.path = path

    def _read_all(self) -> Dict[str, Any]:
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning(f"Store file {self.path} is unreadable, treating as empty: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Store file {self.path} does not hold an object, treating as empty")
            return {}
        return data

    def get_raw(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        if value is None or isinstance(value, str):
            return value
        # Hand-edited files may hold decoded JSON instead of text
        return json.dumps(value)

    def set_raw(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        directory = os.path.dirname(os.path.abspath(self.path))
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".unihub-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2)
            os.replace(tmp_path, self.path)
        except Exception:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise


class MongoBackend(KeyValueBackend):
    """One document per key: {"_id": key, "value": "<json text>"}."""

    def __init__(self, collection):
        self.collection = collection

    @classmethod
    def from_uri(cls, uri: str, database: str, collection: str) -> "MongoBackend":
        client = MongoClient(uri)
        return cls(client[database][collection])

    def get_raw(self, key: str) -> Optional[str]:
        doc = self.collection.find_one({"_id": key})
        if not doc:
            return None
        value = doc.get("value")
        return value if isinstance(value, str) else None

    def set_raw(self, key: str, value: str) -> None:
        self.collection.replace_one({"_id": key}, {"_id": key, "value": value}, upsert=True)


class RecordStore:
    """
    Named collections of JSON records on top of a key-value backend.

    Reads never raise: a missing key, undecodable text or a value of the wrong
    shape all come back as an empty collection.
    """

    def __init__(self, backend: KeyValueBackend):
        self.backend = backend

    def _decode(self, key: str) -> Any:
        raw = self.backend.get_raw(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            raise StorageCorruption(f"Value under '{key}' is not valid JSON") from e

    def get(self, key: str) -> List[Dict[str, Any]]:
        try:
            value = self._decode(key)
            if value is None:
                return []
            if not isinstance(value, list):
                raise StorageCorruption(f"Value under '{key}' is not a list")
        except StorageCorruption as e:
            logger.warning(f"{e}; reading as empty")
            return []
        return [record for record in value if isinstance(record, dict)]

    def get_record(self, key: str) -> Optional[Dict[str, Any]]:
        """Read a single-object value such as the current user."""
        try:
            value = self._decode(key)
        except StorageCorruption as e:
            logger.warning(f"{e}; reading as missing")
            return None
        return value if isinstance(value, dict) else None

    def set(self, key: str, records: List[Dict[str, Any]]) -> None:
        self.backend.set_raw(key, json.dumps(list(records), default=str))

    def set_record(self, key: str, record: Dict[str, Any]) -> None:
        self.backend.set_raw(key, json.dumps(record, default=str))


def create_store(backend: Optional[str] = None) -> RecordStore:
    """Build a RecordStore for the configured backend."""
    from unihub.config import (
        STORE_BACKEND, STORE_PATH, MONGODB_URI, MONGODB_DB, MONGODB_COLLECTION
    )

    backend = (backend or STORE_BACKEND).lower()
    if backend == "memory":
        return RecordStore(InMemoryBackend())
    if backend == "file":
        return RecordStore(FileBackend(STORE_PATH))
    if backend == "mongo":
        return RecordStore(MongoBackend.from_uri(MONGODB_URI, MONGODB_DB, MONGODB_COLLECTION))
    raise ValueError(f"Unknown store backend: {backend}")
