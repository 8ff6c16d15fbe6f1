"""
Purpose: Document store adapters for route documents.
What it does:
- Defines the DocumentStore interface the pipeline consumes:
    get(collection_path, day) -> dict | None
    set(collection_path, day, fields, merge=True)
- Provides two implementations:
    InMemoryDocumentStore   tests and simulations
    JsonFileDocumentStore   one JSON file per collection, for scripts and local editing

A set() with several fields is applied as one write, so geometry and metrics
land together or not at all.

Rule: Store owns persistence only. It does not know what a route is.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
import threading
from typing import Any, Dict, List, Mapping, Optional, Protocol

from routes.models import document_id

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the document store cannot read or write."""
    pass


class DocumentStore(Protocol):
    def get(self, collection_path: str, day: int) -> Optional[Dict[str, Any]]:
        ...

    def set(self, collection_path: str, day: int, fields: Mapping[str, Any], merge: bool = True) -> None:
        ...


def _merge(existing: Optional[Dict[str, Any]], fields: Mapping[str, Any], merge: bool) -> Dict[str, Any]:
    if existing is None or not merge:
        return copy.deepcopy(dict(fields))
    updated = dict(existing)
    updated.update(copy.deepcopy(dict(fields)))
    return updated


class InMemoryDocumentStore:
    """
    Dict-backed store: {collection_path: {"day{N}": document}}.
    """
    def __init__(self):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._lock = threading.Lock()
        self.writes = 0

    def get(self, collection_path: str, day: int) -> Optional[Dict[str, Any]]:
        with self._lock:
            document = self._collections.get(collection_path, {}).get(document_id(day))
            return copy.deepcopy(document) if document is not None else None

    def set(self, collection_path: str, day: int, fields: Mapping[str, Any], merge: bool = True) -> None:
        with self._lock:
            collection = self._collections.setdefault(collection_path, {})
            key = document_id(day)
            collection[key] = _merge(collection.get(key), fields, merge)
            self.writes += 1

    def list_days(self, collection_path: str) -> List[int]:
        with self._lock:
            keys = self._collections.get(collection_path, {}).keys()
            return sorted(int(key[3:]) for key in keys if key.startswith("day") and key[3:].isdigit())


class JsonFileDocumentStore:
    """
    Stores each collection as one JSON file under `root`:
        <root>/<collection path with '/' replaced by '__'>.json  ->  {"day1": {...}, "day2": {...}}

    Writes go to a temp file and are swapped in with os.replace, so readers
    never see a half-written collection.
    """
    def __init__(self, root: str):
        self.root = root
        self._lock = threading.Lock()

    def _file_for(self, collection_path: str) -> str:
        name = collection_path.strip("/").replace("/", "__") or "default"
        return os.path.join(self.root, f"{name}.json")

    def _read(self, collection_path: str) -> Dict[str, Dict[str, Any]]:
        path = self._file_for(collection_path)
        if not os.path.exists(path):
            return {}
        try:
            with open(path, "r", encoding="utf-8") as file:
                data = json.load(file)
        except (OSError, ValueError) as e:
            raise StorageError(f"Cannot read {path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Unexpected content in {path}")
        return data

    def _write(self, collection_path: str, data: Dict[str, Dict[str, Any]]) -> None:
        path = self._file_for(collection_path)
        tmp_path = None
        try:
            os.makedirs(self.root, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.root, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as file:
                json.dump(data, file, indent=2, sort_keys=True)
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StorageError(f"Cannot write {path}: {e}") from e

    def get(self, collection_path: str, day: int) -> Optional[Dict[str, Any]]:
        with self._lock:
            return self._read(collection_path).get(document_id(day))

    def set(self, collection_path: str, day: int, fields: Mapping[str, Any], merge: bool = True) -> None:
        with self._lock:
            data = self._read(collection_path)
            key = document_id(day)
            data[key] = _merge(data.get(key), fields, merge)
            self._write(collection_path, data)
            logger.debug("Wrote %s/%s (%d fields)", collection_path, key, len(fields))

    def list_days(self, collection_path: str) -> List[int]:
        with self._lock:
            keys = self._read(collection_path).keys()
        return sorted(int(key[3:]) for key in keys if key.startswith("day") and key[3:].isdigit())
