"""JSON file-backed document store.

Documents live in named collections and are addressed by key. Writes replace
the whole document (last write wins). Used for the website ad pages and for
the raw channel responses kept for auditing.
"""

from __future__ import annotations

import copy
import json
import os
import threading
from pathlib import Path
from typing import Any

from loguru import logger


class DocumentStore:
    """Keyed documents grouped by collection, optionally persisted to disk."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self._lock = threading.Lock()
        if path and path.exists():
            self._load()

    def _load(self) -> None:
        if not self._path or not self._path.exists():
            return
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            self._collections = {
                name: dict(docs) for name, docs in data.get("collections", {}).items()
            }
        except (json.JSONDecodeError, TypeError, AttributeError):
            logger.warning("Unreadable document store at {}, starting empty", self._path)
            self._collections = {}

    def _save(self) -> None:
        if not self._path:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        data = {"collections": self._collections}
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        os.replace(str(tmp), str(self._path))

    def set(self, collection: str, key: str, document: dict[str, Any]) -> None:
        with self._lock:
            self._collections.setdefault(collection, {})[key] = copy.deepcopy(document)
            self._save()

    def get(self, collection: str, key: str) -> dict[str, Any] | None:
        with self._lock:
            doc = self._collections.get(collection, {}).get(key)
            return copy.deepcopy(doc) if doc is not None else None

    def delete(self, collection: str, key: str) -> bool:
        with self._lock:
            removed = self._collections.get(collection, {}).pop(key, None) is not None
            if removed:
                self._save()
            return removed

    def collection(self, name: str) -> dict[str, dict[str, Any]]:
        with self._lock:
            return copy.deepcopy(self._collections.get(name, {}))

    def count(self, collection: str) -> int:
        with self._lock:
            return len(self._collections.get(collection, {}))
