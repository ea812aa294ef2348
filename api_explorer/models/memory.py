"""In-memory record store backing the default remote methods."""

from __future__ import annotations

from itertools import count
from threading import Lock
from typing import Any, Dict, List, Optional


class MemoryDataSource:
    """Per-model dict store with auto-increment integer ids.

    Records are plain dicts; the ``id`` key is owned by the store.
    """

    def __init__(self) -> None:
        self._tables: Dict[str, Dict[int, Dict[str, Any]]] = {}
        self._sequences: Dict[str, count] = {}
        self._lock = Lock()

    def _table(self, model: str) -> Dict[int, Dict[str, Any]]:
        return self._tables.setdefault(model, {})

    def create(self, model: str, data: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            seq = self._sequences.setdefault(model, count(1))
            record_id = next(seq)
            record = {**data, "id": record_id}
            self._table(model)[record_id] = record
        return dict(record)

    def find(
        self,
        model: str,
        where: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
        skip: int = 0,
    ) -> List[Dict[str, Any]]:
        where = where or {}
        with self._lock:
            rows = [
                dict(row)
                for _, row in sorted(self._table(model).items())
                if all(row.get(key) == value for key, value in where.items())
            ]
        rows = rows[skip:]
        return rows if limit is None else rows[:limit]

    def find_by_id(self, model: str, record_id: int) -> Optional[Dict[str, Any]]:
        with self._lock:
            row = self._table(model).get(record_id)
            return dict(row) if row is not None else None

    def count(self, model: str, where: Optional[Dict[str, Any]] = None) -> int:
        return len(self.find(model, where))

    def replace(self, model: str, record_id: int, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        with self._lock:
            table = self._table(model)
            if record_id not in table:
                return None
            table[record_id] = {**data, "id": record_id}
            return dict(table[record_id])

    def delete(self, model: str, record_id: int) -> bool:
        with self._lock:
            return self._table(model).pop(record_id, None) is not None

    def clear(self, model: Optional[str] = None) -> None:
        with self._lock:
            if model is None:
                self._tables.clear()
                self._sequences.clear()
            else:
                self._tables.pop(model, None)
                self._sequences.pop(model, None)
