import copy
import threading
from typing import Any, Dict, List, Optional, Tuple

from app.database.store import UniqueViolation

# Mirrors the unique constraints documented in app/modules/auth/models.py
UNIQUE_COLUMNS: Dict[str, Tuple[str, ...]] = {
    "users": ("id", "email"),
    "profiles": ("id", "user_id"),
    "sessions": ("id",),
}


def _project(row: Dict[str, Any], columns: str) -> Dict[str, Any]:
    if columns.strip() == "*":
        return copy.deepcopy(row)
    wanted = [c.strip() for c in columns.split(",") if c.strip()]
    return {c: copy.deepcopy(row.get(c)) for c in wanted}


class InMemoryStore:
    """Thread-safe in-memory CredentialStore with coarse-grained lock.

    For tests and single-process local development.
    """

    def __init__(self, unique_columns: Optional[Dict[str, Tuple[str, ...]]] = None):
        self._tables: Dict[str, List[Dict[str, Any]]] = {}
        self._unique = unique_columns if unique_columns is not None else UNIQUE_COLUMNS
        self._lock = threading.RLock()

    def rows(self, table: str) -> List[Dict[str, Any]]:
        with self._lock:
            return copy.deepcopy(self._tables.get(table, []))

    def _check_unique(self, table: str, candidate: Dict[str, Any], skip: Optional[Dict[str, Any]] = None):
        for column in self._unique.get(table, ()):
            value = candidate.get(column)
            if value is None:
                continue
            for row in self._tables.get(table, []):
                if row is not skip and row.get(column) == value:
                    raise UniqueViolation(
                        f'duplicate key value violates unique constraint "{table}_{column}_key"'
                    )

    def find_one(self, table: str, field: str, value: Any, columns: str = "*") -> Optional[Dict[str, Any]]:
        with self._lock:
            for row in self._tables.get(table, []):
                if row.get(field) == value:
                    return _project(row, columns)
            return None

    def insert_one(self, table: str, record: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            self._check_unique(table, record)
            row = copy.deepcopy(record)
            self._tables.setdefault(table, []).append(row)
            return copy.deepcopy(row)

    def update_by_field(self, table: str, field: str, value: Any, changes: Dict[str, Any]) -> List[Dict[str, Any]]:
        with self._lock:
            updated = []
            for row in self._tables.get(table, []):
                if row.get(field) == value:
                    self._check_unique(table, {**row, **changes}, skip=row)
                    row.update(copy.deepcopy(changes))
                    updated.append(copy.deepcopy(row))
            return updated

    def update_by_id(self, table: str, record_id: Any, changes: Dict[str, Any]) -> List[Dict[str, Any]]:
        return self.update_by_field(table, "id", record_id, changes)

    def delete_by_field(self, table: str, field: str, value: Any) -> int:
        with self._lock:
            rows = self._tables.get(table, [])
            kept = [row for row in rows if row.get(field) != value]
            self._tables[table] = kept
            return len(rows) - len(kept)
