import re
import threading
import uuid
from copy import deepcopy
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from wctips.core.errors import DuplicateRowError, StoreError
from wctips.database.store import Store

# Mirrors the constraints of the Supabase schema (see modules/*/models.py)
DEFAULT_UNIQUE_KEYS: Dict[str, List[Tuple[str, ...]]] = {
    "profiles": [("id",)],
    "groups": [("id",)],
    "group_members": [("group_id", "user_id")],
    "group_invites": [("id",), ("token",)],
}


def _like_to_regex(pattern: str) -> "re.Pattern":
    parts = []
    for char in pattern:
        if char == "%":
            parts.append(".*")
        elif char == "_":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("^" + "".join(parts) + "$", re.IGNORECASE | re.DOTALL)


def _project(row: Dict[str, Any], columns: str) -> Dict[str, Any]:
    if columns.strip() == "*":
        return deepcopy(row)
    names = [c.strip() for c in columns.split(",") if c.strip()]
    return {name: deepcopy(row.get(name)) for name in names}


class InMemoryStore(Store):
    """Dict-backed store with the same unique constraints as the database."""

    def __init__(self, unique_keys: Optional[Dict[str, List[Tuple[str, ...]]]] = None):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.unique_keys = unique_keys if unique_keys is not None else DEFAULT_UNIQUE_KEYS
        self._lock = threading.Lock()

    def rows(self, table: str) -> List[Dict[str, Any]]:
        return self.tables.setdefault(table, [])

    def _matches(self, row, eq=None, in_=None, ilike=None) -> bool:
        for column, value in (eq or {}).items():
            if row.get(column) != value:
                return False
        for column, values in (in_ or {}).items():
            if row.get(column) not in values:
                return False
        for column, pattern in (ilike or {}).items():
            value = row.get(column)
            if value is None or not _like_to_regex(pattern).match(str(value)):
                return False
        return True

    def _check_unique(self, table: str, row: Dict[str, Any], ignore: Optional[Dict[str, Any]] = None):
        for key in self.unique_keys.get(table, []):
            for existing in self.rows(table):
                if existing is ignore:
                    continue
                if all(existing.get(c) == row.get(c) for c in key):
                    raise DuplicateRowError(
                        f'duplicate key value violates unique constraint "{table}_{"_".join(key)}_key"'
                    )

    def _with_defaults(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        stored = deepcopy(row)
        if ("id",) in self.unique_keys.get(table, []) and not stored.get("id"):
            stored["id"] = str(uuid.uuid4())
        stored.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        return stored

    def select(self, table, columns="*", eq=None, in_=None, ilike=None, limit=None):
        with self._lock:
            found = [_project(r, columns) for r in self.rows(table) if self._matches(r, eq, in_, ilike)]
        if limit is not None:
            found = found[:limit]
        return found

    def insert(self, table, row):
        with self._lock:
            stored = self._with_defaults(table, row)
            self._check_unique(table, stored)
            self.rows(table).append(stored)
            return deepcopy(stored)

    def update(self, table, values, eq):
        with self._lock:
            updated = []
            for row in self.rows(table):
                if self._matches(row, eq):
                    candidate = {**row, **values}
                    self._check_unique(table, candidate, ignore=row)
                    row.update(deepcopy(values))
                    updated.append(deepcopy(row))
            return updated

    def upsert(self, table, row, on_conflict="id"):
        columns = [c.strip() for c in on_conflict.split(",") if c.strip()]
        if any(row.get(c) is None for c in columns):
            raise StoreError(f"upsert on {table} needs values for {on_conflict}")
        with self._lock:
            for existing in self.rows(table):
                if all(existing.get(c) == row.get(c) for c in columns):
                    existing.update(deepcopy(row))
                    return deepcopy(existing)
            stored = self._with_defaults(table, row)
            self._check_unique(table, stored)
            self.rows(table).append(stored)
            return deepcopy(stored)

    def delete(self, table, eq):
        with self._lock:
            kept, removed = [], []
            for row in self.rows(table):
                (removed if self._matches(row, eq) else kept).append(row)
            self.tables[table] = kept
            return removed
