"""
Narrow repository interface over the relational store.

Services only talk to ``Store``; ``SupabaseStore`` is the production
implementation and ``InMemoryStore`` (memory_store.py) the fake.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from wctips.core.errors import DuplicateRowError, StoreError

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


class Store(ABC):
    @abstractmethod
    def select(
        self,
        table: str,
        columns: str = "*",
        eq: Optional[Dict[str, Any]] = None,
        in_: Optional[Dict[str, List[Any]]] = None,
        ilike: Optional[Dict[str, str]] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Rows of ``table`` matching every filter, projected to ``columns``."""

    def select_one(
        self,
        table: str,
        columns: str = "*",
        eq: Optional[Dict[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        rows = self.select(table, columns, eq=eq, limit=1)
        return rows[0] if rows else None

    @abstractmethod
    def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        """Insert one row and return it as stored (with defaults filled in)."""

    @abstractmethod
    def update(self, table: str, values: Dict[str, Any], eq: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Update matching rows; the returned list is the affected rows."""

    @abstractmethod
    def upsert(self, table: str, row: Dict[str, Any], on_conflict: str = "id") -> Dict[str, Any]:
        """Insert, or overwrite the row sharing the ``on_conflict`` columns."""

    @abstractmethod
    def delete(self, table: str, eq: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Delete matching rows and return them."""


def translate_api_error(error: APIError) -> StoreError:
    message = error.message or str(error)
    if error.code == UNIQUE_VIOLATION:
        return DuplicateRowError(message)
    return StoreError(message)


class SupabaseStore(Store):
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _apply_filters(self, query, eq=None, in_=None, ilike=None):
        for column, value in (eq or {}).items():
            query = query.eq(column, value)
        for column, values in (in_ or {}).items():
            query = query.in_(column, values)
        for column, pattern in (ilike or {}).items():
            query = query.ilike(column, pattern)
        return query

    def _execute(self, query, table: str) -> List[Dict[str, Any]]:
        try:
            result = query.execute()
        except APIError as e:
            logger.error(f"Store error on {table}: {e.code} {e.message}")
            raise translate_api_error(e) from e
        except httpx.HTTPError as e:
            logger.error(f"Store unreachable on {table}: {e}")
            raise StoreError("Database is unavailable, please try again.") from e
        return result.data or []

    def select(self, table, columns="*", eq=None, in_=None, ilike=None, limit=None):
        query = self._apply_filters(self.supabase.table(table).select(columns), eq, in_, ilike)
        if limit is not None:
            query = query.limit(limit)
        return self._execute(query, table)

    def insert(self, table, row):
        rows = self._execute(self.supabase.table(table).insert(row), table)
        if not rows:
            raise StoreError(f"Failed to insert into {table}")
        return rows[0]

    def update(self, table, values, eq):
        query = self._apply_filters(self.supabase.table(table).update(values), eq)
        return self._execute(query, table)

    def upsert(self, table, row, on_conflict="id"):
        rows = self._execute(
            self.supabase.table(table).upsert(row, on_conflict=on_conflict),
            table,
        )
        if not rows:
            raise StoreError(f"Failed to save to {table}")
        return rows[0]

    def delete(self, table, eq):
        query = self._apply_filters(self.supabase.table(table).delete(), eq)
        return self._execute(query, table)
