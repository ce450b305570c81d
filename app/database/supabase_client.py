import logging
from typing import Any, Dict, List, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import Client, ClientOptions, create_client

from app.config.settings import settings
from app.database.memory_store import InMemoryStore
from app.database.store import CredentialStore, StoreError, UniqueViolation

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE for unique_violation
UNIQUE_VIOLATION_CODE = "23505"


class SupabaseClient:
    _client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        """Client with the service key; bypasses RLS, the API enforces access itself."""
        if cls._client is None:
            cls._client = create_client(
                settings.supabase_url,
                settings.supabase_service_key,
                options=ClientOptions(
                    auto_refresh_token=False,
                    persist_session=False,
                    postgrest_client_timeout=settings.store_timeout_seconds,
                ),
            )
        return cls._client

    @classmethod
    def reset_client(cls):
        cls._client = None


def _translate(error: Exception) -> StoreError:
    if isinstance(error, APIError):
        if error.code == UNIQUE_VIOLATION_CODE:
            return UniqueViolation(error.message or str(error))
        return StoreError(error.message or str(error))
    if isinstance(error, httpx.TimeoutException):
        return StoreError(f"Store request timed out: {error}")
    return StoreError(str(error))


class SupabaseStore:
    """CredentialStore over the PostgREST query builder."""

    def __init__(self, client: Client):
        self.client = client

    def find_one(self, table: str, field: str, value: Any, columns: str = "*") -> Optional[Dict[str, Any]]:
        # limit(1) instead of single(): "no row" is a normal outcome, not an error
        try:
            result = self.client.table(table)\
                .select(columns)\
                .eq(field, value)\
                .limit(1)\
                .execute()
        except (APIError, httpx.HTTPError) as e:
            raise _translate(e) from e
        return result.data[0] if result.data else None

    def insert_one(self, table: str, record: Dict[str, Any]) -> Dict[str, Any]:
        try:
            result = self.client.table(table)\
                .insert(record)\
                .execute()
        except (APIError, httpx.HTTPError) as e:
            raise _translate(e) from e
        return result.data[0] if result.data else dict(record)

    def update_by_field(self, table: str, field: str, value: Any, changes: Dict[str, Any]) -> List[Dict[str, Any]]:
        try:
            result = self.client.table(table)\
                .update(changes)\
                .eq(field, value)\
                .execute()
        except (APIError, httpx.HTTPError) as e:
            raise _translate(e) from e
        return result.data or []

    def update_by_id(self, table: str, record_id: Any, changes: Dict[str, Any]) -> List[Dict[str, Any]]:
        return self.update_by_field(table, "id", record_id, changes)

    def delete_by_field(self, table: str, field: str, value: Any) -> int:
        try:
            result = self.client.table(table)\
                .delete()\
                .eq(field, value)\
                .execute()
        except (APIError, httpx.HTTPError) as e:
            raise _translate(e) from e
        return len(result.data or [])


_memory_store: Optional[InMemoryStore] = None


def get_supabase() -> Client:
    return SupabaseClient.get_client()


def get_store() -> CredentialStore:
    global _memory_store
    if settings.store_backend == "memory":
        if _memory_store is None:
            logger.warning("Using in-memory store; data is lost on restart")
            _memory_store = InMemoryStore()
        return _memory_store
    return SupabaseStore(get_supabase())
