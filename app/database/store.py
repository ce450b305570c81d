"""
Credential store contract.

The auth service only needs single-record CRUD keyed by one column. Both
the Supabase adapter and the in-memory store implement this; a unique
constraint violation must surface as UniqueViolation so callers can tell
it apart from "no row" (None) and from any other failure.
"""

from typing import Any, Dict, List, Optional, Protocol


class StoreError(Exception):
    """Any read/write failure in the backing store, including timeouts."""


class UniqueViolation(StoreError):
    pass


class CredentialStore(Protocol):
    def find_one(self, table: str, field: str, value: Any, columns: str = "*") -> Optional[Dict[str, Any]]: ...

    def insert_one(self, table: str, record: Dict[str, Any]) -> Dict[str, Any]: ...

    def update_by_field(self, table: str, field: str, value: Any, changes: Dict[str, Any]) -> List[Dict[str, Any]]: ...

    def update_by_id(self, table: str, record_id: Any, changes: Dict[str, Any]) -> List[Dict[str, Any]]: ...

    def delete_by_field(self, table: str, field: str, value: Any) -> int: ...
