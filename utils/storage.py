"""
Storage utilities for Learnware Grove.
Supabase-backed, owner-scoped storage for courses, notes and settings.
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol

from clients.supabase_client import (
    insert_row,
    update_row,
    delete_row,
    select_row,
    select_rows,
    get_setting,
    upsert_setting,
)
from utils.exceptions import NotFoundError, StorageError

logger = logging.getLogger(__name__)

COURSES_TABLE = "courses"
NOTES_TABLE = "notes"


def generate_uuid() -> str:
    """Generate unique ID for courses/notes"""
    return str(uuid.uuid4())


class RecordStore(Protocol):
    """Persistence boundary. Every call is scoped to one authenticated owner."""

    owner_id: str

    def create_record(self, data: Dict[str, Any]) -> Dict[str, Any]: ...

    def update_record(self, record_id: str, patch: Dict[str, Any]) -> Dict[str, Any]: ...

    def delete_record(self, record_id: str) -> bool: ...

    def get_record(self, record_id: str) -> Optional[Dict[str, Any]]: ...

    def list_records(self, owner_id: str, **filters: Any) -> List[Dict[str, Any]]: ...


def _failure_message(error: Exception) -> str:
    message = getattr(error, "message", None)
    return message if isinstance(message, str) and message else str(error)


def _as_storage_error(description: str, error: Exception, context: Dict[str, Any]) -> StorageError:
    """Wrap any Supabase, transport or configuration failure as StorageError"""
    if isinstance(error, StorageError):
        return error
    message = _failure_message(error)
    logger.error(f"Supabase {description} failed: {message}")
    return StorageError(
        f"Failed to {description}: {message}",
        context={**context, "code": getattr(error, "code", None), "error_type": type(error).__name__},
    )


class SupabaseRecordStore:
    """RecordStore over one Supabase table, filtered by user_id"""

    def __init__(self, table: str, owner_id: str, not_found_code: str = "RECORD_NOT_FOUND"):
        self.table = table
        self.owner_id = owner_id
        self.not_found_code = not_found_code

    def _run(self, operation: str, fn, *args):
        try:
            return fn(*args)
        except Exception as e:
            raise _as_storage_error(f"{operation} {self.table} record", e, {"table": self.table}) from e

    def create_record(self, data: Dict[str, Any]) -> Dict[str, Any]:
        record = {**data, "user_id": self.owner_id}
        record.setdefault("id", generate_uuid())
        record.setdefault("created_at", datetime.utcnow())
        return self._run("create", insert_row, self.table, record)

    def update_record(self, record_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        # Ownership and identity columns are never patched
        patch = {k: v for k, v in patch.items() if k not in ("id", "user_id")}
        updated = self._run("update", update_row, self.table, self.owner_id, record_id, patch)
        if updated is None:
            raise NotFoundError(
                f"{self.table[:-1].capitalize()} {record_id} not found",
                error_code=self.not_found_code,
                context={"id": record_id},
            )
        return updated

    def delete_record(self, record_id: str) -> bool:
        return self._run("delete", delete_row, self.table, self.owner_id, record_id)

    def get_record(self, record_id: str) -> Optional[Dict[str, Any]]:
        return self._run("get", select_row, self.table, self.owner_id, record_id)

    def list_records(self, owner_id: str, **filters: Any) -> List[Dict[str, Any]]:
        if owner_id != self.owner_id:
            # Only the owner this store was opened for may be listed
            return []
        return self._run("list", select_rows, self.table, owner_id, filters)


class SupabaseSettingsStore:
    """App-wide key/value settings in the `settings` table"""

    def get_setting(self, key: str) -> Optional[str]:
        try:
            return get_setting(key)
        except Exception as e:
            raise _as_storage_error(f"read setting '{key}'", e, {"key": key}) from e

    def set_setting(self, key: str, value: str) -> None:
        try:
            upsert_setting(key, value)
        except Exception as e:
            raise _as_storage_error(f"save setting '{key}'", e, {"key": key}) from e
