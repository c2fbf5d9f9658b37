import os
from typing import Dict, Any, List, Optional
from dotenv import load_dotenv
from supabase import create_client, Client
from datetime import datetime
from enum import Enum
import logging

from utils.exceptions import StorageError

load_dotenv()

logger = logging.getLogger(__name__)

_supabase_client: Optional[Client] = None

# Columns the app writes, per table. Anything else in a payload is dropped.
TABLE_COLUMNS: Dict[str, set] = {
    "courses": {
        "id", "user_id", "name", "code", "description", "topic", "difficulty",
        "content", "study_materials", "quizzes", "progress",
        "start_date", "end_date", "created_at"
    },
    "notes": {
        "id", "user_id", "course_id", "title", "content", "tags",
        "created_at", "updated_at"
    },
}


def get_supabase() -> Client:
    global _supabase_client
    if _supabase_client is None:
        url = os.getenv("SUPABASE_URL")
        key = os.getenv("SUPABASE_KEY")
        if not url or not key:
            raise StorageError(
                "SUPABASE_URL and SUPABASE_KEY must be set",
                error_code="SUPABASE_NOT_CONFIGURED",
            )
        _supabase_client = create_client(url, key)
    return _supabase_client


def _serialize_for_supabase(data: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively convert enums → .value, datetimes/dates → .isoformat() for Supabase writes."""
    result = {}
    for key, value in data.items():
        if isinstance(value, Enum):
            result[key] = value.value
        elif hasattr(value, "isoformat"):
            result[key] = value.isoformat()
        elif isinstance(value, dict):
            result[key] = _serialize_for_supabase(value)
        elif isinstance(value, list):
            result[key] = [
                _serialize_for_supabase(item) if isinstance(item, dict)
                else item.value if isinstance(item, Enum)
                else item
                for item in value
            ]
        else:
            result[key] = value
    return result


def serialize_row(table: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only known columns for table and serialize values."""
    columns = TABLE_COLUMNS.get(table)
    filtered = {k: v for k, v in data.items() if columns is None or k in columns}
    return _serialize_for_supabase(filtered)


# ============================================================================
# Owner-scoped row operations
# ============================================================================

def insert_row(table: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """Insert one row and return it as stored."""
    response = get_supabase().table(table).insert(serialize_row(table, data)).execute()
    if not response.data:
        raise StorageError(f"Supabase insert into {table} returned no row", context={"table": table})
    return response.data[0]


def update_row(table: str, owner_id: str, row_id: str, patch: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Update a row owned by owner_id. Returns None when no such row exists."""
    response = get_supabase().table(table) \
        .update(serialize_row(table, patch)) \
        .eq("id", row_id).eq("user_id", owner_id) \
        .execute()
    if response.data and len(response.data) > 0:
        return response.data[0]
    return None


def delete_row(table: str, owner_id: str, row_id: str) -> bool:
    """Delete a row owned by owner_id. True if a row was removed."""
    response = get_supabase().table(table) \
        .delete() \
        .eq("id", row_id).eq("user_id", owner_id) \
        .execute()
    return bool(response.data)


def select_row(table: str, owner_id: str, row_id: str) -> Optional[Dict[str, Any]]:
    """Get a row by id, only if owner_id owns it."""
    response = get_supabase().table(table) \
        .select("*").eq("id", row_id).eq("user_id", owner_id).execute()
    if response.data and len(response.data) > 0:
        return response.data[0]
    return None


def select_rows(table: str, owner_id: str, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """List rows owned by owner_id, newest first, with optional equality filters."""
    query = get_supabase().table(table).select("*").eq("user_id", owner_id)
    for column, value in (filters or {}).items():
        query = query.eq(column, value)
    response = query.order("created_at", desc=True).execute()
    return response.data or []


# ============================================================================
# Settings
# ============================================================================

def get_setting(key: str) -> Optional[str]:
    """Read one value from the settings table."""
    response = get_supabase().table("settings") \
        .select("value").eq("key", key).execute()
    if response.data and len(response.data) > 0:
        return response.data[0].get("value")
    return None


def upsert_setting(key: str, value: str) -> None:
    """Write one value to the settings table, keyed by `key`."""
    get_supabase().table("settings").upsert({
        "key": key,
        "value": value,
        "updated_at": datetime.now().isoformat()
    }, on_conflict="key").execute()
    logger.info(f"Setting '{key}' saved")
