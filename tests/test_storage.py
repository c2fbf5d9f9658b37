import unittest
import os
import sys
from datetime import date, datetime
from enum import Enum
from unittest import mock

import httpx
from supabase import PostgrestAPIError

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import clients.supabase_client as supabase_client
from clients.supabase_client import serialize_row
from utils.storage import SupabaseRecordStore, SupabaseSettingsStore
from utils.exceptions import NotFoundError, StorageError


def api_error(message="permission denied", code="42501"):
    return PostgrestAPIError({"message": message, "code": code, "hint": None, "details": None})


class Level(str, Enum):
    BEGINNER = "Beginner"


class TestSerializeRow(unittest.TestCase):
    def test_drops_unknown_columns_and_serializes_values(self):
        row = serialize_row("courses", {
            "name": "Algebra",
            "difficulty": Level.BEGINNER,
            "start_date": date(2024, 9, 1),
            "content": {"key_topics": [{"title": "x"}]},
            "not_a_column": 1,
        })
        self.assertEqual(row, {
            "name": "Algebra",
            "difficulty": "Beginner",
            "start_date": "2024-09-01",
            "content": {"key_topics": [{"title": "x"}]},
        })


class TestSupabaseRecordStore(unittest.TestCase):
    def setUp(self):
        self.store = SupabaseRecordStore("courses", "user-1", "COURSE_NOT_FOUND")

    @mock.patch("utils.storage.insert_row", side_effect=lambda table, row: row)
    def test_create_sets_owner_id_and_timestamp(self, insert_row):
        record = self.store.create_record({"name": "Algebra", "user_id": "someone-else"})
        self.assertEqual(record["user_id"], "user-1")
        self.assertTrue(record["id"])
        self.assertIsInstance(record["created_at"], datetime)

    @mock.patch("utils.storage.update_row", return_value=None)
    def test_update_missing_row(self, update_row):
        with self.assertRaises(NotFoundError) as ctx:
            self.store.update_record("c1", {"name": "x"})
        self.assertEqual(ctx.exception.error_code, "COURSE_NOT_FOUND")

    @mock.patch("utils.storage.update_row", return_value={"id": "c1"})
    def test_update_never_patches_identity(self, update_row):
        self.store.update_record("c1", {"name": "x", "id": "c2", "user_id": "user-2"})
        update_row.assert_called_once_with("courses", "user-1", "c1", {"name": "x"})

    @mock.patch("utils.storage.select_rows")
    def test_list_other_owner_is_empty(self, select_rows):
        self.assertEqual(self.store.list_records("user-2"), [])
        select_rows.assert_not_called()

    @mock.patch("utils.storage.select_rows", return_value=[{"id": "n1"}])
    def test_list_passes_filters(self, select_rows):
        self.store.list_records("user-1", course_id="c1")
        select_rows.assert_called_once_with("courses", "user-1", {"course_id": "c1"})

    @mock.patch("utils.storage.select_row", side_effect=api_error())
    def test_postgrest_error_becomes_storage_error(self, select_row):
        with self.assertRaises(StorageError) as ctx:
            self.store.get_record("c1")
        self.assertIn("permission denied", ctx.exception.message)

    @mock.patch.dict(os.environ, {}, clear=True)
    @mock.patch.object(supabase_client, "_supabase_client", None)
    def test_missing_configuration_is_storage_error(self):
        with self.assertRaises(StorageError) as ctx:
            self.store.get_record("c1")
        self.assertEqual(ctx.exception.error_code, "SUPABASE_NOT_CONFIGURED")

    def test_insert_returning_no_row_is_storage_error(self):
        client = mock.MagicMock()
        client.table.return_value.insert.return_value.execute.return_value = mock.Mock(data=[])
        with mock.patch.object(supabase_client, "get_supabase", return_value=client):
            with self.assertRaises(StorageError) as ctx:
                self.store.create_record({"name": "Algebra"})
        self.assertIn("returned no row", ctx.exception.message)

    @mock.patch("utils.storage.select_rows", side_effect=httpx.ConnectError("connection refused"))
    def test_transport_error_is_storage_error(self, select_rows):
        with self.assertRaises(StorageError) as ctx:
            self.store.list_records("user-1")
        self.assertEqual(ctx.exception.context["error_type"], "ConnectError")
        self.assertIn("connection refused", ctx.exception.message)


class TestSupabaseSettingsStore(unittest.TestCase):
    @mock.patch("utils.storage.get_setting", side_effect=api_error("relation does not exist", "42P01"))
    def test_read_failure(self, get_setting):
        with self.assertRaises(StorageError):
            SupabaseSettingsStore().get_setting("gemini_api_key")

    @mock.patch("utils.storage.upsert_setting", side_effect=httpx.ReadTimeout("timed out"))
    def test_write_failure(self, upsert_setting):
        with self.assertRaises(StorageError):
            SupabaseSettingsStore().set_setting("gemini_api_key", "k")

    @mock.patch("utils.storage.upsert_setting")
    def test_write(self, upsert_setting):
        SupabaseSettingsStore().set_setting("gemini_api_key", "k")
        upsert_setting.assert_called_once_with("gemini_api_key", "k")


if __name__ == '__main__':
    unittest.main()
