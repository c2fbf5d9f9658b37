import unittest
import os
import sys
from unittest import mock

from fastapi.testclient import TestClient

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import clients.supabase_client as supabase_client
from main import create_app
from services.content_generator import ContentGenerator
from utils.cache import TTLCache
from utils.credentials import API_KEY_SETTING
from utils.storage import SupabaseRecordStore
from tests.fakes import (
    FakeClientFactory, FakeModelClient, FakeSettingsStore, FakeStoreFactory,
    COURSE_CONTENT_JSON, QUIZ_JSON,
)

OWNER_HEADERS = {"X-User-Id": "user-1"}


class RoutesTestCase(unittest.TestCase):
    def make_client(self, *responses, api_key="test-key"):
        self.model = FakeModelClient(*responses)
        self.factory = FakeClientFactory(self.model)
        self.settings = FakeSettingsStore()
        generator = ContentGenerator(TTLCache(), client_factory=self.factory, api_key=api_key)
        app = create_app(
            settings_store=self.settings,
            generator=generator,
            store_factory=FakeStoreFactory(),
        )
        return TestClient(app)


class TestGenerateRoute(RoutesTestCase):
    def test_missing_owner_header(self):
        client = self.make_client()
        response = client.post("/api/v1/generate/quiz", json={"subject_name": "Algebra"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["error"], "OWNER_MISSING")

    def test_returns_payload(self):
        client = self.make_client(QUIZ_JSON)
        response = client.post(
            "/api/v1/generate/quiz", json={"subject_name": "Algebra"}, headers=OWNER_HEADERS
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["topic"], "Algebra")

    def test_failed_generation_is_200_with_error_body(self):
        client = self.make_client("Sorry, no JSON today.")
        response = client.post(
            "/api/v1/generate/course_content", json={"subject_name": "Biology"}, headers=OWNER_HEADERS
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["error"], "INVALID_RESPONSE_FORMAT")
        self.assertEqual(body["raw_text"], "Sorry, no JSON today.")

    def test_unknown_kind(self):
        client = self.make_client()
        response = client.post(
            "/api/v1/generate/poem", json={"subject_name": "Algebra"}, headers=OWNER_HEADERS
        )
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["error"], "VALIDATION_ERROR")

    def test_unconfigured_generator(self):
        client = self.make_client(api_key=None)
        response = client.post(
            "/api/v1/generate/quiz", json={"subject_name": "Algebra"}, headers=OWNER_HEADERS
        )
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["error"], "API_KEY_MISSING")
        self.assertEqual(self.model.call_count, 0)


class TestCourseRoutes(RoutesTestCase):
    def setUp(self):
        self.client = self.make_client(COURSE_CONTENT_JSON)
        response = self.client.post(
            "/api/v1/courses",
            json={"name": "Intro to Databases", "topic": "SQL Basics"},
            headers=OWNER_HEADERS,
        )
        self.assertEqual(response.status_code, 201)
        self.course = response.json()

    def test_crud_flow(self):
        course_id = self.course["id"]
        self.assertEqual(self.course["progress"], 0)

        listed = self.client.get("/api/v1/courses", headers=OWNER_HEADERS).json()["courses"]
        self.assertEqual([c["id"] for c in listed], [course_id])

        patched = self.client.patch(
            f"/api/v1/courses/{course_id}", json={"difficulty": "Beginner"}, headers=OWNER_HEADERS
        )
        self.assertEqual(patched.json()["difficulty"], "Beginner")
        self.assertEqual(patched.json()["topic"], "SQL Basics")

        deleted = self.client.delete(f"/api/v1/courses/{course_id}", headers=OWNER_HEADERS)
        self.assertEqual(deleted.json(), {"success": True})
        missing = self.client.get(f"/api/v1/courses/{course_id}", headers=OWNER_HEADERS)
        self.assertEqual(missing.status_code, 404)
        self.assertEqual(missing.json()["error"], "COURSE_NOT_FOUND")

    def test_progress(self):
        url = f"/api/v1/courses/{self.course['id']}/progress"
        ok = self.client.put(url, json={"progress": 40}, headers=OWNER_HEADERS)
        self.assertEqual(ok.json()["progress"], 40)

        too_high = self.client.put(url, json={"progress": 150}, headers=OWNER_HEADERS)
        self.assertEqual(too_high.status_code, 422)

    def test_other_owner_gets_404(self):
        response = self.client.get(
            f"/api/v1/courses/{self.course['id']}", headers={"X-User-Id": "user-2"}
        )
        self.assertEqual(response.status_code, 404)

    def test_generate_for_course_merges_content(self):
        response = self.client.post(
            f"/api/v1/courses/{self.course['id']}/generate/course_content", headers=OWNER_HEADERS
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["course"]["content"], body["result"])
        self.assertIn('"SQL Basics"', self.model.prompts[0])

    def test_notes(self):
        created = self.client.post(
            "/api/v1/notes",
            json={"title": "Joins", "course_id": self.course["id"]},
            headers=OWNER_HEADERS,
        )
        self.assertEqual(created.status_code, 201)
        self.client.post("/api/v1/notes", json={"title": "Loose"}, headers=OWNER_HEADERS)

        by_course = self.client.get(
            "/api/v1/notes", params={"course_id": self.course["id"]}, headers=OWNER_HEADERS
        ).json()["notes"]
        self.assertEqual([n["title"] for n in by_course], ["Joins"])

        orphan = self.client.post(
            "/api/v1/notes", json={"title": "x", "course_id": "missing"}, headers=OWNER_HEADERS
        )
        self.assertEqual(orphan.status_code, 404)


class TestStorageFailureRoute(unittest.TestCase):
    @mock.patch.dict(os.environ, {}, clear=True)
    @mock.patch.object(supabase_client, "_supabase_client", None)
    def test_unconfigured_database_renders_json_error(self):
        generator = ContentGenerator(TTLCache(), client_factory=FakeClientFactory(FakeModelClient()), api_key="k")
        app = create_app(
            settings_store=FakeSettingsStore(),
            generator=generator,
            store_factory=SupabaseRecordStore,
        )
        response = TestClient(app).get("/api/v1/courses", headers=OWNER_HEADERS)
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["error"], "SUPABASE_NOT_CONFIGURED")


class TestSettingsRoutes(RoutesTestCase):
    def test_status_and_update(self):
        client = self.make_client(QUIZ_JSON, api_key=None)
        status = client.get("/api/v1/settings/api-key").json()
        self.assertEqual(status, {"configured": False, "source": None})

        saved = client.put(
            "/api/v1/settings/api-key", json={"api_key": "  fresh-key "}, headers=OWNER_HEADERS
        )
        self.assertEqual(saved.status_code, 200)
        self.assertEqual(self.settings.values[API_KEY_SETTING], "fresh-key")

        status = client.get("/api/v1/settings/api-key").json()
        self.assertEqual(status, {"configured": True, "source": "settings"})

        response = client.post(
            "/api/v1/generate/quiz", json={"subject_name": "Algebra"}, headers=OWNER_HEADERS
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.factory.api_keys, ["fresh-key"])

    def test_blank_key_rejected(self):
        client = self.make_client()
        response = client.put(
            "/api/v1/settings/api-key", json={"api_key": "   "}, headers=OWNER_HEADERS
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "INVALID_API_KEY")

    def test_check(self):
        client = self.make_client('{"query": "test connection"}')
        self.assertEqual(client.post("/api/v1/settings/api-key/check").json(), {"valid": True})


if __name__ == '__main__':
    unittest.main()
