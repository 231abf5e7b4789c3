import tempfile
import unittest
from datetime import date
from pathlib import Path

from fastapi.testclient import TestClient

from dashboard import dependencies
from dashboard.app import app
from database.preferences import PreferenceStore
from database.remote_store import InMemoryRecordStore
from services.auth import LocalAuthProvider

TODAY = date(2026, 10, 19)


class TestGoalsApi(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.records = InMemoryRecordStore()
        dependencies.init_components(
            record_store=self.records,
            auth_provider=LocalAuthProvider(user_id="u1", email="runner@example.com"),
            preferences=PreferenceStore(Path(self._tmp.name) / "prefs.json"),
            clock=lambda: TODAY,
        )
        # один event loop на все запросы: фоновые записи переживают запрос
        self.client = TestClient(app)
        self.client.__enter__()

        response = self.client.post(
            "/api/auth/login",
            json={"email": "runner@example.com", "password": "secret"},
        )
        self.assertEqual(response.status_code, 200)
        self.headers = {"Authorization": f"Bearer {response.json()['access_token']}"}

    def tearDown(self) -> None:
        self.client.__exit__(None, None, None)
        dependencies.reset_state()
        self._tmp.cleanup()

    def _create(self, name: str = "Run") -> str:
        response = self.client.post("/api/goals", json={"name": name}, headers=self.headers)
        self.assertEqual(response.status_code, 201)
        return response.json()["data"]["goal_id"]

    def test_health(self) -> None:
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "ok")

    def test_requires_authentication(self) -> None:
        self.client.cookies.clear()
        response = self.client.get("/api/goals")
        self.assertEqual(response.status_code, 401)

    def test_empty_board(self) -> None:
        response = self.client.get("/api/goals", headers=self.headers)
        self.assertEqual(response.status_code, 200)
        board = response.json()
        self.assertEqual(board["goals"], [])
        self.assertEqual(board["year"], 2026)
        self.assertEqual(board["years"], [2026, 2027])
        self.assertEqual(board["notices"], [])

    def test_toggle_day(self) -> None:
        goal_id = self._create()

        response = self.client.post(f"/api/goals/{goal_id}/days/2026-10-19/toggle",
                                    headers=self.headers)
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["status"], "completed")
        self.assertEqual(data["stats"], {"completed": 1, "missed": 0, "total": 1, "streak": 1})

        goal = self.client.get("/api/goals", headers=self.headers).json()["goals"][0]
        self.assertEqual(goal["name"], "Run")
        self.assertEqual(goal["stats"]["streak"], 1)
        self.assertEqual(len(goal["weeks"]), 53)

    def test_future_day_is_rejected(self) -> None:
        goal_id = self._create()
        response = self.client.post(f"/api/goals/{goal_id}/days/2026-10-20/toggle",
                                    headers=self.headers)
        self.assertEqual(response.status_code, 409)

    def test_unknown_goal(self) -> None:
        response = self.client.post("/api/goals/missing/days/2026-10-19/toggle",
                                    headers=self.headers)
        self.assertEqual(response.status_code, 404)

    def test_empty_name_is_rejected(self) -> None:
        response = self.client.post("/api/goals", json={"name": "   "}, headers=self.headers)
        self.assertEqual(response.status_code, 422)

    def test_rename(self) -> None:
        goal_id = self._create()

        response = self.client.patch(f"/api/goals/{goal_id}", json={"name": " "},
                                     headers=self.headers)
        self.assertEqual(response.json()["data"], {"renamed": False, "name": "Run"})

        response = self.client.patch(f"/api/goals/{goal_id}", json={"name": "Walk"},
                                     headers=self.headers)
        self.assertEqual(response.json()["data"], {"renamed": True, "name": "Walk"})

    def test_delete_with_confirmation(self) -> None:
        goal_id = self._create()

        response = self.client.delete(f"/api/goals/{goal_id}", headers=self.headers)
        self.assertEqual(response.status_code, 409)
        self.assertIn('"Run"', response.json()["detail"])

        response = self.client.delete(f"/api/goals/{goal_id}?confirm=true", headers=self.headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.client.get("/api/goals", headers=self.headers).json()["goals"], [])
        self.assertEqual(len(self.records), 0)

    def test_year_selection(self) -> None:
        response = self.client.get("/api/goals?year=2027", headers=self.headers)
        self.assertEqual(response.json()["year"], 2027)

        response = self.client.get("/api/goals?year=2025", headers=self.headers)
        self.assertEqual(response.status_code, 422)

    def test_theme_toggle(self) -> None:
        response = self.client.put("/api/preferences/theme", json={}, headers=self.headers)
        self.assertEqual(response.json()["theme"], "dark")

        response = self.client.get("/api/preferences/theme", headers=self.headers)
        self.assertEqual(response.json()["theme"], "dark")

    def test_pages(self) -> None:
        self._create("Meditate")

        response = self.client.get("/", headers=self.headers, follow_redirects=False)
        self.assertEqual(response.status_code, 303)

        response = self.client.get("/app", headers=self.headers)
        self.assertEqual(response.status_code, 200)
        self.assertIn("Meditate", response.text)
        self.assertIn("0 completed · 0 missed · 0 day streak", response.text)

    def test_logout(self) -> None:
        response = self.client.post("/api/auth/logout", headers=self.headers)
        self.assertEqual(response.status_code, 200)

        self.client.cookies.clear()
        response = self.client.get("/api/goals", headers=self.headers)
        self.assertEqual(response.status_code, 401)


if __name__ == "__main__":
    unittest.main(verbosity=2)
