"""Tests for the Flask JSON API"""

import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock

from cm2git.app import create_app
from cm2git.session import ActivitySession
from cm2git.settings import SettingsStore


def raw_fetch_result():
    return {
        "pulls": [
            {"id": 1, "number": 1, "title": "Old PR", "created_at": "2026-01-01T00:00:00Z"},
            {"id": 2, "number": 2, "title": "New PR", "created_at": "2026-01-03T00:00:00Z"},
        ],
        "commits": [{"sha": "abc123", "commit": {"message": "loose", "author": {"date": "2026-01-02T00:00:00Z"}}}],
        "events": [{
            "id": "e1", "type": "PullRequestEvent", "created_at": "2026-01-04T00:00:00Z",
            "payload": {"pull_request": {"number": 1, "merged": True, "merge_commit_sha": "m1"}},
        }],
        "commit_pulls": {},
        "kanban": {1: "Board: Done", 2: None},
    }


class TestActivityAPI(unittest.TestCase):
    """Test load and activity endpoints"""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.settings = SettingsStore(Path(self.tmp.name) / "settings.json")
        self.fetcher = MagicMock()
        self.fetcher.fetch.return_value = raw_fetch_result()
        self.factory = MagicMock(return_value=self.fetcher)
        self.session = ActivitySession(fetcher_factory=self.factory)
        self.client = create_app(self.session, self.settings).test_client()

    def tearDown(self):
        self.tmp.cleanup()

    def test_load_requires_credentials(self):
        """Test load requires credentials"""
        response = self.client.post("/api/load", json={"owner": "octo", "repo": "hello"})

        self.assertEqual(response.status_code, 400)
        self.assertIn("error", response.get_json())
        self.factory.assert_not_called()

    def test_load_and_remember_connection(self):
        """Test load and remember connection"""
        response = self.client.post("/api/load", json={"owner": "octo", "repo": "hello", "token": "secret"})

        self.assertEqual(response.status_code, 200)
        body = response.get_json()
        self.assertTrue(body["success"])
        self.assertEqual(body["count"], 3)
        self.assertEqual(self.settings.connection(), ("octo", "hello", "secret"))

    def test_load_falls_back_to_stored_settings(self):
        """Test load falls back to stored settings"""
        self.settings.update({"cm2git-owner": "octo", "cm2git-repo": "hello", "cm2git-token": "stored"})

        response = self.client.post("/api/load")

        self.assertEqual(response.status_code, 200)
        self.factory.assert_called_once_with("stored")
        self.fetcher.fetch.assert_called_once_with("octo", "hello")

    def test_activities_sorted_and_filtered(self):
        """Test activities sorted and filtered"""
        self.client.post("/api/load", json={"owner": "octo", "repo": "hello", "token": "secret"})

        desc = self.client.get("/api/activities?sort=desc").get_json()
        self.assertEqual([a["id"] for a in desc], [1, 2, "abc123"])

        asc = self.client.get("/api/activities?sort=asc").get_json()
        self.assertEqual([a["id"] for a in asc], ["abc123", 2, 1])

        merged = self.client.get("/api/activities?type=merge").get_json()
        self.assertEqual([a["number"] for a in merged], [1])
        self.assertEqual(merged[0]["merge"]["kanban_status"], "Board: Done")

    def test_activities_reject_unknown_values(self):
        """Test activities reject unknown values"""
        self.assertEqual(self.client.get("/api/activities?type=issue").status_code, 400)
        self.assertEqual(self.client.get("/api/activities?sort=up").status_code, 400)

    def test_query_arguments_leave_session_view_alone(self):
        """Test a filtered read does not change the session's default view"""
        self.client.post("/api/load", json={"owner": "octo", "repo": "hello", "token": "secret"})

        self.client.get("/api/activities?type=commit&sort=asc")

        self.assertEqual(self.session.type_filter, "all")
        self.assertEqual(self.session.sort_order, "desc")
        default = self.client.get("/api/activities").get_json()
        self.assertEqual([a["id"] for a in default], [1, 2, "abc123"])

    def test_put_view_sets_defaults(self):
        """Test the session view defaults are changed through PUT"""
        self.client.post("/api/load", json={"owner": "octo", "repo": "hello", "token": "secret"})

        response = self.client.put("/api/view", json={"type": "PR", "sort": "asc"})

        self.assertEqual(response.get_json(), {"type": "PR", "sort": "asc"})
        default = self.client.get("/api/activities").get_json()
        self.assertEqual([a["id"] for a in default], [2, 1])

    def test_put_view_rejects_invalid_without_partial_update(self):
        """Test an invalid view update changes nothing"""
        response = self.client.put("/api/view", json={"type": "PR", "sort": "sideways"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.session.type_filter, "all")
        self.assertEqual(self.client.put("/api/view", json=["PR"]).status_code, 400)

    def test_cache_info(self):
        """Test cache info reports the last load"""
        self.client.post("/api/load", json={"owner": "octo", "repo": "hello", "token": "secret"})

        info = self.client.get("/api/cache-info").get_json()

        self.assertEqual(info["owner"], "octo")
        self.assertEqual(info["repo"], "hello")
        self.assertEqual(info["count"], 3)


class TestSettingsAPI(unittest.TestCase):
    """Test settings endpoints"""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.settings = SettingsStore(Path(self.tmp.name) / "settings.json")
        self.client = create_app(ActivitySession(), self.settings).test_client()

    def tearDown(self):
        self.tmp.cleanup()

    def test_get_masks_token(self):
        """Test GET reports token presence only"""
        self.settings.update({"cm2git-token": "secret"})

        body = self.client.get("/api/settings").get_json()

        self.assertTrue(body["has_token"])
        self.assertNotIn("cm2git-token", body)

    def test_put_updates(self):
        """Test PUT stores valid settings"""
        response = self.client.put("/api/settings", json={"cm2git-theme": "dark", "cm2git-view": "grid"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["cm2git-view"], "grid")
        self.assertEqual(self.settings.get("cm2git-theme"), "dark")

    def test_put_rejects_invalid(self):
        """Test PUT rejects invalid settings"""
        self.assertEqual(self.client.put("/api/settings", json={"cm2git-theme": "neon"}).status_code, 400)
        self.assertEqual(self.client.put("/api/settings", json=["x"]).status_code, 400)


if __name__ == "__main__":
    unittest.main()
