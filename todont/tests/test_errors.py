"""
Database failures must come back as a generic 500, never the driver message.
"""
from __future__ import annotations

import sqlite3
import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient
from sqlalchemy import exc


class TestDatabaseErrors(unittest.TestCase):

    def setUp(self):
        from todont.api import app
        self.client = TestClient(app)

    @patch("todont.repository.todont_repo.list_all")
    def test_list_db_error_is_500(self, mock_list):
        mock_list.side_effect = sqlite3.OperationalError("no such table: todonts")
        r = self.client.get("/")
        self.assertEqual(r.status_code, 500)
        self.assertEqual(r.json(), {"detail": "database_error"})

    @patch("todont.repository.todont_repo.get_one")
    def test_get_db_error_is_500(self, mock_get):
        mock_get.side_effect = sqlite3.DatabaseError("disk image is malformed")
        r = self.client.get("/1")
        self.assertEqual(r.status_code, 500)
        self.assertNotIn("malformed", r.text)

    @patch("todont.repository.todont_repo.insert")
    def test_create_db_error_is_500(self, mock_insert):
        mock_insert.side_effect = sqlite3.IntegrityError("NOT NULL constraint failed")
        r = self.client.post("/", json={"description": "x", "done": False})
        self.assertEqual(r.status_code, 500)
        self.assertEqual(r.json()["detail"], "database_error")

    @patch("todont.repository.todont_repo.update")
    def test_update_db_error_is_500(self, mock_update):
        mock_update.side_effect = sqlite3.OperationalError("database is locked")
        r = self.client.put("/1", json={"description": "x", "done": True})
        self.assertEqual(r.status_code, 500)

    @patch("todont.repository.todont_repo.delete")
    def test_delete_db_error_is_500(self, mock_delete):
        mock_delete.side_effect = sqlite3.OperationalError("database is locked")
        r = self.client.delete("/1")
        self.assertEqual(r.status_code, 500)

    @patch("todont.db.get_pool")
    def test_connection_acquire_failure_is_500(self, mock_get_pool):
        mock_get_pool.return_value.connect.side_effect = sqlite3.OperationalError("unable to open database file")
        r = self.client.get("/")
        self.assertEqual(r.status_code, 500)
        self.assertEqual(r.json(), {"detail": "database_error"})

    @patch("todont.db.get_pool")
    def test_pool_timeout_is_500(self, mock_get_pool):
        mock_get_pool.return_value.connect.side_effect = exc.TimeoutError("QueuePool limit reached")
        r = self.client.post("/", json={"description": "x", "done": False})
        self.assertEqual(r.status_code, 500)
        self.assertEqual(r.json(), {"detail": "database_error"})


class TestOutOfRangeIds(unittest.TestCase):
    """Ids beyond signed 64-bit are rejected before reaching sqlite."""

    def setUp(self):
        from todont.api import app
        self.client = TestClient(app, raise_server_exceptions=True)

    def test_get_too_large_id_is_422(self):
        r = self.client.get("/99999999999999999999")
        self.assertEqual(r.status_code, 422)

    def test_put_too_large_id_is_422(self):
        r = self.client.put("/99999999999999999999", json={"description": "x", "done": True})
        self.assertEqual(r.status_code, 422)

    def test_delete_too_small_id_is_422(self):
        r = self.client.delete(f"/{-2**63 - 1}")
        self.assertEqual(r.status_code, 422)

    def test_int64_bounds_accepted(self):
        self.assertEqual(self.client.get(f"/{2**63 - 1}").status_code, 404)
        self.assertEqual(self.client.delete(f"/{-2**63}").status_code, 200)
