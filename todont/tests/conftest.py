import os
import sys
import sqlite3
import pytest
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


@pytest.fixture(scope="session")
def tmp_db_path(tmp_path_factory):
    path = tmp_path_factory.mktemp("db") / "todont_test.db"
    # Point the app at this temp DB
    os.environ["DATABASE_URL"] = f"sqlite://{path}"
    os.environ["TODONT_CONFIG"] = str(path.parent / "missing.yaml")
    from todont.db import close_pool
    from todont.migrations import run_migrations
    close_pool()
    conn = sqlite3.connect(str(path))
    try:
        run_migrations(conn)
    finally:
        conn.close()
    yield str(path)
    close_pool()


@pytest.fixture()
def client(tmp_db_path):
    # Import app after DB ready so startup hooks can use it
    from todont.api import app
    from fastapi.testclient import TestClient
    return TestClient(app)


@pytest.fixture(autouse=True)
def _clean_db(tmp_db_path):
    # Safety: ensure we only ever wipe the temp DB, never a real one
    assert os.environ.get("DATABASE_URL") == f"sqlite://{tmp_db_path}", "Refusing to clean non-temp DB"
    conn = sqlite3.connect(tmp_db_path)
    try:
        conn.execute("DELETE FROM todonts")
        conn.commit()
    finally:
        conn.close()
    yield
