"""
Schema migrations: a fixed, ordered set of NNNN_name.sql files in this
directory. Each file is applied once and recorded in schema_migrations.
"""
from __future__ import annotations

import logging
import os
import re
from sqlite3 import Connection

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = os.path.dirname(__file__)
_FILE_RE = re.compile(r"^(\d+)_([\w-]+)\.sql$")

DDL = """
CREATE TABLE IF NOT EXISTS schema_migrations (
  version INTEGER PRIMARY KEY,
  name TEXT NOT NULL,
  applied_at TEXT NOT NULL DEFAULT (datetime('now'))
);
"""


def available(directory: str = MIGRATIONS_DIR) -> list[tuple[int, str, str]]:
    out = []
    for fn in os.listdir(directory):
        m = _FILE_RE.match(fn)
        if m:
            out.append((int(m.group(1)), m.group(2), os.path.join(directory, fn)))
    out.sort()
    return out


def applied_versions(conn: Connection) -> set[int]:
    conn.executescript(DDL)
    return {r[0] for r in conn.execute("SELECT version FROM schema_migrations").fetchall()}


def pending(conn: Connection, directory: str = MIGRATIONS_DIR) -> list[tuple[int, str, str]]:
    done = applied_versions(conn)
    return [m for m in available(directory) if m[0] not in done]


def run_migrations(conn: Connection, directory: str = MIGRATIONS_DIR) -> list[int]:
    """Apply pending migrations in version order; returns applied versions."""
    applied = []
    for version, name, path in pending(conn, directory):
        with open(path, "r", encoding="utf-8") as f:
            script = f.read()
        logger.info("applying migration %04d_%s", version, name)
        # 每个迁移与其 schema_migrations 记录在同一事务中，失败则整体回滚
        try:
            conn.executescript("BEGIN;\n" + script)
            conn.execute(
                "INSERT INTO schema_migrations(version, name) VALUES(?, ?)",
                (version, name),
            )
            conn.commit()
        except Exception:
            if conn.in_transaction:
                conn.rollback()
            logger.error("migration %04d_%s failed, rolled back", version, name)
            raise
        applied.append(version)
    return applied
