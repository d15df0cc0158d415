from __future__ import annotations

from sqlite3 import Connection, Row
from typing import Optional


def list_all(conn: Connection) -> list[Row]:
    return conn.execute("SELECT id, description, done FROM todonts").fetchall()


def get_one(conn: Connection, todont_id: int) -> Optional[Row]:
    return conn.execute(
        "SELECT id, description, done FROM todonts WHERE id=?", (todont_id,)
    ).fetchone()


def insert(conn: Connection, description: str, done: bool) -> int:
    cur = conn.execute(
        "INSERT INTO todonts(description, done) VALUES(?, ?)",
        (description, 1 if done else 0),
    )
    return cur.lastrowid


def update(conn: Connection, todont_id: int, description: str, done: bool) -> int:
    cur = conn.execute(
        "UPDATE todonts SET description=?, done=? WHERE id=?",
        (description, 1 if done else 0, todont_id),
    )
    return cur.rowcount


def delete(conn: Connection, todont_id: int) -> int:
    cur = conn.execute("DELETE FROM todonts WHERE id=?", (todont_id,))
    return cur.rowcount
