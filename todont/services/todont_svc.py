from __future__ import annotations

from sqlite3 import Connection, Row
from typing import Any

from ..logs import LogContext
from ..repository import todont_repo

# 连接均来自 db 连接池，为 autocommit 模式：每条写语句执行即生效，这里不再 commit


def _to_dict(r: Row) -> dict[str, Any]:
    return {"id": r["id"], "description": r["description"], "done": bool(r["done"])}


def list_todonts(conn: Connection) -> list[dict[str, Any]]:
    return [_to_dict(r) for r in todont_repo.list_all(conn)]


def get_todont(conn: Connection, todont_id: int) -> dict[str, Any] | None:
    row = todont_repo.get_one(conn, todont_id)
    return _to_dict(row) if row else None


def create_todont(conn: Connection, description: str, done: bool, log: LogContext) -> dict[str, Any]:
    log.set_payload({"description": description, "done": done})
    new_id = todont_repo.insert(conn, description, done)
    log.set_entity("TODONT", new_id)
    return {"id": new_id, "description": description, "done": done}


def update_todont(conn: Connection, todont_id: int, description: str, done: bool, log: LogContext) -> bool:
    """全量替换 description/done；id 不存在时不报错，返回 False。"""
    log.set_entity("TODONT", todont_id)
    log.set_payload({"description": description, "done": done})
    n = todont_repo.update(conn, todont_id, description, done)
    return n > 0


def delete_todont(conn: Connection, todont_id: int, log: LogContext) -> bool:
    log.set_entity("TODONT", todont_id)
    n = todont_repo.delete(conn, todont_id)
    return n > 0
