from __future__ import annotations

# todont/db.py
import logging
import os
import sqlite3
import threading
from contextlib import contextmanager
from typing import Callable, Iterator

from fastapi import HTTPException
from sqlalchemy import exc
from sqlalchemy.pool import QueuePool

from .config import load_settings

logger = logging.getLogger(__name__)


def _connector(path: str) -> Callable[[], sqlite3.Connection]:
    def connect() -> sqlite3.Connection:
        dirn = os.path.dirname(path) or "."
        os.makedirs(dirn, exist_ok=True)
        conn = sqlite3.connect(
            path,
            detect_types=sqlite3.PARSE_DECLTYPES | sqlite3.PARSE_COLNAMES,
            check_same_thread=False,
            isolation_level=None,
        )
        conn.execute("PRAGMA foreign_keys = ON;")
        conn.row_factory = sqlite3.Row
        return conn
    return connect


def build_pool(path: str, max_connections: int = 5, timeout: float = 30.0) -> QueuePool:
    """
    有界 SQLite 连接池：最多同时借出 max_connections 个连接（不允许 overflow），
    空闲连接按 LIFO 复用，借不到时等待 timeout 秒后抛 sqlalchemy.exc.TimeoutError。
    连接为 autocommit（isolation_level=None），row_factory 为 Row。
    """
    if max_connections < 1:
        raise ValueError("max_connections must be >= 1")
    return QueuePool(
        _connector(path),
        pool_size=max_connections,
        max_overflow=0,
        timeout=timeout,
        use_lifo=True,
    )


@contextmanager
def checkout(pool: QueuePool) -> Iterator[sqlite3.Connection]:
    fairy = pool.connect()
    try:
        yield fairy.dbapi_connection
    finally:
        fairy.close()


_pool: QueuePool | None = None
_pool_lock = threading.Lock()


def get_pool() -> QueuePool:
    global _pool
    with _pool_lock:
        if _pool is None:
            settings = load_settings()
            _pool = build_pool(settings.db_path, settings.max_connections, settings.pool_timeout)
            logger.debug("opened pool on %s (max %d)", settings.db_path, settings.max_connections)
        return _pool


def close_pool() -> None:
    global _pool
    with _pool_lock:
        if _pool is not None:
            _pool.dispose()
            _pool = None


@contextmanager
def get_conn() -> Iterator[sqlite3.Connection]:
    """从共享连接池借出一个连接，退出时归还。"""
    with checkout(get_pool()) as conn:
        yield conn


def get_db() -> Iterator[sqlite3.Connection]:
    """
    FastAPI 依赖：每个请求一个连接。
        def route(..., conn: sqlite3.Connection = Depends(get_db)):
    """
    try:
        fairy = get_pool().connect()
    except (sqlite3.Error, exc.SQLAlchemyError, ValueError):
        logger.exception("failed to acquire database connection")
        raise HTTPException(status_code=500, detail="database_error")
    try:
        yield fairy.dbapi_connection
    finally:
        fairy.close()
