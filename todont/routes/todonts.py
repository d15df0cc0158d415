from __future__ import annotations

import logging
from sqlite3 import Connection
import sqlite3

from fastapi import APIRouter, Depends, HTTPException, Path
from pydantic import BaseModel

from ..db import get_db
from ..logs import LogContext
from ..services.todont_svc import (
    list_todonts,
    get_todont,
    create_todont,
    update_todont,
    delete_todont,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# sqlite INTEGER 为有符号 64 位
I64_MIN, I64_MAX = -2**63, 2**63 - 1


class TodontIn(BaseModel):
    description: str
    done: bool


class TodontOut(BaseModel):
    id: int
    description: str
    done: bool


@router.get("/", response_model=list[TodontOut])
def api_todont_list(conn: Connection = Depends(get_db)):
    try:
        return list_todonts(conn)
    except sqlite3.Error:
        logger.exception("list todonts failed")
        raise HTTPException(status_code=500, detail="database_error")


@router.post("/")
def api_todont_create(body: TodontIn, conn: Connection = Depends(get_db)):
    log = LogContext("CREATE_TODONT")
    try:
        res = create_todont(conn, body.description, body.done, log)
        log.write("OK")
        return {"message": "ok", "id": res["id"]}
    except sqlite3.Error:
        logger.exception("create todont failed")
        log.write("ERROR", "database_error")
        raise HTTPException(status_code=500, detail="database_error")


@router.get("/{todont_id}", response_model=TodontOut, responses={404: {"description": "Not Found"}})
def api_todont_get(todont_id: int = Path(..., ge=I64_MIN, le=I64_MAX), conn: Connection = Depends(get_db)):
    try:
        item = get_todont(conn, todont_id)
    except sqlite3.Error:
        logger.exception("get todont %s failed", todont_id)
        raise HTTPException(status_code=500, detail="database_error")
    if item is None:
        raise HTTPException(status_code=404, detail="todont_not_found")
    return item


@router.put("/{todont_id}")
def api_todont_update(body: TodontIn, todont_id: int = Path(..., ge=I64_MIN, le=I64_MAX), conn: Connection = Depends(get_db)):
    log = LogContext("UPDATE_TODONT")
    try:
        found = update_todont(conn, todont_id, body.description, body.done, log)
        log.write("OK" if found else "NOOP")
        return {"message": "ok"}
    except sqlite3.Error:
        logger.exception("update todont %s failed", todont_id)
        log.write("ERROR", "database_error")
        raise HTTPException(status_code=500, detail="database_error")


@router.delete("/{todont_id}")
def api_todont_delete(todont_id: int = Path(..., ge=I64_MIN, le=I64_MAX), conn: Connection = Depends(get_db)):
    log = LogContext("DELETE_TODONT")
    try:
        found = delete_todont(conn, todont_id, log)
        log.write("OK" if found else "NOOP")
        return {"message": "ok"}
    except sqlite3.Error:
        logger.exception("delete todont %s failed", todont_id)
        log.write("ERROR", "database_error")
        raise HTTPException(status_code=500, detail="database_error")
