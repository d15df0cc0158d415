"""
FastAPI app entry point aggregating routers under todont/routes.
Keep as `uvicorn todont.api:app`.
"""
from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request

from . import __version__
from .config import load_settings
from .db import get_conn, close_pool
from .logs import configure_logging
from .migrations import run_migrations

logger = logging.getLogger(__name__)

app = FastAPI(title="todont-api", version=__version__)


@app.middleware("http")
async def trace_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    # route 在路由匹配后写入 scope；未匹配时退回原始路径
    route = request.scope.get("route")
    matched_path = getattr(route, "path", request.url.path)
    logger.debug(
        "http_request method=%s matched_path=%s status=%d latency_ms=%.1f",
        request.method,
        matched_path,
        response.status_code,
        (time.perf_counter() - start) * 1000,
    )
    return response


@app.on_event("startup")
def on_startup():
    settings = load_settings()
    configure_logging(settings.log_level)
    logger.info("starting todont-api: %s, %s", settings.database_url, settings.env)
    with get_conn() as conn:
        applied = run_migrations(conn)
    if applied:
        logger.info("applied migrations: %s", applied)


@app.on_event("shutdown")
def on_shutdown():
    close_pool()


# Include routers; base first so /health and /version win over /{todont_id}
from .routes import base as base_routes
from .routes import todonts as todonts_routes

app.include_router(base_routes.router)
app.include_router(todonts_routes.router)
