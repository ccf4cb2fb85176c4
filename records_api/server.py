"""
HTTP surface for the records API.

A FastAPI application with one catch-all route: every method and every path
is handed to `RequestRouter`, which decides between the known routes and a
404. Served through uvicorn.

Usage:
    from records_api.server import create_app, run_app

    run_app(create_app(), host="0.0.0.0", port=8080)
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from records_api.config import Settings, get_settings
from records_api.infrastructure.db_factory import connect
from records_api.repository import RecordRepository
from records_api.router import RequestRouter
from records_api.utils.logging import get_logger

log = get_logger(__name__)

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


def _raw_path(request: Request) -> str:
    """Path exactly as sent, without percent-decoding or the query string."""
    raw = request.scope.get("raw_path")
    if raw is None:
        return request.url.path
    return raw.split(b"?", 1)[0].decode("latin-1")


def _database_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # Connection or DDL failures propagate and abort startup.
        session = await connect(settings)
        try:
            repository = RecordRepository(session)
            await repository.ensure_table()
            app.state.router = RequestRouter(repository, default_name=settings.default_name)
            log.info("Listening on: http://%s:%s", settings.http_host, settings.http_port)
            yield
        finally:
            log.info("Shutting down records API")
            await session.end()

    return lifespan


def create_app(
    router: Optional[RequestRouter] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Parameters
    ----------
    router : RequestRouter, optional
        A ready router. When given, no database work happens at startup.
    settings : Settings, optional
        Used to open the session when no router is given.
    """
    lifespan = None
    if router is None:
        lifespan = _database_lifespan(settings or get_settings())

    app = FastAPI(
        title="records-api",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    if router is not None:
        app.state.router = router

    @app.api_route("/{path:path}", methods=ALL_METHODS, include_in_schema=False)
    async def handle(request: Request) -> JSONResponse:
        path = _raw_path(request)
        target = path
        if request.url.query:
            target = f"{target}?{request.url.query}"

        # First occurrence wins for repeated parameters.
        names = request.query_params.getlist("name")
        routed = await request.app.state.router.dispatch(
            request.method,
            path,
            name=names[0] if names else None,
            target=target,
        )
        return JSONResponse(content=routed.body.to_json(), status_code=routed.status_code)

    return app


def run_app(
    app: FastAPI,
    *,
    host: str = "0.0.0.0",
    port: int = 8080,
    log_level: str = "info",
) -> None:
    """Run one FastAPI app through uvicorn, keeping the logging already configured."""
    uvicorn.run(app, host=host, port=port, log_level=log_level, log_config=None)


__all__ = ["ALL_METHODS", "create_app", "run_app"]
