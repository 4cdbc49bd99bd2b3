from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.core.config import Settings, get_settings
from api.core.logging import get_logger
from api.db.session import Storage, StorageError
from api.repositories.sql_repository import SQLRepository
from api.routers import info as info_router
from api.routers import pago as pago_router
from api.routers import productos as productos_router
from api.services.catalog_service import CatalogService
from api.services.seed_service import SeedLoader, SeedReport

LOG = get_logger("productos-api")


@dataclass
class ServiceHandle:
    """Everything opened by start(); released by stop()."""

    settings: Settings
    storage: Storage
    repository: SQLRepository
    catalog: CatalogService
    seed_report: SeedReport
    started_at: datetime


def start(settings: Settings) -> ServiceHandle:
    """Open the database and seed it. Raises StorageError when the file cannot be opened."""
    storage = Storage.open(settings.database_url)
    LOG.info("BD conectada: %s", settings.database_url)
    try:
        repository = SQLRepository(storage)
        report = SeedLoader(repository, settings.seed_data_file, settings.pago_qr_file).run()
    except BaseException:
        storage.close()
        raise
    return ServiceHandle(
        settings=settings,
        storage=storage,
        repository=repository,
        catalog=CatalogService(repository),
        seed_report=report,
        started_at=datetime.now(timezone.utc),
    )


def stop(handle: ServiceHandle) -> None:
    handle.storage.close()
    LOG.info("BD cerrada correctamente")


def _not_found(request: Request) -> JSONResponse:
    path = request.url.path
    if request.url.query:
        path = f"{path}?{request.url.query}"
    return JSONResponse(
        {"success": False, "error": "Endpoint no encontrado", "message": f"La ruta {path} no existe"},
        status_code=404,
    )


async def _http_error_handler(request: Request, exc: StarletteHTTPException):
    # unknown paths and unsupported methods both report the route as missing
    if exc.status_code in (404, 405):
        return _not_found(request)
    return JSONResponse({"success": False, "error": str(exc.detail)}, status_code=exc.status_code)


async def _storage_error_handler(request: Request, exc: StorageError):
    LOG.error("Error de BD en %s (%s): %s", request.url.path, exc.operation, exc.message)
    return JSONResponse({"success": False, "error": "Error consultando la base de datos"}, status_code=500)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Factory compatible with uvicorn/gunicorn; the DB is opened in the lifespan."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        handle = await run_in_threadpool(start, settings)
        app.state.handle = handle
        app.state.catalog = handle.catalog
        try:
            yield
        finally:
            app.state.catalog = None
            stop(handle)

    app = FastAPI(title="API Productos", version=settings.version, lifespan=lifespan)
    app.state.settings = settings
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(StorageError, _storage_error_handler)

    app.include_router(info_router.router)
    app.include_router(pago_router.router)
    app.include_router(productos_router.router)
    return app


app = create_app()
