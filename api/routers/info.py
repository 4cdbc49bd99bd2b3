"""Service metadata and liveness endpoints."""
from __future__ import annotations

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request

router = APIRouter(tags=["info"])

PROCESS_STARTED = time.monotonic()

ENDPOINTS = [
    "GET /productos - Todos los productos",
    "GET /productos/search/MODELO - Buscar por modelo",
    "GET /productos/precio/MIN/MAX - Filtrar por precio",
    "GET /productos/ID - Producto por ID",
    "GET /pagoQR - Imagen QR de pago",
    "GET /health - Estado del servicio",
]


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.api_route("/", methods=["GET", "HEAD"])
def index(request: Request):
    settings = getattr(request.app.state, "settings", None)
    return {
        "success": True,
        "message": "API Productos funcionando",
        "version": settings.version if settings else "1.0.0",
        "status": "OK",
        "timestamp": _now_iso(),
        "endpoints": ENDPOINTS,
    }


@router.api_route("/health", methods=["GET", "HEAD"])
def health():
    return {
        "status": "OK",
        "timestamp": _now_iso(),
        "uptime": round(time.monotonic() - PROCESS_STARTED, 3),
    }
