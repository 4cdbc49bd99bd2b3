from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.services.catalog_service import CatalogError, CatalogService

router = APIRouter(prefix="/productos", tags=["productos"])


def _get_catalog(request: Request) -> CatalogService:
    svc = getattr(getattr(request.app, "state", None), "catalog", None)
    if not svc:
        raise RuntimeError("CatalogService no configurado")
    return svc


def _error_response(err: CatalogError) -> JSONResponse:
    return JSONResponse({"success": False, "error": err.message}, status_code=err.status_code)


@router.api_route("", methods=["GET", "HEAD"])
def list_productos(request: Request):
    result = _get_catalog(request).list_all()
    return {"success": True, "count": result.count, "data": result.to_list()}


@router.api_route("/search/{modelo}", methods=["GET", "HEAD"])
def search_productos(modelo: str, request: Request):
    result = _get_catalog(request).search(modelo)
    return {"success": True, "search": modelo, "count": result.count, "data": result.to_list()}


@router.api_route("/precio/{min_precio}/{max_precio}", methods=["GET", "HEAD"])
def productos_por_precio(min_precio: str, max_precio: str, request: Request):
    try:
        low, high, result = _get_catalog(request).by_price_range(min_precio, max_precio)
    except CatalogError as exc:
        return _error_response(exc)
    return {
        "success": True,
        "priceRange": {"min": low, "max": high},
        "count": result.count,
        "data": result.to_list(),
    }


@router.api_route("/{product_id}", methods=["GET", "HEAD"])
def get_producto(product_id: str, request: Request):
    try:
        entity = _get_catalog(request).get_by_id(product_id)
    except CatalogError as exc:
        return _error_response(exc)
    return {"success": True, "data": entity.to_dict()}
