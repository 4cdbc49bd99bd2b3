from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import Response

from api.routers.productos import _error_response, _get_catalog
from api.services.catalog_service import PaymentAssetNotFoundError

router = APIRouter(tags=["pago"])

QR_CACHE_CONTROL = "public, max-age=86400"


@router.api_route("/pagoQR", methods=["GET", "HEAD"])
def pago_qr(request: Request):
    try:
        img = _get_catalog(request).payment_qr()
    except PaymentAssetNotFoundError as exc:
        return _error_response(exc)
    return Response(img, media_type="image/jpeg", headers={"Cache-Control": QR_CACHE_CONTROL})
