"""Read-only catalog use cases (listing, search, price filter, lookup, QR asset)."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any

from api.db.models import PAGO_QR_KEY, Producto
from api.repositories.sql_repository import MAX_SQL_INTEGER, SQLRepository

# decimal or exponent notation only; no digit-group underscores
_NUMBER_PATTERN = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?|[+-]?Infinity", re.ASCII)


class CatalogError(Exception):
    """Base exception for catalog lookups; carries the HTTP status to report."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidProductIdError(CatalogError):
    """Raised when the id does not parse as a number."""


class InvalidPriceRangeError(CatalogError):
    """Raised when a price bound is not an integer."""


class ProductNotFoundError(CatalogError):
    status_code = 404


class PaymentAssetNotFoundError(CatalogError):
    status_code = 404


@dataclass
class ProductList:
    items: list[Producto]

    @property
    def count(self) -> int:
        return len(self.items)

    def to_list(self) -> list[dict[str, Any]]:
        return [item.to_dict() for item in self.items]


def parse_price_bound(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        number = value
    else:
        raw = str(value if value is not None else "").strip()
        if not re.fullmatch(r"[+-]?[0-9]+", raw):
            raise InvalidPriceRangeError("Los precios deben ser números enteros")
        number = int(raw)
    if abs(number) > MAX_SQL_INTEGER:
        raise InvalidPriceRangeError("Precio fuera de rango")
    return number


def parse_product_id(value: Any) -> float:
    """Parse an id the way a numeric check would; NaN, underscores and garbage are rejected."""
    raw = str(value if value is not None else "").strip()
    if not raw:
        return 0.0
    if not _NUMBER_PATTERN.fullmatch(raw):
        raise InvalidProductIdError("ID debe ser un número")
    return float(raw.replace("Infinity", "inf"))


class CatalogService:
    """Translates the read operations of the API into repository queries."""

    def __init__(self, repository: SQLRepository) -> None:
        self.repository = repository

    def list_all(self) -> ProductList:
        return ProductList(self.repository.list_products())

    def search(self, term: str) -> ProductList:
        return ProductList(self.repository.search_products(term or ""))

    def by_price_range(self, low: Any, high: Any) -> tuple[int, int, ProductList]:
        min_value = parse_price_bound(low)
        max_value = parse_price_bound(high)
        if min_value > max_value:
            return min_value, max_value, ProductList([])
        return min_value, max_value, ProductList(self.repository.products_in_price_range(min_value, max_value))

    def get_by_id(self, raw_id: Any) -> Producto:
        number = parse_product_id(raw_id)
        entity = None
        if math.isfinite(number) and number.is_integer() and abs(number) <= MAX_SQL_INTEGER:
            entity = self.repository.get_product(int(number))
        if not entity:
            raise ProductNotFoundError("Producto no encontrado")
        return entity

    def payment_qr(self) -> bytes:
        asset = self.repository.get_payment_asset(PAGO_QR_KEY)
        if not asset or not asset.img:
            raise PaymentAssetNotFoundError("Imagen no encontrada")
        return bytes(asset.img)
