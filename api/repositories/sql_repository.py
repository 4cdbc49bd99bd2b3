"""High-level data access helpers backed by SQLAlchemy."""
from __future__ import annotations

import re
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Mapping, Optional

from sqlalchemy import func, insert, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from api.core.logging import get_logger
from api.db.models import Pago, Producto
from api.db.session import Storage, StorageError

LOG = get_logger("productos-repository")

# largest integer SQLite can bind
MAX_SQL_INTEGER = 2**63 - 1
_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


@dataclass
class InsertResult:
    """Outcome of a conflict-ignoring batch insert."""

    inserted: int = 0
    skipped: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


class InvalidRecordError(ValueError):
    """Raised when a seed record cannot be turned into a product row."""


@contextmanager
def _guard(operation: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        raise StorageError(operation, str(exc)) from exc


def _coerce_precio(value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidRecordError(f"precio invalido: {value!r}")
    if isinstance(value, int):
        number = value
    elif isinstance(value, float) and value.is_integer():
        number = int(value)
    elif isinstance(value, str) and _INTEGER_PATTERN.fullmatch(value.strip()):
        try:
            number = int(value.strip())
        except ValueError:
            raise InvalidRecordError(f"precio invalido: {value!r}") from None
    else:
        raise InvalidRecordError(f"precio invalido: {value!r}")
    if abs(number) > MAX_SQL_INTEGER:
        raise InvalidRecordError(f"precio fuera de rango: {value!r}")
    return number


def coerce_record(record: Mapping[str, Any]) -> tuple[str, int]:
    """Validate a ``{modelo, precio}`` mapping and return the column values."""
    if not isinstance(record, Mapping):
        raise InvalidRecordError(f"registro invalido: {record!r}")
    modelo = record.get("modelo")
    if not isinstance(modelo, str) or not modelo.strip():
        raise InvalidRecordError(f"modelo invalido: {modelo!r}")
    return modelo, _coerce_precio(record.get("precio"))


class SQLRepository:
    """Query helpers wrapping a Storage handle."""

    def __init__(self, storage: Storage) -> None:
        self.storage = storage

    # -------------------------- productos --------------------------
    def count_products(self) -> int:
        with self.storage.session() as session, _guard("count_products"):
            return int(session.execute(select(func.count()).select_from(Producto)).scalar_one())

    def list_products(self) -> list[Producto]:
        with self.storage.session() as session, _guard("list_products"):
            stmt = select(Producto).order_by(Producto.modelo)
            return list(session.execute(stmt).scalars().all())

    def search_products(self, term: str) -> list[Producto]:
        with self.storage.session() as session, _guard("search_products"):
            stmt = (
                select(Producto)
                .where(Producto.modelo.contains(term, autoescape=True))
                .order_by(Producto.modelo)
            )
            return list(session.execute(stmt).scalars().all())

    def products_in_price_range(self, low: int, high: int) -> list[Producto]:
        with self.storage.session() as session, _guard("products_in_price_range"):
            stmt = (
                select(Producto)
                .where(Producto.precio.between(low, high))
                .order_by(Producto.precio, Producto.modelo)
            )
            return list(session.execute(stmt).scalars().all())

    def get_product(self, product_id: int) -> Optional[Producto]:
        with self.storage.session() as session, _guard("get_product"):
            return session.get(Producto, product_id)

    def _insert_ignore(self, modelo: str, precio: int):
        values = {"modelo": modelo, "precio": precio}
        if self.storage.dialect == "sqlite":
            return sqlite.insert(Producto.__table__).values(**values).on_conflict_do_nothing(index_elements=["modelo"])
        if self.storage.dialect == "postgresql":
            return postgresql.insert(Producto.__table__).values(**values).on_conflict_do_nothing(index_elements=["modelo"])
        return insert(Producto.__table__).values(**values)

    def insert_products_ignoring_conflicts(self, records: Iterable[Mapping[str, Any]]) -> InsertResult:
        """Insert each record on its own; duplicates on ``modelo`` are skipped, never raised."""
        result = InsertResult()
        with self.storage.session() as session:
            for record in records:
                try:
                    modelo, precio = coerce_record(record)
                except InvalidRecordError as exc:
                    LOG.warning("Registro descartado: %s", exc)
                    result.failed.append(str(record.get("modelo")) if isinstance(record, Mapping) else repr(record))
                    continue
                try:
                    rowcount = session.execute(self._insert_ignore(modelo, precio)).rowcount
                    session.commit()
                except IntegrityError:
                    session.rollback()
                    result.skipped.append(modelo)
                    continue
                except SQLAlchemyError as exc:
                    session.rollback()
                    LOG.error("Error insertando %s: %s", modelo, exc)
                    result.failed.append(modelo)
                    continue
                if rowcount:
                    result.inserted += 1
                    LOG.debug("Insertado: %s", modelo)
                else:
                    result.skipped.append(modelo)
        return result

    # -------------------------- pago --------------------------
    def payment_asset_exists(self, nombre: str) -> bool:
        with self.storage.session() as session, _guard("payment_asset_exists"):
            stmt = select(Pago.id).where(Pago.nombre == nombre).limit(1)
            return session.execute(stmt).first() is not None

    def get_payment_asset(self, nombre: str) -> Optional[Pago]:
        with self.storage.session() as session, _guard("get_payment_asset"):
            stmt = select(Pago).where(Pago.nombre == nombre).order_by(Pago.id).limit(1)
            return session.execute(stmt).scalars().first()

    def insert_payment_asset(self, nombre: str, img: bytes) -> Pago:
        entity = Pago(nombre=nombre, img=img)
        with self.storage.session() as session, _guard("insert_payment_asset"):
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return entity
