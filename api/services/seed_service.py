"""Idempotent startup seeding of the catalog and the payment QR image."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from api.core.logging import get_logger
from api.db.models import PAGO_QR_KEY
from api.db.session import StorageError
from api.repositories.sql_repository import InsertResult, SQLRepository

LOG = get_logger("productos-seed")

SAMPLE_PRODUCTS: tuple[dict[str, Any], ...] = (
    {"modelo": "iPhone 14", "precio": 1200000},
    {"modelo": "Samsung Galaxy S23", "precio": 1100000},
    {"modelo": "MacBook Air M2", "precio": 1800000},
    {"modelo": "Dell XPS 13", "precio": 1500000},
    {"modelo": "iPad Pro", "precio": 1000000},
)

QR_INSERTED = "inserted"
QR_EXISTS = "exists"
QR_MISSING = "missing"
QR_ERROR = "error"


class SeedFileError(Exception):
    """Raised when the seed data file is missing or cannot be used."""


@dataclass
class SeedReport:
    source: Optional[str] = None
    products: Optional[InsertResult] = None
    payment_qr: Optional[str] = None
    errors: list[str] = field(default_factory=list)


def load_seed_records(path: Path) -> list[dict[str, Any]]:
    """Read a JSON array of ``{modelo, precio}`` records."""
    if not path.exists():
        raise SeedFileError(f"Archivo de datos no encontrado: {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise SeedFileError(f"No se pudo leer {path}: {exc}") from exc
    if not isinstance(data, list):
        raise SeedFileError(f"{path} no contiene una lista de productos")
    return data


class SeedLoader:
    """Guarantees baseline rows exist once, tolerating missing optional inputs."""

    def __init__(self, repository: SQLRepository, data_file: Path | None, image_file: Path | None) -> None:
        self.repository = repository
        self.data_file = Path(data_file) if data_file else None
        self.image_file = Path(image_file) if image_file else None

    def run(self) -> SeedReport:
        report = SeedReport()
        try:
            self.seed_products(report)
        except StorageError as exc:
            LOG.error("Error cargando productos (%s): %s", exc.operation, exc.message)
            report.errors.append(str(exc))
        try:
            self.seed_payment_qr(report)
        except StorageError as exc:
            LOG.error("Error cargando imagen de pago (%s): %s", exc.operation, exc.message)
            report.payment_qr = QR_ERROR
            report.errors.append(str(exc))
        return report

    def _records(self, report: SeedReport) -> list[dict[str, Any]]:
        if self.data_file is not None:
            try:
                records = load_seed_records(self.data_file)
                report.source = "file"
                return records
            except SeedFileError as exc:
                LOG.warning("%s; usando datos de ejemplo", exc)
        else:
            LOG.info("Sin archivo de datos configurado; usando datos de ejemplo")
        report.source = "sample"
        return [dict(item) for item in SAMPLE_PRODUCTS]

    def seed_products(self, report: SeedReport) -> SeedReport:
        count = self.repository.count_products()
        if count > 0:
            LOG.info("BD ya tiene %s productos", count)
            return report
        records = self._records(report)
        result = self.repository.insert_products_ignoring_conflicts(records)
        report.products = result
        LOG.info(
            "Productos cargados desde %s: %s insertados, %s omitidos, %s fallidos",
            report.source,
            result.inserted,
            len(result.skipped),
            len(result.failed),
        )
        return report

    def seed_payment_qr(self, report: SeedReport) -> SeedReport:
        if self.repository.payment_asset_exists(PAGO_QR_KEY):
            LOG.info("Imagen %s ya existe en BD", PAGO_QR_KEY)
            report.payment_qr = QR_EXISTS
            return report
        img = self._read_image()
        if not img:
            report.payment_qr = QR_MISSING
            return report
        self.repository.insert_payment_asset(PAGO_QR_KEY, img)
        LOG.info("Imagen %s insertada (%s bytes)", PAGO_QR_KEY, len(img))
        report.payment_qr = QR_INSERTED
        return report

    def _read_image(self) -> bytes | None:
        if self.image_file is None:
            LOG.info("Sin imagen de pago configurada")
            return None
        try:
            img = self.image_file.read_bytes()
        except FileNotFoundError:
            LOG.warning("Imagen de pago no encontrada: %s", self.image_file)
            return None
        except OSError as exc:
            LOG.warning("No se pudo leer la imagen de pago %s: %s", self.image_file, exc)
            return None
        if not img:
            LOG.warning("Imagen de pago vacia: %s", self.image_file)
            return None
        return img
