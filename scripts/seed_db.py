#!/usr/bin/env python3
"""
Cargar los datos base (productos + imagen QR de pago) sin levantar el servidor.

Uso:
  python scripts/seed_db.py [--data data/resumen_productos.json] [--image data/pagoQR.jpg] [--database-url sqlite:///productos.db]
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Garantiza que el paquete api sea importable al ejecutarlo directamente
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from api.core.config import get_settings  # noqa: E402
from api.db.session import Storage  # noqa: E402
from api.repositories.sql_repository import SQLRepository  # noqa: E402
from api.services.seed_service import SeedLoader  # noqa: E402


def main() -> None:
    settings = get_settings()
    ap = argparse.ArgumentParser(description="Cargar productos e imagen de pago en la BD")
    ap.add_argument("--data", default=str(settings.seed_data_file), help="JSON con [{modelo, precio}]")
    ap.add_argument("--image", default=str(settings.pago_qr_file), help="Imagen JPEG del QR de pago")
    ap.add_argument("--database-url", default=settings.database_url, help="URL SQLAlchemy de la BD")
    args = ap.parse_args()

    storage = Storage.open(args.database_url)
    try:
        report = SeedLoader(SQLRepository(storage), Path(args.data), Path(args.image)).run()
    finally:
        storage.close()

    print("OK: carga finalizada")
    if report.products is None:
        print("  Productos: ya existian, sin cambios")
    else:
        print(f"  Productos ({report.source}): {report.products.inserted} insertados")
        if report.products.skipped:
            print(f"  Omitidos: {', '.join(report.products.skipped)}")
        if report.products.failed:
            print(f"  Fallidos: {', '.join(report.products.failed)}")
    print(f"  Imagen pagoQR: {report.payment_qr}")
    for error in report.errors:
        print(f"  Error: {error}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - uso CLI
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
