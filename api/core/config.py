"""
Configuration helpers for the productos API.

Routers/services never read os.environ directly; they receive a Settings
instance (built here from environment variables) at startup.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

ROOT_DIR = Path(__file__).resolve().parents[2]
DATA_DIR = ROOT_DIR / "data"


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    host: str
    port: int
    database_url: str
    seed_data_file: Path
    pago_qr_file: Path
    cors_origins: tuple[str, ...]
    log_level: str
    version: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _list(value: str | None, default: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            return default
        items = tuple(item.strip() for item in value.split(",") if item.strip())
        return items or default

    default_db = f"sqlite:///{ROOT_DIR / 'productos.db'}"
    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_int(os.getenv("PORT", "3000"), 3000),
        database_url=(os.getenv("DATABASE_URL") or default_db).strip(),
        seed_data_file=Path(os.getenv("SEED_DATA_FILE") or DATA_DIR / "resumen_productos.json"),
        pago_qr_file=Path(os.getenv("PAGO_QR_FILE") or DATA_DIR / "pagoQR.jpg"),
        cors_origins=_list(os.getenv("CORS_ORIGINS"), ("*",)),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        version=os.getenv("APP_VERSION", "1.0.0"),
    )
