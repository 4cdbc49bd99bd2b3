"""Utility script to create the database schema."""
from __future__ import annotations

from api.core.config import get_settings

from .session import Storage, StorageError


def create_all(url: str | None = None) -> None:
    storage = Storage.open(url or get_settings().database_url)
    storage.close()


if __name__ == "__main__":
    try:
        create_all()
        print("Database tables created successfully.")
    except StorageError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
