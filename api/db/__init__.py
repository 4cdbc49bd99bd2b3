"""Database helpers (storage handle, models)."""

from .session import Base, Storage, StorageError

__all__ = ["Base", "Storage", "StorageError"]
