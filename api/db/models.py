"""SQLAlchemy models for the catalog and the payment asset."""
from __future__ import annotations

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    LargeBinary,
    String,
    func,
)

from .session import Base

PAGO_QR_KEY = "pagoQR"


class Producto(Base):
    __tablename__ = "productos"

    id = Column(Integer, primary_key=True, autoincrement=True)
    modelo = Column(String, unique=True, nullable=False)
    precio = Column(Integer, nullable=False)

    def to_dict(self) -> dict:
        return {"id": self.id, "modelo": self.modelo, "precio": self.precio}


class Pago(Base):
    __tablename__ = "pago"

    id = Column(Integer, primary_key=True, autoincrement=True)
    nombre = Column(String, nullable=False)
    img = Column(LargeBinary, nullable=False)
    created_at = Column("fecha_creacion", DateTime, server_default=func.now(), nullable=False)
