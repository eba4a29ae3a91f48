"""SQLAlchemy model backing the SQL keyed store."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, String, Text, func

from .session import Base


class KeyValueRow(Base):
    __tablename__ = "kv_store"

    key = Column(String(64), primary_key=True)
    # JSON text; encoded by the store so encoding failures surface as SerializationError.
    value = Column(Text, nullable=False)
    revision = Column(Integer, default=0, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
