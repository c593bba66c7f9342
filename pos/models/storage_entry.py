"""Storage entry model."""
from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func
from pos.database import Base


class StorageEntry(Base):
    """One serialized document of the local key-value store."""

    __tablename__ = 'kv_store'

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<StorageEntry(key='{self.key}', size={len(self.value or '')})>"
