"""SQLAlchemy model for persisted key-value blobs."""

from sqlalchemy import Column, DateTime, String, Text

from lifestream.infrastructure.database import Base
from lifestream.utils import now_in_app_naive_datetime


class BlobModel(Base):
    """One JSON document stored under a string key."""

    __tablename__ = "app_blob"

    key = Column(String(120), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(
        DateTime(),
        nullable=False,
        default=now_in_app_naive_datetime,
        onupdate=now_in_app_naive_datetime,
    )


__all__ = ["BlobModel"]
