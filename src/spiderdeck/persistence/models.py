"""SQLAlchemy models for save persistence."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import declarative_base


def utc_now() -> datetime:
    """Return current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


Base = declarative_base()


class SaveSlot(Base):
    """One persisted game record, keyed by slot name."""

    __tablename__ = "save_slots"

    slot = Column(String, primary_key=True)  # e.g. "spider-solitaire-save"
    record_json = Column(Text, nullable=False)
    version = Column(Integer, default=1)
    saved_at = Column(DateTime, default=utc_now, onupdate=utc_now)
