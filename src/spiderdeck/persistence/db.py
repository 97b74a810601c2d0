"""SQLite-backed save store."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as SQLSession, sessionmaker

from spiderdeck.persistence.models import Base, SaveSlot
from spiderdeck.persistence.store import StoreError
from spiderdeck.simulation.schema import SAVE_KEY

logger = logging.getLogger(__name__)

# Module-level engine cache to avoid recreating engines
_engines: dict[str, Any] = {}
_session_factories: dict[str, Any] = {}


def get_engine(db_path: str = "data/spider.db"):
    """Create or get cached SQLAlchemy engine with WAL mode."""
    if db_path in _engines:
        return _engines[db_path]

    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{db_path}")
    with engine.connect() as conn:
        conn.execute(text("PRAGMA journal_mode=WAL"))
        conn.commit()

    _engines[db_path] = engine
    return engine


def init_db(session_or_engine) -> None:
    """Create all tables."""
    if hasattr(session_or_engine, "get_bind"):
        engine = session_or_engine.get_bind()
    else:
        engine = session_or_engine
    Base.metadata.create_all(engine)


def get_session(db_path: str = "data/spider.db") -> SQLSession:
    """Get a new database session from a cached sessionmaker."""
    if db_path not in _session_factories:
        engine = get_engine(db_path)
        init_db(engine)
        _session_factories[db_path] = sessionmaker(bind=engine)
    return _session_factories[db_path]()


def get_test_db() -> SQLSession:
    """Get a fresh in-memory database session with tables created."""
    engine = create_engine("sqlite:///:memory:")
    init_db(engine)
    return sessionmaker(bind=engine)()


class SqlStore:
    """Save store on top of a SQLAlchemy session."""

    def __init__(self, session: SQLSession, key: str = SAVE_KEY):
        self.session = session
        self.key = key

    @classmethod
    def open(cls, db_path: str = "data/spider.db", key: str = SAVE_KEY) -> "SqlStore":
        return cls(get_session(db_path), key=key)

    def load(self) -> Optional[Dict[str, Any]]:
        try:
            row = self.session.get(SaveSlot, self.key)
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.warning(f"Could not read save slot {self.key}: {e}")
            return None
        if row is None:
            return None
        try:
            data = json.loads(row.record_json)
        except json.JSONDecodeError as e:
            logger.warning(f"Corrupt save slot {self.key}: {e}")
            return None
        return data if isinstance(data, dict) else None

    def save(self, record: Dict[str, Any]) -> None:
        payload = json.dumps(record)
        try:
            row = self.session.get(SaveSlot, self.key)
            if row is None:
                self.session.add(SaveSlot(slot=self.key, record_json=payload))
            else:
                row.record_json = payload
                row.version = (row.version or 0) + 1
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StoreError(f"Could not write save slot {self.key}: {e}") from e

    def clear(self) -> None:
        try:
            row = self.session.get(SaveSlot, self.key)
            if row is not None:
                self.session.delete(row)
                self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StoreError(f"Could not clear save slot {self.key}: {e}") from e

    def close(self) -> None:
        self.session.close()
