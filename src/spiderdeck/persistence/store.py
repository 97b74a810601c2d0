"""Single-slot save stores.

The engine only needs ``load()``, ``save()`` and ``clear()`` on one fixed
key, so any key-value backend can sit behind this port.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from spiderdeck.simulation.schema import SAVE_KEY

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """A backend failed to read or write the save slot."""


class SaveStore(Protocol):
    """Storage port for the persisted game record."""

    def load(self) -> Optional[Dict[str, Any]]:
        """Return the stored record, or None if the slot is empty."""
        ...

    def save(self, record: Dict[str, Any]) -> None:
        ...

    def clear(self) -> None:
        ...


class MemoryStore:
    """In-process dict store, mainly for tests."""

    def __init__(self, key: str = SAVE_KEY):
        self.key = key
        self._data: Dict[str, str] = {}

    def load(self) -> Optional[Dict[str, Any]]:
        raw = self._data.get(self.key)
        if raw is None:
            return None
        return json.loads(raw)

    def save(self, record: Dict[str, Any]) -> None:
        # Store the encoded form so callers can't alias the saved record
        self._data[self.key] = json.dumps(record)

    def clear(self) -> None:
        self._data.pop(self.key, None)


class JsonFileStore:
    """Stores the record as one JSON file."""

    def __init__(self, path: Path | str = Path("spider_save.json")):
        self.path = Path(path)

    def load(self) -> Optional[Dict[str, Any]]:
        if not self.path.exists():
            return None
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read save file {self.path}: {e}")
            return None
        if not isinstance(data, dict):
            logger.warning(f"Ignoring save file {self.path}: not a JSON object")
            return None
        return data

    def save(self, record: Dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(record, f, indent=2)
        except OSError as e:
            raise StoreError(f"Could not write save file {self.path}: {e}") from e

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StoreError(f"Could not remove save file {self.path}: {e}") from e
