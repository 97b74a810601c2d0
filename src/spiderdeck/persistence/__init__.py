"""Save records and storage backends."""

from spiderdeck.persistence.serialization import (
    GameSnapshot,
    InvalidRecordError,
    game_from_record,
    game_to_record,
    record_from_json,
    record_to_json,
)
from spiderdeck.persistence.store import SaveStore, StoreError, MemoryStore, JsonFileStore

__all__ = [
    "GameSnapshot",
    "InvalidRecordError",
    "game_from_record",
    "game_to_record",
    "record_from_json",
    "record_to_json",
    "SaveStore",
    "StoreError",
    "MemoryStore",
    "JsonFileStore",
]
