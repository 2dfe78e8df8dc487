"""Cross-process rotation state: the store port, publisher and reader.

The app and the widget never talk to each other directly. The app publishes
the whole rotation snapshot as one blob under one key; the store only
guarantees that a single key is replaced atomically, so nothing that must be
read together is ever split over several keys. The widget only reads.
"""

import sqlite3
from datetime import datetime, timedelta
from pathlib import Path
from typing import Dict, Optional, Protocol, Type, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from .models import History, RotationState, WindowBounds, WordRecord
from .scheduler import index_for_time, next_rotation_at, time_until_next_rotation
from .window import is_in_window, time_until_window_start

log = structlog.get_logger()

SNAPSHOT_KEY = "rotation.snapshot"
HISTORY_KEY = "rotation.history"
WINDOW_KEY = "window.bounds"

M = TypeVar("M", bound=BaseModel)


class SharedStateStore(Protocol):
    """Eventually consistent key/value store; each key is replaced atomically."""

    def read(self, key: str) -> Optional[bytes]:
        ...

    def write(self, key: str, value: bytes) -> None:
        ...


class InMemorySharedStore:
    def __init__(self):
        self._values: Dict[str, bytes] = {}

    def read(self, key: str) -> Optional[bytes]:
        return self._values.get(key)

    def write(self, key: str, value: bytes) -> None:
        self._values[key] = bytes(value)


class SqliteSharedStore:
    """Shared store backed by a single SQLite table, usable from several processes."""

    def __init__(self, path: Path):
        self.path = path
        self.init_database()

    def init_database(self):
        db_exists = self.path.exists()
        self.path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(self.path)
        cursor = conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS shared_state(
                key TEXT PRIMARY KEY,
                value BLOB,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)
        conn.commit()
        conn.close()

        if db_exists:
            log.info("Shared store connected", db_path=str(self.path))
        else:
            log.info("Shared store created", db_path=str(self.path))

    def read(self, key: str) -> Optional[bytes]:
        conn = sqlite3.connect(self.path)
        cursor = conn.cursor()
        cursor.execute("SELECT value FROM shared_state WHERE key = ?", (key,))
        result = cursor.fetchone()
        conn.close()
        return bytes(result[0]) if result and result[0] is not None else None

    def write(self, key: str, value: bytes) -> None:
        conn = sqlite3.connect(self.path)
        cursor = conn.cursor()
        cursor.execute("""
            INSERT OR REPLACE INTO shared_state (key, value, updated_at)
            VALUES (?, ?, CURRENT_TIMESTAMP)
        """, (key, sqlite3.Binary(value)))
        conn.commit()
        conn.close()


class SharedStatePublisher:
    """Writes whole snapshots. Store failures are logged, never raised."""

    def __init__(self, store: SharedStateStore):
        self.store = store

    def _write(self, key: str, model: BaseModel) -> bool:
        try:
            self.store.write(key, model.model_dump_json(by_alias=True).encode("utf-8"))
        except (sqlite3.Error, OSError) as e:
            log.error("Shared store write failed", key=key, error=str(e))
            return False
        return True

    def publish(self, state: RotationState) -> bool:
        ok = self._write(SNAPSHOT_KEY, state)
        if ok:
            log.info("Snapshot published",
                     candidates=len(state.candidate_list),
                     index=state.current_index,
                     interval=state.rotation_interval_seconds)
        return ok

    def publish_history(self, history: History) -> bool:
        return self._write(HISTORY_KEY, history)

    def publish_window(self, bounds: WindowBounds) -> bool:
        return self._write(WINDOW_KEY, bounds)


class SharedStateReader:
    """Reconstructs the current word from the published snapshot.

    Used both by the widget and by the app itself. Missing or corrupt data
    reads as "no state" rather than an error.
    """

    def __init__(self, store: SharedStateStore):
        self.store = store

    def _read(self, key: str, model: Type[M]) -> Optional[M]:
        try:
            raw = self.store.read(key)
        except (sqlite3.Error, OSError) as e:
            log.warning("Shared store read failed", key=key, error=str(e))
            return None
        if raw is None:
            return None
        try:
            return model.model_validate_json(raw)
        except ValidationError as e:
            log.warning("Discarding undecodable shared state", key=key, error_count=e.error_count())
            return None

    def read_snapshot(self) -> Optional[RotationState]:
        return self._read(SNAPSHOT_KEY, RotationState)

    def read_history(self) -> History:
        return self._read(HISTORY_KEY, History) or History()

    def read_window(self) -> Optional[WindowBounds]:
        return self._read(WINDOW_KEY, WindowBounds)

    def current_index(self, now: datetime, snapshot: Optional[RotationState]) -> Optional[int]:
        """Index into an already-read snapshot; never reads the store again."""
        if snapshot is None or not snapshot.candidate_list:
            return None
        return index_for_time(
            now,
            snapshot.current_index,
            snapshot.last_rotation_at,
            snapshot.rotation_interval_seconds,
            len(snapshot.candidate_list),
        )

    def current_word(self, now: Optional[datetime] = None) -> Optional[WordRecord]:
        now = now or datetime.now()
        snapshot = self.read_snapshot()
        index = self.current_index(now, snapshot)
        if index is None:
            return None
        return snapshot.candidate_list[index]

    def next_word(self, now: Optional[datetime] = None) -> Optional[WordRecord]:
        """The word the widget will show after the next interval boundary."""
        now = now or datetime.now()
        snapshot = self.read_snapshot()
        index = self.current_index(now, snapshot)
        if index is None:
            return None
        return snapshot.candidate_list[(index + 1) % len(snapshot.candidate_list)]

    def next_rotation_at(self, now: Optional[datetime] = None) -> Optional[datetime]:
        now = now or datetime.now()
        snapshot = self.read_snapshot()
        if snapshot is None:
            return None
        return next_rotation_at(now, snapshot.last_rotation_at, snapshot.rotation_interval_seconds)

    def is_outside_window(self, now: Optional[datetime] = None) -> bool:
        """True when exported window bounds exist and ``now`` is outside them."""
        now = now or datetime.now()
        bounds = self.read_window()
        if bounds is None:
            return False
        return not is_in_window(now, bounds.start_24, bounds.end_24)

    def time_until_window_start(self, now: Optional[datetime] = None) -> Optional[timedelta]:
        now = now or datetime.now()
        bounds = self.read_window()
        if bounds is None:
            return None
        return time_until_window_start(now, bounds.start_24)

    def time_until_next_rotation(self, now: Optional[datetime] = None) -> Optional[timedelta]:
        now = now or datetime.now()
        snapshot = self.read_snapshot()
        if snapshot is None:
            return None
        return time_until_next_rotation(now, snapshot.rotation_interval_seconds, self.read_window())
