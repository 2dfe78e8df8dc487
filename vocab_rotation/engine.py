"""Rotation engine: decides when to rotate, picks the word and publishes state.

The engine is the only writer of rotation state. Its mutating operations are
serialized on one lock so that the foreground hook, the periodic tick and the
settings listener never interleave a rotation.
"""

import random
import threading
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, List, Optional, Sequence

import structlog

from .catalog import candidates_for
from .config import HISTORY_LIMIT, RECENT_EXCLUSION, ROTATION_TOLERANCE_SECONDS
from .models import History, Preferences, RotationState, WordRecord
from .preferences import PreferencesPort, load_preferences
from .scheduler import calculate_rotation_interval, time_until_next_rotation
from .shared_state import SharedStatePublisher, SharedStateReader
from .window import is_in_window

log = structlog.get_logger()

WordChangedCallback = Callable[[Optional[WordRecord]], None]


class EngineState(str, Enum):
    UNINITIALIZED = "uninitialized"  # nothing published yet
    ACTIVE = "active"  # snapshot published, inside the window
    DORMANT = "dormant"  # outside the window, last word held


class RotationEngine:
    def __init__(self, pool: Sequence[WordRecord], preferences: PreferencesPort,
                 publisher: SharedStatePublisher, reader: SharedStateReader,
                 rng: Optional[random.Random] = None,
                 widget_reloader: Optional[Callable[[], None]] = None,
                 history_limit: int = HISTORY_LIMIT,
                 recent_exclusion: int = RECENT_EXCLUSION,
                 tolerance_seconds: float = ROTATION_TOLERANCE_SECONDS):
        self.pool = list(pool)
        self.preferences = preferences
        self.publisher = publisher
        self.reader = reader
        self.rng = rng or random.Random()
        self.widget_reloader = widget_reloader
        self.history_limit = history_limit
        self.recent_exclusion = recent_exclusion
        self.tolerance_seconds = tolerance_seconds
        self._by_id = {record.id: record for record in self.pool}
        self._listeners: List[WordChangedCallback] = []
        self._lock = threading.RLock()

    # ---- Observers ----
    def subscribe(self, callback: WordChangedCallback):
        self._listeners.append(callback)

    def _notify(self, word: Optional[WordRecord]):
        for callback in list(self._listeners):
            callback(word)
        if self.widget_reloader is not None:
            self.widget_reloader()

    # ---- Read model ----
    def current_word(self, now: Optional[datetime] = None) -> Optional[WordRecord]:
        return self.reader.current_word(now or datetime.now())

    def history(self) -> List[WordRecord]:
        """Recently shown words, oldest first; ids no longer in the pool are skipped."""
        return [self._by_id[i] for i in self.reader.read_history().entries if i in self._by_id]

    def time_until_next_rotation(self, now: Optional[datetime] = None) -> Optional[timedelta]:
        now = now or datetime.now()
        prefs = load_preferences(self.preferences)
        snapshot = self.reader.read_snapshot()
        if snapshot is not None:
            interval = snapshot.rotation_interval_seconds
        else:
            interval = self._interval_for(prefs)
        return time_until_next_rotation(now, interval, prefs.window)

    def state(self, now: Optional[datetime] = None) -> EngineState:
        now = now or datetime.now()
        if self.reader.read_snapshot() is None:
            return EngineState.UNINITIALIZED
        window = load_preferences(self.preferences).window
        if is_in_window(now, window.start_24, window.end_24):
            return EngineState.ACTIVE
        return EngineState.DORMANT

    # ---- Transitions ----
    def check_and_rotate_if_needed(self, now: Optional[datetime] = None) -> bool:
        """Rotate if the interval has elapsed inside the window, or if nothing was ever published."""
        now = now or datetime.now()
        with self._lock:
            snapshot = self.reader.read_snapshot()
            if snapshot is None:
                log.info("No rotation state yet, priming first word")
                return self._rotate(now)

            window = load_preferences(self.preferences).window
            if not is_in_window(now, window.start_24, window.end_24):
                return False

            elapsed = (now - snapshot.last_rotation_at).total_seconds()
            if elapsed >= snapshot.rotation_interval_seconds - self.tolerance_seconds:
                return self._rotate(now)
            return False

    def rotate(self, now: Optional[datetime] = None) -> bool:
        with self._lock:
            return self._rotate(now or datetime.now())

    def force_rotation(self, now: Optional[datetime] = None) -> bool:
        """Rotate immediately, regardless of the interval."""
        log.info("Forced rotation")
        return self.rotate(now)

    def handle_settings_changed(self, now: Optional[datetime] = None) -> bool:
        """Republish the window and rotate so the shown word matches the new filters."""
        now = now or datetime.now()
        with self._lock:
            prefs = load_preferences(self.preferences)
            self.publisher.publish_window(prefs.window)
            return self._rotate(now, prefs, allow_recent=True)

    # ---- Internals ----
    def _interval_for(self, prefs: Preferences) -> float:
        return calculate_rotation_interval(
            prefs.frequency_min, prefs.frequency_max, prefs.start_24, prefs.end_24
        )

    def _rotate(self, now: datetime, prefs: Optional[Preferences] = None, allow_recent: bool = False) -> bool:
        prefs = prefs or load_preferences(self.preferences)
        interval = self._interval_for(prefs)
        history = self.reader.read_history()

        eligible = candidates_for(self.pool, prefs)
        if not eligible:
            log.warning("No words match the current filters",
                        language=prefs.language_code,
                        difficulties=sorted(d.value for d in prefs.enabled_difficulties))
            state = RotationState(
                candidate_list=[],
                current_index=0,
                last_rotation_at=now,
                rotation_interval_seconds=interval,
                is_learning_new=prefs.is_learning_new_language,
            )
            self.publisher.publish(state)
            self.publisher.publish_window(prefs.window)
            self._notify(None)
            return False

        recent = set(history.recent(self.recent_exclusion))
        candidates = [record for record in eligible if record.id not in recent]
        if not candidates and allow_recent:
            # The shown word must match the new filters even if it repeats.
            candidates = eligible
        if not candidates:
            # Pool too small for the anti-repeat window; keep the current word.
            log.info("All candidates recently shown, skipping rotation", eligible=len(eligible))
            return False

        chosen = self.rng.choice(candidates)
        history = history.append(chosen.id, now, limit=self.history_limit)

        state = RotationState(
            candidate_list=candidates,
            current_index=candidates.index(chosen),
            last_rotation_at=now,
            rotation_interval_seconds=interval,
            is_learning_new=prefs.is_learning_new_language,
        )
        self.publisher.publish_history(history)
        self.publisher.publish_window(prefs.window)
        self.publisher.publish(state)

        log.info("Rotated word", word_id=chosen.id, candidates=len(candidates), interval=interval)
        self._notify(chosen)
        return True
