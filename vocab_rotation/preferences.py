"""User preference access and change detection."""

import json
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

import structlog
from pydantic import ValidationError

from .models import Preferences

log = structlog.get_logger()


class PrefKey:
    IS_LEARNING_NEW_LANGUAGE = "isLearningNewLanguage"
    NATIVE_LANGUAGE_CODE = "nativeLanguageCode"
    TARGET_LANGUAGE_CODE = "targetLanguageCode"

    DIFFICULTY_EASY = "difficultyEasy"
    DIFFICULTY_MEDIUM = "difficultyMedium"
    DIFFICULTY_HARD = "difficultyHard"

    FREQUENCY_MIN = "frequencyMin"
    FREQUENCY_MAX = "frequencyMax"

    START_HOUR = "startHour"
    START_MINUTE = "startMinute"
    START_IS_PM = "startIsPM"
    END_HOUR = "endHour"
    END_MINUTE = "endMinute"
    END_IS_PM = "endIsPM"


# Preferences field name -> stored key
_FIELDS = {
    "is_learning_new_language": PrefKey.IS_LEARNING_NEW_LANGUAGE,
    "native_language_code": PrefKey.NATIVE_LANGUAGE_CODE,
    "target_language_code": PrefKey.TARGET_LANGUAGE_CODE,
    "difficulty_easy": PrefKey.DIFFICULTY_EASY,
    "difficulty_medium": PrefKey.DIFFICULTY_MEDIUM,
    "difficulty_hard": PrefKey.DIFFICULTY_HARD,
    "frequency_min": PrefKey.FREQUENCY_MIN,
    "frequency_max": PrefKey.FREQUENCY_MAX,
    "start_hour": PrefKey.START_HOUR,
    "start_minute": PrefKey.START_MINUTE,
    "start_is_pm": PrefKey.START_IS_PM,
    "end_hour": PrefKey.END_HOUR,
    "end_minute": PrefKey.END_MINUTE,
    "end_is_pm": PrefKey.END_IS_PM,
}

# Minutes are display-only and do not affect rotation.
_WATCHED_FIELDS = tuple(name for name in _FIELDS if not name.endswith("_minute"))


class PreferencesPort(Protocol):
    """Key/value access to the user's settings."""

    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set(self, key: str, value: Any) -> None:
        ...


class InMemoryPreferences:
    def __init__(self, values: Optional[Dict[str, Any]] = None):
        self._values = dict(values or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value


class JsonFilePreferences:
    """Preferences kept in a JSON object on disk.

    The file is re-read on every ``get`` so that edits made by another process
    are picked up. Writes go through a temp file and ``os.replace``.
    """

    def __init__(self, path: Path):
        self.path = path

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            log.warning("Could not read preferences", file=str(self.path), error=str(e))
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str, default: Any = None) -> Any:
        return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, separators=(",", ":"), sort_keys=True)
        os.replace(tmp_path, self.path)


def load_preferences(port: PreferencesPort) -> Preferences:
    """Build a Preferences view; unset or invalid keys take the onboarding defaults."""
    defaults = Preferences()
    values = {}
    for name, key in _FIELDS.items():
        value = port.get(key)
        values[name] = getattr(defaults, name) if value is None else value
    try:
        return Preferences(**values)
    except ValidationError as e:
        invalid = {error["loc"][0] for error in e.errors() if error["loc"]}
        log.warning("Ignoring invalid preference values", keys=sorted(_FIELDS[name] for name in invalid))
        for name in invalid:
            values[name] = getattr(defaults, name)
        return Preferences(**values)


def fingerprint(preferences: Preferences) -> Tuple:
    return tuple(getattr(preferences, name) for name in _WATCHED_FIELDS)


class SettingsWatcher:
    """Calls back when the rotation-relevant settings change.

    ``poll`` compares a fingerprint of the current settings with the last one
    acted on. A change fires only after it has been stable for
    ``debounce_seconds``, so a burst of writes produces one callback.
    """

    def __init__(self, port: PreferencesPort, callback: Callable[[datetime], Any], debounce_seconds: float = 0.0):
        self.port = port
        self.callback = callback
        self.debounce_seconds = debounce_seconds
        self._committed = fingerprint(load_preferences(port))
        self._pending: Optional[Tuple] = None
        self._pending_since: Optional[datetime] = None

    def poll(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now()
        current = fingerprint(load_preferences(self.port))

        if current == self._committed:
            self._pending = None
            self._pending_since = None
            return False

        if current != self._pending:
            self._pending = current
            self._pending_since = now

        if (now - self._pending_since).total_seconds() < self.debounce_seconds:
            return False

        self._committed = current
        self._pending = None
        self._pending_since = None
        log.info("Settings changed")
        self.callback(now)
        return True
