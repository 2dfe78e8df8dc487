"""Data models for the vocabulary rotation core."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .window import to_24_hour


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


def to_local_naive(value: datetime) -> datetime:
    """Timestamps are compared with naive local clock times; drop any offset."""
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


class _CamelModel(BaseModel):
    """Base for models shared with the widget; JSON keys are camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Definition(_CamelModel):
    text: str
    number: Optional[int] = None  # ordinal for display (1., 2., ...)


class ExampleSentence(_CamelModel):
    original: str
    romanization: Optional[str] = None
    translation: Optional[str] = None


class WordRecord(_CamelModel):
    """A single vocabulary entry. Immutable once loaded."""

    id: str
    word: str
    part_of_speech: str = ""
    pronunciation: Optional[str] = None
    language_code: str
    difficulty: Difficulty = Difficulty.MEDIUM

    # Target language mode
    alternate_script: Optional[str] = None  # kanji, cyrillic, etc.
    translation: Optional[str] = None
    translation_language_code: Optional[str] = None
    example_sentences: Optional[List[ExampleSentence]] = None

    # Native language mode
    definitions: Optional[List[Definition]] = None
    origin: Optional[str] = None
    synonyms: Optional[List[str]] = None

    @field_validator("difficulty", mode="before")
    @classmethod
    def _default_difficulty(cls, value):
        return Difficulty.MEDIUM if value is None else value


class WindowBounds(_CamelModel):
    """Daily active window on a 12-hour clock, as the user configured it."""

    start_hour: int = 8
    start_is_pm: bool = False
    end_hour: int = 8
    end_is_pm: bool = True

    @property
    def start_24(self) -> int:
        return to_24_hour(self.start_hour, self.start_is_pm)

    @property
    def end_24(self) -> int:
        return to_24_hour(self.end_hour, self.end_is_pm)


class Preferences(BaseModel):
    """Read-only view over the user's settings."""

    model_config = ConfigDict(frozen=True)

    is_learning_new_language: bool = True
    native_language_code: str = ""
    target_language_code: str = ""

    difficulty_easy: bool = True
    difficulty_medium: bool = True
    difficulty_hard: bool = True

    frequency_min: int = 2
    frequency_max: int = 4

    start_hour: int = 8
    start_minute: int = 0  # display only
    start_is_pm: bool = False
    end_hour: int = 8
    end_minute: int = 0  # display only
    end_is_pm: bool = True

    @property
    def language_code(self) -> str:
        """Language of the words shown in the current mode."""
        return self.target_language_code if self.is_learning_new_language else self.native_language_code

    @property
    def enabled_difficulties(self) -> frozenset:
        flags = {
            Difficulty.EASY: self.difficulty_easy,
            Difficulty.MEDIUM: self.difficulty_medium,
            Difficulty.HARD: self.difficulty_hard,
        }
        return frozenset(level for level, enabled in flags.items() if enabled)

    @property
    def frequency_valid(self) -> bool:
        return 0 < self.frequency_min <= self.frequency_max

    @property
    def start_24(self) -> int:
        return to_24_hour(self.start_hour, self.start_is_pm)

    @property
    def end_24(self) -> int:
        return to_24_hour(self.end_hour, self.end_is_pm)

    @property
    def window(self) -> WindowBounds:
        return WindowBounds(
            start_hour=self.start_hour,
            start_is_pm=self.start_is_pm,
            end_hour=self.end_hour,
            end_is_pm=self.end_is_pm,
        )


class RotationState(_CamelModel):
    """Snapshot published to the shared store after every rotation."""

    candidate_list: List[WordRecord] = Field(default_factory=list)
    current_index: int = 0
    last_rotation_at: datetime
    rotation_interval_seconds: float
    is_learning_new: bool = True

    @field_validator("last_rotation_at")
    @classmethod
    def _local_time(cls, value: datetime) -> datetime:
        return to_local_naive(value)

    @model_validator(mode="after")
    def _index_in_range(self):
        if self.candidate_list and not 0 <= self.current_index < len(self.candidate_list):
            raise ValueError(
                f"current_index {self.current_index} out of range for {len(self.candidate_list)} candidates"
            )
        return self

    @property
    def current_word(self) -> Optional[WordRecord]:
        if not self.candidate_list:
            return None
        return self.candidate_list[self.current_index]


class History(_CamelModel):
    """Recently shown word ids, oldest first."""

    entries: List[str] = Field(default_factory=list)
    last_rotation: Optional[datetime] = None

    @field_validator("last_rotation")
    @classmethod
    def _local_time(cls, value: Optional[datetime]) -> Optional[datetime]:
        return None if value is None else to_local_naive(value)

    def append(self, word_id: str, at: datetime, limit: int = 20) -> "History":
        entries = [*self.entries, word_id]
        if len(entries) > limit:
            entries = entries[len(entries) - limit:]
        return History(entries=entries, last_rotation=at)

    def recent(self, count: int) -> List[str]:
        if count <= 0:
            return []
        return self.entries[-count:]
