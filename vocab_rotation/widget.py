"""Widget timeline generation.

Runs in the widget's refresh callback, which the host fires at unpredictable
times. It only reads the shared store and never writes rotation state.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional

import structlog

from .config import WIDGET_REFRESH_SECONDS
from .models import Definition, Difficulty, ExampleSentence, WordRecord
from .scheduler import next_rotation_at
from .shared_state import SharedStateReader
from .window import is_in_window, time_until_window_start

log = structlog.get_logger()


@dataclass
class TimelineEntry:
    date: datetime
    word: Optional[WordRecord]
    is_learning_new: bool = True
    outside_window: bool = False
    countdown: Optional[timedelta] = None


@dataclass
class Timeline:
    entries: List[TimelineEntry] = field(default_factory=list)
    refresh_at: Optional[datetime] = None


def sample_word() -> WordRecord:
    """Small word shown in the widget gallery preview."""
    return WordRecord(
        id="sample",
        word="sample",
        part_of_speech="n.",
        pronunciation="ˈsampəl",
        language_code="en",
        translation="ejemplo",
        translation_language_code="es",
        definitions=[Definition(text="A small example.", number=1)],
        example_sentences=[ExampleSentence(original="This is a sample.", translation="Esta es una muestra.")],
        difficulty=Difficulty.EASY,
    )


class WidgetTimelineProvider:
    def __init__(self, reader: SharedStateReader, refresh_seconds: float = WIDGET_REFRESH_SECONDS):
        self.reader = reader
        self.refresh = timedelta(seconds=refresh_seconds)

    def placeholder(self, now: Optional[datetime] = None) -> TimelineEntry:
        return TimelineEntry(date=now or datetime.now(), word=sample_word())

    def snapshot(self, now: Optional[datetime] = None) -> TimelineEntry:
        now = now or datetime.now()
        return self.timeline(now).entries[0]

    def timeline(self, now: Optional[datetime] = None) -> Timeline:
        now = now or datetime.now()
        snapshot = self.reader.read_snapshot()
        is_learning_new = snapshot.is_learning_new if snapshot else True

        if snapshot is None or not snapshot.candidate_list:
            entry = TimelineEntry(date=now, word=None, is_learning_new=is_learning_new)
            return Timeline(entries=[entry], refresh_at=now + self.refresh)

        bounds = self.reader.read_window()
        if bounds is not None and not is_in_window(now, bounds.start_24, bounds.end_24):
            countdown = time_until_window_start(now, bounds.start_24)
            entry = TimelineEntry(date=now, word=None, is_learning_new=is_learning_new,
                                  outside_window=True, countdown=countdown)
            return Timeline(entries=[entry], refresh_at=now + min(countdown, self.refresh))

        words = snapshot.candidate_list
        index = self.reader.current_index(now, snapshot)
        current = TimelineEntry(date=now, word=words[index], is_learning_new=is_learning_new)

        next_at = next_rotation_at(now, snapshot.last_rotation_at, snapshot.rotation_interval_seconds)
        if next_at is None:
            return Timeline(entries=[current], refresh_at=now + self.refresh)

        upcoming = TimelineEntry(date=next_at, word=words[(index + 1) % len(words)],
                                 is_learning_new=is_learning_new)
        refresh_at = min(next_at, now + self.refresh)
        log.debug("Widget timeline built", index=index, next_at=next_at.isoformat())
        return Timeline(entries=[current, upcoming], refresh_at=refresh_at)
