"""Pytest configuration and fixtures."""

import random
from datetime import datetime

import pytest

from vocab_rotation.engine import RotationEngine
from vocab_rotation.models import Difficulty, WordRecord
from vocab_rotation.preferences import InMemoryPreferences, PrefKey
from vocab_rotation.shared_state import InMemorySharedStore, SharedStatePublisher, SharedStateReader


def make_word(word_id: str, language_code: str = "es", difficulty: Difficulty = Difficulty.MEDIUM) -> WordRecord:
    return WordRecord(id=word_id, word=word_id, part_of_speech="noun",
                      language_code=language_code, difficulty=difficulty)


@pytest.fixture
def now():
    """A fixed instant inside the default 8 AM - 8 PM window."""
    return datetime(2025, 3, 10, 9, 0, 0)


@pytest.fixture
def sample_pool():
    """Spanish words over all difficulties plus a couple of English ones."""
    return [
        make_word("gato", "es", Difficulty.EASY),
        make_word("perro", "es", Difficulty.EASY),
        make_word("casa", "es", Difficulty.MEDIUM),
        make_word("libro", "es", Difficulty.MEDIUM),
        make_word("esdrujula", "es", Difficulty.HARD),
        make_word("desasosiego", "es", Difficulty.HARD),
        make_word("ken", "en", Difficulty.MEDIUM),
        make_word("esoteric", "en", Difficulty.HARD),
    ]


@pytest.fixture
def preferences():
    """Learning Spanish from English, every difficulty, 2-4 words, 8 AM - 8 PM."""
    return InMemoryPreferences({
        PrefKey.IS_LEARNING_NEW_LANGUAGE: True,
        PrefKey.NATIVE_LANGUAGE_CODE: "en",
        PrefKey.TARGET_LANGUAGE_CODE: "es",
        PrefKey.FREQUENCY_MIN: 2,
        PrefKey.FREQUENCY_MAX: 4,
        PrefKey.START_HOUR: 8,
        PrefKey.START_IS_PM: False,
        PrefKey.END_HOUR: 8,
        PrefKey.END_IS_PM: True,
    })


@pytest.fixture
def store():
    return InMemorySharedStore()


@pytest.fixture
def reader(store):
    return SharedStateReader(store)


@pytest.fixture
def publisher(store):
    return SharedStatePublisher(store)


@pytest.fixture
def engine(sample_pool, preferences, publisher, reader):
    return RotationEngine(sample_pool, preferences, publisher, reader, rng=random.Random(42))
