"""Tests for data models."""

import pytest
from datetime import datetime, timezone
from pydantic import ValidationError

from vocab_rotation.models import (
    Definition, Difficulty, ExampleSentence, History, Preferences, RotationState, WindowBounds, WordRecord,
)


def test_word_record_creation():
    """Test WordRecord creation and default values."""
    record = WordRecord(id="w1", word="gato", language_code="es")

    assert record.id == "w1"
    assert record.word == "gato"
    assert record.part_of_speech == ""
    assert record.pronunciation is None
    assert record.difficulty == Difficulty.MEDIUM
    assert record.alternate_script is None
    assert record.translation is None
    assert record.definitions is None
    assert record.example_sentences is None


def test_word_record_with_data():
    """Test WordRecord with all fields populated."""
    record = WordRecord(
        id="ja-yasai",
        word="やさい",
        part_of_speech="noun",
        pronunciation="ya·sa·i",
        language_code="ja",
        difficulty=Difficulty.EASY,
        alternate_script="野菜",
        translation="vegetable",
        translation_language_code="en",
        definitions=[Definition(text="plant eaten as food", number=1)],
        example_sentences=[ExampleSentence(original="やさいをたべます。", romanization="Yasai o tabemasu.")],
    )

    assert record.alternate_script == "野菜"
    assert record.definitions[0].number == 1
    assert record.example_sentences[0].translation is None


def test_word_record_is_immutable():
    record = WordRecord(id="w1", word="gato", language_code="es")
    with pytest.raises(ValidationError):
        record.word = "perro"


def test_word_record_decodes_camel_case_and_null_difficulty():
    """Blobs written by the app use camelCase keys; a null difficulty means medium."""
    raw = '{"id": "w1", "word": "casa", "partOfSpeech": "noun", "languageCode": "es", "difficulty": null}'
    record = WordRecord.model_validate_json(raw)

    assert record.part_of_speech == "noun"
    assert record.language_code == "es"
    assert record.difficulty == Difficulty.MEDIUM


def test_word_record_rejects_unknown_difficulty():
    with pytest.raises(ValidationError):
        WordRecord(id="w1", word="casa", language_code="es", difficulty="impossible")


def test_preferences_defaults():
    """Test Preferences default values match onboarding defaults."""
    prefs = Preferences()

    assert prefs.is_learning_new_language is True
    assert prefs.frequency_min == 2
    assert prefs.frequency_max == 4
    assert prefs.start_24 == 8
    assert prefs.end_24 == 20
    assert prefs.enabled_difficulties == frozenset(Difficulty)


def test_preferences_language_follows_mode():
    prefs = Preferences(native_language_code="en", target_language_code="ja")
    assert prefs.language_code == "ja"

    native = Preferences(is_learning_new_language=False, native_language_code="en", target_language_code="ja")
    assert native.language_code == "en"


def test_preferences_frequency_validity():
    assert Preferences(frequency_min=2, frequency_max=4).frequency_valid
    assert not Preferences(frequency_min=0, frequency_max=4).frequency_valid
    assert not Preferences(frequency_min=5, frequency_max=4).frequency_valid


def test_window_bounds_24_hour():
    bounds = WindowBounds(start_hour=10, start_is_pm=True, end_hour=6, end_is_pm=False)
    assert bounds.start_24 == 22
    assert bounds.end_24 == 6


def test_rotation_state_current_word():
    words = [WordRecord(id=str(i), word=str(i), language_code="es") for i in range(3)]
    state = RotationState(candidate_list=words, current_index=2,
                          last_rotation_at=datetime(2025, 1, 1), rotation_interval_seconds=60)

    assert state.current_word.id == "2"


def test_rotation_state_rejects_out_of_range_index():
    words = [WordRecord(id="a", word="a", language_code="es")]
    with pytest.raises(ValidationError):
        RotationState(candidate_list=words, current_index=1,
                      last_rotation_at=datetime(2025, 1, 1), rotation_interval_seconds=60)


def test_rotation_state_empty_list_has_no_word():
    state = RotationState(candidate_list=[], current_index=7,
                          last_rotation_at=datetime(2025, 1, 1), rotation_interval_seconds=60)
    assert state.current_word is None


def test_rotation_state_offset_timestamp_becomes_local():
    """An ISO-8601 timestamp with an offset is stored as naive local time."""
    state = RotationState.model_validate_json(
        '{"candidateList": [], "currentIndex": 0, "lastRotationAt": "2025-03-10T09:00:00Z",'
        ' "rotationIntervalSeconds": 3600, "isLearningNew": true}'
    )

    expected = datetime(2025, 3, 10, 9, 0, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
    assert state.last_rotation_at == expected
    assert state.last_rotation_at.tzinfo is None


def test_history_evicts_oldest():
    history = History()
    at = datetime(2025, 1, 1)
    for i in range(25):
        history = history.append(f"w{i}", at, limit=20)

    assert len(history.entries) == 20
    assert history.entries[0] == "w5"
    assert history.entries[-1] == "w24"
    assert history.recent(2) == ["w23", "w24"]
    assert history.last_rotation == at


def test_history_recent_zero():
    assert History(entries=["a", "b"]).recent(0) == []
