"""Tests for the command-line interface."""

import json

import pytest
from click.testing import CliRunner

from vocab_rotation.cli import main


@pytest.fixture
def cli_args(tmp_path):
    return [
        "--db", str(tmp_path / "shared.sqlite"),
        "--prefs", str(tmp_path / "prefs.json"),
        "--cache", str(tmp_path / "vocabulary.json"),
    ]


def test_prefs_set_and_show(cli_args, tmp_path):
    runner = CliRunner()

    result = runner.invoke(main, cli_args + ["prefs", "set", "frequencyMax", "6"])
    assert result.exit_code == 0
    assert json.loads((tmp_path / "prefs.json").read_text(encoding="utf-8")) == {"frequencyMax": 6}

    result = runner.invoke(main, cli_args + ["prefs", "show"])
    assert result.exit_code == 0
    assert '"frequency_max": 6' in result.output


def test_rotate_then_status(cli_args):
    runner = CliRunner()
    runner.invoke(main, cli_args + ["prefs", "set", "targetLanguageCode", "ja"])

    result = runner.invoke(main, cli_args + ["rotate"])
    assert result.exit_code == 0
    assert "rotated    : yes" in result.output
    assert "Japanese" in result.output

    result = runner.invoke(main, cli_args + ["status"])
    assert result.exit_code == 0
    assert "history    : " in result.output
    assert "No word available" not in result.output


def test_rotate_without_matching_words(cli_args):
    runner = CliRunner()
    runner.invoke(main, cli_args + ["prefs", "set", "targetLanguageCode", "ko"])

    result = runner.invoke(main, cli_args + ["rotate", "--force"])

    assert result.exit_code == 0
    assert "rotated    : no" in result.output
    assert "No word available" in result.output


def test_widget_reads_published_state(cli_args):
    runner = CliRunner()
    runner.invoke(main, cli_args + ["prefs", "set", "targetLanguageCode", "ja"])
    runner.invoke(main, cli_args + ["rotate"])

    result = runner.invoke(main, cli_args + ["widget"])

    assert result.exit_code == 0
    assert "refresh at" in result.output


def test_watch_runs_bounded_ticks(cli_args):
    runner = CliRunner()
    runner.invoke(main, cli_args + ["prefs", "set", "targetLanguageCode", "ja"])

    result = runner.invoke(main, cli_args + ["watch", "--ticks", "2", "--interval", "0"])

    assert result.exit_code == 0
    assert "word       : " in result.output


def test_invalid_preference_value_is_ignored(cli_args):
    runner = CliRunner()
    runner.invoke(main, cli_args + ["prefs", "set", "frequencyMin", "2.5"])

    result = runner.invoke(main, cli_args + ["status"])
    assert result.exit_code == 0

    result = runner.invoke(main, cli_args + ["prefs", "show"])
    assert result.exit_code == 0
    assert '"frequency_min": 2' in result.output


def test_prefs_set_accepts_language_name(cli_args, tmp_path):
    runner = CliRunner()

    result = runner.invoke(main, cli_args + ["prefs", "set", "targetLanguageCode", "Japanese"])

    assert result.exit_code == 0
    assert json.loads((tmp_path / "prefs.json").read_text(encoding="utf-8")) == {"targetLanguageCode": "ja"}


def test_status_shows_window_end(cli_args):
    result = CliRunner().invoke(main, cli_args + ["status"])

    assert result.exit_code == 0
    assert "window ends: " in result.output
