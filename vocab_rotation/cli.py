"""Command-line interface for the vocabulary rotation core."""

import asyncio
import json
import logging
from datetime import datetime
from pathlib import Path

import click
import structlog

from .catalog import VocabularyCatalog
from .config import BUNDLED_FILE, CACHE_FILE, PREFERENCES_FILE, SETTINGS_DEBOUNCE_SECONDS, SHARED_DB, TICK_SECONDS
from .engine import RotationEngine
from .languages import language_for_code, match_language
from .preferences import JsonFilePreferences, PrefKey, SettingsWatcher, load_preferences
from .shared_state import SharedStatePublisher, SharedStateReader, SqliteSharedStore
from .ticker import RotationTicker
from .widget import WidgetTimelineProvider
from .window import time_until_window_end

log = structlog.get_logger()


def configure_logging(verbose: bool = False):
    renderer = structlog.dev.ConsoleRenderer() if verbose else structlog.processors.JSONRenderer()
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def build_engine(db_path: Path = SHARED_DB, prefs_path: Path = PREFERENCES_FILE,
                 cache_path: Path = CACHE_FILE, bundled_path: Path = BUNDLED_FILE) -> RotationEngine:
    """Wire the default on-disk collaborators into an engine."""
    store = SqliteSharedStore(db_path)
    catalog = VocabularyCatalog(cache_path, bundled_path)
    return RotationEngine(
        catalog.load(),
        JsonFilePreferences(prefs_path),
        SharedStatePublisher(store),
        SharedStateReader(store),
    )


def _format_delta(delta) -> str:
    if delta is None:
        return "-"
    total = int(delta.total_seconds())
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:d}h {minutes:02d}m {seconds:02d}s"


def _describe(word) -> str:
    if word is None:
        return "No word available"
    language = language_for_code(word.language_code)
    label = language.english if language else word.language_code
    text = f"{word.word} ({word.alternate_script})" if word.alternate_script else word.word
    gloss = word.translation or (word.definitions[0].text if word.definitions else "")
    return f"{text} [{word.part_of_speech}, {label}] {gloss}".rstrip()


@click.group()
@click.option("--db", type=click.Path(path_type=Path), default=SHARED_DB, help="Shared state database")
@click.option("--prefs", type=click.Path(path_type=Path), default=PREFERENCES_FILE, help="Preferences JSON file")
@click.option("--cache", type=click.Path(path_type=Path), default=CACHE_FILE, help="Cached word pool")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def main(ctx: click.Context, db: Path, prefs: Path, cache: Path, verbose: bool):
    """Rotate vocabulary words on a daily schedule."""
    configure_logging(verbose)
    ctx.obj = {"db": db, "prefs": prefs, "cache": cache}


@main.command()
@click.pass_obj
def status(obj):
    """Show the current word, countdown and history."""
    engine = build_engine(obj["db"], obj["prefs"], obj["cache"])
    now = datetime.now()
    window = load_preferences(engine.preferences).window
    click.echo(f"state      : {engine.state(now).value}")
    click.echo(f"word       : {_describe(engine.current_word(now))}")
    click.echo(f"next in    : {_format_delta(engine.time_until_next_rotation(now))}")
    click.echo(f"window ends: {_format_delta(time_until_window_end(now, window.start_24, window.end_24))}")
    history = engine.history()
    click.echo(f"history    : {', '.join(w.word for w in reversed(history)) or '-'}")


@main.command()
@click.option("--force", is_flag=True, help="Rotate even if the interval has not elapsed")
@click.pass_obj
def rotate(obj, force: bool):
    """Rotate the current word if due (or always with --force)."""
    engine = build_engine(obj["db"], obj["prefs"], obj["cache"])
    rotated = engine.force_rotation() if force else engine.check_and_rotate_if_needed()
    click.echo(f"rotated    : {'yes' if rotated else 'no'}")
    click.echo(f"word       : {_describe(engine.current_word())}")


@main.command()
@click.pass_obj
def widget(obj):
    """Print the widget timeline as the widget process would build it."""
    reader = SharedStateReader(SqliteSharedStore(obj["db"]))
    timeline = WidgetTimelineProvider(reader).timeline()
    for entry in timeline.entries:
        if entry.outside_window:
            click.echo(f"{entry.date:%H:%M:%S}  outside window, starts in {_format_delta(entry.countdown)}")
        else:
            click.echo(f"{entry.date:%H:%M:%S}  {_describe(entry.word)}")
    click.echo(f"refresh at {timeline.refresh_at:%H:%M:%S}")


@main.command()
@click.option("--ticks", type=int, default=None, help="Stop after this many ticks")
@click.option("--interval", type=float, default=TICK_SECONDS, help="Seconds between ticks")
@click.pass_obj
def watch(obj, ticks, interval: float):
    """Run the rotation loop in the foreground."""
    engine = build_engine(obj["db"], obj["prefs"], obj["cache"])
    engine.subscribe(lambda word: click.echo(f"word       : {_describe(word)}"))
    watcher = SettingsWatcher(engine.preferences, engine.handle_settings_changed, SETTINGS_DEBOUNCE_SECONDS)
    ticker = RotationTicker(engine, watcher, interval=interval)
    try:
        asyncio.run(ticker.run(max_ticks=ticks))
    except KeyboardInterrupt:
        pass


@main.group()
def prefs():
    """Read or change preferences."""


@prefs.command("show")
@click.pass_obj
def prefs_show(obj):
    preferences = load_preferences(JsonFilePreferences(obj["prefs"]))
    click.echo(preferences.model_dump_json(indent=2))


@prefs.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_obj
def prefs_set(obj, key: str, value: str):
    """Set KEY to VALUE (JSON literal, or a plain string; language names become codes)."""
    try:
        parsed = json.loads(value)
    except ValueError:
        parsed = value
    if key in (PrefKey.NATIVE_LANGUAGE_CODE, PrefKey.TARGET_LANGUAGE_CODE) and isinstance(parsed, str):
        language = match_language(parsed)
        if language is not None:
            parsed = language.code
    try:
        JsonFilePreferences(obj["prefs"]).set(key, parsed)
    except OSError as e:
        log.error("Saving preference failed", key=key, error=str(e))
        raise click.ClickException(str(e))
    click.echo(f"{key} = {parsed!r}")


if __name__ == "__main__":
    main()
