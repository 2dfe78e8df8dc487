"""Word pool loading and candidate filtering."""

import os
from pathlib import Path
from typing import Iterable, List, Optional

import structlog
from pydantic import TypeAdapter, ValidationError

from .config import BUNDLED_FILE, CACHE_FILE
from .models import Difficulty, Preferences, WordRecord
from .sample_data import sample_words

log = structlog.get_logger()

_pool_adapter = TypeAdapter(List[WordRecord])


def _unique_by_id(records: Iterable[WordRecord]) -> List[WordRecord]:
    seen, out = set(), []
    for record in records:
        if record.id not in seen:
            seen.add(record.id)
            out.append(record)
    return out


def read_pool(path: Path) -> Optional[List[WordRecord]]:
    """Read a JSON word pool; None if the file is missing or unreadable."""
    if not path.exists():
        return None
    try:
        pool = _pool_adapter.validate_json(path.read_bytes())
    except (OSError, ValidationError) as e:
        log.warning("Could not read word pool", file=str(path), error=str(e))
        return None
    return _unique_by_id(pool)


def write_pool(path: Path, pool: List[WordRecord]):
    """Write a word pool atomically (temp file, then replace)."""
    tmp_path = path.with_suffix(".tmp")
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(tmp_path, "wb") as f:
        f.write(_pool_adapter.dump_json(pool, by_alias=True))
    os.replace(tmp_path, path)


class VocabularyCatalog:
    """Loads the word pool for a session."""

    def __init__(self, cache_path: Path = CACHE_FILE, bundled_path: Path = BUNDLED_FILE):
        self.cache_path = cache_path
        self.bundled_path = bundled_path

    def load(self) -> List[WordRecord]:
        """Load the pool: cache if at least as large as the bundle, else the larger one, else samples."""
        cached = read_pool(self.cache_path)
        bundled = read_pool(self.bundled_path)

        if cached and len(cached) >= len(bundled or []):
            pool, source = cached, "cache"
        elif bundled:
            pool, source = bundled, "bundle"
        else:
            pool, source = _unique_by_id(sample_words()), "samples"

        if source != "cache":
            try:
                write_pool(self.cache_path, pool)
            except OSError as e:
                log.warning("Could not write word cache", file=str(self.cache_path), error=str(e))

        log.info("Vocabulary loaded", source=source, count=len(pool))
        return pool


def filter_candidates(pool: Iterable[WordRecord], difficulty_flags: Iterable[Difficulty], language_code: str,
                      excluded_ids: Iterable[str] = ()) -> List[WordRecord]:
    """Records in ``language_code`` with an enabled difficulty and an id not excluded.

    Pool order is preserved; selection happens in the engine.
    """
    enabled = frozenset(difficulty_flags)
    excluded = frozenset(excluded_ids)
    return [
        record for record in pool
        if record.language_code == language_code
        and record.difficulty in enabled
        and record.id not in excluded
    ]


def candidates_for(pool: Iterable[WordRecord], preferences: Preferences,
                   excluded_ids: Iterable[str] = ()) -> List[WordRecord]:
    """``filter_candidates`` with every filter taken from ``preferences``."""
    return filter_candidates(
        pool,
        preferences.enabled_difficulties,
        preferences.language_code,
        excluded_ids,
    )
