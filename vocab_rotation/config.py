"""Configuration and runtime constants."""

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# Directory Configuration
BASE_DIR = Path(__file__).parent.parent
DATA_DIR = Path(os.getenv("VOCAB_DATA_DIR", str(BASE_DIR / "data")))

# Ensure directories exist
DATA_DIR.mkdir(parents=True, exist_ok=True)

# File paths
SHARED_DB = Path(os.getenv("VOCAB_SHARED_DB", str(DATA_DIR / "shared.sqlite")))
PREFERENCES_FILE = Path(os.getenv("VOCAB_PREFERENCES_FILE", str(DATA_DIR / "preferences.json")))
CACHE_FILE = Path(os.getenv("VOCAB_CACHE_FILE", str(DATA_DIR / "vocabulary.json")))
BUNDLED_FILE = Path(os.getenv("VOCAB_BUNDLED_FILE", str(DATA_DIR / "bundled_vocabulary.json")))

# Rotation Configuration
FALLBACK_INTERVAL_SECONDS = float(os.getenv("FALLBACK_INTERVAL_SECONDS", "3600"))
HISTORY_LIMIT = int(os.getenv("HISTORY_LIMIT", "20"))
RECENT_EXCLUSION = int(os.getenv("RECENT_EXCLUSION", "2"))  # last N history ids kept out of the draw
ROTATION_TOLERANCE_SECONDS = float(os.getenv("ROTATION_TOLERANCE_SECONDS", "1.0"))

# Scheduling Configuration
TICK_SECONDS = float(os.getenv("TICK_SECONDS", "1.0"))
SETTINGS_DEBOUNCE_SECONDS = float(os.getenv("SETTINGS_DEBOUNCE_SECONDS", "0.5"))
WIDGET_REFRESH_SECONDS = float(os.getenv("WIDGET_REFRESH_SECONDS", "300"))
