"""Runtime configuration and persisted user preferences."""
import os
from pathlib import Path

from flashlearn.db import get_connection
from flashlearn.models import ModeToggles

DEFAULT_DB_PATH = os.getenv(
    "FLASHLEARN_DB", str(Path.home() / ".flashlearn" / "flashlearn.db")
)

AI_GATEWAY_URL = os.getenv(
    "FLASHLEARN_AI_GATEWAY_URL", "https://ai.gateway.lovable.dev/v1/chat/completions"
)
AI_API_KEY = os.getenv("FLASHLEARN_AI_API_KEY", "")
AI_MODEL = os.getenv("FLASHLEARN_AI_MODEL", "google/gemini-2.5-flash")
AI_TIMEOUT = float(os.getenv("FLASHLEARN_AI_TIMEOUT", "60"))

ADVANCE_DELAY = float(os.getenv("FLASHLEARN_ADVANCE_DELAY", "1.0"))
SHARE_BASE_URL = os.getenv("FLASHLEARN_SHARE_URL", "http://localhost:8080")
LOG_LEVEL = os.getenv("FLASHLEARN_LOG_LEVEL", "WARNING").upper()

TOGGLE_KEYS = {
    "typing_mode": "learn.typing_mode",
    "spaced_repetition": "learn.spaced_repetition",
    "show_hints": "learn.show_hints",
    "show_images": "learn.show_images",
}


def get_setting(db_path: str, key: str, default: str = None) -> str | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT value FROM user_settings WHERE key = ?", (key,)).fetchone()
    conn.close()
    return row["value"] if row else default


def set_setting(db_path: str, key: str, value: str) -> None:
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO user_settings (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=?",
        (key, value, value),
    )
    conn.commit()
    conn.close()


def load_mode_toggles(db_path: str) -> ModeToggles:
    """Read the saved learn-mode toggles, falling back to the defaults."""
    defaults = ModeToggles()
    values = {}
    for field_name, key in TOGGLE_KEYS.items():
        stored = get_setting(db_path, key)
        if stored is None:
            values[field_name] = getattr(defaults, field_name)
        else:
            values[field_name] = stored == "1"
    return ModeToggles(**values)


def save_mode_toggles(db_path: str, toggles: ModeToggles) -> None:
    for field_name, key in TOGGLE_KEYS.items():
        set_setting(db_path, key, "1" if getattr(toggles, field_name) else "0")
