"""Seed the database with sample flashcard sets."""
import json
from pathlib import Path
from flashlearn.db import get_connection
from flashlearn.sets import create_set

CONTENT_DIR = Path(__file__).parent / "content"


def is_seeded(db_path: str) -> bool:
    """Check whether the database already holds any sets."""
    conn = get_connection(db_path)
    count = conn.execute("SELECT COUNT(*) FROM flashcard_sets").fetchone()[0]
    conn.close()
    return count > 0


def load_sample_sets() -> list[dict]:
    data = json.loads((CONTENT_DIR / "sample_sets.json").read_text())
    return data["sets"]


def seed_sample_sets(db_path: str) -> list[str]:
    """Insert the bundled sample sets. Returns the new set ids."""
    set_ids = []
    for sample in load_sample_sets():
        cards = [(c["term"], c["definition"], c.get("image_url")) for c in sample["cards"]]
        set_ids.append(create_set(db_path, sample["title"], sample.get("description", ""), cards))
    return set_ids


def seed_all(db_path: str) -> None:
    """Seed sample content on first run only."""
    if is_seeded(db_path):
        return
    seed_sample_sets(db_path)
