"""Import flashcard sets from files."""
import csv
import json
import logging
from pathlib import Path

from flashlearn.sets import create_set

logger = logging.getLogger(__name__)

TEXT_SEPARATORS = ("\t", " - ", " : ", ";")


def _from_records(records) -> list[tuple]:
    cards = []
    for rec in records:
        if isinstance(rec, dict):
            term = rec.get("term") or rec.get("front") or rec.get("question")
            definition = rec.get("definition") or rec.get("back") or rec.get("answer")
            image_url = rec.get("image_url") or None
        elif isinstance(rec, (list, tuple)) and len(rec) >= 2:
            term, definition = rec[0], rec[1]
            image_url = rec[2] if len(rec) > 2 and rec[2] else None
        else:
            continue
        if term and definition:
            cards.append((str(term).strip(), str(definition).strip(), image_url))
    return cards


def _from_text(text: str) -> list[tuple]:
    cards = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        for sep in TEXT_SEPARATORS:
            if sep in line:
                term, definition = line.split(sep, 1)
                if term.strip() and definition.strip():
                    cards.append((term.strip(), definition.strip(), None))
                break
    return cards


def read_cards(file_path: str) -> list[tuple]:
    """Read ``(term, definition, image_url)`` tuples from a file."""
    path = Path(file_path)
    suffix = path.suffix.lower()

    if suffix == ".csv":
        with path.open(newline="", encoding="utf-8-sig") as f:
            rows = list(csv.reader(f))
        if rows and [c.strip().lower() for c in rows[0][:2]] in (["term", "definition"], ["front", "back"]):
            header = [c.strip().lower() for c in rows[0]]
            return _from_records(dict(zip(header, r)) for r in rows[1:])
        return _from_records(rows)
    elif suffix == ".json":
        data = json.loads(path.read_text())
        if isinstance(data, dict):
            data = data.get("cards", [])
        return _from_records(data)
    elif suffix in (".yaml", ".yml"):
        import yaml
        data = yaml.safe_load(path.read_text())
        if isinstance(data, dict):
            data = data.get("cards", [])
        return _from_records(data or [])
    else:
        return _from_text(path.read_text())


def import_file(db_path: str, file_path: str, title: str | None = None, description: str = "") -> dict:
    """Create a new set from a file. Title defaults to the file name."""
    cards = read_cards(file_path)
    if not cards:
        raise ValueError(f"No flashcards found in {Path(file_path).name}")
    title = title or Path(file_path).stem.replace("_", " ").strip()
    set_id = create_set(db_path, title, description, cards)
    logger.info("Imported %d cards from %s", len(cards), file_path)
    return {"set_id": set_id, "title": title, "count": len(cards)}
