"""Flashcard set storage: sets, their ordered cards, and sharing."""
import logging
import uuid
from datetime import datetime

from flashlearn.db import get_connection
from flashlearn.models import Card, FlashcardSet

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


def create_set(db_path: str, title: str, description: str = "", cards=()) -> str:
    """Create a set and its cards in display order. ``cards`` holds
    ``(term, definition)`` or ``(term, definition, image_url)`` tuples."""
    set_id = _new_id()
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO flashcard_sets (id, title, description, is_public, created_at) VALUES (?, ?, ?, 0, ?)",
        (set_id, title, description, datetime.now().isoformat()),
    )
    for position, card in enumerate(cards):
        term, definition = card[0], card[1]
        image_url = card[2] if len(card) > 2 else None
        conn.execute(
            "INSERT INTO flashcards (id, set_id, term, definition, image_url, position) VALUES (?, ?, ?, ?, ?, ?)",
            (_new_id(), set_id, term, definition, image_url, position),
        )
    conn.commit()
    conn.close()
    logger.info("Created set %s (%r) with %d cards", set_id, title, len(cards))
    return set_id


def add_card(db_path: str, set_id: str, term: str, definition: str, image_url: str | None = None) -> str:
    """Append a card after the set's last position."""
    card_id = _new_id()
    conn = get_connection(db_path)
    next_position = conn.execute(
        "SELECT COALESCE(MAX(position) + 1, 0) FROM flashcards WHERE set_id = ?", (set_id,)
    ).fetchone()[0]
    conn.execute(
        "INSERT INTO flashcards (id, set_id, term, definition, image_url, position) VALUES (?, ?, ?, ?, ?, ?)",
        (card_id, set_id, term, definition, image_url, next_position),
    )
    conn.commit()
    conn.close()
    return card_id


def get_set_title(db_path: str, set_id: str) -> str | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT title FROM flashcard_sets WHERE id = ?", (set_id,)).fetchone()
    conn.close()
    return row["title"] if row else None


def get_cards_for_set(db_path: str, set_id: str) -> list[Card]:
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT * FROM flashcards WHERE set_id = ? ORDER BY position",
        (set_id,),
    ).fetchall()
    conn.close()
    return [
        Card(
            id=r["id"], term=r["term"], definition=r["definition"],
            image_url=r["image_url"], position=r["position"],
        )
        for r in rows
    ]


def list_sets(db_path: str) -> list[FlashcardSet]:
    conn = get_connection(db_path)
    rows = conn.execute(
        """SELECT s.*, COUNT(f.id) as card_count
        FROM flashcard_sets s
        LEFT JOIN flashcards f ON f.set_id = s.id
        GROUP BY s.id
        ORDER BY s.created_at DESC, s.title"""
    ).fetchall()
    conn.close()
    return [
        FlashcardSet(
            id=r["id"], title=r["title"], description=r["description"] or "",
            is_public=bool(r["is_public"]), card_count=r["card_count"],
            created_at=r["created_at"],
        )
        for r in rows
    ]


def delete_set(db_path: str, set_id: str) -> bool:
    """Delete a set and, by cascade, all of its flashcards."""
    conn = get_connection(db_path)
    cursor = conn.execute("DELETE FROM flashcard_sets WHERE id = ?", (set_id,))
    conn.commit()
    conn.close()
    deleted = cursor.rowcount > 0
    if deleted:
        logger.info("Deleted set %s", set_id)
    return deleted


def set_public(db_path: str, set_id: str, is_public: bool) -> bool:
    conn = get_connection(db_path)
    cursor = conn.execute(
        "UPDATE flashcard_sets SET is_public = ? WHERE id = ?", (int(is_public), set_id)
    )
    conn.commit()
    conn.close()
    return cursor.rowcount > 0


def is_public(db_path: str, set_id: str) -> bool:
    conn = get_connection(db_path)
    row = conn.execute("SELECT is_public FROM flashcard_sets WHERE id = ?", (set_id,)).fetchone()
    conn.close()
    return bool(row and row["is_public"])


def share_set(db_path: str, set_id: str, base_url: str) -> str | None:
    """Return the study link for a set, making the set public first.

    Returns None when the set does not exist.
    """
    if get_set_title(db_path, set_id) is None:
        return None
    if not is_public(db_path, set_id):
        set_public(db_path, set_id, True)
    return f"{base_url.rstrip('/')}/study/{set_id}"


def find_set_id(db_path: str, ref: str) -> str | None:
    """Resolve a set by exact id, then case-insensitive title, then id prefix.

    The prefix match is literal and case-sensitive; ``%`` and ``_`` are not
    wildcards.
    """
    ref = ref.strip()
    if not ref:
        return None
    lookups = (
        ("SELECT id FROM flashcard_sets WHERE id = ?", (ref,)),
        ("SELECT id FROM flashcard_sets WHERE LOWER(title) = LOWER(?) ORDER BY created_at LIMIT 1", (ref,)),
        ("SELECT id FROM flashcard_sets WHERE substr(id, 1, ?) = ? ORDER BY created_at LIMIT 1", (len(ref), ref)),
    )
    conn = get_connection(db_path)
    row = None
    for query, params in lookups:
        row = conn.execute(query, params).fetchone()
        if row:
            break
    conn.close()
    return row["id"] if row else None
