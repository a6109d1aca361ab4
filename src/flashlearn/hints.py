"""Hints and answer checking for learn mode."""


def get_hint(definition: str) -> str:
    """Initial letters of the definition followed by an ellipsis.

    "Photosynthesis" -> "P...", "light dependent reaction" -> "l d r...".
    """
    words = definition.split()
    if not words:
        return "..."
    if len(words) == 1:
        return words[0][0] + "..."
    return " ".join(w[0] for w in words) + "..."


def normalize_answer(text: str) -> str:
    return text.lower().strip()


def is_typed_answer_correct(user_answer: str, definition: str) -> bool:
    """Case-insensitive, whitespace-trimmed exact match. No fuzzy matching."""
    return normalize_answer(user_answer) == normalize_answer(definition)
