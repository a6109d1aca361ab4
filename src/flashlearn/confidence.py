"""Per-card confidence scoring."""
from flashlearn.models import Card

MIN_CONFIDENCE = 0
MAX_CONFIDENCE = 100
CORRECT_GAIN = 20
INCORRECT_PENALTY = 25


def clamped_increase(confidence: int) -> int:
    return min(MAX_CONFIDENCE, confidence + CORRECT_GAIN)


def clamped_decrease(confidence: int) -> int:
    return max(MIN_CONFIDENCE, confidence - INCORRECT_PENALTY)


def update_confidence(confidence: int, is_correct: bool) -> int:
    """Apply one answer to a confidence value.

    Wrong answers cost more than right answers earn, so recently missed cards
    stay low and keep getting picked.
    """
    if is_correct:
        return clamped_increase(confidence)
    return clamped_decrease(confidence)


def aggregate_confidence(cards) -> int:
    """Mean confidence over the working set, rounded half up."""
    cards = list(cards)
    if not cards:
        raise ValueError("aggregate_confidence needs at least one card")
    total = sum(card.confidence for card in cards)
    return int(total / len(cards) + 0.5)


def get_confidence_label(score: float) -> str:
    if score >= 80:
        return "MASTERED"
    elif score >= 60:
        return "FAMILIAR"
    elif score >= 40:
        return "LEARNING"
    return "STRUGGLING"


def get_confidence_color(score: float) -> str:
    if score >= 80:
        return "green"
    elif score >= 60:
        return "yellow"
    elif score >= 40:
        return "dark_orange"
    return "red"


def weakest_cards(cards: list[Card], limit: int = 5) -> list[Card]:
    """Lowest-confidence cards first, original order among equals."""
    return sorted(cards, key=lambda c: c.confidence)[:limit]
