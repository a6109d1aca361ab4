"""Adaptive next-card scheduling for learn mode.

All functions here are pure: they take a ``SessionState`` (plus an explicit
random source and timestamp where needed) and return a new one. The learn
session controller owns the current value and is the only caller that swaps
it.
"""
import math
import random
from dataclasses import replace

from flashlearn.confidence import update_confidence
from flashlearn.models import Card, SessionState

POOL_FRACTION = 0.4


def pool_size(set_size: int) -> int:
    """Number of lowest-confidence cards eligible for the weighted draw."""
    return max(1, math.floor(set_size * POOL_FRACTION))


def sequential_next(current_index: int, set_size: int) -> int:
    if set_size <= 0:
        raise ValueError("cannot select from an empty working set")
    return (current_index + 1) % set_size


def weighted_pool(cards, rng: random.Random) -> list[int]:
    """Indices of the lowest-confidence cards, recomputed from scratch.

    Indices are shuffled before the stable sort so cards with equal
    confidence land in the pool in random order rather than deck order.
    """
    if not cards:
        raise ValueError("cannot select from an empty working set")
    indices = list(range(len(cards)))
    rng.shuffle(indices)
    indices.sort(key=lambda i: cards[i].confidence)
    return indices[:pool_size(len(cards))]


def weighted_next(cards, rng: random.Random) -> int:
    return rng.choice(weighted_pool(cards, rng))


def next_card_index(state: SessionState, rng: random.Random) -> int:
    if state.toggles.spaced_repetition:
        return weighted_next(state.cards, rng)
    return sequential_next(state.current_index, len(state.cards))


def apply_answer(state: SessionState, is_correct: bool, now: float,
                 card_index: int | None = None) -> SessionState:
    """Score one answer: card confidence, last-seen time, streak and total."""
    index = state.current_index if card_index is None else card_index
    if not 0 <= index < len(state.cards):
        raise IndexError(f"card index {index} out of range for {len(state.cards)} cards")
    card = state.cards[index]
    updated = replace(
        card,
        confidence=update_confidence(card.confidence, is_correct),
        last_seen=max(card.last_seen, now),
    )
    cards = state.cards[:index] + (updated,) + state.cards[index + 1:]
    if is_correct:
        return replace(state, cards=cards, streak=state.streak + 1,
                       correct_count=state.correct_count + 1)
    return replace(state, cards=cards, streak=0)


def advance(state: SessionState, rng: random.Random) -> SessionState:
    return replace(state, current_index=next_card_index(state, rng))


def shuffle(state: SessionState, rng: random.Random) -> SessionState:
    """Reorder the working set uniformly at random and restart at the top."""
    cards = list(state.cards)
    rng.shuffle(cards)
    return replace(state, cards=tuple(cards), current_index=0)


def start_state(cards: list[Card], toggles=None) -> SessionState:
    if not cards:
        raise ValueError("a learn session needs at least one card")
    if toggles is None:
        return SessionState(cards=tuple(cards))
    return SessionState(cards=tuple(cards), toggles=toggles)
