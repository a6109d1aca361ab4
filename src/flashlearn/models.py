"""Data classes for the flashcard domain model."""
from dataclasses import dataclass, field
from typing import Optional

DEFAULT_CONFIDENCE = 50


@dataclass(frozen=True)
class Card:
    id: str
    term: str
    definition: str
    image_url: Optional[str] = None
    position: int = 0
    # Session-scoped, never written back to the store
    confidence: int = DEFAULT_CONFIDENCE
    last_seen: float = 0.0


@dataclass
class FlashcardSet:
    id: str
    title: str
    description: str = ""
    is_public: bool = False
    card_count: int = 0
    created_at: Optional[str] = None


@dataclass
class Question:
    question_type: str
    question_text: str
    correct_answer: str
    options: list[str] = field(default_factory=list)
    explanation: str = ""


@dataclass(frozen=True)
class ModeToggles:
    typing_mode: bool = False
    spaced_repetition: bool = True
    show_hints: bool = True
    show_images: bool = True


@dataclass(frozen=True)
class SessionState:
    """Everything a learn session mutates, as one immutable value.

    ``cards`` is the working set: fixed length for the session, reordered only
    by shuffling. ``current_index`` always points at a valid card.
    """
    cards: tuple[Card, ...]
    current_index: int = 0
    streak: int = 0
    correct_count: int = 0
    toggles: ModeToggles = ModeToggles()

    @property
    def current_card(self) -> Card:
        return self.cards[self.current_index]
