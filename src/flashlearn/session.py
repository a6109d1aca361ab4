"""Learn-mode study sessions.

``init_session`` loads a set's cards and attaches fresh learning metadata.
``LearnSession`` owns the resulting ``SessionState`` for the life of one study
session and is the single place where it changes.
"""
import logging
import random
import sqlite3
import threading
import time
from dataclasses import replace

from flashlearn import scheduler
from flashlearn.confidence import aggregate_confidence
from flashlearn.errors import EmptySetError, SetNotFoundError
from flashlearn.hints import get_hint, is_typed_answer_correct
from flashlearn.models import DEFAULT_CONFIDENCE, Card, ModeToggles, SessionState
from flashlearn.sets import get_cards_for_set, get_set_title

logger = logging.getLogger(__name__)


def init_session(db_path: str, set_id: str, clock=time.time) -> tuple[str, list[Card]]:
    """Load a set for studying.

    Returns ``(title, working_set)`` where every card starts at the neutral
    confidence and ``last_seen`` = now. Raises SetNotFoundError when the set is
    missing or the store cannot be read, EmptySetError when it has no cards.
    """
    try:
        title = get_set_title(db_path, set_id)
        if title is None:
            raise SetNotFoundError(set_id)
        cards = get_cards_for_set(db_path, set_id)
    except sqlite3.Error as e:
        logger.error("Failed to load set %s: %s", set_id, e)
        raise SetNotFoundError(set_id) from e
    if not cards:
        raise EmptySetError(set_id)
    now = clock()
    working_set = [replace(c, confidence=DEFAULT_CONFIDENCE, last_seen=now) for c in cards]
    logger.info("Loaded %d cards for set %s", len(working_set), set_id)
    return title, working_set


class LearnSession:
    """Controller for one learn-mode session.

    Answers are scored immediately; moving on to the next card happens after
    ``advance_delay`` seconds on a timer that ``close()`` cancels.
    """

    def __init__(self, cards: list[Card], title: str = "", toggles: ModeToggles | None = None,
                 rng: random.Random | None = None, clock=time.time, advance_delay: float = 1.0):
        self.title = title
        self.state = scheduler.start_state(cards, toggles)
        self._rng = rng if rng is not None else random.Random()
        self._clock = clock
        self._advance_delay = advance_delay
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._closed = False

    @classmethod
    def start(cls, db_path: str, set_id: str, **kwargs) -> "LearnSession":
        clock = kwargs.get("clock", time.time)
        title, cards = init_session(db_path, set_id, clock=clock)
        return cls(cards, title=title, **kwargs)

    @property
    def current_card(self) -> Card:
        return self.state.current_card

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def advance_pending(self) -> bool:
        return self._timer is not None

    def aggregate_confidence(self) -> int:
        return aggregate_confidence(self.state.cards)

    def hint(self) -> str | None:
        if not self.state.toggles.show_hints:
            return None
        return get_hint(self.current_card.definition)

    def image_url(self) -> str | None:
        if not self.state.toggles.show_images:
            return None
        return self.current_card.image_url

    def check_typed_answer(self, text: str) -> bool:
        return is_typed_answer_correct(text, self.current_card.definition)

    def answer(self, is_correct: bool, card_index: int | None = None) -> Card:
        """Score the current (or given) card and schedule the advance."""
        with self._lock:
            if self._closed:
                raise RuntimeError("session is closed")
            if self._timer is not None:
                raise RuntimeError("previous answer is still being shown")
            index = self.state.current_index if card_index is None else card_index
            self.state = scheduler.apply_answer(self.state, is_correct, self._clock(), index)
            card = self.state.cards[index]
            logger.debug("Card %s answered %s, confidence now %d",
                         card.id, "correctly" if is_correct else "incorrectly", card.confidence)
            timer = threading.Timer(self._advance_delay, self._fire_advance)
            timer.args = (timer,)
            timer.daemon = True
            self._timer = timer
            timer.start()
            return card

    def _fire_advance(self, timer: threading.Timer) -> None:
        with self._lock:
            if self._closed or self._timer is not timer:
                return
            self._timer = None
            self.state = scheduler.advance(self.state, self._rng)

    def advance_now(self) -> None:
        """Skip the presentation pause and move on immediately."""
        timer = self._timer
        if timer is None:
            return
        timer.cancel()
        self._fire_advance(timer)

    def wait_for_advance(self, timeout: float | None = None) -> None:
        timer = self._timer
        if timer is not None:
            timer.join(timeout)

    def shuffle(self) -> None:
        with self._lock:
            if self._closed:
                raise RuntimeError("session is closed")
            self._cancel_timer()
            self.state = scheduler.shuffle(self.state, self._rng)
            logger.debug("Shuffled %d cards", len(self.state.cards))

    def set_toggle(self, name: str, value: bool) -> None:
        if name not in ModeToggles.__dataclass_fields__:
            raise ValueError(f"Unknown toggle: {name}")
        with self._lock:
            if self._closed:
                raise RuntimeError("session is closed")
            self.state = replace(self.state, toggles=replace(self.state.toggles, **{name: value}))

    def close(self) -> None:
        with self._lock:
            self._cancel_timer()
            self._closed = True
        logger.info("Closed learn session %r (confidence %d%%)", self.title, self.aggregate_confidence())

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False
