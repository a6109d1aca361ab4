# tests/test_scheduler.py
import random

import pytest

from flashlearn import scheduler
from flashlearn.models import Card, ModeToggles, SessionState


def _cards(*confidences):
    return tuple(Card(id=str(i), term=f"t{i}", definition=f"d{i}", confidence=c) for i, c in enumerate(confidences))


def test_sequential_next_advances():
    assert scheduler.sequential_next(0, 5) == 1
    assert scheduler.sequential_next(2, 5) == 3


def test_sequential_next_wraps_around():
    assert scheduler.sequential_next(4, 5) == 0


def test_sequential_next_empty_set_is_contract_violation():
    with pytest.raises(ValueError):
        scheduler.sequential_next(0, 0)


def test_pool_size():
    assert scheduler.pool_size(1) == 1
    assert scheduler.pool_size(2) == 1
    assert scheduler.pool_size(5) == 2
    assert scheduler.pool_size(10) == 4
    assert scheduler.pool_size(40) == 16


def test_weighted_pool_is_two_lowest():
    cards = _cards(10, 20, 30, 80, 90)
    for seed in range(50):
        assert set(scheduler.weighted_pool(cards, random.Random(seed))) == {0, 1}


def test_weighted_next_never_picks_high_confidence():
    cards = _cards(10, 20, 30, 80, 90)
    rng = random.Random(7)
    picks = {scheduler.weighted_next(cards, rng) for _ in range(200)}
    assert picks == {0, 1}


def test_weighted_pool_finds_low_cards_anywhere_in_deck():
    cards = _cards(90, 80, 20, 30, 10)
    assert set(scheduler.weighted_pool(cards, random.Random(1))) == {2, 4}


def test_single_card_always_eligible():
    cards = _cards(100)
    rng = random.Random(3)
    assert scheduler.weighted_pool(cards, rng) == [0]
    assert scheduler.weighted_next(cards, rng) == 0


def test_weighted_pool_empty_is_contract_violation():
    with pytest.raises(ValueError):
        scheduler.weighted_pool((), random.Random(0))


def test_ties_are_broken_randomly():
    """With all cards equal, different draws put different cards in the pool."""
    cards = _cards(*([50] * 10))
    pools = {tuple(sorted(scheduler.weighted_pool(cards, random.Random(seed)))) for seed in range(30)}
    assert len(pools) > 1


def test_weighted_selection_is_reproducible_with_seed():
    cards = _cards(*([50] * 10))
    first = [scheduler.weighted_next(cards, random.Random(42)) for _ in range(5)]
    second = [scheduler.weighted_next(cards, random.Random(42)) for _ in range(5)]
    assert first == second


def test_next_card_index_respects_toggle():
    cards = _cards(10, 20, 30, 80, 90)
    state = SessionState(cards=cards, current_index=4, toggles=ModeToggles(spaced_repetition=False))
    assert scheduler.next_card_index(state, random.Random(0)) == 0
    state = SessionState(cards=cards, current_index=4)
    assert scheduler.next_card_index(state, random.Random(0)) in {0, 1}


def test_apply_answer_correct():
    state = SessionState(cards=_cards(50, 50), current_index=1, streak=2, correct_count=3)
    new = scheduler.apply_answer(state, True, now=100.0)
    assert new.cards[1].confidence == 70
    assert new.cards[1].last_seen == 100.0
    assert new.cards[0].confidence == 50
    assert new.streak == 3
    assert new.correct_count == 4
    # the old value is untouched
    assert state.cards[1].confidence == 50


def test_apply_answer_incorrect_resets_streak():
    state = SessionState(cards=_cards(50, 50), streak=17, correct_count=17)
    new = scheduler.apply_answer(state, False, now=5.0)
    assert new.cards[0].confidence == 25
    assert new.streak == 0
    assert new.correct_count == 17
    assert new.cards[0].last_seen == 5.0


def test_apply_answer_explicit_card_index():
    state = SessionState(cards=_cards(50, 50, 50))
    new = scheduler.apply_answer(state, False, now=1.0, card_index=2)
    assert new.cards[2].confidence == 25
    assert new.cards[0].confidence == 50


def test_apply_answer_rejects_out_of_range_index():
    state = SessionState(cards=_cards(50, 50, 50))
    with pytest.raises(IndexError):
        scheduler.apply_answer(state, True, now=1.0, card_index=-1)
    with pytest.raises(IndexError):
        scheduler.apply_answer(state, True, now=1.0, card_index=3)
    assert len(state.cards) == 3


def test_last_seen_never_goes_backwards():
    card = Card(id="a", term="t", definition="d", last_seen=200.0)
    state = SessionState(cards=(card,))
    new = scheduler.apply_answer(state, True, now=150.0)
    assert new.cards[0].last_seen == 200.0


def test_mastered_card_leaves_the_pool():
    """Ten cards at 50; one answered right five times ends at 100 and drops out."""
    state = SessionState(cards=_cards(*([50] * 10)), current_index=3)
    history = []
    for i in range(5):
        state = scheduler.apply_answer(state, True, now=float(i))
        history.append(state.cards[3].confidence)
    assert history == [70, 90, 100, 100, 100]
    for seed in range(50):
        assert 3 not in scheduler.weighted_pool(state.cards, random.Random(seed))


def test_selection_sees_update_for_answered_card():
    """A wrong answer drops the card to the bottom and it becomes the only candidate."""
    state = SessionState(cards=_cards(60, 60, 60, 60, 50))
    state = scheduler.apply_answer(state, False, now=1.0, card_index=0)
    # pool of 2: card 0 at 35 and card 4 at 50
    assert set(scheduler.weighted_pool(state.cards, random.Random(0))) == {0, 4}


def test_shuffle_keeps_confidence_and_resets_index():
    state = SessionState(cards=_cards(10, 20, 30, 40, 50, 60), current_index=4)
    new = scheduler.shuffle(state, random.Random(9))
    assert new.current_index == 0
    assert sorted(new.cards, key=lambda c: c.id) == sorted(state.cards, key=lambda c: c.id)
    assert {c.id: c.confidence for c in new.cards} == {c.id: c.confidence for c in state.cards}


def test_advance_moves_current_index():
    state = SessionState(cards=_cards(50, 50, 50), toggles=ModeToggles(spaced_repetition=False))
    assert scheduler.advance(state, random.Random(0)).current_index == 1


def test_start_state_rejects_empty():
    with pytest.raises(ValueError):
        scheduler.start_state([])
