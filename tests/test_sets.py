# tests/test_sets.py
from flashlearn.db import init_db, get_connection
from flashlearn.sets import (
    create_set, add_card, get_set_title, get_cards_for_set, list_sets,
    delete_set, set_public, is_public, share_set, find_set_id,
)


def test_create_set_and_fetch_title(tmp_db):
    init_db(tmp_db)
    set_id = create_set(tmp_db, "Biology", "Plants", [("Stomata", "Leaf pores")])
    assert get_set_title(tmp_db, set_id) == "Biology"


def test_get_set_title_missing(tmp_db):
    init_db(tmp_db)
    assert get_set_title(tmp_db, "missing") is None


def test_cards_come_back_in_position_order(tmp_db):
    init_db(tmp_db)
    set_id = create_set(tmp_db, "Order", cards=[("a", "1"), ("b", "2"), ("c", "3")])
    # Scramble stored positions
    conn = get_connection(tmp_db)
    conn.execute("UPDATE flashcards SET position = 10 WHERE term = 'a'")
    conn.commit()
    conn.close()
    cards = get_cards_for_set(tmp_db, set_id)
    assert [c.term for c in cards] == ["b", "c", "a"]


def test_cards_have_no_learning_state_from_store(tmp_db):
    init_db(tmp_db)
    set_id = create_set(tmp_db, "S", cards=[("a", "1", "http://img/a.png")])
    card = get_cards_for_set(tmp_db, set_id)[0]
    assert card.image_url == "http://img/a.png"
    assert card.confidence == 50
    assert card.last_seen == 0.0


def test_add_card_appends(tmp_db):
    init_db(tmp_db)
    set_id = create_set(tmp_db, "S", cards=[("a", "1")])
    add_card(tmp_db, set_id, "b", "2")
    cards = get_cards_for_set(tmp_db, set_id)
    assert [c.term for c in cards] == ["a", "b"]
    assert cards[1].position == 1


def test_add_card_to_empty_set(tmp_db):
    init_db(tmp_db)
    set_id = create_set(tmp_db, "Empty")
    add_card(tmp_db, set_id, "a", "1")
    assert get_cards_for_set(tmp_db, set_id)[0].position == 0


def test_list_sets_counts_cards(tmp_db):
    init_db(tmp_db)
    full = create_set(tmp_db, "Full", cards=[("a", "1"), ("b", "2")])
    empty = create_set(tmp_db, "Empty")
    counts = {s.id: s.card_count for s in list_sets(tmp_db)}
    assert counts == {full: 2, empty: 0}


def test_delete_set_cascades(tmp_db):
    init_db(tmp_db)
    set_id = create_set(tmp_db, "Gone", cards=[("a", "1"), ("b", "2")])
    assert delete_set(tmp_db, set_id)
    assert get_set_title(tmp_db, set_id) is None
    conn = get_connection(tmp_db)
    assert conn.execute("SELECT COUNT(*) FROM flashcards").fetchone()[0] == 0
    conn.close()


def test_delete_missing_set(tmp_db):
    init_db(tmp_db)
    assert not delete_set(tmp_db, "missing")


def test_visibility_toggle(tmp_db):
    init_db(tmp_db)
    set_id = create_set(tmp_db, "S")
    assert not is_public(tmp_db, set_id)
    assert set_public(tmp_db, set_id, True)
    assert is_public(tmp_db, set_id)
    set_public(tmp_db, set_id, False)
    assert not is_public(tmp_db, set_id)


def test_share_set_makes_public(tmp_db):
    init_db(tmp_db)
    set_id = create_set(tmp_db, "S")
    url = share_set(tmp_db, set_id, "http://localhost:8080/")
    assert url == f"http://localhost:8080/study/{set_id}"
    assert is_public(tmp_db, set_id)


def test_share_missing_set(tmp_db):
    init_db(tmp_db)
    assert share_set(tmp_db, "missing", "http://x") is None


def test_find_set_id(tmp_db):
    init_db(tmp_db)
    set_id = create_set(tmp_db, "European Capitals")
    assert find_set_id(tmp_db, "european capitals") == set_id
    assert find_set_id(tmp_db, set_id) == set_id
    assert find_set_id(tmp_db, set_id[:8]) == set_id
    assert find_set_id(tmp_db, "nope") is None
    assert find_set_id(tmp_db, "  ") is None


def test_find_set_id_prefers_title_over_id_prefix(tmp_db):
    init_db(tmp_db)
    first_id = create_set(tmp_db, "European Capitals")
    ref = first_id[:3].upper()
    second_id = create_set(tmp_db, ref)
    assert find_set_id(tmp_db, ref) == second_id


def test_find_set_id_treats_wildcards_literally(tmp_db):
    init_db(tmp_db)
    create_set(tmp_db, "European Capitals")
    assert find_set_id(tmp_db, "%") is None
    assert find_set_id(tmp_db, "_") is None
    assert find_set_id(tmp_db, "European%") is None
