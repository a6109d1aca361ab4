# tests/test_config.py
from flashlearn.config import get_setting, set_setting, load_mode_toggles, save_mode_toggles
from flashlearn.db import init_db
from flashlearn.models import ModeToggles


def test_get_setting_default(tmp_db):
    init_db(tmp_db)
    assert get_setting(tmp_db, "missing") is None
    assert get_setting(tmp_db, "missing", "x") == "x"


def test_set_setting_overwrites(tmp_db):
    init_db(tmp_db)
    set_setting(tmp_db, "k", "1")
    set_setting(tmp_db, "k", "2")
    assert get_setting(tmp_db, "k") == "2"


def test_load_mode_toggles_defaults(tmp_db):
    init_db(tmp_db)
    assert load_mode_toggles(tmp_db) == ModeToggles()


def test_mode_toggles_round_trip(tmp_db):
    init_db(tmp_db)
    toggles = ModeToggles(typing_mode=True, spaced_repetition=False, show_hints=False, show_images=True)
    save_mode_toggles(tmp_db, toggles)
    assert load_mode_toggles(tmp_db) == toggles
