from __future__ import annotations

import json

from ue5qgen.constants import STORAGE_KEYS
from ue5qgen.review.storage import JsonPreferenceStore, MemoryPreferenceStore


def test_missing_keys_give_defaults():
    prefs = MemoryPreferenceStore().load_preferences()
    assert prefs == {"search_term": "", "filter_mode": "pending", "show_history": False}


def test_save_uses_fixed_keys_and_string_booleans():
    store = MemoryPreferenceStore()
    store.save_preferences("nanite", "accepted", True)
    assert store.data == {
        STORAGE_KEYS["PREF_SEARCH"]: "nanite",
        STORAGE_KEYS["PREF_FILTER"]: "accepted",
        STORAGE_KEYS["PREF_HISTORY"]: "true",
    }
    assert store.load_preferences() == {"search_term": "nanite", "filter_mode": "accepted", "show_history": True}


def test_invalid_stored_mode_falls_back_to_pending():
    store = MemoryPreferenceStore({"ue5_pref_filter": "archived", "ue5_pref_history": "yes"})
    prefs = store.load_preferences()
    assert prefs["filter_mode"] == "pending"
    assert prefs["show_history"] is False


def test_json_store_persists_across_instances(tmp_path):
    path = tmp_path / "prefs" / "preferences.json"
    JsonPreferenceStore(path).save_preferences("lumen", "rejected", False)
    assert json.loads(path.read_text(encoding="utf-8"))["ue5_pref_search"] == "lumen"
    prefs = JsonPreferenceStore(path).load_preferences()
    assert prefs == {"search_term": "lumen", "filter_mode": "rejected", "show_history": False}


def test_json_store_corrupt_file_starts_empty(tmp_path, caplog):
    path = tmp_path / "preferences.json"
    path.write_text("{not json", encoding="utf-8")
    store = JsonPreferenceStore(path)
    assert store.get("ue5_pref_search") is None
    assert "corrupt" in caplog.text


def test_json_store_clear_removes_file(tmp_path):
    path = tmp_path / "preferences.json"
    store = JsonPreferenceStore(path)
    store.set("ue5_pref_search", "x")
    assert path.exists()
    store.clear()
    assert not path.exists()
    assert store.get("ue5_pref_search") is None


def test_json_store_invalid_utf8_starts_empty(tmp_path, caplog):
    path = tmp_path / "preferences.json"
    path.write_bytes(b'{"ue5_pref_search": "\xff\xfe"}')
    store = JsonPreferenceStore(path)
    assert store.load_preferences()["search_term"] == ""
    assert "unreadable or corrupt" in caplog.text


def test_json_store_unreadable_path_starts_empty(tmp_path):
    # a directory where the file should be cannot be read as text
    path = tmp_path / "preferences.json"
    path.mkdir()
    assert JsonPreferenceStore(path).get("ue5_pref_filter") is None
