from __future__ import annotations

import logging

import pytest

from ue5qgen.config import GenerationConfig
from ue5qgen.review import (
    FilteringSession,
    MemoryPreferenceStore,
    SetFilterMode,
    SetSearchTerm,
    SetShowHistory,
    SetSortBy,
)
from ue5qgen.review.storage import PreferenceStore


class BrokenStore(MemoryPreferenceStore):
    def set(self, key, value):
        raise OSError("disk full")


@pytest.fixture
def config() -> GenerationConfig:
    return GenerationConfig(discipline="Technical Art", difficulty="Easy MC", creator_name="Sam")


def _ids(questions) -> list[str]:
    return [q.id for q in questions]


def test_initial_view(sample_questions, config):
    session = FilteringSession(sample_questions, config=config)
    view = session.view
    assert _ids(view.context) == ["q1", "q3", "q4"]
    assert view.counts == {"pending": 2, "accepted": 0, "rejected": 1, "all": 3}
    assert _ids(view.filtered) == ["q1", "q4"]
    assert _ids(view.unique) == ["q1", "q4"]
    assert session.current_question.id == "q1"


def test_stored_preferences_are_loaded(sample_questions, config):
    store = MemoryPreferenceStore({"ue5_pref_filter": "rejected", "ue5_pref_search": "texture"})
    session = FilteringSession(sample_questions, config=config, store=store)
    assert session.state.filter_mode == "rejected"
    assert _ids(session.view.unique) == ["q3"]


def test_tab_change_keeps_counts(sample_questions, config):
    session = FilteringSession(sample_questions, config=config)
    view = session.dispatch(SetFilterMode("rejected"))
    assert _ids(view.filtered) == ["q3"]
    assert view.counts["pending"] == 2


def test_preferences_written_to_store(sample_questions, config):
    store = MemoryPreferenceStore()
    session = FilteringSession(sample_questions, config=config, store=store)
    session.dispatch(SetSearchTerm("nanite"))
    session.dispatch(SetShowHistory(True))
    assert store.data["ue5_pref_search"] == "nanite"
    assert store.data["ue5_pref_history"] == "true"


def test_non_preference_action_does_not_write(sample_questions, config):
    store = MemoryPreferenceStore()
    session = FilteringSession(sample_questions, config=config, store=store)
    session.dispatch(SetSortBy("newest"))
    assert store.data == {}


def test_store_failure_is_logged_not_raised(sample_questions, config, caplog):
    session = FilteringSession(sample_questions, config=config, store=BrokenStore())
    with caplog.at_level(logging.WARNING):
        view = session.dispatch(SetSearchTerm("emitter"))
    assert session.state.search_term == "emitter"
    assert _ids(view.unique) == ["q4"]
    assert "Could not persist" in caplog.text


def test_discipline_change_resets_cursor(make_q, config):
    questions = [make_q(f"t{i}") for i in range(5)] + [make_q("b1", discipline="Blueprints")]
    session = FilteringSession(questions, config=config)
    session.step(3)
    assert session.state.review_index == 3
    assert session.current_question.id == "t3"

    view = session.set_config(GenerationConfig(discipline="Blueprints", difficulty="Easy MC"))
    assert session.state.review_index == 0
    assert _ids(view.unique) == ["b1"]


def test_step_is_clamped(make_q, config):
    session = FilteringSession([make_q("a"), make_q("b")], config=config)
    assert session.step(10).id == "b"
    assert session.step(-10).id == "a"


def test_empty_view_has_no_current_question(config):
    session = FilteringSession([], config=config)
    assert session.current_question is None
    assert session.step(1) is None


def test_review_mode_ignores_difficulty(sample_questions):
    cfg = GenerationConfig(discipline="Technical Art", difficulty="Hard T/F")
    session = FilteringSession(sample_questions, config=cfg)
    assert session.view.context == []
    view = session.set_app_mode("review")
    assert _ids(view.context) == ["q1", "q3", "q4"]


def test_history_included_outside_database_mode(sample_questions, make_q, config):
    historical = [make_q("h1", status="pending")]
    session = FilteringSession(sample_questions, historical, config=config, app_mode="database")
    assert "h1" not in _ids(session.view.context)
    view = session.dispatch(SetShowHistory(True))
    assert "h1" in _ids(view.context)
    view = session.set_app_mode("create")
    assert "h1" in _ids(view.context)


def test_language_variants_collapsed(export_rows):
    cfg = GenerationConfig(discipline="Technical Art", difficulty="Easy MC", language="French")
    session = FilteringSession(export_rows, config=cfg)
    assert _ids(session.view.unique) == ["a-fr"]


def test_set_questions_recomputes(sample_questions, make_q, config):
    session = FilteringSession(sample_questions, config=config)
    view = session.set_questions(sample_questions + [make_q("q5")])
    assert _ids(view.unique) == ["q1", "q4", "q5"]


def test_factory_reset(sample_questions, config):
    store = MemoryPreferenceStore()
    session = FilteringSession(sample_questions, config=config, store=store)
    session.dispatch(SetFilterMode("accepted"))
    session.dispatch(SetSearchTerm("lumen"))
    session.factory_reset()
    assert store.data == {}
    assert session.state.filter_mode == "pending"
    assert session.state.search_term == ""
    assert session.state.discipline == "Technical Art"


def test_store_interface_is_abstract():
    with pytest.raises(NotImplementedError):
        PreferenceStore().get("ue5_pref_search")


class UnreadableStore(MemoryPreferenceStore):
    def get(self, key):
        raise OSError("permission denied")


def test_unreadable_store_falls_back_to_defaults(sample_questions, config, caplog):
    with caplog.at_level(logging.WARNING):
        session = FilteringSession(sample_questions, config=config, store=UnreadableStore())
    assert session.state.filter_mode == "pending"
    assert _ids(session.view.unique) == ["q1", "q4"]
    assert "Could not load view preferences" in caplog.text
