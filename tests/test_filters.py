from __future__ import annotations

import pytest

from ue5qgen.qa.filters import (
    context_filtered_questions,
    filtered_questions,
    sort_questions,
    status_counts,
)


def _ids(questions) -> list[str]:
    return [q.id for q in questions]


class TestContextFilter:
    def test_no_filters_returns_everything(self, sample_questions):
        assert _ids(context_filtered_questions(sample_questions)) == ["q1", "q2", "q3", "q4"]

    def test_creator_filter(self, sample_questions):
        result = context_filtered_questions(sample_questions, filter_by_creator=True, creator_name="Sam")
        assert _ids(result) == ["q1", "q2"]

    def test_discipline_filter(self, sample_questions):
        result = context_filtered_questions(sample_questions, discipline="Lighting & Rendering")
        assert _ids(result) == ["q2"]

    @pytest.mark.parametrize(
        "difficulty,expected",
        [
            ("Easy MC", ["q1", "q3", "q4"]),
            ("Hard T/F", ["q2"]),
            ("Easy T/F", []),
            ("Balanced All", ["q1", "q2", "q3", "q4"]),
            ("Beginner", ["q1", "q3", "q4"]),
        ],
    )
    def test_difficulty_filter(self, sample_questions, difficulty, expected):
        assert _ids(context_filtered_questions(sample_questions, difficulty=difficulty)) == expected

    def test_type_applies_to_bare_level(self, sample_questions):
        result = context_filtered_questions(sample_questions, difficulty="Easy", question_type="True/False")
        assert result == []

    def test_split_difficulty_fields_match_combined_setting(self, make_q):
        questions = [
            make_q("1", difficulty="Easy", type="Multiple Choice"),
            make_q("2", difficulty="Hard", type="True/False"),
            make_q("3", difficulty="Easy", type="True/False"),
        ]
        assert _ids(context_filtered_questions(questions, difficulty="Easy MC")) == ["1"]

    def test_tags_use_or_semantics(self, sample_questions):
        result = context_filtered_questions(sample_questions, tags=["#Nanite", "#Lumen"])
        assert _ids(result) == ["q1", "q2"]

    def test_untagged_question_fails_tag_filter(self, sample_questions):
        result = context_filtered_questions(sample_questions, tags=["#Materials"])
        assert _ids(result) == ["q3"]

    def test_search_is_case_insensitive(self, sample_questions):
        assert _ids(context_filtered_questions(sample_questions, search_term="NANITE")) == ["q1"]

    def test_search_covers_source_excerpt_and_options(self, sample_questions, make_q):
        assert _ids(context_filtered_questions(sample_questions, search_term="particles")) == ["q4"]
        with_options = [make_q("o1", options=("Static Mesh", "Skeletal Mesh"))]
        assert _ids(context_filtered_questions(with_options, search_term="skeletal")) == ["o1"]

    def test_search_matches_unique_id(self, sample_questions):
        assert _ids(context_filtered_questions(sample_questions, search_term="q3")) == ["q3"]

    def test_no_match_is_empty_list(self, sample_questions):
        assert context_filtered_questions(sample_questions, search_term="zzz-nothing") == []

    def test_history_is_opt_in(self, sample_questions, make_q):
        historical = [make_q("h1")]
        assert "h1" not in _ids(context_filtered_questions(sample_questions, historical))
        result = context_filtered_questions(sample_questions, historical, include_history=True)
        assert _ids(result)[-1] == "h1"

    def test_status_filter_argument_is_applied_last(self, sample_questions):
        result = context_filtered_questions(sample_questions, status_filter="accepted")
        assert _ids(result) == ["q2"]

    def test_non_list_input_raises(self):
        with pytest.raises(TypeError):
            context_filtered_questions("not a list")


class TestStatusFilter:
    def test_pending_includes_missing_status(self, sample_questions):
        assert _ids(filtered_questions(sample_questions, "pending")) == ["q1", "q4"]

    def test_exact_status(self, sample_questions):
        assert _ids(filtered_questions(sample_questions, "rejected")) == ["q3"]

    def test_all_passes_through(self, sample_questions):
        assert filtered_questions(sample_questions, "all") == sample_questions

    def test_unknown_status_raises(self, sample_questions):
        with pytest.raises(ValueError):
            filtered_questions(sample_questions, "archived")

    def test_context_count_bounds_every_tab(self, sample_questions):
        context = context_filtered_questions(sample_questions, discipline="Technical Art")
        for mode in ("pending", "accepted", "rejected"):
            assert len(context) >= len(filtered_questions(context, mode))


def test_status_counts_ignore_active_tab(sample_questions):
    context = context_filtered_questions(sample_questions)
    assert status_counts(context) == {"pending": 2, "accepted": 1, "rejected": 1, "all": 4}
    accepted_only = filtered_questions(context, "accepted")
    assert len(accepted_only) == 1
    # counts come from the context, not from the tab view
    assert status_counts(context)["pending"] == 2


class TestSort:
    def test_default_keeps_order(self, sample_questions):
        assert sort_questions(sample_questions) == sample_questions

    def test_newest_and_oldest_put_undated_last(self, sample_questions):
        assert _ids(sort_questions(sample_questions, "newest")) == ["q2", "q1", "q3", "q4"]
        assert _ids(sort_questions(sample_questions, "oldest")) == ["q3", "q1", "q2", "q4"]

    def test_difficulty_orders_easy_before_hard(self, sample_questions):
        assert _ids(sort_questions(sample_questions, "difficulty")) == ["q1", "q3", "q4", "q2"]

    def test_discipline_sort_is_stable(self, sample_questions):
        assert _ids(sort_questions(sample_questions, "discipline")) == ["q2", "q1", "q3", "q4"]

    def test_unknown_key_raises(self, sample_questions):
        with pytest.raises(ValueError):
            sort_questions(sample_questions, "popularity")


def test_newest_reads_original_timestamp_keys():
    rows = [
        {"id": "old", "question": "Older question?", "dateAdded": "2024-03-01T10:00:00.000Z"},
        {"id": "new", "question": "Newer question?", "dateAdded": "2025-03-01T10:00:00.000Z"},
        {"id": "legacy", "question": "Legacy question?", "created": "2024-06-01T10:00:00.000Z"},
    ]
    assert _ids(sort_questions(context_filtered_questions(rows), "newest")) == ["new", "legacy", "old"]
