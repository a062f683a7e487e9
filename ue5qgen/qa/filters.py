"""View filters over the question list.

Filtering runs in two stages. ``context_filtered_questions`` applies every
filter except status; tab counts are computed from that list so they keep
describing the whole context while one tab is selected.
``filtered_questions`` then applies the status tab.

Search is a case-insensitive substring match over ``SEARCH_FIELDS`` plus every
answer option.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Dict, Optional

from ..constants import FILTER_MODES, SORT_KEYS, STATUS_ACCEPTED, STATUS_PENDING, STATUS_REJECTED
from ..data.schemas import Question
from ._items import as_questions
from .difficulty import is_balanced, normalize_type, split_difficulty

SEARCH_FIELDS = ("unique_id", "question", "discipline", "difficulty", "source_excerpt")


def _matches_search(q: Question, term: str) -> bool:
    haystack = [getattr(q, name) for name in SEARCH_FIELDS]
    haystack.extend(q.options)
    return any(value and term in str(value).lower() for value in haystack)


def _matches_difficulty(q: Question, difficulty: Optional[str], question_type: Optional[str]) -> bool:
    if not difficulty or is_balanced(difficulty):
        return True
    want_level, want_type = split_difficulty(difficulty)
    have_level, embedded_type = split_difficulty(q.difficulty)
    if have_level != want_level:
        return False
    want_type = want_type or normalize_type(question_type)
    if want_type is None:
        return True
    return (embedded_type or normalize_type(q.type)) == want_type


def _matches_tags(q: Question, tags: Sequence[str]) -> bool:
    if not tags:
        return True
    return bool(set(q.tags) & set(tags))


def context_filtered_questions(
    questions: Sequence,
    historical: Sequence = (),
    include_history: bool = False,
    status_filter: str = "all",
    filter_by_creator: bool = False,
    search_term: str = "",
    creator_name: str = "",
    discipline: Optional[str] = None,
    difficulty: Optional[str] = None,
    language: Optional[str] = None,
    tags: Sequence[str] = (),
    question_type: Optional[str] = None,
) -> list[Question]:
    """Questions matching the current context.

    Applies source selection (session only, or session plus history), creator,
    discipline, tags, difficulty/type and search. ``language`` is accepted for
    parity with the view state but is resolved later by
    ``unique_filtered_questions``. A ``status_filter`` other than ``"all"`` is
    applied last through ``filtered_questions``.
    """
    session = as_questions(questions)
    source = session + as_questions(historical, name="historical") if include_history else session
    term = (search_term or "").strip().lower()

    out: list[Question] = []
    for q in source:
        if filter_by_creator and q.creator_name != creator_name:
            continue
        if discipline and q.discipline != discipline:
            continue
        if not _matches_tags(q, tags):
            continue
        if not _matches_difficulty(q, difficulty, question_type):
            continue
        if term and not _matches_search(q, term):
            continue
        out.append(q)

    if status_filter != "all":
        return filtered_questions(out, status_filter)
    return out


def filtered_questions(context: Sequence[Question], status_filter: str) -> list[Question]:
    """Apply the status tab: ``pending`` includes records with no status."""
    if status_filter not in FILTER_MODES:
        raise ValueError(f"Unknown status filter {status_filter!r}; expected one of {FILTER_MODES}")
    if status_filter == "all":
        return list(context)
    if status_filter == STATUS_PENDING:
        return [q for q in context if not q.status or q.status == STATUS_PENDING]
    return [q for q in context if q.status == status_filter]


def status_counts(context: Iterable[Question]) -> Dict[str, int]:
    """Tab counts over a context-filtered list."""
    counts = {STATUS_PENDING: 0, STATUS_ACCEPTED: 0, STATUS_REJECTED: 0, "all": 0}
    for q in context:
        counts["all"] += 1
        if not q.status or q.status == STATUS_PENDING:
            counts[STATUS_PENDING] += 1
        elif q.status in counts:
            counts[q.status] += 1
    return counts


_DIFFICULTY_RANK = {"easy": 0, "medium": 1, "hard": 2}


def _difficulty_rank(q: Question) -> tuple:
    level, qtype = split_difficulty(q.difficulty)
    return (_DIFFICULTY_RANK.get(level, len(_DIFFICULTY_RANK)), level, qtype or "")


def sort_questions(questions: Sequence[Question], sort_by: str = "default") -> list[Question]:
    """Stable sort for the database view; ``default`` keeps input order.

    Records without ``created_at`` sort after dated ones for both
    ``newest`` and ``oldest``.
    """
    if sort_by not in SORT_KEYS:
        raise ValueError(f"Unknown sort key {sort_by!r}; expected one of {SORT_KEYS}")
    items = list(questions)
    if sort_by == "default":
        return items
    if sort_by in ("newest", "oldest"):
        dated = [q for q in items if q.created_at]
        undated = [q for q in items if not q.created_at]
        dated.sort(key=lambda q: str(q.created_at), reverse=(sort_by == "newest"))
        return dated + undated
    if sort_by == "language":
        return sorted(items, key=lambda q: q.language.lower())
    if sort_by == "discipline":
        return sorted(items, key=lambda q: (q.discipline or "").lower())
    return sorted(items, key=_difficulty_rank)
