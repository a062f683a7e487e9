"""Quota enforcement run before each generation request.

A batch is refused once the total target or the selected difficulty category
is full, and shrunk (``warning=True``) when it would overshoot the remaining
room. Rejected questions never count toward a quota; a missing status counts
as pending.

Two requests that both read the quota before either result lands can
together overshoot it. Callers re-run ``validate_generation`` against the
latest in-memory list immediately before each request; nothing here
serialises concurrent callers.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Dict, Optional

from .constants import (
    CATEGORY_KEYS,
    IMBALANCE_THRESHOLD,
    STATUS_REJECTED,
    TARGET_PER_CATEGORY,
    TARGET_TOTAL,
)
from .data.schemas import Question, QuotaCheck
from .qa._items import as_questions
from .qa.difficulty import (
    MULTIPLE_CHOICE,
    TRUE_FALSE,
    category_key,
    is_balanced,
    normalize_type,
    split_difficulty,
)

logger = logging.getLogger(__name__)


def _counted(questions: Sequence[Question]) -> list[Question]:
    return [q for q in questions if q.status != STATUS_REJECTED]


def _in_category(q: Question, difficulty: str) -> bool:
    target = category_key(difficulty)
    if target is not None:
        return category_key(q.difficulty, q.type) == target
    return split_difficulty(q.difficulty)[0] == split_difficulty(difficulty)[0]


def _question_type(q: Question) -> Optional[str]:
    own = normalize_type(q.type)
    if own is not None:
        return own
    key = category_key(q.difficulty)
    if key is None:
        return None
    return MULTIPLE_CHOICE if key.endswith("MC") else TRUE_FALSE


def category_counts(questions: Sequence) -> Dict[str, int]:
    """Non-rejected question count for each quota category."""
    qs = _counted(as_questions(questions))
    return {cat: sum(1 for q in qs if _in_category(q, cat)) for cat in CATEGORY_KEYS}


def discipline_counts(questions: Sequence) -> Dict[str, Dict[str, int]]:
    """Nested ``{discipline: {difficulty: count}}`` over non-rejected questions."""
    counts: Dict[str, Dict[str, int]] = {}
    for q in _counted(as_questions(questions)):
        discipline = q.discipline or "Unknown"
        difficulty = q.difficulty or "Unknown"
        per = counts.setdefault(discipline, {})
        per[difficulty] = per.get(difficulty, 0) + 1
    return counts


def is_total_quota_met(questions: Sequence, target_total: int = TARGET_TOTAL) -> bool:
    return len(_counted(as_questions(questions))) >= target_total


def remaining_quota(
    difficulty: str,
    questions: Sequence,
    target_per_category: int = TARGET_PER_CATEGORY,
) -> int:
    """Slots left in ``difficulty``'s category, never negative."""
    qs = _counted(as_questions(questions))
    current = sum(1 for q in qs if _in_category(q, difficulty))
    return max(0, target_per_category - current)


def quota_status(
    questions: Sequence,
    target_total: int = TARGET_TOTAL,
    target_per_category: int = TARGET_PER_CATEGORY,
) -> Dict[str, Dict[str, object]]:
    """Per-category and ``TOTAL`` progress: current, target, remaining, is_full, percentage."""
    qs = _counted(as_questions(questions))

    def _entry(current: int, target: int) -> Dict[str, object]:
        return {
            "current": current,
            "target": target,
            "remaining": max(0, target - current),
            "is_full": current >= target,
            "percentage": int(current * 100 / target + 0.5) if target else 100,
        }

    status = {
        cat: _entry(sum(1 for q in qs if _in_category(q, cat)), target_per_category)
        for cat in CATEGORY_KEYS
    }
    status["TOTAL"] = _entry(len(qs), target_total)
    return status


def validate_generation(
    discipline: Optional[str],
    difficulty: str,
    batch_size: int,
    questions: Sequence,
    question_type: Optional[str] = "Balanced",
    target_total: int = TARGET_TOTAL,
    target_per_category: int = TARGET_PER_CATEGORY,
) -> QuotaCheck:
    """Decide whether a batch of ``batch_size`` new questions may be generated.

    Args:
        discipline: Selected discipline; only used for the MC/T/F balance check
        difficulty: Selected difficulty; ``"Balanced All"`` skips the category cap
        batch_size: Requested batch size, must be a positive int
        questions: Every known question, all languages and statuses
        question_type: Requested type, or ``"Balanced"``
        target_total: Maximum non-rejected questions overall
        target_per_category: Maximum non-rejected questions per category

    Returns:
        QuotaCheck. ``allowed=False`` when a limit is already met;
        ``warning=True`` with a reduced ``max_allowed`` when the batch would
        overshoot.

    Raises:
        TypeError: If ``questions`` is not a list or ``batch_size`` not an int
        ValueError: If ``batch_size`` is zero or negative
    """
    if isinstance(batch_size, bool) or not isinstance(batch_size, int):
        raise TypeError(f"batch_size must be an int, got {type(batch_size).__name__}")
    if batch_size <= 0:
        raise ValueError(f"batch_size must be positive, got {batch_size}")
    qs = _counted(as_questions(questions))

    total = len(qs)
    total_remaining = max(0, target_total - total)
    if total_remaining == 0:
        logger.info("Generation blocked: total quota %d reached", target_total)
        return QuotaCheck(
            allowed=False,
            reason=f"Total quota reached ({target_total} questions). No more generation allowed.",
            max_allowed=0,
            details={"total": total},
        )

    remaining = total_remaining
    category = None
    if not is_balanced(difficulty):
        category = sum(1 for q in qs if _in_category(q, difficulty))
        category_remaining = max(0, target_per_category - category)
        if category_remaining == 0:
            logger.info("Generation blocked: category %r full", difficulty)
            return QuotaCheck(
                allowed=False,
                reason=(
                    f'Category "{difficulty}" is full ({target_per_category}/{target_per_category}). '
                    "Select a different difficulty."
                ),
                max_allowed=0,
                details={"total": total, "category": category},
            )
        remaining = min(remaining, category_remaining)

    details = {"total": total, "remaining": remaining}
    if category is not None:
        details["category"] = category

    force_type = None
    balance_note = ""
    # Only a bare level ("Easy") spans both types; "Easy MC" is one type by definition
    if category is not None and split_difficulty(difficulty)[1] is None:
        scoped = [q for q in qs if q.discipline == discipline and _in_category(q, difficulty)]
        mc = sum(1 for q in scoped if _question_type(q) == MULTIPLE_CHOICE)
        tf = sum(1 for q in scoped if _question_type(q) == TRUE_FALSE)
        if abs(mc - tf) > IMBALANCE_THRESHOLD:
            needs_more = MULTIPLE_CHOICE if mc < tf else TRUE_FALSE
            has_more = TRUE_FALSE if needs_more == MULTIPLE_CHOICE else MULTIPLE_CHOICE
            if normalize_type(question_type) == has_more:
                logger.info("Generation blocked: %s MC vs %s T/F at %r", mc, tf, difficulty)
                return QuotaCheck(
                    allowed=False,
                    reason=(
                        f"Type imbalance detected at {difficulty}: {mc} MC vs {tf} T/F. "
                        f"Generate {needs_more} questions first to restore balance."
                    ),
                    max_allowed=0,
                    force_type=needs_more,
                    details=details,
                )
            force_type = needs_more
            balance_note = f"Imbalance detected ({mc} MC, {tf} T/F). Prioritizing {needs_more}."

    if batch_size > remaining:
        label = f'"{difficulty}"' if category is not None else "the total quota"
        reason = f"Only {remaining} questions remaining for {label}. Batch size reduced."
        if balance_note:
            reason = f"{balance_note} {reason}"
        return QuotaCheck(
            allowed=True,
            reason=reason,
            max_allowed=remaining,
            warning=True,
            force_type=force_type,
            details=details,
        )

    if force_type is not None:
        return QuotaCheck(
            allowed=True,
            reason=balance_note,
            max_allowed=batch_size,
            warning=True,
            force_type=force_type,
            details=details,
        )

    return QuotaCheck(
        allowed=True,
        reason="Generation allowed",
        max_allowed=batch_size,
        details=details,
    )
