from __future__ import annotations

from collections.abc import Sequence

import pandas as pd

from ..constants import TARGET_PER_CATEGORY, TARGET_TOTAL
from ..qa._items import as_questions
from ..quota import discipline_counts, quota_status


def quota_frame(
    questions: Sequence,
    target_total: int = TARGET_TOTAL,
    target_per_category: int = TARGET_PER_CATEGORY,
) -> pd.DataFrame:
    """One row per quota category plus ``TOTAL``."""
    status = quota_status(questions, target_total=target_total, target_per_category=target_per_category)
    df = pd.DataFrame.from_dict(status, orient="index")
    df.index.name = "category"
    return df.reset_index()[["category", "current", "target", "remaining", "is_full", "percentage"]]


def discipline_frame(questions: Sequence) -> pd.DataFrame:
    """Discipline x difficulty counts of non-rejected questions, zero-filled."""
    counts = discipline_counts(questions)
    if not counts:
        return pd.DataFrame()
    df = pd.DataFrame(counts).T.fillna(0).astype(int)
    df.index.name = "discipline"
    return df.sort_index().reindex(sorted(df.columns), axis=1)


def status_by_language_frame(questions: Sequence) -> pd.DataFrame:
    """Question count per language and status; a missing status counts as pending."""
    qs = as_questions(questions)
    if not qs:
        return pd.DataFrame()
    df = pd.DataFrame([{"language": q.language, "status": q.effective_status} for q in qs])
    return pd.crosstab(df["language"], df["status"])
