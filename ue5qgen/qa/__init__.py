"""Question view filters and deduplication."""

from .dedupe import (
    filter_duplicate_questions,
    remove_duplicate_questions,
    text_similarity,
    unique_filtered_questions,
)
from .filters import (
    SEARCH_FIELDS,
    context_filtered_questions,
    filtered_questions,
    sort_questions,
    status_counts,
)

__all__ = [
    "SEARCH_FIELDS",
    "context_filtered_questions",
    "filtered_questions",
    "status_counts",
    "sort_questions",
    "unique_filtered_questions",
    "text_similarity",
    "remove_duplicate_questions",
    "filter_duplicate_questions",
]
