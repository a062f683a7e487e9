"""Review view state: reducer, preference storage and the filtering session."""

from .session import FilteredView, FilteringSession
from .state import (
    FilterState,
    SetContext,
    SetFilterByCreator,
    SetFilterMode,
    SetFilterTags,
    SetReviewIndex,
    SetSearchTerm,
    SetShowHistory,
    SetSortBy,
    reduce_filter_state,
)
from .storage import JsonPreferenceStore, MemoryPreferenceStore, PreferenceStore

__all__ = [
    "FilterState",
    "FilteredView",
    "FilteringSession",
    "JsonPreferenceStore",
    "MemoryPreferenceStore",
    "PreferenceStore",
    "SetContext",
    "SetFilterByCreator",
    "SetFilterMode",
    "SetFilterTags",
    "SetReviewIndex",
    "SetSearchTerm",
    "SetShowHistory",
    "SetSortBy",
    "reduce_filter_state",
]
