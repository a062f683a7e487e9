from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Tuple, Union

from ..constants import APP_MODES, DEFAULT_LANGUAGE, FILTER_MODES, SORT_KEYS


@dataclass(frozen=True)
class FilterState:
    """View preferences plus the context values that own the review cursor."""

    search_term: str = ""
    filter_mode: str = "pending"
    show_history: bool = False
    filter_by_creator: bool = False
    filter_tags: Tuple[str, ...] = ()
    sort_by: str = "default"
    review_index: int = 0
    discipline: Optional[str] = None
    difficulty: Optional[str] = None
    language: str = DEFAULT_LANGUAGE
    app_mode: str = "create"

    def preferences(self) -> dict:
        """The subset written to per-device storage."""
        return {
            "search_term": self.search_term,
            "filter_mode": self.filter_mode,
            "show_history": self.show_history,
        }


@dataclass(frozen=True)
class SetSearchTerm:
    value: str


@dataclass(frozen=True)
class SetFilterMode:
    value: str


@dataclass(frozen=True)
class SetShowHistory:
    value: bool


@dataclass(frozen=True)
class SetFilterByCreator:
    value: bool


@dataclass(frozen=True)
class SetFilterTags:
    value: Tuple[str, ...]


@dataclass(frozen=True)
class SetSortBy:
    value: str


@dataclass(frozen=True)
class SetReviewIndex:
    value: int


@dataclass(frozen=True)
class SetContext:
    """Generation settings or app mode changed; ``None`` leaves a field as is."""

    discipline: Optional[str] = None
    difficulty: Optional[str] = None
    language: Optional[str] = None
    app_mode: Optional[str] = None


Action = Union[
    SetSearchTerm,
    SetFilterMode,
    SetShowHistory,
    SetFilterByCreator,
    SetFilterTags,
    SetSortBy,
    SetReviewIndex,
    SetContext,
]

# Changing any of these invalidates the review cursor
CURSOR_KEYS = ("discipline", "difficulty", "language", "app_mode", "filter_mode", "search_term")


def _with_cursor_reset(old: FilterState, new: FilterState) -> FilterState:
    if any(getattr(old, k) != getattr(new, k) for k in CURSOR_KEYS):
        return replace(new, review_index=0)
    return new


def reduce_filter_state(state: FilterState, action: Action) -> FilterState:
    """Return the state after ``action``. Pure; persistence happens elsewhere."""
    if isinstance(action, SetSearchTerm):
        new = replace(state, search_term=action.value or "")
    elif isinstance(action, SetFilterMode):
        if action.value not in FILTER_MODES:
            raise ValueError(f"Unknown filter mode {action.value!r}; expected one of {FILTER_MODES}")
        new = replace(state, filter_mode=action.value)
    elif isinstance(action, SetShowHistory):
        new = replace(state, show_history=bool(action.value))
    elif isinstance(action, SetFilterByCreator):
        new = replace(state, filter_by_creator=bool(action.value))
    elif isinstance(action, SetFilterTags):
        new = replace(state, filter_tags=tuple(action.value))
    elif isinstance(action, SetSortBy):
        if action.value not in SORT_KEYS:
            raise ValueError(f"Unknown sort key {action.value!r}; expected one of {SORT_KEYS}")
        new = replace(state, sort_by=action.value)
    elif isinstance(action, SetReviewIndex):
        if action.value < 0:
            raise ValueError(f"review index must be >= 0, got {action.value}")
        return replace(state, review_index=action.value)
    elif isinstance(action, SetContext):
        if action.app_mode is not None and action.app_mode not in APP_MODES:
            raise ValueError(f"Unknown app mode {action.app_mode!r}; expected one of {APP_MODES}")
        changes = {
            k: getattr(action, k)
            for k in ("discipline", "difficulty", "language", "app_mode")
            if getattr(action, k) is not None
        }
        new = replace(state, **changes)
    else:
        raise TypeError(f"Unsupported action {type(action).__name__}")
    return _with_cursor_reset(state, new)
