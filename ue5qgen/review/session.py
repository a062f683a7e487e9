from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Dict, Optional, Sequence

from ..config import GenerationConfig
from ..constants import DEFAULT_LANGUAGE
from ..data.schemas import Question
from ..qa._items import as_questions
from ..qa.dedupe import unique_filtered_questions
from ..qa.filters import context_filtered_questions, filtered_questions, sort_questions, status_counts
from .state import Action, FilterState, SetContext, SetReviewIndex, reduce_filter_state
from .storage import MemoryPreferenceStore, PreferenceStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilteredView:
    context: list[Question]
    counts: Dict[str, int]
    filtered: list[Question]
    unique: list[Question]


class FilteringSession:
    """Owns review view state and the lists derived from it.

    Every action goes through ``reduce_filter_state``; the preference subset is
    then written to ``store`` and the view recomputed. A failing store is
    logged and never stops the recompute.
    """

    def __init__(
        self,
        questions: Sequence = (),
        historical: Sequence = (),
        config: Optional[GenerationConfig] = None,
        app_mode: str = "create",
        store: Optional[PreferenceStore] = None,
    ) -> None:
        self.store = store if store is not None else MemoryPreferenceStore()
        self.config = config or GenerationConfig()
        self._questions = as_questions(questions)
        self._historical = as_questions(historical, name="historical")
        try:
            prefs = self.store.load_preferences()
        except Exception:
            logger.warning("Could not load view preferences; using defaults", exc_info=True)
            prefs = {}
        self._state = reduce_filter_state(
            FilterState(**prefs),
            SetContext(
                discipline=self.config.discipline,
                difficulty=self.config.difficulty,
                language=self.config.language,
                app_mode=app_mode,
            ),
        )
        self._view = self._compute()

    @property
    def state(self) -> FilterState:
        return self._state

    @property
    def view(self) -> FilteredView:
        return self._view

    @property
    def current_question(self) -> Optional[Question]:
        unique = self._view.unique
        if not unique:
            return None
        return unique[min(self._state.review_index, len(unique) - 1)]

    def dispatch(self, action: Action) -> FilteredView:
        old = self._state
        self._state = reduce_filter_state(old, action)
        if self._state.preferences() != old.preferences():
            self._persist()
        self._view = self._compute()
        return self._view

    def step(self, delta: int) -> Optional[Question]:
        """Move the review cursor, clamped to the visible list."""
        last = max(0, len(self._view.unique) - 1)
        target = min(max(0, self._state.review_index + delta), last)
        self.dispatch(SetReviewIndex(target))
        return self.current_question

    def set_questions(self, questions: Sequence, historical: Optional[Sequence] = None) -> FilteredView:
        self._questions = as_questions(questions)
        if historical is not None:
            self._historical = as_questions(historical, name="historical")
        self._view = self._compute()
        return self._view

    def set_config(self, config: GenerationConfig) -> FilteredView:
        self.config = config
        return self.dispatch(
            SetContext(
                discipline=config.discipline,
                difficulty=config.difficulty,
                language=config.language,
            )
        )

    def set_app_mode(self, app_mode: str) -> FilteredView:
        return self.dispatch(SetContext(app_mode=app_mode))

    def factory_reset(self) -> FilteredView:
        """Clear stored preferences and return to default filters."""
        self.store.clear()
        self._state = replace(
            FilterState(),
            discipline=self._state.discipline,
            difficulty=self._state.difficulty,
            language=self._state.language,
            app_mode=self._state.app_mode,
        )
        self._view = self._compute()
        return self._view

    def _persist(self) -> None:
        prefs = self._state.preferences()
        try:
            self.store.save_preferences(**prefs)
        except Exception:
            logger.warning("Could not persist view preferences", exc_info=True)

    def _compute(self) -> FilteredView:
        st = self._state
        review = st.app_mode == "review"
        context = context_filtered_questions(
            self._questions,
            self._historical,
            include_history=st.show_history or st.app_mode in ("create", "review"),
            status_filter="all",
            filter_by_creator=st.filter_by_creator,
            search_term=st.search_term,
            creator_name=self.config.creator_name,
            discipline=st.discipline,
            difficulty=None if review else st.difficulty,
            language=st.language,
            tags=st.filter_tags,
            question_type=None if review else self.config.type,
        )
        filtered = filtered_questions(context, st.filter_mode)
        unique = unique_filtered_questions(filtered, st.language or DEFAULT_LANGUAGE)
        view = FilteredView(
            context=context,
            counts=status_counts(context),
            filtered=filtered,
            unique=sort_questions(unique, st.sort_by),
        )
        logger.debug(
            "Recomputed view: %d context, %d filtered, %d unique",
            len(context), len(filtered), len(unique),
            extra={"counts": view.counts, "app_mode": st.app_mode},
        )
        return view
