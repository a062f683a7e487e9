"""UE5 question review pipeline.

Quota checks, view filters and language-variant deduplication for the UE5
training question generator.
"""

from .config import AppConfig, GenerationConfig, default_app_config
from .data import Question, QuotaCheck, load_questions
from .qa import (
    context_filtered_questions,
    filtered_questions,
    status_counts,
    unique_filtered_questions,
)
from .quota import validate_generation
from .review import FilteringSession, FilterState, reduce_filter_state
from .utils import setup_logging

__all__ = [
    "__version__",
    "AppConfig",
    "GenerationConfig",
    "default_app_config",
    "Question",
    "QuotaCheck",
    "load_questions",
    "context_filtered_questions",
    "filtered_questions",
    "status_counts",
    "unique_filtered_questions",
    "validate_generation",
    "FilteringSession",
    "FilterState",
    "reduce_filter_state",
    "setup_logging",
]

__version__ = "0.1.0"
