"""Data handling modules for the question review pipeline."""

from .schemas import Question, QuotaCheck
from .loader import load_questions, save_questions

__all__ = [
    "Question",
    "QuotaCheck",
    "load_questions",
    "save_questions",
]
