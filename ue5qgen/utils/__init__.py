"""Utilities for the question review pipeline."""

from .logging import setup_logging
from .validation import SchemaValidationError, ValidationError

__all__ = [
    "setup_logging",
    "ValidationError",
    "SchemaValidationError",
]
