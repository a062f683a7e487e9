"""Command-line entry points for the question review pipeline."""

from .main import main

__all__ = ["main"]
