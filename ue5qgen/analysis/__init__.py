"""Coverage reports over the question set."""

from .coverage import discipline_frame, quota_frame, status_by_language_frame

__all__ = [
    "quota_frame",
    "discipline_frame",
    "status_by_language_frame",
]
