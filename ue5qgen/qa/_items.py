from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from ..data.schemas import Question


def as_questions(items: Iterable, name: str = "questions") -> list[Question]:
    """Accept ``Question`` objects or raw export dicts; reject non-sequences loudly."""
    if not isinstance(items, Sequence) or isinstance(items, (str, bytes)):
        raise TypeError(f"{name} must be a list of questions, got {type(items).__name__}")
    out: list[Question] = []
    for it in items:
        if isinstance(it, Question):
            out.append(it)
        elif isinstance(it, Mapping):
            out.append(Question.from_dict(it))
        else:
            raise TypeError(f"{name} contains a {type(it).__name__}, expected Question or dict")
    return out
