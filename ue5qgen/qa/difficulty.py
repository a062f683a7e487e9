from __future__ import annotations

from typing import Optional, Tuple

from ..constants import BALANCED_DIFFICULTIES

MULTIPLE_CHOICE = "Multiple Choice"
TRUE_FALSE = "True/False"

_LEVEL_SYNONYMS = {
    "easy": "easy",
    "beginner": "easy",
    "medium": "medium",
    "intermediate": "medium",
    "hard": "hard",
    "expert": "hard",
}

_TYPE_SYNONYMS = {
    "mc": MULTIPLE_CHOICE,
    "multiple choice": MULTIPLE_CHOICE,
    "t/f": TRUE_FALSE,
    "tf": TRUE_FALSE,
    "true/false": TRUE_FALSE,
}

_TYPE_ABBREV = {MULTIPLE_CHOICE: "MC", TRUE_FALSE: "T/F"}


def is_balanced(difficulty: Optional[str]) -> bool:
    return bool(difficulty) and difficulty.strip() in BALANCED_DIFFICULTIES


def normalize_level(level: Optional[str]) -> str:
    if not level:
        return ""
    lower = str(level).strip().lower()
    return _LEVEL_SYNONYMS.get(lower, lower)


def normalize_type(qtype: Optional[str]) -> Optional[str]:
    """Map ``MC``/``T/F`` style labels to canonical names; ``None`` if unknown or balanced."""
    if not qtype:
        return None
    return _TYPE_SYNONYMS.get(str(qtype).strip().lower())


def split_difficulty(difficulty: Optional[str]) -> Tuple[str, Optional[str]]:
    """Split a setting such as ``"Easy MC"`` into ``("easy", "Multiple Choice")``.

    A bare level (``"Hard"``) yields no type.
    """
    if not difficulty:
        return "", None
    text = str(difficulty).strip()
    head, _, tail = text.partition(" ")
    qtype = normalize_type(tail)
    if qtype is not None:
        return normalize_level(head), qtype
    return normalize_level(text), None


def category_key(difficulty: Optional[str], qtype: Optional[str] = None) -> Optional[str]:
    """Quota category for a question, e.g. ``"Easy MC"``; ``None`` when it has no level."""
    level, embedded = split_difficulty(difficulty)
    if level not in ("easy", "medium", "hard"):
        return None
    resolved = embedded or normalize_type(qtype)
    if resolved is None:
        return None
    return f"{level.capitalize()} {_TYPE_ABBREV[resolved]}"
