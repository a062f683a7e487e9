from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from ..constants import DEFAULT_LANGUAGE, STATUS_PENDING

# Export files use the web app's camelCase keys
_CAMEL_KEYS = {
    "uniqueId": "unique_id",
    "correctAnswer": "correct_answer",
    "rejectionReason": "rejection_reason",
    "critiqueScore": "critique_score",
    "sourceUrl": "source_url",
    "sourceExcerpt": "source_excerpt",
    "creatorId": "creator_id",
    "creatorName": "creator_name",
    "dateAdded": "created_at",
    "updatedAt": "updated_at",
}

# Creation time has been written under several names; the first non-empty wins
_CREATED_KEYS = ("created", "dateAdded", "createdAt")


def _options_tuple(options: Any) -> Tuple[str, ...]:
    if options is None:
        return ()
    if isinstance(options, Mapping):
        return tuple(str(v) for v in options.values())
    return tuple(str(v) for v in options)


@dataclass(frozen=True)
class Question:
    """One language variant of a logical question.

    All variants of the same logical question share ``unique_id`` and differ
    in ``id`` and ``language``. A ``status`` of ``None`` counts as pending.
    """

    id: str
    question: str
    unique_id: Optional[str] = None
    options: Tuple[str, ...] = ()
    correct_answer: Optional[str] = None
    discipline: Optional[str] = None
    difficulty: Optional[str] = None
    type: Optional[str] = None
    language: str = DEFAULT_LANGUAGE
    status: Optional[str] = None
    rejection_reason: Optional[str] = None
    critique_score: Optional[float] = None
    source_url: Optional[str] = None
    source_excerpt: Optional[str] = None
    explanation: Optional[str] = None
    tags: Tuple[str, ...] = ()
    creator_id: Optional[str] = None
    creator_name: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def group_key(self) -> str:
        """Identity used to group language variants; falls back to ``id``."""
        return self.unique_id or self.id

    @property
    def effective_status(self) -> str:
        return self.status or STATUS_PENDING

    @classmethod
    def from_dict(cls, row: Mapping[str, Any]) -> "Question":
        data: Dict[str, Any] = {}
        for key, value in row.items():
            data[_CAMEL_KEYS.get(key, key)] = value
        known = cls.__dataclass_fields__.keys()
        kwargs = {k: v for k, v in data.items() if k in known}
        created = next((row[k] for k in _CREATED_KEYS if row.get(k)), None)
        if created is not None:
            kwargs["created_at"] = created
        kwargs["id"] = str(kwargs.get("id") if kwargs.get("id") is not None else "")
        kwargs["question"] = str(kwargs.get("question") or "")
        kwargs["options"] = _options_tuple(kwargs.get("options"))
        kwargs["tags"] = tuple(kwargs.get("tags") or ())
        kwargs["language"] = kwargs.get("language") or DEFAULT_LANGUAGE
        if kwargs.get("unique_id") is not None:
            kwargs["unique_id"] = str(kwargs["unique_id"])
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        reverse = {v: k for k, v in _CAMEL_KEYS.items()}
        out: Dict[str, Any] = {}
        for name in self.__dataclass_fields__:
            value = getattr(self, name)
            if isinstance(value, tuple):
                value = list(value)
            out[reverse.get(name, name)] = value
        return out


@dataclass(frozen=True)
class QuotaCheck:
    """Outcome of a pre-generation quota check. Never persisted."""

    allowed: bool
    reason: str
    max_allowed: int = 0
    warning: bool = False
    force_type: Optional[str] = None
    details: Dict[str, int] = field(default_factory=dict, compare=False)
