from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import Optional

import numpy as np

from ..constants import DUPLICATE_SIMILARITY_THRESHOLD
from ..data.schemas import Question
from ._items import as_questions

logger = logging.getLogger(__name__)

TAG_RE = re.compile(r"<[^>]*>")
WS_RE = re.compile(r"\s+")

# Above this length similarity switches from edit distance to word overlap
LONG_TEXT_CHARS = 500


def unique_filtered_questions(
    questions: Sequence,
    language: str,
    fallback_language: Optional[str] = None,
) -> list[Question]:
    """Collapse language variants to one question per ``unique_id``.

    Picks the variant in ``language``, then ``fallback_language`` if given,
    then the first variant seen. Groups keep the order in which their first
    variant appears. Records without a ``unique_id`` form their own group
    keyed by ``id``.
    """
    groups: dict[tuple, list[Question]] = {}
    for q in as_questions(questions):
        # an id never joins a group keyed by a real unique_id
        key = ("uid", q.unique_id) if q.unique_id else ("id", q.id)
        groups.setdefault(key, []).append(q)

    out: list[Question] = []
    for variants in groups.values():
        chosen = next((v for v in variants if v.language == language), None)
        if chosen is None and fallback_language:
            chosen = next((v for v in variants if v.language == fallback_language), None)
        out.append(chosen if chosen is not None else variants[0])
    return out


def _normalize(text: str) -> str:
    return WS_RE.sub(" ", TAG_RE.sub("", text.lower())).strip()


def _levenshtein(a: str, b: str) -> int:
    codes = np.frombuffer(a.encode("utf-32-le"), dtype=np.uint32)
    idx = np.arange(len(a) + 1, dtype=np.int32)
    prev = idx.copy()
    for j in range(1, len(b) + 1):
        cur = np.empty_like(prev)
        cur[0] = j
        cost = (codes != ord(b[j - 1])).astype(np.int32)
        cur[1:] = np.minimum(prev[1:] + 1, prev[:-1] + cost)
        # insertions: cur[i] = min over k <= i of cur[k] + (i - k)
        prev = np.minimum.accumulate(cur - idx) + idx
    return int(prev[-1])


def text_similarity(a: Optional[str], b: Optional[str]) -> float:
    """Similarity in [0, 1] between two question texts, ignoring case, HTML and spacing."""
    if not a or not b:
        return 0.0
    na, nb = _normalize(a), _normalize(b)
    if na == nb:
        return 1.0
    if not na or not nb:
        return 0.0
    if len(na) > LONG_TEXT_CHARS or len(nb) > LONG_TEXT_CHARS:
        wa, wb = set(na.split(" ")), set(nb.split(" "))
        union = wa | wb
        return len(wa & wb) / len(union) if union else 0.0
    return 1.0 - _levenshtein(na, nb) / max(len(na), len(nb))


def remove_duplicate_questions(
    questions: Sequence,
    threshold: float = DUPLICATE_SIMILARITY_THRESHOLD,
) -> list[Question]:
    """Drop near-duplicates inside one generated batch, keeping the first occurrence."""
    unique: list[Question] = []
    removed = 0
    for q in as_questions(questions):
        if any(text_similarity(kept.question, q.question) >= threshold for kept in unique):
            removed += 1
            continue
        unique.append(q)
    if removed:
        logger.info("Removed %d duplicate(s) from batch", removed)
    return unique


def filter_duplicate_questions(
    new_items: Sequence,
    current: Sequence,
    other: Sequence = (),
    threshold: float = DUPLICATE_SIMILARITY_THRESHOLD,
) -> list[Question]:
    """Keep only new questions whose id and text are not already known."""
    existing = as_questions(current) + as_questions(other, name="other")
    known_ids = {q.id for q in existing}
    fresh: list[Question] = []
    for item in as_questions(new_items, name="new_items"):
        if item.id in known_ids:
            continue
        if any(text_similarity(q.question, item.question) >= threshold for q in existing):
            continue
        fresh.append(item)
    dropped = len(new_items) - len(fresh)
    if dropped:
        logger.info("Removed %d duplicate(s) already in the question database", dropped)
    return fresh
