"""Loading question exports into ``Question`` records."""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .schemas import Question
from ..utils.io import read_json_records, write_json_records, write_jsonl
from ..utils.validation import QUESTION_EXPORT_SCHEMA, SchemaValidator

logger = logging.getLogger(__name__)


def load_questions(
    path: Union[str, Path],
    validate: bool = True,
    max_items: Optional[int] = None,
) -> List[Question]:
    """Load a JSON or JSONL question export and return ``Question`` objects.

    Args:
        path: Path to a ``.json`` or ``.jsonl`` export
        validate: Check records against the export schema before conversion
        max_items: Optional limit on number of questions to load

    Returns:
        List of Question objects, in file order. An empty export is valid.

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If the file is not a JSON/JSONL export
        SchemaValidationError: If ``validate`` is set and records are malformed
    """
    filepath = Path(path).resolve()
    if not filepath.exists():
        raise FileNotFoundError(f"Question export not found: {filepath}")
    if not filepath.is_file():
        raise ValueError(f"Path is not a file: {filepath}")
    if filepath.suffix not in {".jsonl", ".json"}:
        raise ValueError(f"Expected .jsonl or .json file, got: {filepath.suffix}")

    records = read_json_records(filepath)
    if max_items is not None:
        records = records[:max_items]

    if validate:
        SchemaValidator(QUESTION_EXPORT_SCHEMA).validate_records(records)

    questions = [Question.from_dict(row) for row in records]
    logger.debug("Loaded %d questions from %s", len(questions), filepath)
    return questions


def save_questions(path: Union[str, Path], questions: Iterable[Question]) -> None:
    """Write questions using export key names: JSONL for ``.jsonl``, else a JSON array."""
    rows = (q.to_dict() for q in questions)
    if Path(path).suffix == ".jsonl":
        write_jsonl(path, rows)
    else:
        write_json_records(path, rows)
