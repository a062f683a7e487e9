"""Schema validation utilities for question exports."""

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from ..constants import FILTER_MODES
from .io import read_json_records

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Base exception for validation errors."""
    pass


class SchemaValidationError(ValidationError):
    """Raised when data doesn't match expected schema."""
    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or []

    def __str__(self) -> str:
        base = super().__str__()
        if not self.errors:
            return base
        return base + ": " + "; ".join(self.errors[:5])


@dataclass
class FieldSpec:
    """Specification for a data field."""
    name: str
    type: Any
    required: bool = True
    nullable: bool = False
    min_length: Optional[int] = None
    choices: Optional[List[Any]] = None


@dataclass
class DatasetSchema:
    """Schema definition for question export validation.

    Fields not listed are allowed; exports carry many app-specific keys.
    """
    name: str
    fields: List[FieldSpec]


QUESTION_EXPORT_SCHEMA = DatasetSchema(
    name="question_export",
    fields=[
        FieldSpec(name="id", type=(str, int), required=True),
        FieldSpec(name="question", type=str, required=True, min_length=1),
        FieldSpec(name="uniqueId", type=(str, int), required=False, nullable=True),
        FieldSpec(name="options", type=(list, dict), required=False, nullable=True),
        FieldSpec(name="language", type=str, required=False, nullable=True, min_length=1),
        FieldSpec(
            name="status",
            type=str,
            required=False,
            nullable=True,
            choices=[m for m in FILTER_MODES if m != "all"],
        ),
        FieldSpec(name="tags", type=list, required=False, nullable=True),
    ],
)

VALID_DISCIPLINES = [
    "Technical Art",
    "Lighting & Rendering",
    "Look Development (Materials)",
    "Animation & Rigging",
    "VFX (Niagara)",
    "World Building & Level Design",
    "Blueprints",
    "Game Logic & Systems",
    "C++ Programming",
]

_SUSPICIOUS_RE = re.compile(r"<script|javascript:|on\w+=", re.IGNORECASE)


class SchemaValidator:
    """Validator for question export schemas."""

    def __init__(self, schema: DatasetSchema):
        self.schema = schema

    def validate_record(self, record: Dict[str, Any]) -> List[str]:
        """Validate a single record against schema.

        Args:
            record: Record to validate

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        for field_spec in self.schema.fields:
            if field_spec.required and field_spec.name not in record:
                errors.append(f"Missing required field: {field_spec.name}")
                continue

            if field_spec.name not in record:
                continue

            value = record[field_spec.name]
            if value is None:
                if not field_spec.nullable:
                    errors.append(f"Field {field_spec.name} cannot be null")
                continue

            expected_types = field_spec.type if isinstance(field_spec.type, tuple) else (field_spec.type,)
            if not isinstance(value, expected_types):
                errors.append(
                    f"Field {field_spec.name} has wrong type: expected {field_spec.type}, "
                    f"got {type(value).__name__}"
                )
                continue

            if field_spec.min_length and isinstance(value, (str, list)) and len(value) < field_spec.min_length:
                errors.append(f"Field {field_spec.name} too short: minimum {field_spec.min_length}")

            if field_spec.choices and value not in field_spec.choices:
                errors.append(
                    f"Field {field_spec.name} has invalid value: must be one of {field_spec.choices}"
                )

        return errors

    def validate_records(self, records: List[Dict[str, Any]]) -> None:
        """Validate every record, raising one error that lists all problems.

        Raises:
            SchemaValidationError: If validation fails
        """
        all_errors = []
        for i, record in enumerate(records):
            if not isinstance(record, dict):
                all_errors.append(f"Record {i}: expected object, got {type(record).__name__}")
                continue
            record_errors = self.validate_record(record)
            if record_errors:
                all_errors.extend([f"Record {i}: {e}" for e in record_errors])

        if all_errors:
            raise SchemaValidationError(
                f"Export validation failed with {len(all_errors)} errors",
                errors=all_errors
            )


def validate_question_export(filepath: Union[str, Path]) -> None:
    """Validate a JSON or JSONL question export file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        SchemaValidationError: If validation fails
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Question export not found: {filepath}")
    try:
        records = read_json_records(filepath)
    except json.JSONDecodeError as e:
        raise SchemaValidationError(f"Invalid JSON in {filepath}: {e}") from e
    except ValueError as e:
        raise SchemaValidationError(str(e)) from e

    SchemaValidator(QUESTION_EXPORT_SCHEMA).validate_records(records)
    logger.info("Question export validation passed: %s", filepath)


def validate_question(question: Dict[str, Any]) -> Tuple[bool, List[str]]:
    """Check a question record before it is saved.

    Content rules come from the review UI: text length, option count, answer
    and explanation limits and the known discipline list.
    """
    errors: List[str] = []

    text = question.get("question")
    if not text or not isinstance(text, str):
        errors.append("Question text is required")
    else:
        if len(text) < 10:
            errors.append("Question must be at least 10 characters")
        if len(text) > 1000:
            errors.append("Question must be less than 1000 characters")
        if _SUSPICIOUS_RE.search(text):
            errors.append("Question contains invalid content")

    answer = question.get("correctAnswer", question.get("correct_answer"))
    if not answer or not isinstance(answer, str):
        errors.append("Correct answer is required")
    elif len(answer) > 500:
        errors.append("Correct answer must be less than 500 characters")

    options = question.get("options")
    if options:
        values = list(options.values()) if isinstance(options, dict) else options
        if not isinstance(values, list):
            errors.append("Options must be a list")
        else:
            if not 2 <= len(values) <= 6:
                errors.append("Must have 2-6 options")
            for idx, opt in enumerate(values):
                if not isinstance(opt, str) or len(opt) > 500:
                    errors.append(f"Option {idx + 1} is invalid")

    explanation = question.get("explanation")
    if explanation and len(explanation) > 2000:
        errors.append("Explanation must be less than 2000 characters")

    discipline = question.get("discipline")
    if discipline and discipline not in VALID_DISCIPLINES:
        errors.append(f"Invalid discipline. Must be one of: {', '.join(VALID_DISCIPLINES)}")

    return len(errors) == 0, errors


def validate_question_batch(questions: List[Dict[str, Any]]) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """Split a generated batch into valid records and rejected ones with their errors."""
    valid: List[Dict[str, Any]] = []
    invalid: List[Dict[str, Any]] = []
    for index, q in enumerate(questions):
        ok, errors = validate_question(q)
        if ok:
            valid.append(q)
        else:
            invalid.append({"index": index, "question": q, "errors": errors})
    if invalid:
        logger.warning("Dropped %d invalid question(s) from batch", len(invalid))
    return valid, invalid
