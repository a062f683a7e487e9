from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from ue5qgen.data.schemas import Question  # noqa: E402


def make_question(qid: str, **kwargs) -> Question:
    """Build a Question with sensible defaults for tests."""
    defaults = {
        "question": f"Question text for {qid}?",
        "unique_id": qid,
        "discipline": "Technical Art",
        "difficulty": "Easy MC",
        "type": "Multiple Choice",
        "language": "English",
        "status": "pending",
    }
    defaults.update(kwargs)
    return Question(id=qid, **defaults)


@pytest.fixture
def sample_questions() -> list[Question]:
    return [
        make_question("q1", question="What does Nanite virtualize?", tags=("#Nanite",),
                      creator_name="Sam", created_at="2024-01-02T00:00:00Z"),
        make_question("q2", status="accepted", difficulty="Hard T/F", type="True/False",
                      question="Lumen supports hardware ray tracing.", tags=("#Lumen",),
                      discipline="Lighting & Rendering", creator_name="Sam",
                      created_at="2024-01-03T00:00:00Z"),
        make_question("q3", status="rejected", creator_name="Other",
                      question="Which node samples a texture?", tags=("#Materials",),
                      created_at="2024-01-01T00:00:00Z"),
        make_question("q4", status=None, question="What is a Niagara emitter?",
                      source_excerpt="Emitters spawn particles", creator_name="Other"),
    ]


@pytest.fixture
def export_rows() -> list[dict]:
    return [
        {
            "id": "a-en",
            "uniqueId": "a",
            "question": "What does the Nanite system virtualize?",
            "options": {"A": "Geometry", "B": "Audio", "C": "Input", "D": "Networking"},
            "correctAnswer": "A",
            "discipline": "Technical Art",
            "difficulty": "Easy MC",
            "type": "Multiple Choice",
            "language": "English",
            "status": "pending",
            "tags": ["#Nanite"],
        },
        {
            "id": "a-fr",
            "uniqueId": "a",
            "question": "Que virtualise le systeme Nanite ?",
            "options": ["Geometrie", "Audio", "Entrees", "Reseau"],
            "correctAnswer": "A",
            "discipline": "Technical Art",
            "difficulty": "Easy MC",
            "type": "Multiple Choice",
            "language": "French",
            "status": "pending",
        },
        {
            "id": "b-en",
            "uniqueId": "b",
            "question": "Lumen provides dynamic global illumination.",
            "options": ["True", "False"],
            "correctAnswer": "True",
            "discipline": "Lighting & Rendering",
            "difficulty": "Easy T/F",
            "type": "True/False",
            "language": "English",
            "status": "accepted",
        },
    ]


@pytest.fixture
def export_file(tmp_path: Path, export_rows: list[dict]) -> Path:
    path = tmp_path / "questions.json"
    path.write_text(json.dumps(export_rows), encoding="utf-8")
    return path


@pytest.fixture
def make_q():
    return make_question
