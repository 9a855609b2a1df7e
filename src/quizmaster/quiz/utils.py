import json
import re

from pathlib import Path
from typing import List, Sequence

from .models import Question, QuestionSet
from .normalizer import (
    ContentError,
    PerItemValidationError,
    ValidationReason,
    validate_item,
)

_slug_re = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    s = name.strip().lower()
    s = _slug_re.sub("-", s).strip("-")
    return s or "quiz"


def read_jsonl(path: Path) -> List[dict]:
    data: List[dict] = []
    with Path(path).open("r", encoding="utf-8") as fh:
        for line in fh:
            line = line.strip()
            if not line:
                continue
            data.append(json.loads(line))
    return data


def write_jsonl(path: Path, records: Sequence[dict]) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as fh:
        for rec in records:
            fh.write(json.dumps(rec, ensure_ascii=False))
            fh.write("\n")


def write_question_set(path: Path, questions: QuestionSet) -> None:
    write_jsonl(path, [q.to_dict() for q in questions])


def read_question_set(path: Path) -> QuestionSet:
    """Load a saved quiz, re-validating every record on the way in.

    Stored ids are kept so a replayed quiz matches the one that was saved.
    """
    records = read_jsonl(path)
    if not records:
        raise ContentError(f"No questions stored in {path}")
    questions: List[Question] = []
    for position, rec in enumerate(records, start=1):
        if not isinstance(rec, dict):
            raise PerItemValidationError(
                position, ValidationReason.MISSING_FIELD, "record is not an object"
            )
        stored_id = str(rec.get("id") or "").strip()
        factory = (lambda: stored_id) if stored_id else None
        result = validate_item(rec, position, factory)
        if isinstance(result, PerItemValidationError):
            raise result
        questions.append(result)
    return QuestionSet(questions)
