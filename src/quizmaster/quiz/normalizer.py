"""Turn loosely structured provider output into a validated ``QuestionSet``.

Providers are asked for a JSON array of questions but routinely wrap it in
prose or Markdown fences, nest it under an arbitrary object key, rename
fields, or give the correct answer as an option index. ``normalize_payload``
absorbs those variations and either returns a fully consistent set or raises
a :class:`ContentError` describing why no quiz can be built.

Validation is all-or-nothing: the first invalid item fails the whole batch
and nothing from that batch is returned.
"""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterator, Mapping, Sequence

from .models import OPTION_COUNT, Question, QuestionSet

logger = logging.getLogger(__name__)

# Accepted spellings for each logical field, most preferred first.
QUESTION_TEXT_KEYS = ("question", "text", "prompt", "stem", "questionText", "q")
OPTIONS_KEYS = ("options", "choices", "answers", "alternatives")
OPTION_TEXT_KEYS = ("text", "option", "value", "label", "answer")
CORRECT_ANSWER_KEYS = (
    "correctAnswer",
    "correct_answer",
    "answer",
    "correct",
    "correctOption",
    "correctIndex",
    "correct_index",
)

IdFactory = Callable[[], str]


class ValidationReason(str, Enum):
    MISSING_FIELD = "MissingField"
    WRONG_OPTION_COUNT = "WrongOptionCount"
    ANSWER_INDEX_OUT_OF_RANGE = "AnswerIndexOutOfRange"
    ANSWER_NOT_FOUND = "AnswerNotFound"


class ContentError(ValueError):
    """Raised when provider content cannot be turned into a quiz."""


class MalformedPayload(ContentError):
    """No JSON literal could be extracted, or it holds no question list."""


class EmptyResult(ContentError):
    """The extracted question list has no entries."""


class PerItemValidationError(ContentError):
    """A single candidate item failed validation.

    ``index`` is the 1-based position of the item in the candidate list.
    """

    def __init__(
        self, index: int, reason: ValidationReason, detail: str = ""
    ) -> None:
        self.index = index
        self.reason = reason
        self.detail = detail
        message = f"Question {index} is invalid ({reason.value})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


def normalize_payload(
    raw: str, *, id_factory: IdFactory | None = None
) -> QuestionSet:
    """Validate the provider response ``raw`` into a ``QuestionSet``.

    Raises :class:`MalformedPayload`, :class:`EmptyResult` or
    :class:`PerItemValidationError`.
    """

    make_id = id_factory or _new_id
    items = find_candidate_items(extract_json_literal(raw))
    if not items:
        raise EmptyResult("The generated quiz contains no questions.")

    results = [
        validate_item(item, position, make_id)
        for position, item in enumerate(items, start=1)
    ]
    for result in results:
        if isinstance(result, PerItemValidationError):
            logger.warning(
                "Rejecting generated quiz: %s",
                result,
                extra={
                    "item_index": result.index,
                    "reason": result.reason.value,
                    "candidate_count": len(items),
                },
            )
            raise result
    return QuestionSet(results)  # type: ignore[arg-type]


def extract_json_literal(raw: str) -> Any:
    """Return the first balanced JSON array/object literal found in ``raw``.

    Text around the literal (prose, Markdown fences) is ignored. A balanced
    candidate that does not parse, such as ``[draft]`` in prose, is skipped
    and scanning resumes after it. A literal that never closes (a truncated
    response) is malformed.
    """

    if not isinstance(raw, str) or not raw.strip():
        raise MalformedPayload("Provider response is empty.")
    for start, end in _balanced_spans(raw):
        try:
            return json.loads(raw[start:end])
        except json.JSONDecodeError:
            continue
    raise MalformedPayload("No parseable JSON array or object found.")


def find_candidate_items(value: Any) -> list[Any]:
    """Locate the list of question items inside a parsed payload."""

    if isinstance(value, list):
        return value
    if not isinstance(value, Mapping):
        raise MalformedPayload("Payload is neither a JSON array nor an object.")
    found = _first_array_property(value)
    if found is None:
        raise MalformedPayload("No array of questions found in JSON object.")
    if len(found) == 1 and isinstance(found[0], Mapping):
        wrapper = found[0]
        if not _looks_like_question(wrapper):
            nested = _first_array_property(wrapper)
            if nested is not None:
                return nested
    return found


def validate_item(
    item: Any, index: int, make_id: IdFactory | None = None
) -> Question | PerItemValidationError:
    """Validate one candidate item, returning the error instead of raising."""

    if not isinstance(item, Mapping):
        return PerItemValidationError(
            index, ValidationReason.MISSING_FIELD, "item is not an object"
        )

    text = _first_text(item, QUESTION_TEXT_KEYS)
    if text is None:
        return PerItemValidationError(
            index, ValidationReason.MISSING_FIELD, "question text"
        )

    raw_options = _first_of_type(item, OPTIONS_KEYS, list)
    if raw_options is None:
        return PerItemValidationError(
            index, ValidationReason.MISSING_FIELD, "options"
        )
    options = normalize_options(raw_options)
    if len(options) != OPTION_COUNT or len(set(options)) != OPTION_COUNT:
        return PerItemValidationError(
            index,
            ValidationReason.WRONG_OPTION_COUNT,
            f"expected {OPTION_COUNT} distinct options, got {options!r}",
        )

    raw_answer = _first_answer(item)
    if raw_answer is None:
        return PerItemValidationError(
            index, ValidationReason.MISSING_FIELD, "correct answer"
        )
    correct = resolve_correct_answer(raw_answer, options)
    if isinstance(correct, ValidationReason):
        return PerItemValidationError(index, correct, repr(raw_answer))

    return Question(
        id=(make_id or _new_id)(),
        text=text,
        options=tuple(options),
        correct_answer=correct,
    )


def normalize_options(raw_options: Sequence[Any]) -> list[str]:
    """Reduce option entries to trimmed, non-empty strings in order."""

    options: list[str] = []
    for entry in raw_options:
        if isinstance(entry, Mapping):
            entry = _first_text(entry, OPTION_TEXT_KEYS)
        if isinstance(entry, str) and entry.strip():
            options.append(entry.strip())
    return options


def resolve_correct_answer(
    raw_answer: int | float | str, options: Sequence[str]
) -> str | ValidationReason:
    """Map an index or answer text onto the matching entry of ``options``."""

    if isinstance(raw_answer, (int, float)):
        if isinstance(raw_answer, float) and not raw_answer.is_integer():
            return ValidationReason.ANSWER_INDEX_OUT_OF_RANGE
        position = int(raw_answer)
        if 0 <= position < len(options):
            return options[position]
        return ValidationReason.ANSWER_INDEX_OUT_OF_RANGE

    candidate = raw_answer.strip()
    if candidate in options:
        return candidate
    folded = candidate.casefold()
    for option in options:
        if option.casefold() == folded:
            return option
    return ValidationReason.ANSWER_NOT_FOUND


def _balanced_spans(raw: str) -> Iterator[tuple[int, int]]:
    closers = {"[": "]", "{": "}"}
    pos = 0
    length = len(raw)
    while pos < length:
        if raw[pos] not in closers:
            pos += 1
            continue
        start = pos
        stack = [closers[raw[pos]]]
        in_string = False
        escaped = False
        pos += 1
        while pos < length and stack:
            ch = raw[pos]
            pos += 1
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch in closers:
                stack.append(closers[ch])
            elif ch in "]}":
                if ch != stack[-1]:
                    break
                stack.pop()
        if not stack:
            yield start, pos
        elif pos >= length:
            # Every later bracket sits inside this literal.
            raise MalformedPayload(
                "Provider response ends inside an unterminated JSON literal."
            )


def _first_array_property(obj: Mapping[str, Any]) -> list[Any] | None:
    for value in obj.values():
        if isinstance(value, list):
            return value
    return None


def _looks_like_question(obj: Mapping[str, Any]) -> bool:
    return any(key in obj for key in QUESTION_TEXT_KEYS + OPTIONS_KEYS)


def _first_text(obj: Mapping[str, Any], keys: Sequence[str]) -> str | None:
    for key in keys:
        value = obj.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _first_of_type(
    obj: Mapping[str, Any], keys: Sequence[str], kind: type
) -> Any:
    for key in keys:
        value = obj.get(key)
        if isinstance(value, kind):
            return value
    return None


def _first_answer(obj: Mapping[str, Any]) -> int | float | str | None:
    for key in CORRECT_ANSWER_KEYS:
        value = obj.get(key)
        if isinstance(value, bool):
            continue
        if isinstance(value, (int, float)):
            return value
        if isinstance(value, str) and value.strip():
            return value
    return None


def _new_id() -> str:
    return uuid.uuid4().hex
