"""Quiz data model shared by the normalizer, the session runner and views."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterator, Sequence

OPTION_COUNT = 4


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"

    @classmethod
    def parse(cls, value: str | "Difficulty") -> "Difficulty":
        if isinstance(value, Difficulty):
            return value
        text = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == text or member.name.lower() == text:
                return member
        raise ValueError(f"Unknown difficulty: {value!r}")


# Seconds on the clock for each round.
TIME_BUDGETS: dict[Difficulty, int] = {
    Difficulty.EASY: 25,
    Difficulty.MEDIUM: 20,
    Difficulty.HARD: 15,
}

# Points for a correct answer before the time bonus.
BASE_POINTS: dict[Difficulty, int] = {
    Difficulty.EASY: 10,
    Difficulty.MEDIUM: 20,
    Difficulty.HARD: 30,
}


@dataclass(frozen=True)
class Question:
    """A validated multiple-choice question.

    ``options`` always holds four distinct strings and ``correct_answer`` is
    one of them, character for character.
    """

    id: str
    text: str
    options: tuple[str, ...]
    correct_answer: str

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "question": self.text,
            "options": list(self.options),
            "correctAnswer": self.correct_answer,
        }


class QuestionSet(Sequence[Question]):
    """Immutable, ordered collection of questions from one generation."""

    __slots__ = ("_questions",)

    def __init__(self, questions: Sequence[Question]):
        self._questions = tuple(questions)

    def __getitem__(self, index):  # type: ignore[override]
        return self._questions[index]

    def __len__(self) -> int:
        return len(self._questions)

    def __iter__(self) -> Iterator[Question]:
        return iter(self._questions)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, QuestionSet):
            return self._questions == other._questions
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._questions)

    def __repr__(self) -> str:
        return f"QuestionSet({len(self._questions)} questions)"


@dataclass(frozen=True)
class AnsweredQuestion:
    """A question together with what the player chose (``None`` on timeout)."""

    question: Question
    user_answer: str | None = None

    @property
    def id(self) -> str:
        return self.question.id

    @property
    def text(self) -> str:
        return self.question.text

    @property
    def options(self) -> tuple[str, ...]:
        return self.question.options

    @property
    def correct_answer(self) -> str:
        return self.question.correct_answer

    @property
    def is_correct(self) -> bool:
        return self.user_answer == self.question.correct_answer

    def answered(self, answer: str | None) -> "AnsweredQuestion":
        return replace(self, user_answer=answer)


@dataclass(frozen=True)
class SessionConfig:
    difficulty: Difficulty = Difficulty.MEDIUM

    @property
    def time_budget(self) -> int:
        return TIME_BUDGETS[self.difficulty]

    @property
    def base_points(self) -> int:
        return BASE_POINTS[self.difficulty]


@dataclass(frozen=True)
class RoundOutcome:
    index: int
    answer: str | None
    correct: bool
    seconds_remaining: int
    points_awarded: int

    @property
    def timed_out(self) -> bool:
        return self.answer is None


@dataclass(frozen=True)
class SessionResult:
    """Final transcript of a completed session."""

    total_points: int
    answered_questions: tuple[AnsweredQuestion, ...]

    @property
    def total_questions(self) -> int:
        return len(self.answered_questions)

    @property
    def correct_count(self) -> int:
        return sum(1 for item in self.answered_questions if item.is_correct)

    @property
    def is_perfect(self) -> bool:
        return bool(self.answered_questions) and (
            self.correct_count == self.total_questions
        )
