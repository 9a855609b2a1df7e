from __future__ import annotations

import pytest

from fixtures import make_question

from quizmaster.quiz.models import (
    AnsweredQuestion,
    Difficulty,
    QuestionSet,
    SessionConfig,
    SessionResult,
)


def test_difficulty_parse_accepts_names_and_values() -> None:
    assert Difficulty.parse("easy") is Difficulty.EASY
    assert Difficulty.parse(" Hard ") is Difficulty.HARD
    assert Difficulty.parse(Difficulty.MEDIUM) is Difficulty.MEDIUM
    with pytest.raises(ValueError):
        Difficulty.parse("impossible")


def test_session_config_tables() -> None:
    assert SessionConfig(Difficulty.EASY).time_budget == 25
    assert SessionConfig(Difficulty.EASY).base_points == 10
    assert SessionConfig(Difficulty.MEDIUM).base_points == 20
    assert SessionConfig(Difficulty.HARD).time_budget < SessionConfig().time_budget


def test_question_set_is_an_immutable_sequence(questions) -> None:
    qs = QuestionSet(questions)
    questions.append(make_question("q3", "x", ["a", "b", "c", "d"], "a"))

    assert len(qs) == 2
    assert qs[0].id == "q1"
    assert [q.id for q in qs[::-1]] == ["q2", "q1"]
    assert qs == QuestionSet(questions[:2])


def test_session_result_helpers(questions) -> None:
    result = SessionResult(
        total_points=42,
        answered_questions=(
            AnsweredQuestion(questions[0], "Paris"),
            AnsweredQuestion(questions[1], None),
        ),
    )

    assert result.total_questions == 2
    assert result.correct_count == 1
    assert result.is_perfect is False
    assert result.answered_questions[1].is_correct is False


def test_question_to_dict_uses_provider_field_names(questions) -> None:
    assert questions[0].to_dict() == {
        "id": "q1",
        "question": "Capital of France?",
        "options": ["Paris", "Rome", "Berlin", "Madrid"],
        "correctAnswer": "Paris",
    }
