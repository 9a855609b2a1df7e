from __future__ import annotations

import asyncio

from fixtures import make_question

from quizmaster.quiz.models import Difficulty, RoundOutcome, SessionConfig
from quizmaster.quiz.session import RoundPhase
from quizmaster.quiz.view import (
    QuizApp,
    feedback_text,
    option_label,
    timer_text,
)


QUESTION = make_question("q", "Sky colour?", ["Blue", "Red", "Green", "Pink"], "Blue")


def test_timer_text_scales_bar() -> None:
    full = timer_text(20, 20)
    half = timer_text(10, 20)

    assert full.startswith("Time left: 20s")
    assert full.count("█") == 20
    assert half.count("█") == 10
    assert timer_text(0, 20).count("█") == 0


def test_option_label_is_one_based() -> None:
    assert option_label(0, "Blue") == "1) Blue"


def test_feedback_text_variants() -> None:
    correct = RoundOutcome(0, "Blue", True, 12, 22)
    wrong = RoundOutcome(0, "Red", False, 12, 0)
    timeout = RoundOutcome(0, None, False, 0, 0)

    assert feedback_text(correct, QUESTION) == "Correct! +22 points"
    assert feedback_text(wrong, QUESTION).startswith("Incorrect.")
    assert "Blue" in feedback_text(timeout, QUESTION)
    assert feedback_text(timeout, QUESTION).startswith("Time's up")


def test_app_defers_runner_until_mount() -> None:
    app = QuizApp([QUESTION], SessionConfig(Difficulty.HARD), reveal_delay=0.5)

    assert app.runner is None
    app.action_submit()
    app.action_choose(0)
    assert app.runner is None


def test_keys_drive_the_mounted_runner() -> None:
    app = QuizApp(
        [QUESTION],
        SessionConfig(Difficulty.EASY),
        reveal_delay=30,
        sound=False,
    )

    async def play():
        async with app.run_test() as pilot:
            await pilot.press("1")
            await pilot.press("enter")
            await pilot.pause()
            runner = app.runner
            assert runner is not None
            assert runner.phase is RoundPhase.REVEALING
            assert len(runner.outcomes) == 1
            outcome = runner.outcomes[0]
            assert outcome.answer == "Blue"
            assert outcome.correct
            assert outcome.points_awarded >= 10
        return runner

    runner = asyncio.run(play())

    assert runner.phase is RoundPhase.ABANDONED
    assert not runner.has_live_countdown
