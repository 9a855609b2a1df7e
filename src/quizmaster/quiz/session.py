"""Timed quiz session state machine.

A session walks the rounds of a ``QuestionSet`` one at a time. Each round
waits for the player to submit a selected option or for the countdown to
run out, reveals the outcome for a short, fixed delay and then moves on.
All state changes happen on the caller's scheduler (normally the running
``asyncio`` loop), so the runner itself needs no locking.

Round ``i`` moves through::

    AWAITING_ANSWER(i) --submit / expiry--> REVEALING(i) --delay--> next

where "next" is ``AWAITING_ANSWER(i + 1)`` or ``COMPLETE`` after the last
round. The seconds left on the clock are captured when the round leaves
``AWAITING_ANSWER`` and handed to the scoring step as an argument.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Sequence

from .models import (
    AnsweredQuestion,
    Question,
    RoundOutcome,
    SessionConfig,
    SessionResult,
)
from .timer import CancelHandle, Countdown, Scheduler

logger = logging.getLogger(__name__)

REVEAL_DELAY_SECONDS = 1.5
LOW_TIME_THRESHOLD = 5


class RoundPhase(str, Enum):
    AWAITING_ANSWER = "awaiting_answer"
    REVEALING = "revealing"
    COMPLETE = "complete"
    ABANDONED = "abandoned"


class SessionListener:
    """Receives advisory session signals; override what you need."""

    def on_round_started(
        self, index: int, question: Question, seconds: int
    ) -> None:
        pass

    def on_tick(self, index: int, seconds_remaining: int) -> None:
        pass

    def on_low_time(self, index: int, seconds_remaining: int) -> None:
        pass

    def on_expired(self, index: int) -> None:
        pass

    def on_revealed(self, index: int, outcome: RoundOutcome) -> None:
        pass

    def on_complete(self, result: SessionResult) -> None:
        pass


def score_round(
    correct: bool, seconds_remaining: int, config: SessionConfig
) -> int:
    """Points for one round: base points plus the time bonus, or nothing."""

    if not correct:
        return 0
    return config.base_points + max(0, seconds_remaining)


class SessionRunner:
    """Drive one play-through of a question set under a per-round timer."""

    def __init__(
        self,
        questions: Sequence[Question],
        config: SessionConfig,
        scheduler: Scheduler,
        *,
        listener: SessionListener | None = None,
        reveal_delay: float = REVEAL_DELAY_SECONDS,
    ) -> None:
        if not questions:
            raise ValueError("A session needs at least one question.")
        self.config = config
        self._scheduler = scheduler
        self._listener = listener or SessionListener()
        self._reveal_delay = reveal_delay
        self._slots = [AnsweredQuestion(question) for question in questions]
        self._outcomes: list[RoundOutcome] = []
        self._total_points = 0
        self._phase = RoundPhase.AWAITING_ANSWER
        self._index = 0
        self._selection: str | None = None
        self._countdown: Countdown | None = None
        self._reveal_handle: CancelHandle | None = None
        self._result: SessionResult | None = None
        self._started = False

    @property
    def phase(self) -> RoundPhase:
        return self._phase

    @property
    def index(self) -> int:
        return self._index

    @property
    def total_rounds(self) -> int:
        return len(self._slots)

    @property
    def current_question(self) -> Question:
        return self._slots[self._index].question

    @property
    def selection(self) -> str | None:
        return self._selection

    @property
    def seconds_remaining(self) -> int:
        if self._countdown is None:
            return self.config.time_budget
        return self._countdown.remaining

    @property
    def total_points(self) -> int:
        return self._total_points

    @property
    def outcomes(self) -> tuple[RoundOutcome, ...]:
        return tuple(self._outcomes)

    @property
    def answered_questions(self) -> tuple[AnsweredQuestion, ...]:
        return tuple(self._slots)

    @property
    def result(self) -> SessionResult | None:
        return self._result

    @property
    def has_live_countdown(self) -> bool:
        return self._countdown is not None and self._countdown.active

    def start(self) -> None:
        """Open round 0 and arm its countdown."""

        if self._started:
            raise RuntimeError("Session already started.")
        self._started = True
        logger.info(
            "Session started",
            extra={
                "rounds": self.total_rounds,
                "difficulty": self.config.difficulty.value,
            },
        )
        self._open_round(0)

    def select_option(self, index: int, value: str) -> bool:
        """Mark ``value`` as the pending choice for round ``index``.

        Ignored (returns ``False``) unless round ``index`` is the one
        currently awaiting an answer and ``value`` is one of its options.
        """

        if not self._accepting(index):
            return False
        if value not in self._slots[index].options:
            return False
        self._selection = value
        return True

    def submit(self) -> bool:
        """Lock in the pending choice for the current round."""

        if not self._accepting(self._index) or self._selection is None:
            return False
        remaining = self._countdown.remaining if self._countdown else 0
        self._conclude_round(self._selection, remaining)
        return True

    def abandon(self) -> None:
        """Stop the session early; no callback fires afterwards."""

        if self._phase in (RoundPhase.COMPLETE, RoundPhase.ABANDONED):
            return
        self._cancel_countdown()
        self._cancel_reveal()
        self._phase = RoundPhase.ABANDONED
        logger.info("Session abandoned", extra={"round": self._index})

    def _accepting(self, index: int) -> bool:
        return (
            self._started
            and self._phase is RoundPhase.AWAITING_ANSWER
            and index == self._index
        )

    def _open_round(self, index: int) -> None:
        self._index = index
        self._selection = None
        self._phase = RoundPhase.AWAITING_ANSWER
        self._arm_countdown()
        self._listener.on_round_started(
            index, self.current_question, self.config.time_budget
        )

    def _arm_countdown(self) -> None:
        self._cancel_countdown()
        countdown = Countdown(
            self._scheduler,
            self.config.time_budget,
            on_tick=self._on_tick,
            on_expire=self._on_expired,
        )
        self._countdown = countdown
        countdown.start()

    def _cancel_countdown(self) -> None:
        if self._countdown is not None:
            self._countdown.cancel()

    def _cancel_reveal(self) -> None:
        if self._reveal_handle is not None:
            self._reveal_handle.cancel()
            self._reveal_handle = None

    def _on_tick(self, seconds_remaining: int) -> None:
        self._listener.on_tick(self._index, seconds_remaining)
        if 0 < seconds_remaining <= LOW_TIME_THRESHOLD:
            self._listener.on_low_time(self._index, seconds_remaining)

    def _on_expired(self) -> None:
        if self._phase is not RoundPhase.AWAITING_ANSWER:
            return
        self._listener.on_expired(self._index)
        self._conclude_round(None, 0)

    def _conclude_round(self, answer: str | None, seconds_remaining: int) -> None:
        self._cancel_countdown()
        index = self._index
        slot = self._slots[index]
        correct = answer is not None and answer == slot.correct_answer
        points = score_round(correct, seconds_remaining, self.config)

        self._slots[index] = slot.answered(answer)
        outcome = RoundOutcome(
            index=index,
            answer=answer,
            correct=correct,
            seconds_remaining=seconds_remaining,
            points_awarded=points,
        )
        self._outcomes.append(outcome)
        self._total_points += points
        self._phase = RoundPhase.REVEALING
        logger.debug(
            "Round concluded",
            extra={
                "round": index,
                "correct": correct,
                "timed_out": answer is None,
                "points": points,
            },
        )

        self._listener.on_revealed(index, outcome)
        self._reveal_handle = self._scheduler.call_later(
            self._reveal_delay, self._after_reveal
        )

    def _after_reveal(self) -> None:
        self._reveal_handle = None
        if self._phase is not RoundPhase.REVEALING:
            return
        if self._index + 1 < len(self._slots):
            self._open_round(self._index + 1)
            return
        self._complete()

    def _complete(self) -> None:
        self._countdown = None
        self._phase = RoundPhase.COMPLETE
        self._result = SessionResult(
            total_points=self._total_points,
            answered_questions=tuple(self._slots),
        )
        logger.info(
            "Session complete",
            extra={
                "total_points": self._result.total_points,
                "correct": self._result.correct_count,
                "rounds": self._result.total_questions,
            },
        )
        self._listener.on_complete(self._result)
