"""Textual front-end that plays a ``QuestionSet`` through a ``SessionRunner``."""

import asyncio
from typing import Optional, Sequence

from textual.app import App, ComposeResult
from textual.containers import Container, Vertical
from textual.widgets import Button, Static

from .models import Question, RoundOutcome, SessionConfig, SessionResult
from .session import REVEAL_DELAY_SECONDS, SessionListener, SessionRunner


def timer_text(seconds_remaining: int, budget: int) -> str:
    width = 20
    filled = round(width * seconds_remaining / budget) if budget else 0
    bar = "█" * filled + "░" * (width - filled)
    return f"Time left: {seconds_remaining:>2}s  {bar}"


def option_label(position: int, option: str) -> str:
    return f"{position + 1}) {option}"


def feedback_text(outcome: RoundOutcome, question: Question) -> str:
    if outcome.correct:
        return f"Correct! +{outcome.points_awarded} points"
    if outcome.answer is None:
        return f"Time's up! The answer was: {question.correct_answer}"
    return f"Incorrect. The answer was: {question.correct_answer}"


class _ViewListener(SessionListener):
    def __init__(self, app: "QuizApp"):
        self.app = app

    def on_round_started(self, index, question, seconds):
        self.app.show_round(index, question, seconds)

    def on_tick(self, index, seconds_remaining):
        self.app.show_time(seconds_remaining)

    def on_low_time(self, index, seconds_remaining):
        self.app.warn_low_time()

    def on_revealed(self, index, outcome):
        self.app.show_outcome(outcome)

    def on_complete(self, result):
        self.app.exit(result)


class QuizApp(App[Optional[SessionResult]]):
    AUTO_FOCUS = None
    CSS = """
#timer.low-time { color: red; text-style: bold; }
#options Button { width: 100%; }
#options Button.selected { background: $accent; color: black; }
#options Button.correct { background: green; }
#options Button.wrong { background: red; }
"""
    BINDINGS = [
        ("1", "choose(0)", "Option 1"),
        ("2", "choose(1)", "Option 2"),
        ("3", "choose(2)", "Option 3"),
        ("4", "choose(3)", "Option 4"),
        ("a", "choose(0)", "Option 1"),
        ("b", "choose(1)", "Option 2"),
        ("c", "choose(2)", "Option 3"),
        ("d", "choose(3)", "Option 4"),
        ("enter", "submit", "Submit"),
        ("s", "submit", "Submit"),
        ("escape", "abandon", "Quit"),
    ]

    def __init__(
        self,
        questions: Sequence[Question],
        config: SessionConfig,
        *,
        reveal_delay: float = REVEAL_DELAY_SECONDS,
        sound: bool = True,
        topic: Optional[str] = None,
    ):
        super().__init__()
        self._questions = list(questions)
        self._config = config
        self._reveal_delay = reveal_delay
        self._sound = sound
        self._topic = topic
        self.runner: Optional[SessionRunner] = None

    def compose(self) -> ComposeResult:
        with Container(id="stage"):
            yield Static(self._topic or "", id="topic")
            yield Static("", id="progress")
            yield Static("", id="timer")
            yield Static("", id="question")
            with Vertical(id="options"):
                for position in range(4):
                    yield Button("", id=f"option-{position}")
            yield Button("Submit", id="submit")
            yield Static("", id="feedback")

    def on_mount(self) -> None:
        self.runner = SessionRunner(
            self._questions,
            self._config,
            asyncio.get_running_loop(),
            listener=_ViewListener(self),
            reveal_delay=self._reveal_delay,
        )
        self.runner.start()

    def on_unmount(self) -> None:
        if self.runner is not None:
            self.runner.abandon()

    def show_round(self, index: int, question: Question, seconds: int) -> None:
        self.query_one("#progress", Static).update(
            f"Question {index + 1} / {len(self._questions)}"
        )
        self.query_one("#question", Static).update(question.text)
        for position, option in enumerate(question.options):
            button = self.query_one(f"#option-{position}", Button)
            button.label = option_label(position, option)
            button.remove_class("selected", "correct", "wrong")
            button.disabled = False
        self.query_one("#feedback", Static).update("")
        timer = self.query_one("#timer", Static)
        timer.remove_class("low-time")
        timer.update(timer_text(seconds, self._config.time_budget))

    def show_time(self, seconds_remaining: int) -> None:
        self.query_one("#timer", Static).update(
            timer_text(seconds_remaining, self._config.time_budget)
        )

    def warn_low_time(self) -> None:
        self.query_one("#timer", Static).add_class("low-time")
        if self._sound:
            self.bell()

    def show_outcome(self, outcome: RoundOutcome) -> None:
        question = self._questions[outcome.index]
        for position, option in enumerate(question.options):
            button = self.query_one(f"#option-{position}", Button)
            button.disabled = True
            if option == question.correct_answer:
                button.add_class("correct")
            elif option == outcome.answer:
                button.add_class("wrong")
        self.query_one("#feedback", Static).update(
            feedback_text(outcome, question)
        )

    def action_choose(self, position: int) -> None:
        runner = self.runner
        if runner is None:
            return
        options = runner.current_question.options
        if not 0 <= position < len(options):
            return
        if not runner.select_option(runner.index, options[position]):
            return
        for pos in range(len(options)):
            button = self.query_one(f"#option-{pos}", Button)
            button.set_class(pos == position, "selected")

    def action_submit(self) -> None:
        if self.runner is not None:
            self.runner.submit()

    def action_abandon(self) -> None:
        if self.runner is not None:
            self.runner.abandon()
        self.exit(None)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        bid = getattr(event.button, "id", "") or ""
        if bid.startswith("option-"):
            self.action_choose(int(bid.rsplit("-", 1)[-1]))
        elif bid == "submit":
            self.action_submit()
