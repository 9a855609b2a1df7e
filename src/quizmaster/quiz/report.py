"""Rich rendering of finished sessions and question sets."""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import QuestionSet, SessionConfig, SessionResult
from .normalizer import ContentError, PerItemValidationError


def render_summary(
    console: Console,
    result: SessionResult,
    *,
    config: SessionConfig | None = None,
    topic: str | None = None,
) -> None:
    console.print()
    title = f"Quiz Summary — {topic}" if topic else "Quiz Summary"
    console.rule(Text(title, style="bold magenta"))

    overview = Table(
        show_header=False,
        box=box.MINIMAL_DOUBLE_HEAD,
        expand=False,
    )
    overview.add_column("Metric", style="bold")
    overview.add_column("Value", justify="right")
    if config is not None:
        overview.add_row("Difficulty", config.difficulty.value)
    overview.add_row("Questions", str(result.total_questions))
    overview.add_row("Correct", str(result.correct_count))
    overview.add_row("Points", str(result.total_points))
    console.print(overview)

    responses = Table(title="Responses", box=box.SIMPLE, expand=True)
    responses.add_column("#", justify="right")
    responses.add_column("Question", overflow="fold")
    responses.add_column("Your answer")
    responses.add_column("Correct answer")
    responses.add_column("Result", justify="center")

    for idx, item in enumerate(result.answered_questions, start=1):
        if item.user_answer is None:
            outcome = "⏱"
        else:
            outcome = "✅" if item.is_correct else "❌"
        responses.add_row(
            str(idx),
            item.text,
            item.user_answer or "—",
            item.correct_answer,
            outcome,
        )
    console.print(responses)

    if result.is_perfect:
        console.print(
            Panel("Perfect score!", border_style="green", expand=False)
        )


def render_question_set(console: Console, questions: QuestionSet) -> None:
    table = Table(title="Questions", box=box.SIMPLE, expand=True)
    table.add_column("#", justify="right")
    table.add_column("Question", overflow="fold")
    table.add_column("Options", overflow="fold")
    for idx, question in enumerate(questions, start=1):
        options = Text()
        for pos, option in enumerate(question.options):
            if pos:
                options.append("\n")
            style = "bold green" if option == question.correct_answer else ""
            options.append(f"{pos + 1}. {option}", style=style)
        table.add_row(str(idx), question.text, options)
    console.print(table)


def render_content_error(console: Console, error: ContentError) -> None:
    lines = [str(error)]
    if isinstance(error, PerItemValidationError):
        lines.append(f"Item: {error.index}  Reason: {error.reason.value}")
    lines.append("Could not build a quiz. Try generating it again.")
    console.print(
        Panel(
            "\n".join(lines),
            title=type(error).__name__,
            border_style="red",
        )
    )
