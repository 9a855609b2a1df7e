"""Ask the content provider for a quiz and normalize what comes back."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from ..core import load_client
from .models import Difficulty, QuestionSet
from .normalizer import IdFactory, normalize_payload

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_QUESTION_COUNT = 5
MIN_RECOMMENDED_QUESTIONS = 3

_DIFFICULTY_HINTS = {
    Difficulty.EASY: "suitable for beginners; common knowledge",
    Difficulty.MEDIUM: "for someone with general familiarity with the topic",
    Difficulty.HARD: "challenging; expert-level detail and subtle distractors",
}


class QuizGenerationError(RuntimeError):
    """Raised when the provider call itself fails."""


def build_quiz_prompts(
    topic: str,
    *,
    count: int = DEFAULT_QUESTION_COUNT,
    difficulty: Difficulty = Difficulty.MEDIUM,
    audience: Optional[str] = None,
) -> Tuple[str, str]:
    sys_prompt = (
        "You are an expert quiz generator. Your sole task is to output a "
        "valid JSON array."
    )
    audience_line = (
        f"Tailor the questions to someone working as: {audience.strip()}.\n"
        if audience and audience.strip()
        else ""
    )
    user_prompt = (
        f'Create a quiz about the topic: "{topic.strip()}".\n'
        f"The quiz must consist of {count} multiple-choice questions.\n"
        f"Difficulty: {difficulty.value} "
        f"({_DIFFICULTY_HINTS[difficulty]}).\n"
        f"{audience_line}"
        "Each question must have exactly 4 unique answer options and exactly "
        "one correct option, identified by its text.\n"
        "Output ONLY a JSON array of objects, each following this format:\n"
        '{"question": str, "options": [str, str, str, str], '
        '"correctAnswer": str}\n'
        "The correctAnswer value must be one of the strings in options."
    )
    return sys_prompt, user_prompt


def request_quiz_content(
    client: object,
    *,
    model: str,
    system_prompt: str,
    user_prompt: str,
    temperature: float,
    max_tokens: int,
) -> str:
    """Return the raw text of a chat completion, unvalidated."""

    try:
        resp = client.chat.completions.create(  # type: ignore[attr-defined]
            model=model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
        )
        raw_content = resp.choices[0].message.content  # type: ignore[index]
    except Exception as exc:
        logger.error("Quiz provider request failed: %s", exc)
        raise QuizGenerationError(f"Failed to generate quiz: {exc}") from exc
    if not isinstance(raw_content, str):
        raise QuizGenerationError(
            "Failed to generate quiz: provider returned no text content."
        )
    return raw_content.strip()


def generate_quiz(
    topic: str,
    *,
    difficulty: Difficulty = Difficulty.MEDIUM,
    count: int = DEFAULT_QUESTION_COUNT,
    audience: Optional[str] = None,
    client: object = None,
    model: str = DEFAULT_MODEL,
    temperature: float = 0.3,
    max_tokens: int = 1500,
    id_factory: IdFactory | None = None,
) -> QuestionSet:
    """Generate and validate a quiz on ``topic``.

    Raises :class:`QuizGenerationError` for provider failures and
    :class:`~quizmaster.quiz.normalizer.ContentError` when the response
    cannot be turned into a quiz. Nothing is retried here; callers decide
    whether to ask again.
    """

    if not topic or not topic.strip():
        raise ValueError("A quiz topic is required.")
    if count <= 0:
        raise ValueError("count must be positive")
    resolved_client = client if client is not None else load_client()

    sys_prompt, user_prompt = build_quiz_prompts(
        topic, count=count, difficulty=difficulty, audience=audience
    )
    content = request_quiz_content(
        resolved_client,
        model=model,
        system_prompt=sys_prompt,
        user_prompt=user_prompt,
        temperature=temperature,
        max_tokens=max_tokens,
    )
    questions = normalize_payload(content, id_factory=id_factory)
    if len(questions) < MIN_RECOMMENDED_QUESTIONS:
        logger.warning(
            "Generated quiz has only %d question(s)",
            len(questions),
            extra={"topic": topic, "requested": count},
        )
    logger.info(
        "Generated quiz",
        extra={
            "topic": topic,
            "difficulty": difficulty.value,
            "questions": len(questions),
        },
    )
    return questions
