"""Shared fakes for the quizmaster test suite."""

from .openai import OpenAIStub  # noqa: F401
from .scheduler import ManualScheduler, ScheduledCall  # noqa: F401
from .payloads import make_question, question_dict  # noqa: F401

__all__ = [
    "ManualScheduler",
    "OpenAIStub",
    "ScheduledCall",
    "make_question",
    "question_dict",
]
