from .models import (
    AnsweredQuestion,
    BASE_POINTS,
    Difficulty,
    Question,
    QuestionSet,
    RoundOutcome,
    SessionConfig,
    SessionResult,
    TIME_BUDGETS,
)
from .normalizer import (
    ContentError,
    EmptyResult,
    MalformedPayload,
    PerItemValidationError,
    ValidationReason,
    normalize_payload,
)
from .session import (
    RoundPhase,
    SessionListener,
    SessionRunner,
    score_round,
)
from .timer import Countdown, Scheduler
from .generator import QuizGenerationError, generate_quiz
from .utils import read_question_set, write_question_set

__all__ = [
    "AnsweredQuestion",
    "BASE_POINTS",
    "Difficulty",
    "Question",
    "QuestionSet",
    "RoundOutcome",
    "SessionConfig",
    "SessionResult",
    "TIME_BUDGETS",
    "ContentError",
    "EmptyResult",
    "MalformedPayload",
    "PerItemValidationError",
    "ValidationReason",
    "normalize_payload",
    "RoundPhase",
    "SessionListener",
    "SessionRunner",
    "score_round",
    "Countdown",
    "Scheduler",
    "QuizGenerationError",
    "generate_quiz",
    "read_question_set",
    "write_question_set",
]
