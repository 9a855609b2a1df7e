"""Settings for quizmaster, backed by an optional TOML file.

Lookup order: an explicit ``--config`` path, then ``$QUIZMASTER_CONFIG``,
then ``<workspace>/config/quizmaster.toml``. Missing files fall back to the
built-in defaults; unknown keys are rejected.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ..core.config import (
    TomlConfigError,
    load_toml,
    merge_defaults,
    require_bool,
    require_choice,
    require_float_range,
    require_positive_int,
    require_string,
    write_toml_template,
)
from .models import Difficulty
from .session import REVEAL_DELAY_SECONDS

CONFIG_PATH_ENV = "QUIZMASTER_CONFIG"
CONFIG_FILENAME = "quizmaster.toml"


class ConfigError(TomlConfigError):
    """Raised when quizmaster settings are invalid."""


@dataclass(frozen=True)
class AIConfig:
    model: str
    temperature: float
    max_tokens: int
    api_base: Optional[str]


@dataclass(frozen=True)
class QuizConfig:
    question_count: int
    difficulty: Difficulty
    audience: Optional[str]


@dataclass(frozen=True)
class SessionSettings:
    reveal_delay: float


@dataclass(frozen=True)
class LoggingConfig:
    level: str
    verbose: bool


@dataclass(frozen=True)
class QuizMasterConfig:
    ai: AIConfig
    quiz: QuizConfig
    session: SessionSettings
    logging: LoggingConfig


_DEFAULTS: Dict[str, Any] = {
    "ai": {
        "model": "gpt-4o-mini",
        "temperature": 0.3,
        "max_tokens": 1500,
        "api_base": "",
    },
    "quiz": {
        "question_count": 5,
        "difficulty": Difficulty.MEDIUM.value,
        "audience": "",
    },
    "session": {
        "reveal_delay": REVEAL_DELAY_SECONDS,
    },
    "logging": {
        "level": "INFO",
        "verbose": False,
    },
}

CONFIG_TEMPLATE = """\
# quizmaster configuration

[ai]
model = "gpt-4o-mini"
temperature = 0.3
max_tokens = 1500
# Leave empty to use the default OpenAI endpoint.
api_base = ""

[quiz]
question_count = 5
# One of: Easy, Medium, Hard
difficulty = "Medium"
# Optional occupation or audience the questions should be tailored to.
audience = ""

[session]
# Seconds the answer stays on screen before the next question.
reveal_delay = 1.5

[logging]
level = "INFO"
verbose = false
"""


def default_config() -> QuizMasterConfig:
    return _build(copy.deepcopy(_DEFAULTS))


def resolve_config_path(
    explicit: Optional[Path] = None,
    *,
    env: Optional[Mapping[str, str]] = None,
    config_dir: Optional[Path] = None,
) -> Optional[Path]:
    if explicit is not None:
        return explicit.expanduser()
    env_map = os.environ if env is None else env
    from_env = (env_map.get(CONFIG_PATH_ENV) or "").strip()
    if from_env:
        return Path(from_env).expanduser()
    if config_dir is not None:
        candidate = config_dir / CONFIG_FILENAME
        if candidate.exists():
            return candidate
    return None


def load_config(path: Optional[Path] = None) -> QuizMasterConfig:
    """Load settings from ``path`` merged over the defaults."""

    data = copy.deepcopy(_DEFAULTS)
    if path is not None:
        try:
            merge_defaults(data, load_toml(path))
        except TomlConfigError as exc:
            raise ConfigError(str(exc)) from exc
    return _build(data)


def write_config_template(path: Path, *, overwrite: bool = False) -> Path:
    try:
        return write_toml_template(
            path, template=CONFIG_TEMPLATE, overwrite=overwrite
        )
    except TomlConfigError as exc:
        raise ConfigError(str(exc)) from exc


def _optional_text(value: Any, *, field: str) -> Optional[str]:
    if value is None or value == "":
        return None
    try:
        return require_string(value, field=field)
    except TomlConfigError as exc:
        raise ConfigError(str(exc)) from exc


def _build(data: Mapping[str, Any]) -> QuizMasterConfig:
    ai, quiz = data["ai"], data["quiz"]
    session, log = data["session"], data["logging"]
    try:
        difficulty = require_choice(
            quiz["difficulty"],
            field="quiz.difficulty",
            choices=tuple(member.value for member in Difficulty),
        )
        return QuizMasterConfig(
            ai=AIConfig(
                model=require_string(ai["model"], field="ai.model"),
                temperature=require_float_range(
                    ai["temperature"],
                    field="ai.temperature",
                    min_value=0.0,
                    max_value=2.0,
                ),
                max_tokens=require_positive_int(
                    ai["max_tokens"], field="ai.max_tokens"
                ),
                api_base=_optional_text(ai["api_base"], field="ai.api_base"),
            ),
            quiz=QuizConfig(
                question_count=require_positive_int(
                    quiz["question_count"], field="quiz.question_count"
                ),
                difficulty=Difficulty(difficulty),
                audience=_optional_text(
                    quiz["audience"], field="quiz.audience"
                ),
            ),
            session=SessionSettings(
                reveal_delay=require_float_range(
                    session["reveal_delay"],
                    field="session.reveal_delay",
                    min_value=0.0,
                    max_value=30.0,
                ),
            ),
            logging=LoggingConfig(
                level=require_choice(
                    log["level"],
                    field="logging.level",
                    choices=("DEBUG", "INFO", "WARNING", "ERROR"),
                ),
                verbose=require_bool(log["verbose"], field="logging.verbose"),
            ),
        )
    except ConfigError:
        raise
    except TomlConfigError as exc:
        raise ConfigError(str(exc)) from exc
