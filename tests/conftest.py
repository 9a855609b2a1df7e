from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterator

import pytest

TESTS_DIR = Path(__file__).resolve().parent
ROOT = TESTS_DIR.parent
for extra in (TESTS_DIR, ROOT / "src"):
    path_str = str(extra)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

from fixtures import ManualScheduler, OpenAIStub, make_question  # noqa: E402

from quizmaster.core.logging import release_logger  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    yield
    release_logger("quizmaster")
    logging.getLogger("quizmaster").propagate = True


@pytest.fixture(autouse=True)
def _isolated_workspace(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Path:
    home = tmp_path / "qm-home"
    monkeypatch.setenv("QUIZMASTER_DATA_HOME", str(home))
    monkeypatch.delenv("QUIZMASTER_CONFIG", raising=False)
    return home


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Deterministic stand-in for the event loop's ``call_later``."""

    return ManualScheduler()


@pytest.fixture
def openai_stub() -> OpenAIStub:
    return OpenAIStub()


@pytest.fixture
def questions():
    return [
        make_question("q1", "Capital of France?", ["Paris", "Rome", "Berlin", "Madrid"], "Paris"),
        make_question("q2", "2 + 2?", ["3", "4", "5", "22"], "4"),
    ]
