from __future__ import annotations

import json
import logging
import tempfile
from enum import Enum
from pathlib import Path

from quizmaster.core import logging as core_logging


class _Reason(str, Enum):
    LATE = "Late"


def test_configure_logger_writes_json(tmp_path):
    logger, log_path = core_logging.configure_logger(
        "quizmaster.test_json",
        log_dir=tmp_path / "logs",
        filename="test.log",
    )

    logger.info("round concluded", extra={"round": 2, "reason": _Reason.LATE})
    try:
        raise ValueError("boom")
    except ValueError:
        logger.exception(
            "with error",
            extra={"items": [Path("a"), 1], "obj": _Helper()},
        )
    for handler in logger.handlers:
        handler.flush()

    lines = log_path.read_text(encoding="utf-8").strip().splitlines()
    first = json.loads(lines[0])
    assert first["message"] == "round concluded"
    assert first["logger"] == "quizmaster.test_json"
    assert first["extra"] == {"round": 2, "reason": "Late"}

    last = json.loads(lines[-1])
    assert "ValueError: boom" in last["exception"]
    assert last["extra"]["items"] == ["a", 1]
    assert last["extra"]["obj"] == "helper"

    core_logging.release_logger("quizmaster.test_json")


class _Helper:
    def __repr__(self):  # noqa: D401
        return "helper"


def test_level_filters_file_output(tmp_path):
    logger, log_path = core_logging.configure_logger(
        "quizmaster.test_level",
        log_dir=tmp_path,
        level="WARNING",
        filename="level.log",
    )

    logger.info("hidden")
    logger.warning("shown")
    for handler in logger.handlers:
        handler.flush()

    contents = log_path.read_text(encoding="utf-8")
    assert "hidden" not in contents
    assert "shown" in contents
    core_logging.release_logger("quizmaster.test_level")


def test_console_handler_toggle(tmp_path):
    name = "quizmaster.test_toggle"

    def console_handlers(logger):
        return [
            h for h in logger.handlers if getattr(h, "_quizmaster_console", False)
        ]

    logger, _ = core_logging.configure_logger(
        name, log_dir=tmp_path, verbose=True, filename="t.log"
    )
    assert len(console_handlers(logger)) == 1

    core_logging.configure_logger(
        name, log_dir=tmp_path, verbose=True, filename="t.log"
    )
    assert len(console_handlers(logger)) == 1
    assert len(logger.handlers) == 2

    core_logging.configure_logger(
        name, log_dir=tmp_path, verbose=False, filename="t.log"
    )
    assert console_handlers(logger) == []

    core_logging.release_logger(name)
    assert logger.handlers == []


def test_unwritable_directory_falls_back(tmp_path, monkeypatch):
    blocked = tmp_path / "blocked"
    fallback = tmp_path / "fallback"
    original_mkdir = Path.mkdir

    def fake_mkdir(self, *args, **kwargs):  # noqa: ANN001
        if self == blocked:
            raise PermissionError("denied")
        return original_mkdir(self, *args, **kwargs)

    monkeypatch.setattr(Path, "mkdir", fake_mkdir)
    monkeypatch.setattr(core_logging, "_fallback_log_dir", lambda: fallback)

    logger, log_path = core_logging.configure_logger(
        "quizmaster.test_blocked", log_dir=blocked, filename="b.log"
    )

    assert log_path == fallback / "b.log"
    assert log_path.exists()
    core_logging.release_logger("quizmaster.test_blocked")


def test_rotating_handler_permission_error_falls_back(tmp_path, monkeypatch):
    calls = {"count": 0}
    fallback = tmp_path / "rotate-fallback"
    original_handler = core_logging.RotatingFileHandler

    def fake_handler(path, *args, **kwargs):  # noqa: ANN001
        calls["count"] += 1
        if calls["count"] == 1:
            raise PermissionError("denied")
        return original_handler(path, *args, **kwargs)

    monkeypatch.setattr(core_logging, "RotatingFileHandler", fake_handler)
    monkeypatch.setattr(core_logging, "_fallback_log_dir", lambda: fallback)

    _, log_path = core_logging.configure_logger(
        "quizmaster.test_rotating",
        log_dir=tmp_path / "primary",
        filename="r.log",
    )

    assert log_path.parent == fallback
    assert calls["count"] == 2
    core_logging.release_logger("quizmaster.test_rotating")


def test_fallback_log_dir_uses_tempdir(tmp_path, monkeypatch):
    monkeypatch.setattr(tempfile, "gettempdir", lambda: str(tmp_path))

    assert core_logging._fallback_log_dir() == tmp_path / "quizmaster-logs"


def test_coerce_level_defaults():
    assert core_logging._coerce_level("bogus") == logging.INFO
    assert core_logging._coerce_level("debug") == logging.DEBUG
