"""``quizmaster`` command line entry point."""

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console

from .core import (
    WorkspaceError,
    configure_logger,
    ensure_workspace,
    load_client,
)
from .quiz.config import (
    CONFIG_FILENAME,
    ConfigError,
    QuizMasterConfig,
    load_config,
    resolve_config_path,
    write_config_template,
)
from .quiz.generator import generate_quiz
from .quiz.models import Difficulty, QuestionSet, SessionConfig
from .quiz.normalizer import ContentError, normalize_payload
from .quiz.report import (
    render_content_error,
    render_question_set,
    render_summary,
)
from .quiz.utils import read_question_set, slugify, write_question_set
from .quiz.view import QuizApp

logger = logging.getLogger("quizmaster.cli")

console = Console()


def _setup(args: argparse.Namespace) -> tuple[QuizMasterConfig, Path]:
    layout = ensure_workspace()
    explicit = Path(args.config) if getattr(args, "config", None) else None
    cfg_path = resolve_config_path(
        explicit, config_dir=layout.path_for("config")
    )
    cfg = load_config(cfg_path)
    configure_logger(
        "quizmaster",
        log_dir=layout.path_for("logs"),
        level=cfg.logging.level,
        verbose=bool(getattr(args, "verbose", False)) or cfg.logging.verbose,
    )
    return cfg, layout.path_for("quizzes")


def _difficulty_for(args: argparse.Namespace, cfg: QuizMasterConfig) -> Difficulty:
    raw = getattr(args, "difficulty", None)
    return Difficulty.parse(raw) if raw else cfg.quiz.difficulty


def _generate(
    topic: str, args: argparse.Namespace, cfg: QuizMasterConfig
) -> Optional[QuestionSet]:
    count = args.count if getattr(args, "count", None) else cfg.quiz.question_count
    audience = getattr(args, "audience", None) or cfg.quiz.audience
    with console.status(f"Generating quiz on {topic!r}..."):
        try:
            return generate_quiz(
                topic,
                difficulty=_difficulty_for(args, cfg),
                count=count,
                audience=audience,
                client=load_client(api_base=cfg.ai.api_base),
                model=cfg.ai.model,
                temperature=cfg.ai.temperature,
                max_tokens=cfg.ai.max_tokens,
            )
        except ContentError as exc:
            render_content_error(console, exc)
        except RuntimeError as exc:
            logger.warning("Quiz generation failed: %s", exc)
            console.print(f"[red]Error:[/] {exc}")
    return None


def _cmd_init(args: argparse.Namespace) -> int:
    if args.config:
        path = Path(args.config).expanduser()
    else:
        path = ensure_workspace().path_for("config") / CONFIG_FILENAME
    try:
        write_config_template(path, overwrite=args.force)
    except ConfigError as exc:
        console.print(f"{exc} (use --force to overwrite)")
        return 0
    console.print(f"Created template {path}")
    return 0


def _cmd_generate(args: argparse.Namespace) -> int:
    cfg, quizzes_dir = _setup(args)
    questions = _generate(args.topic, args, cfg)
    if questions is None:
        return 1
    out = (
        Path(args.out)
        if args.out
        else quizzes_dir / f"{slugify(args.topic)}.jsonl"
    )
    write_question_set(out, questions)
    render_question_set(console, questions)
    console.print(f"Wrote {len(questions)} question(s) -> {out}")
    return 0


def _cmd_normalize(args: argparse.Namespace) -> int:
    _setup(args)
    path = Path(args.file)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        console.print(f"[red]Error:[/] cannot read {path}: {exc}")
        return 2
    try:
        questions = normalize_payload(raw)
    except ContentError as exc:
        render_content_error(console, exc)
        return 1
    render_question_set(console, questions)
    if args.out:
        write_question_set(Path(args.out), questions)
        console.print(f"Wrote {len(questions)} question(s) -> {args.out}")
    return 0


def _cmd_play(args: argparse.Namespace) -> int:
    cfg, _ = _setup(args)
    if args.questions:
        try:
            questions = read_question_set(Path(args.questions))
        except (OSError, ValueError) as exc:
            console.print(f"[red]Error:[/] cannot load quiz: {exc}")
            return 1
        topic = args.topic or Path(args.questions).stem
    elif args.topic:
        questions = _generate(args.topic, args, cfg)
        if questions is None:
            return 1
        topic = args.topic
    else:
        console.print("Error: provide a TOPIC or --questions FILE")
        return 2

    session_config = SessionConfig(difficulty=_difficulty_for(args, cfg))
    app = QuizApp(
        questions,
        session_config,
        reveal_delay=cfg.session.reveal_delay,
        sound=args.sound,
        topic=topic,
    )
    result = app.run()
    if result is None:
        console.print("[bold yellow]Session ended without finishing.[/]")
        return 1
    logger.info(
        "Quiz finished",
        extra={"topic": topic, "total_points": result.total_points},
    )
    render_summary(console, result, config=session_config, topic=topic)
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="quizmaster",
        description="Generate and play timed multiple-choice quizzes",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    p.add_argument("--config", help="Path to quizmaster.toml")
    p.add_argument(
        "-v", "--verbose", action="store_true", help="Log to stderr as well"
    )
    sub = p.add_subparsers(dest="command", required=True)
    difficulties = [d.value for d in Difficulty]

    sp_init = sub.add_parser("init", help="Write a quizmaster.toml template")
    sp_init.add_argument("--force", action="store_true")

    sp_gen = sub.add_parser("generate", help="Generate and save a quiz")
    sp_gen.add_argument("topic")
    sp_gen.add_argument("--difficulty", choices=difficulties)
    sp_gen.add_argument("--count", type=int)
    sp_gen.add_argument("--audience", help="Occupation to tailor questions to")
    sp_gen.add_argument("--out", help="Output JSONL path")

    sp_norm = sub.add_parser(
        "normalize", help="Validate a raw provider response file"
    )
    sp_norm.add_argument("file")
    sp_norm.add_argument("--out", help="Save the validated quiz as JSONL")

    sp_play = sub.add_parser("play", help="Play a timed quiz")
    sp_play.add_argument("topic", nargs="?")
    sp_play.add_argument("--questions", help="Saved quiz JSONL to replay")
    sp_play.add_argument("--difficulty", choices=difficulties)
    sp_play.add_argument("--count", type=int)
    sp_play.add_argument("--audience")
    sp_play.add_argument("--sound", dest="sound", action="store_true")
    sp_play.add_argument("--no-sound", dest="sound", action="store_false")
    sp_play.set_defaults(sound=True)
    return p


_HANDLERS = {
    "init": _cmd_init,
    "generate": _cmd_generate,
    "normalize": _cmd_normalize,
    "play": _cmd_play,
}


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    try:
        code = _HANDLERS[args.command](args)
    except (ConfigError, WorkspaceError) as exc:
        console.print(f"[red]Error:[/] {exc}")
        code = 2
    raise SystemExit(code)


if __name__ == "__main__":  # pragma: no cover
    main()
