from __future__ import annotations

"""CLI entry point for quizsession."""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from storage.store import (
    append_attempts as storage_append,
    init_store as storage_init_store,
    latest_attempt,
    load_all,
    row_from_completion,
    validate_records as storage_validate_records,
)

from . import __version__
from .app import explain
from .app.events import EventBus
from .app.runner import run_session
from .config.config import load_config, validate_config
from .engine.errors import QuizSessionError
from .engine.models import CompletionEvent
from .engine.order import OrderGenerator
from .engine.session_manager import SessionManager
from .engine.timer import ElapsedTimer
from .storage.store import JsonFileBackend, KeyValueBackend, MemoryBackend, SessionStore
from .util.randomness import make_rng


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="quizsession: run a multiple-choice quiz in the terminal")
    p.add_argument("--questions", type=str, default=None, help="Path to a YAML or JSON question set")
    p.add_argument("--chapter", type=str, default=None, help="Chapter id used as the progress key (default: file stem)")
    p.add_argument("--config", type=str, default=None, help="Path to YAML config")
    p.add_argument("--seed", type=int, default=None, help="Seed for question shuffling")
    p.add_argument("--review", action="store_true", help="Review the latest submitted attempt for the chapter")
    p.add_argument("--explain", action="store_true", help="Print trace lines at session milestones")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    return p.parse_args(argv)


def load_question_file(path: Path) -> List[Dict[str, Any]]:
    """Read a question set: a list of question objects, or a mapping with ``questions``."""
    text = Path(path).read_text(encoding="utf-8")
    if Path(path).suffix.lower() == ".json":
        data = json.loads(text)
    else:
        data = yaml.safe_load(text)
    if isinstance(data, dict):
        data = data.get("questions") or data.get("mcqData") or []
    if not isinstance(data, list):
        raise ValueError(f"Question file must hold a list of questions: {path}")
    return data


def make_store(cfg: Dict[str, Any]) -> SessionStore:
    st = cfg["storage"]
    backend: KeyValueBackend
    if st["backend"] == "memory":
        backend = MemoryBackend()
    else:
        backend = JsonFileBackend(Path(st["progress_dir"]))
    return SessionStore(backend, key_prefix=st["key_prefix"])


def _record_attempt(event: CompletionEvent, data_dir: Path) -> None:
    storage_init_store(data_dir)
    df_rows = storage_validate_records([row_from_completion(event.to_json())])
    storage_append(df_rows, data_dir)


def cli(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    if args.version:
        print(f"quizsession {__version__}")
        sys.exit(0)
    if not args.questions:
        print("ERROR: --questions is required.", file=sys.stderr)
        sys.exit(2)

    cfg = validate_config(load_config(args.config))
    explain.enable(args.explain or cfg["ui"]["explain"])

    qpath = Path(args.questions)
    chapter_id = args.chapter or qpath.stem
    try:
        questions = load_question_file(qpath)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"ERROR: Could not read questions: {e}", file=sys.stderr)
        sys.exit(1)

    history_cfg = cfg["history"]
    history_dir = Path(history_cfg["data_dir"])
    bus = EventBus()
    if history_cfg["enabled"]:
        bus.subscribe("completed", lambda event: _record_attempt(event, history_dir))

    try:
        session = SessionManager(
            chapter_id,
            questions,
            store=make_store(cfg),
            page_size=cfg["quiz"]["page_size"],
            min_threshold=cfg["quiz"]["min_required"],
            generator=OrderGenerator(make_rng(args.seed)),
            timer=ElapsedTimer(cfg["timer"]["tick_seconds"]),
            bus=bus,
        )
    except QuizSessionError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)

    if args.review:
        attempt = latest_attempt(load_all(history_dir), chapter_id)
        if attempt is None:
            print(f"No submitted attempt found for chapter '{chapter_id}'.")
            sys.exit(0)
        try:
            session.initialize(historical_answers=attempt["answers"], historical_order=attempt["order"])
        except QuizSessionError as e:
            print(f"ERROR: Stored attempt is unreadable: {e}", file=sys.stderr)
            sys.exit(1)

    print(f"Starting quiz '{chapter_id}' ({len(session.questions)} questions).")
    run_session(session, {"ask": input, "inform": print})


if __name__ == "__main__":
    cli()
