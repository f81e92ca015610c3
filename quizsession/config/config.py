from __future__ import annotations

"""Configuration loading and validation for quizsession.

This module loads YAML configuration, applies defaults, and validates
that enumerations and numeric limits are sane for the CLI host.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import sys

import yaml


ALLOWED_BACKENDS = {"json", "memory"}

DEFAULT_PAGE_SIZE = 50
DEFAULT_MIN_REQUIRED = 50


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        print(f"ERROR: Config file not found: {path}", file=sys.stderr)
        sys.exit(1)
    except yaml.YAMLError as e:
        print(f"ERROR: Config file is not valid YAML: {path} ({e})", file=sys.stderr)
        sys.exit(1)


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML or defaults.

    Args:
        path: Optional path to a YAML config. If None, use package defaults.

    Returns:
        A dictionary with configuration values.
    """
    if path:
        cfg = _load_yaml(Path(path))
    else:
        default_path = Path(__file__).with_name("defaults.yml")
        cfg = _load_yaml(default_path)
    return cfg


def _positive_int(section: Dict[str, Any], key: str, default: int) -> None:
    value = section.get(key)
    try:
        ivalue = int(value)
    except (TypeError, ValueError):
        ivalue = 0
    if ivalue < 1:
        print(f"WARNING: Invalid {key} '{value}', using {default}.")
        ivalue = default
    section[key] = ivalue


def validate_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Apply defaults and validate configuration values.

    Args:
        cfg: The raw configuration dictionary.

    Returns:
        The validated and merged configuration dictionary.
    """
    # Shallow defaults for missing sections
    for section in ("quiz", "storage", "history", "timer", "ui"):
        if not isinstance(cfg.get(section), dict):
            cfg[section] = {}

    quiz = cfg["quiz"]
    storage = cfg["storage"]
    history = cfg["history"]
    timer = cfg["timer"]
    ui = cfg["ui"]

    quiz.setdefault("page_size", DEFAULT_PAGE_SIZE)
    quiz.setdefault("min_required", DEFAULT_MIN_REQUIRED)

    storage.setdefault("backend", "json")
    storage.setdefault("progress_dir", "./.quizsession/progress")
    storage.setdefault("key_prefix", "nst_mcq_progress_")

    history.setdefault("enabled", True)
    history.setdefault("data_dir", "./.quizsession/attempts")

    timer.setdefault("tick_seconds", 1.0)

    ui.setdefault("explain", False)

    _positive_int(quiz, "page_size", DEFAULT_PAGE_SIZE)
    _positive_int(quiz, "min_required", DEFAULT_MIN_REQUIRED)

    backend = storage.get("backend")
    if backend not in ALLOWED_BACKENDS:
        print(f"WARNING: Unsupported storage backend '{backend}', using 'json'.")
        storage["backend"] = "json"

    prefix = storage.get("key_prefix")
    if not isinstance(prefix, str) or not prefix:
        print(f"WARNING: Invalid key_prefix '{prefix}', using 'nst_mcq_progress_'.")
        storage["key_prefix"] = "nst_mcq_progress_"

    try:
        tick = float(timer.get("tick_seconds"))
    except (TypeError, ValueError):
        tick = 0.0
    if tick <= 0:
        print(f"WARNING: Invalid tick_seconds '{timer.get('tick_seconds')}', using 1.0.")
        tick = 1.0
    timer["tick_seconds"] = tick

    history["enabled"] = bool(history.get("enabled"))
    ui["explain"] = bool(ui.get("explain"))

    return cfg
