from __future__ import annotations

"""Explain mode: one-line traces at session milestones.

Turned on by ``--explain`` or ``ui.explain``. Lines look like
``[EXPLAIN] mode_changed :: {"chapter":"ch-1","from":"fresh_start","to":"active"}``
and go to ``print`` unless a sink is given.
"""

import json
from typing import Any, Callable, Dict, Optional

Sink = Callable[[str], None]

_ENABLED = False
_SINK: Optional[Sink] = None


def enable(flag: bool = True, sink: Optional[Sink] = None) -> None:
    global _ENABLED, _SINK
    _ENABLED = bool(flag)
    _SINK = sink


def enabled() -> bool:
    return _ENABLED


def format_line(event: str, payload: Optional[Dict[str, Any]] = None) -> str:
    try:
        body = json.dumps(payload or {}, separators=(",", ":"), sort_keys=True, default=str)
    except (TypeError, ValueError):
        return f"[EXPLAIN] {event}"
    return f"[EXPLAIN] {event} :: {body}"


def trace(event: str, payload: Optional[Dict[str, Any]] = None) -> None:
    if not _ENABLED:
        return
    (_SINK or print)(format_line(event, payload))
