from __future__ import annotations

import random
from typing import Any, Dict, List

from quizsession.app.events import EventBus
from quizsession.engine.order import OrderGenerator
from quizsession.engine.session_manager import SessionManager
from quizsession.engine.timer import ElapsedTimer
from quizsession.storage.store import MemoryBackend, SessionStore


def make_questions(n: int, n_options: int = 4) -> List[Dict[str, Any]]:
    return [
        {
            "question": f"Question {i}?",
            "options": [f"opt {i}.{j}" for j in range(n_options)],
            "correctAnswer": i % n_options,
            "explanation": f"Because {i}.",
        }
        for i in range(n)
    ]


def make_session(n: int, *, store: SessionStore | None = None, chapter_id: str = "ch-1", seed: int = 7, **kwargs: Any) -> SessionManager:
    return SessionManager(
        chapter_id,
        make_questions(n),
        store=store or SessionStore(MemoryBackend()),
        generator=OrderGenerator(random.Random(seed)),
        timer=ElapsedTimer(autorun=False),
        bus=kwargs.pop("bus", None) or EventBus(),
        **kwargs,
    )


def answer_range(session: SessionManager, positions, *, correct: bool = True) -> None:
    for pos in positions:
        q = session.order[pos]
        choice = q.correct_answer if correct else (q.correct_answer + 1) % len(q.options)
        assert session.answer(pos, choice)
