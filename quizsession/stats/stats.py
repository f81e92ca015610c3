from __future__ import annotations

"""Analysis-view rows and text summaries for a finished session."""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..engine.models import CompletionEvent
from ..engine.session_manager import SessionManager


@dataclass(frozen=True)
class ReviewItem:
    position: int
    question: str
    options: Tuple[str, ...]
    chosen: Optional[int]
    correct_answer: int
    explanation: Optional[str]

    @property
    def attempted(self) -> bool:
        return self.chosen is not None

    @property
    def is_correct(self) -> bool:
        return self.chosen == self.correct_answer


def review_items(session: SessionManager, *, page_only: bool = False) -> List[ReviewItem]:
    """Per-question correctness rows; empty until analysis is unlocked."""
    if not session.analysis_unlocked:
        return []
    answers = session.answers
    order = session.order
    positions = session.current_positions if page_only else range(len(order))
    return [
        ReviewItem(
            position=pos,
            question=order[pos].question,
            options=order[pos].options,
            chosen=answers.get(pos),
            correct_answer=order[pos].correct_answer,
            explanation=order[pos].explanation,
        )
        for pos in positions
    ]


def accuracy(score: int, total: int) -> float:
    return score / total if total > 0 else 0.0


def _format_elapsed(seconds: int) -> str:
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{secs:02d}"


def format_summary(event: CompletionEvent) -> str:
    """Return a human-readable summary of a completed attempt."""
    lines = [
        f"Score: {event.score}/{event.total} ({accuracy(event.score, event.total):.0%})",
        f"Attempted: {event.attempted}/{event.total}",
        f"Time: {_format_elapsed(event.elapsed_seconds)}",
    ]
    wrong = event.attempted - event.score
    if wrong:
        lines.append(f"Wrong: {wrong}")
    skipped = event.total - event.attempted
    if skipped:
        lines.append(f"Skipped: {skipped}")
    return "\n".join(lines)
