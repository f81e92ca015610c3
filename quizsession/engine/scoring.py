from __future__ import annotations

"""Scoring evaluator.

Pure functions over (answers, order); recomputed on every query so the
derived numbers can never drift from the answers they describe.
"""

from dataclasses import dataclass
from typing import Mapping, Sequence

from .models import QuestionItem

MIN_REQUIRED_THRESHOLD = 50


@dataclass(frozen=True)
class Evaluation:
    score: int
    attempted: int
    total: int
    min_required: int

    @property
    def can_submit(self) -> bool:
        return self.attempted >= self.min_required


def min_required(total: int, threshold: int = MIN_REQUIRED_THRESHOLD) -> int:
    return min(threshold, total)


def can_submit(attempted: int, total: int, threshold: int = MIN_REQUIRED_THRESHOLD) -> bool:
    return attempted >= min_required(total, threshold)


def evaluate(
    answers: Mapping[int, int],
    order: Sequence[QuestionItem],
    threshold: int = MIN_REQUIRED_THRESHOLD,
) -> Evaluation:
    """Count correct and attempted positions.

    Positions outside ``order`` are ignored; they can only come from a
    stale or hand-edited record.
    """
    total = len(order)
    score = 0
    attempted = 0
    for pos, choice in answers.items():
        if choice is None or not 0 <= pos < total:
            continue
        attempted += 1
        if choice == order[pos].correct_answer:
            score += 1
    return Evaluation(score=score, attempted=attempted, total=total, min_required=min_required(total, threshold))
