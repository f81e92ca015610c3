from __future__ import annotations

"""Order generator: a shuffled presentation order for one session."""

import random
from typing import List, Optional, Sequence

from .models import QuestionItem


class OrderGenerator:
    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    def generate(self, questions: Sequence[QuestionItem]) -> List[QuestionItem]:
        """Return a uniformly shuffled copy; the input is left untouched."""
        order = list(questions)
        self._rng.shuffle(order)
        return order
