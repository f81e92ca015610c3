from __future__ import annotations

"""Question and completion models shared by the engine and its host."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .errors import EmptyQuestionSetError, InvalidQuestionSetError


class QuestionItem(BaseModel):
    """One multiple-choice question. Read-only once loaded."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    question: str
    options: Tuple[str, ...] = Field(min_length=2)
    correct_answer: int = Field(alias="correctAnswer", ge=0)
    explanation: Optional[str] = None

    @model_validator(mode="after")
    def _answer_in_options(self) -> "QuestionItem":
        if self.correct_answer >= len(self.options):
            raise ValueError(
                f"correctAnswer {self.correct_answer} is out of range for {len(self.options)} options"
            )
        return self

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


def load_questions(items: Iterable[Any]) -> List[QuestionItem]:
    """Validate a raw question set, raising before any session can start."""
    out: List[QuestionItem] = []
    for i, raw in enumerate(items or []):
        if isinstance(raw, QuestionItem):
            out.append(raw)
            continue
        try:
            out.append(QuestionItem.model_validate(raw))
        except ValidationError as exc:
            reason = "; ".join(err.get("msg", "invalid") for err in exc.errors())
            raise InvalidQuestionSetError(i, reason) from exc
    if not out:
        raise EmptyQuestionSetError()
    return out


@dataclass(frozen=True)
class CompletionEvent:
    """Payload handed to the host exactly once, on confirmed submission."""

    chapter_id: str
    score: int
    attempted: int
    total: int
    answers: Dict[int, int]
    order: List[QuestionItem]
    elapsed_seconds: int
    submitted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_json(self) -> Dict[str, Any]:
        return {
            "chapter_id": self.chapter_id,
            "score": self.score,
            "attempted": self.attempted,
            "total": self.total,
            "answers": {str(k): v for k, v in self.answers.items()},
            "order": [q.to_json() for q in self.order],
            "elapsed_seconds": self.elapsed_seconds,
            "submitted_at": self.submitted_at.isoformat(),
        }
