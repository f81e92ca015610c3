from __future__ import annotations

"""Pydantic model for the persisted per-chapter progress record."""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, field_validator

from ..engine.models import QuestionItem


class ProgressRecord(BaseModel):
    """``{answers, batchIndex, order}``; every field defaults so partial records restore."""

    model_config = ConfigDict(populate_by_name=True)

    answers: Dict[NonNegativeInt, NonNegativeInt] = Field(default_factory=dict)
    batch_index: NonNegativeInt = Field(default=0, alias="batchIndex")
    order: List[QuestionItem] = Field(default_factory=list)

    @field_validator("answers", mode="before")
    @classmethod
    def _drop_unanswered(cls, v: Any) -> Any:
        # null marks an unanswered slot in older records
        if isinstance(v, dict):
            return {k: val for k, val in v.items() if val is not None}
        return v

    def to_json_str(self) -> str:
        return self.model_dump_json(by_alias=True)
