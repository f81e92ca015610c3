from __future__ import annotations

"""Schema constants and Pydantic models for the Parquet-backed attempt log."""

from datetime import datetime, timezone

import pandas as pd
from pydantic import BaseModel, Field, field_validator, model_validator

# --- Constants ---

DTYPES = {
    "attempt_id": "string",
    "chapter_id": "string",
    # timezone-aware UTC timestamps
    "submitted_at": pd.DatetimeTZDtype(tz="UTC"),
    "score": "UInt32",
    "attempted": "UInt32",
    "total": "UInt32",
    "elapsed_s": "UInt32",
    # answers as {"position": option}, order as a list of question objects
    "answers_json": "string",
    "order_json": "string",
}


# --- Pydantic models ---

class AttemptRow(BaseModel):
    attempt_id: str
    chapter_id: str = Field(min_length=1)
    submitted_at: datetime
    score: int = Field(ge=0, le=4294967295)
    attempted: int = Field(ge=0, le=4294967295)
    total: int = Field(ge=1, le=4294967295)
    elapsed_s: int = Field(default=0, ge=0, le=4294967295)
    answers_json: str = "{}"
    order_json: str = "[]"

    @model_validator(mode="after")
    def _score_le_attempted_le_total(self) -> "AttemptRow":
        if self.attempted > self.total:
            raise ValueError("attempted must be <= total")
        if self.score > self.attempted:
            raise ValueError("score must be <= attempted")
        return self

    @field_validator("submitted_at")
    @classmethod
    def _ensure_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)
