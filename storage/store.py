from __future__ import annotations

"""Parquet-backed log of completed quiz attempts using pandas + pyarrow.

Unit of data: one row per submitted attempt. The log is the host-side
persistence of completion events and the source of History-mode reviews.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

import pandas as pd

from .schema import DTYPES, AttemptRow


DATA_FILE = "attempts.parquet"


def _empty_df() -> pd.DataFrame:
    dtypes = DTYPES.copy()
    df = pd.DataFrame({k: pd.Series(dtype=v) for k, v in dtypes.items()})
    return df


def init_store(data_dir: Path) -> None:
    """Ensure data directory and an empty Parquet file with correct schema exist."""
    data_dir = Path(data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)
    path = data_dir / DATA_FILE
    if not path.exists():
        _empty_df().to_parquet(path, engine="pyarrow", compression="zstd", index=False)


def row_from_completion(payload: Dict[str, Any], attempt_id: Optional[str] = None) -> AttemptRow:
    """Build an AttemptRow from a completion event's JSON form."""
    submitted_at = payload.get("submitted_at") or datetime.now(timezone.utc)
    return AttemptRow(
        attempt_id=attempt_id or str(uuid4()),
        chapter_id=str(payload["chapter_id"]),
        submitted_at=submitted_at,
        score=int(payload["score"]),
        attempted=int(payload["attempted"]),
        total=int(payload["total"]),
        elapsed_s=int(payload.get("elapsed_seconds", 0)),
        answers_json=json.dumps({str(k): v for k, v in (payload.get("answers") or {}).items()}, separators=(",", ":")),
        order_json=json.dumps(payload.get("order") or [], separators=(",", ":")),
    )


def validate_records(records: List[AttemptRow]) -> pd.DataFrame:
    """Validate a list of AttemptRow and return a DataFrame with proper dtypes.

    - Enforces score <= attempted <= total and UTC timestamps via Pydantic.
    - Returns a pandas DataFrame with string and unsigned integer dtypes.
    """
    if not isinstance(records, list):
        raise TypeError("records must be a list[AttemptRow]")
    rows = [AttemptRow.model_validate(r) if not isinstance(r, AttemptRow) else r for r in records]
    data = [r.model_dump() for r in rows]
    df = pd.DataFrame(data, columns=list(DTYPES.keys()))
    return _fix_dtypes(df)


def _fix_dtypes(df: pd.DataFrame) -> pd.DataFrame:
    for col, dt in DTYPES.items():
        if col in df.columns:
            df[col] = df[col].astype(dt)
        else:
            df[col] = pd.Series(index=df.index, dtype=dt)
    return df[list(DTYPES.keys())]


def append_attempts(df_new: pd.DataFrame, data_path: Path) -> None:
    """Append rows to the attempts table.

    - Reads existing, concatenates, fixes dtypes, removes exact duplicates, and writes back.
    - Uses pyarrow with zstd compression.
    """
    data_path = Path(data_path)
    data_path.mkdir(parents=True, exist_ok=True)
    f = data_path / DATA_FILE
    if f.exists():
        df_old = _fix_dtypes(pd.read_parquet(f, engine="pyarrow"))
    else:
        df_old = _empty_df()
    df_new = _fix_dtypes(df_new.copy())
    if df_old.empty:
        combined = df_new
    else:
        combined = pd.concat([df_old, df_new], ignore_index=True)
    combined = _fix_dtypes(combined)
    combined = combined.drop_duplicates()  # exact duplicate rows only
    combined.to_parquet(f, engine="pyarrow", compression="zstd", index=False)


def load_all(data_path: Path) -> pd.DataFrame:
    """Load the full attempts table, ensuring dtypes, and add ``acc`` = score / total."""
    f = Path(data_path) / DATA_FILE
    if not f.exists():
        return _empty_df().assign(acc=pd.Series(dtype="float32"))
    df = pd.read_parquet(f, engine="pyarrow")
    df = _fix_dtypes(df)
    total = df["total"].astype("float32").where(df["total"] > 0, other=1.0)
    df["acc"] = (df["score"].astype("float32") / total).astype("float32")
    return df


def query_chapter(df: pd.DataFrame, chapter_id: str) -> pd.DataFrame:
    """Filter rows for one chapter and sort oldest first."""
    if not chapter_id:
        raise ValueError("chapter_id must be non-empty")
    dff = df[df["chapter_id"].astype("string") == str(chapter_id)]
    return dff.sort_values("submitted_at", kind="mergesort").reset_index(drop=True)


def latest_attempt(df: pd.DataFrame, chapter_id: str) -> Optional[Dict[str, Any]]:
    """Decode the newest attempt for a chapter, or None when there is none.

    ``answers`` comes back keyed by int position and ``order`` as the list of
    question objects, ready to hand to a History-mode session.
    """
    dff = query_chapter(df, chapter_id)
    if dff.empty:
        return None
    row = dff.iloc[-1]
    answers = json.loads(str(row["answers_json"]))
    return {
        "attempt_id": str(row["attempt_id"]),
        "chapter_id": str(row["chapter_id"]),
        "submitted_at": row["submitted_at"].to_pydatetime(),
        "score": int(row["score"]),
        "attempted": int(row["attempted"]),
        "total": int(row["total"]),
        "elapsed_s": int(row["elapsed_s"]),
        "answers": {int(k): int(v) for k, v in answers.items()},
        "order": json.loads(str(row["order_json"])),
    }


def export_ndjson(df: pd.DataFrame, out_path: Path) -> None:
    """Export a DataFrame to line-delimited JSON (NDJSON) for quick inspection."""
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    df.to_json(out_path, orient="records", lines=True, date_format="iso")
