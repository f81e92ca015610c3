from __future__ import annotations

import json
import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

from pydantic import ValidationError

from storage.schema import AttemptRow
from storage.store import (
    append_attempts,
    export_ndjson,
    init_store,
    latest_attempt,
    load_all,
    query_chapter,
    row_from_completion,
    validate_records,
)


def _row(chapter: str, score: int, *, minutes: int = 0, attempt_id: str | None = None) -> AttemptRow:
    return AttemptRow(
        attempt_id=attempt_id or f"{chapter}-{minutes}",
        chapter_id=chapter,
        submitted_at=datetime(2026, 1, 1, tzinfo=timezone.utc) + timedelta(minutes=minutes),
        score=score,
        attempted=10,
        total=20,
        elapsed_s=300,
        answers_json=json.dumps({"0": 1}),
        order_json=json.dumps([{"question": "Q?", "options": ["a", "b"], "correctAnswer": 1}]),
    )


class AttemptRowTests(unittest.TestCase):
    def test_score_cannot_exceed_attempted(self) -> None:
        with self.assertRaises(ValidationError):
            AttemptRow(attempt_id="x", chapter_id="c", submitted_at=datetime.now(timezone.utc), score=5, attempted=4, total=10)

    def test_attempted_cannot_exceed_total(self) -> None:
        with self.assertRaises(ValidationError):
            AttemptRow(attempt_id="x", chapter_id="c", submitted_at=datetime.now(timezone.utc), score=1, attempted=11, total=10)

    def test_naive_timestamp_becomes_utc(self) -> None:
        row = AttemptRow(attempt_id="x", chapter_id="c", submitted_at=datetime(2026, 1, 1), score=0, attempted=0, total=1)
        self.assertEqual(row.submitted_at.tzinfo, timezone.utc)

    def test_row_from_completion(self) -> None:
        payload = {
            "chapter_id": "ch",
            "score": 3,
            "attempted": 4,
            "total": 5,
            "answers": {"0": 1, "2": 0},
            "order": [{"question": "Q?", "options": ["a", "b"], "correctAnswer": 0}],
            "elapsed_seconds": 42,
            "submitted_at": "2026-03-01T10:00:00+00:00",
        }
        row = row_from_completion(payload, attempt_id="a1")
        self.assertEqual(row.attempt_id, "a1")
        self.assertEqual(row.elapsed_s, 42)
        self.assertEqual(json.loads(row.answers_json), {"0": 1, "2": 0})


class AttemptStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.data_dir = Path(self._tmp.name) / "attempts"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_missing_store_loads_empty(self) -> None:
        df = load_all(self.data_dir)
        self.assertTrue(df.empty)
        self.assertIn("acc", df.columns)

    def test_append_load_and_accuracy(self) -> None:
        init_store(self.data_dir)
        append_attempts(validate_records([_row("a", 5), _row("b", 10, minutes=1)]), self.data_dir)
        df = load_all(self.data_dir)
        self.assertEqual(len(df), 2)
        acc = dict(zip(df["chapter_id"].astype(str), df["acc"].astype(float)))
        self.assertAlmostEqual(acc["a"], 0.25)
        self.assertAlmostEqual(acc["b"], 0.5)

    def test_exact_duplicates_are_dropped(self) -> None:
        init_store(self.data_dir)
        rows = validate_records([_row("a", 5)])
        append_attempts(rows, self.data_dir)
        append_attempts(rows, self.data_dir)
        self.assertEqual(len(load_all(self.data_dir)), 1)

    def test_query_and_latest_attempt(self) -> None:
        init_store(self.data_dir)
        append_attempts(
            validate_records([_row("a", 9, minutes=5), _row("a", 2, minutes=1), _row("b", 7, minutes=9)]),
            self.data_dir,
        )
        df = load_all(self.data_dir)
        trend = query_chapter(df, "a")
        self.assertEqual(list(trend["score"].astype(int)), [2, 9])
        latest = latest_attempt(df, "a")
        self.assertEqual(latest["score"], 9)
        self.assertEqual(latest["answers"], {0: 1})
        self.assertEqual(latest["order"][0]["correctAnswer"], 1)
        self.assertIsNone(latest_attempt(df, "zzz"))

    def test_export_ndjson(self) -> None:
        init_store(self.data_dir)
        append_attempts(validate_records([_row("a", 1)]), self.data_dir)
        out = Path(self._tmp.name) / "out" / "a.ndjson"
        export_ndjson(load_all(self.data_dir), out)
        lines = out.read_text(encoding="utf-8").strip().splitlines()
        self.assertEqual(len(lines), 1)
        self.assertEqual(json.loads(lines[0])["chapter_id"], "a")

    def test_validate_records_requires_list(self) -> None:
        with self.assertRaises(TypeError):
            validate_records(_row("a", 1))  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()
