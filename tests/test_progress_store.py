import json
import tempfile
import unittest
from pathlib import Path

from quizsession.engine.models import load_questions
from quizsession.storage.schema import ProgressRecord
from quizsession.storage.store import PROGRESS_KEY_PREFIX, JsonFileBackend, MemoryBackend, SessionStore

from _fixtures import make_questions


class _BrokenBackend:
    def get(self, key):
        raise OSError("disk gone")

    def set(self, key, value):
        raise OSError("quota exceeded")

    def remove(self, key):
        raise OSError("read-only")


class SessionStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.backend = MemoryBackend()
        self.store = SessionStore(self.backend)
        self.record = ProgressRecord(
            answers={0: 1, 4: 2},
            batch_index=1,
            order=load_questions(make_questions(5)),
        )

    def test_key_is_namespaced(self) -> None:
        self.assertEqual(self.store.key_for("42"), f"{PROGRESS_KEY_PREFIX}42")
        self.store.save("42", self.record)
        self.assertIn("nst_mcq_progress_42", self.backend.data)

    def test_round_trip(self) -> None:
        self.store.save("ch", self.record)
        loaded = self.store.load("ch")
        self.assertIsNotNone(loaded)
        self.assertEqual(loaded.answers, {0: 1, 4: 2})
        self.assertEqual(loaded.batch_index, 1)
        self.assertEqual(loaded.order, self.record.order)

    def test_wire_format_uses_camel_case(self) -> None:
        self.store.save("ch", self.record)
        raw = json.loads(self.backend.data[self.store.key_for("ch")])
        self.assertEqual(set(raw), {"answers", "batchIndex", "order"})
        self.assertIn("correctAnswer", raw["order"][0])

    def test_chapters_do_not_collide(self) -> None:
        self.store.save("a", self.record)
        self.assertIsNone(self.store.load("b"))

    def test_clear(self) -> None:
        self.store.save("ch", self.record)
        self.store.clear("ch")
        self.assertIsNone(self.store.load("ch"))
        self.assertFalse(self.store.has_record("ch"))

    def test_malformed_record_reads_as_absent(self) -> None:
        self.backend.set(self.store.key_for("ch"), "{not json")
        self.assertIsNone(self.store.load("ch"))
        self.assertFalse(self.store.has_record("ch"))
        self.backend.set(self.store.key_for("ch"), json.dumps({"answers": {"x": "y"}}))
        self.assertIsNone(self.store.load("ch"))

    def test_partial_record_gets_defaults(self) -> None:
        self.backend.set(self.store.key_for("ch"), json.dumps({"answers": {"3": 1, "5": None}}))
        loaded = self.store.load("ch")
        self.assertEqual(loaded.answers, {3: 1})
        self.assertEqual(loaded.batch_index, 0)
        self.assertEqual(loaded.order, [])

    def test_backend_failures_are_swallowed(self) -> None:
        store = SessionStore(_BrokenBackend())
        store.save("ch", self.record)
        store.clear("ch")
        self.assertIsNone(store.load("ch"))


class JsonFileBackendTests(unittest.TestCase):
    def test_round_trip_on_disk(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            store = SessionStore(JsonFileBackend(Path(tmp) / "progress"))
            record = ProgressRecord(answers={2: 0}, batch_index=0, order=load_questions(make_questions(3)))
            store.save("unit/7", record)
            files = list((Path(tmp) / "progress").glob("*.json"))
            self.assertEqual(len(files), 1)
            self.assertNotIn("/", files[0].name)
            self.assertEqual(store.load("unit/7"), record)
            store.clear("unit/7")
            self.assertIsNone(store.load("unit/7"))

    def test_missing_directory_reads_as_absent(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            backend = JsonFileBackend(Path(tmp) / "nope")
            self.assertIsNone(backend.get("k"))
            backend.remove("k")

    def test_failed_write_leaves_no_temp_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            data_dir = Path(tmp) / "progress"
            store = SessionStore(JsonFileBackend(data_dir))
            target = data_dir / f"{store.key_for('ch')}.json"
            target.mkdir(parents=True)
            (target / "occupied").write_text("x", encoding="utf-8")
            record = ProgressRecord(answers={0: 0}, batch_index=0, order=load_questions(make_questions(2)))
            with self.assertRaises(OSError):
                store.backend.set(store.key_for("ch"), record.to_json_str())
            store.save("ch", record)
            self.assertEqual(list(data_dir.glob("*.tmp")), [])


if __name__ == "__main__":
    unittest.main()
