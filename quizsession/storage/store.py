from __future__ import annotations

"""Session store: per-chapter progress records in a key-value backend.

Writes are fire-and-forget and reads are best effort. Any backend or
decoding failure is traced and reported as "no saved progress"; the
in-memory session stays authoritative.
"""

from pathlib import Path
from typing import Dict, Optional, Protocol
from urllib.parse import quote

from pydantic import ValidationError

from ..app.explain import trace as xtrace
from .schema import ProgressRecord

PROGRESS_KEY_PREFIX = "nst_mcq_progress_"


class KeyValueBackend(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryBackend:
    """Process-local backend; also the test double."""

    def __init__(self) -> None:
        self.data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileBackend:
    """One JSON document per key under ``data_dir``."""

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{quote(key, safe='')}.json"

    def get(self, key: str) -> Optional[str]:
        p = self._path(key)
        if not p.exists():
            return None
        return p.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        p = self._path(key)
        tmp = p.with_suffix(".json.tmp")
        try:
            tmp.write_text(value, encoding="utf-8")
            tmp.replace(p)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise

    def remove(self, key: str) -> None:
        p = self._path(key)
        if p.exists():
            p.unlink()


class SessionStore:
    def __init__(self, backend: KeyValueBackend, key_prefix: str = PROGRESS_KEY_PREFIX) -> None:
        self.backend = backend
        self.key_prefix = key_prefix

    def key_for(self, chapter_id: str) -> str:
        return f"{self.key_prefix}{chapter_id}"

    def load(self, chapter_id: str) -> Optional[ProgressRecord]:
        key = self.key_for(chapter_id)
        try:
            raw = self.backend.get(key)
        except Exception as e:
            xtrace("store_error", {"op": "load", "key": key, "error": str(e)})
            return None
        if not raw:
            return None
        try:
            return ProgressRecord.model_validate_json(raw)
        except ValidationError as e:
            xtrace("store_error", {"op": "decode", "key": key, "error": e.error_count()})
            return None

    def has_record(self, chapter_id: str) -> bool:
        return self.load(chapter_id) is not None

    def save(self, chapter_id: str, record: ProgressRecord) -> None:
        key = self.key_for(chapter_id)
        try:
            self.backend.set(key, record.to_json_str())
        except Exception as e:
            # Best effort; the last answer may be lost on abrupt exit
            xtrace("store_error", {"op": "save", "key": key, "error": str(e)})

    def clear(self, chapter_id: str) -> None:
        key = self.key_for(chapter_id)
        try:
            self.backend.remove(key)
        except Exception as e:
            xtrace("store_error", {"op": "clear", "key": key, "error": str(e)})
