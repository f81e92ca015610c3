from .schema import ProgressRecord
from .store import (
    PROGRESS_KEY_PREFIX,
    KeyValueBackend,
    MemoryBackend,
    JsonFileBackend,
    SessionStore,
)

__all__ = [
    "PROGRESS_KEY_PREFIX",
    "ProgressRecord",
    "KeyValueBackend",
    "MemoryBackend",
    "JsonFileBackend",
    "SessionStore",
]
