"""quizsession package initialization.

Re-exports the engine so hosts can simply ``from quizsession import SessionManager``.
"""

from __future__ import annotations

from .engine import (
    BatchPaginator,
    CompletionEvent,
    Confirmation,
    ElapsedTimer,
    EmptyQuestionSetError,
    InvalidQuestionSetError,
    OrderGenerator,
    QuestionItem,
    QuizSessionError,
    SessionManager,
    SessionMode,
    evaluate,
    load_questions,
)
from .storage import JsonFileBackend, MemoryBackend, ProgressRecord, SessionStore

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "BatchPaginator",
    "CompletionEvent",
    "Confirmation",
    "ElapsedTimer",
    "EmptyQuestionSetError",
    "InvalidQuestionSetError",
    "OrderGenerator",
    "QuestionItem",
    "QuizSessionError",
    "SessionManager",
    "SessionMode",
    "evaluate",
    "load_questions",
    "JsonFileBackend",
    "MemoryBackend",
    "ProgressRecord",
    "SessionStore",
]
