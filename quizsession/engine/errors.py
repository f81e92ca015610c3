from __future__ import annotations

"""Input error taxonomy for the quiz session engine.

Storage failures and out-of-sequence operations are never raised; only a
question set that cannot start a session is.
"""


class QuizSessionError(ValueError):
    """Base class for errors surfaced before a session can start."""


class EmptyQuestionSetError(QuizSessionError):
    def __init__(self) -> None:
        super().__init__("Question set is empty; a session needs at least one question")


class InvalidQuestionSetError(QuizSessionError):
    def __init__(self, index: int, reason: str) -> None:
        self.index = index
        self.reason = reason
        super().__init__(f"Invalid question at index {index}: {reason}")
