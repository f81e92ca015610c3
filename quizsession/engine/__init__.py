"""Quiz session engine: ordering, pagination, scoring and lifecycle."""

from .errors import EmptyQuestionSetError, InvalidQuestionSetError, QuizSessionError
from .models import CompletionEvent, QuestionItem, load_questions
from .order import OrderGenerator
from .paginator import PAGE_SIZE, BatchPaginator
from .scoring import MIN_REQUIRED_THRESHOLD, Evaluation, can_submit, evaluate, min_required
from .session_manager import Confirmation, SessionManager, SessionMode
from .timer import ElapsedTimer

__all__ = [
    "PAGE_SIZE",
    "MIN_REQUIRED_THRESHOLD",
    "QuizSessionError",
    "EmptyQuestionSetError",
    "InvalidQuestionSetError",
    "QuestionItem",
    "CompletionEvent",
    "load_questions",
    "OrderGenerator",
    "BatchPaginator",
    "Evaluation",
    "evaluate",
    "min_required",
    "can_submit",
    "ElapsedTimer",
    "SessionManager",
    "SessionMode",
    "Confirmation",
]
