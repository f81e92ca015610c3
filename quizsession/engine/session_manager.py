from __future__ import annotations

"""Session Manager: the quiz session lifecycle.

Owns the answers, presentation order and batch cursor of one session and is
the only writer of the session store. Callers change state through the
named operations; each returns True when it was applied and False when it
was ignored as out of sequence. Nothing here raises for sequencing errors.
"""

from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from ..app.events import EventBus
from ..app.explain import enabled as explain_enabled, trace as xtrace
from ..storage.schema import ProgressRecord
from ..storage.store import SessionStore
from .models import CompletionEvent, QuestionItem, load_questions
from .order import OrderGenerator
from .paginator import PAGE_SIZE, BatchPaginator
from .scoring import MIN_REQUIRED_THRESHOLD, Evaluation, evaluate
from .timer import ElapsedTimer


class SessionMode(str, Enum):
    FRESH_START = "fresh_start"
    RESUME_PENDING = "resume_pending"
    ACTIVE = "active"
    SUBMITTED = "submitted"
    HISTORY = "history"


class Confirmation(str, Enum):
    SUBMIT = "submit"
    RECREATE = "recreate"


ANALYSIS_MODES = frozenset({SessionMode.SUBMITTED, SessionMode.HISTORY})
NAVIGABLE_MODES = frozenset({SessionMode.ACTIVE, SessionMode.SUBMITTED, SessionMode.HISTORY})


def _clean_answers(raw: Mapping[Any, Any], order: Sequence[QuestionItem]) -> Dict[int, int]:
    """Keep only answers that name a real option of a real position."""
    out: Dict[int, int] = {}
    for k, v in (raw or {}).items():
        if v is None:
            continue
        try:
            pos, choice = int(k), int(v)
        except (TypeError, ValueError):
            continue
        if 0 <= pos < len(order) and 0 <= choice < len(order[pos].options):
            out[pos] = choice
    return out


class SessionManager:
    def __init__(
        self,
        chapter_id: str,
        questions: Sequence[Any],
        *,
        store: SessionStore,
        page_size: int = PAGE_SIZE,
        min_threshold: int = MIN_REQUIRED_THRESHOLD,
        generator: Optional[OrderGenerator] = None,
        timer: Optional[ElapsedTimer] = None,
        bus: Optional[EventBus] = None,
        on_complete: Optional[Callable[[CompletionEvent], None]] = None,
    ) -> None:
        self.chapter_id = str(chapter_id)
        self.questions: List[QuestionItem] = load_questions(questions)
        self.store = store
        self.paginator = BatchPaginator(page_size)
        self.min_threshold = int(min_threshold)
        self.generator = generator or OrderGenerator()
        self.timer = timer or ElapsedTimer()
        self.bus = bus or EventBus()
        if on_complete is not None:
            self.bus.subscribe("completed", on_complete)

        self._mode = SessionMode.FRESH_START
        self._answers: Dict[int, int] = {}
        self._order: List[QuestionItem] = []
        self._batch_index = 0
        self._pending: Optional[Confirmation] = None
        self._completion: Optional[CompletionEvent] = None
        self._closed = False

    # --- Read-only views ---

    @property
    def mode(self) -> SessionMode:
        return self._mode

    @property
    def answers(self) -> Mapping[int, int]:
        return MappingProxyType(dict(self._answers))

    @property
    def order(self) -> Tuple[QuestionItem, ...]:
        return tuple(self._order)

    @property
    def batch_index(self) -> int:
        return self._batch_index

    @property
    def pending_confirmation(self) -> Optional[Confirmation]:
        return self._pending

    @property
    def completion(self) -> Optional[CompletionEvent]:
        return self._completion

    @property
    def elapsed_seconds(self) -> int:
        return self.timer.seconds

    @property
    def total(self) -> int:
        return len(self._order)

    @property
    def analysis_unlocked(self) -> bool:
        return self._mode in ANALYSIS_MODES

    @property
    def evaluation(self) -> Evaluation:
        return evaluate(self._answers, self._order, self.min_threshold)

    @property
    def score(self) -> int:
        return self.evaluation.score

    @property
    def revealed_score(self) -> Optional[int]:
        """Score as the UI may show it: hidden until analysis is unlocked."""
        return self.score if self.analysis_unlocked else None

    @property
    def attempted(self) -> int:
        return self.evaluation.attempted

    @property
    def min_required(self) -> int:
        return self.evaluation.min_required

    @property
    def can_submit(self) -> bool:
        return self._mode is SessionMode.ACTIVE and self.evaluation.can_submit

    @property
    def total_pages(self) -> int:
        return self.paginator.page_count(self.total)

    @property
    def current_positions(self) -> range:
        return self.paginator.positions(self._batch_index, self.total)

    @property
    def current_page(self) -> List[QuestionItem]:
        return self.paginator.current_page(self._order, self._batch_index)

    @property
    def page_complete(self) -> bool:
        return all(pos in self._answers for pos in self.current_positions)

    @property
    def has_next(self) -> bool:
        return self.paginator.has_next(self._batch_index, self.total)

    @property
    def has_previous(self) -> bool:
        return self._mode in NAVIGABLE_MODES and self.paginator.has_previous(self._batch_index)

    @property
    def can_go_next(self) -> bool:
        if self._mode not in NAVIGABLE_MODES or not self.has_next:
            return False
        # The gate only looks at the page on screen, not earlier pages
        return self._mode is not SessionMode.ACTIVE or self.page_complete

    @property
    def has_unsaved_progress(self) -> bool:
        """True when leaving now should trigger an "unsaved changes" warning."""
        return self._mode is SessionMode.ACTIVE and bool(self._answers)

    # --- Lifecycle ---

    def initialize(
        self,
        historical_answers: Optional[Mapping[Any, Any]] = None,
        historical_order: Optional[Sequence[Any]] = None,
    ) -> SessionMode:
        """Start from history, a resumable record, or a fresh shuffle."""
        if self._mode is not SessionMode.FRESH_START or self._closed:
            self._reject("initialize")
            return self._mode

        if historical_answers is not None:
            self._order = load_questions(historical_order) if historical_order else list(self.questions)
            self._answers = _clean_answers(historical_answers, self._order)
            self._batch_index = 0
            self._set_mode(SessionMode.HISTORY)
        elif self.store.has_record(self.chapter_id):
            # Shuffled up front in case the user picks restart
            self._order = self.generator.generate(self.questions)
            self._set_mode(SessionMode.RESUME_PENDING)
        else:
            self._order = self.generator.generate(self.questions)
            self._set_mode(SessionMode.ACTIVE)
        return self._mode

    def resume(self) -> bool:
        if self._mode is not SessionMode.RESUME_PENDING:
            return self._reject("resume")
        record = self.store.load(self.chapter_id)
        if record is not None:
            if record.order:
                self._order = list(record.order)
            self._answers = _clean_answers(record.answers, self._order)
            self._batch_index = self.paginator.clamp(record.batch_index, len(self._order))
        else:
            self._answers = {}
            self._batch_index = 0
        xtrace("resumed", {"chapter": self.chapter_id, "attempted": len(self._answers), "batch": self._batch_index})
        self._set_mode(SessionMode.ACTIVE)
        return True

    def restart(self) -> bool:
        if self._mode is not SessionMode.RESUME_PENDING:
            return self._reject("restart")
        self.store.clear(self.chapter_id)
        self._start_over()
        self._set_mode(SessionMode.ACTIVE)
        return True

    def request_recreate(self) -> bool:
        if self._mode not in NAVIGABLE_MODES or self._pending is not None:
            return self._reject("request_recreate")
        self._pending = Confirmation.RECREATE
        self._sync_timer()
        return True

    def confirm_recreate(self) -> bool:
        if self._pending is not Confirmation.RECREATE:
            return self._reject("confirm_recreate")
        self._pending = None
        self.store.clear(self.chapter_id)
        self._start_over()
        self._completion = None
        self.timer.reset()
        self._set_mode(SessionMode.ACTIVE)
        return True

    def cancel_confirmation(self) -> bool:
        if self._pending is None:
            return self._reject("cancel_confirmation")
        self._pending = None
        self._sync_timer()
        return True

    def answer(self, position: int, option_index: int) -> bool:
        """Record the first answer for ``position``; later answers are ignored."""
        if self._mode is not SessionMode.ACTIVE:
            return self._reject("answer")
        if not 0 <= position < len(self._order) or position in self._answers:
            return self._reject("answer")
        if not 0 <= option_index < len(self._order[position].options):
            return self._reject("answer")
        self._answers[position] = option_index
        if explain_enabled():
            xtrace("answered", {"position": position, "option": option_index, "attempted": self.attempted, "page": self._batch_index})
        self.bus.emit("answered", {"position": position, "option": option_index})
        self._autosave()
        return True

    def request_submit(self) -> bool:
        if self._pending is not None or not self.can_submit:
            return self._reject("request_submit")
        self._pending = Confirmation.SUBMIT
        self._sync_timer()
        return True

    def confirm_submit(self) -> Optional[CompletionEvent]:
        if self._pending is not Confirmation.SUBMIT or not self.can_submit:
            self._reject("confirm_submit")
            return None
        self._pending = None
        self.store.clear(self.chapter_id)
        self.timer.stop()
        result = self.evaluation
        event = CompletionEvent(
            chapter_id=self.chapter_id,
            score=result.score,
            attempted=result.attempted,
            total=result.total,
            answers=dict(self._answers),
            order=list(self._order),
            elapsed_seconds=self.timer.seconds,
        )
        self._completion = event
        self._set_mode(SessionMode.SUBMITTED)
        xtrace("submitted", {"chapter": self.chapter_id, "score": event.score, "attempted": event.attempted, "elapsed_s": event.elapsed_seconds})
        self.bus.emit("completed", event)
        return event

    def navigate_batch(self, direction: int) -> bool:
        if direction not in (-1, 1) or self._mode not in NAVIGABLE_MODES:
            return self._reject("navigate_batch")
        target = self._batch_index + direction
        if not 0 <= target < self.total_pages:
            return self._reject("navigate_batch")
        if direction > 0 and not self.can_go_next:
            return self._reject("navigate_batch")
        self._batch_index = target
        self._autosave()
        return True

    def next_batch(self) -> bool:
        return self.navigate_batch(1)

    def previous_batch(self) -> bool:
        return self.navigate_batch(-1)

    def close(self) -> None:
        """Unmount: stop the clock. A stored record stays for a later resume."""
        self._closed = True
        self.timer.stop()

    # --- Internals ---

    def _start_over(self) -> None:
        self._order = self.generator.generate(self.questions)
        self._answers = {}
        self._batch_index = 0

    def _autosave(self) -> None:
        if self._mode is not SessionMode.ACTIVE or not self._answers:
            return
        record = ProgressRecord(answers=dict(self._answers), batch_index=self._batch_index, order=list(self._order))
        self.store.save(self.chapter_id, record)

    def _set_mode(self, mode: SessionMode) -> None:
        previous = self._mode
        self._mode = mode
        xtrace("mode_changed", {"chapter": self.chapter_id, "from": previous.value, "to": mode.value})
        self.bus.emit("mode_changed", {"from": previous, "to": mode})
        self._sync_timer()

    def _sync_timer(self) -> None:
        if self._closed:
            return
        # Paused behind any blocking dialog; the resume prompt is RESUME_PENDING itself
        self.timer.set_running(self._mode is SessionMode.ACTIVE and self._pending is None)

    def _reject(self, op: str) -> bool:
        xtrace("rejected", {"op": op, "mode": self._mode.value})
        return False
