from __future__ import annotations

"""Terminal host for a quiz session.

Renders the current batch, prompts and the analysis view as plain text and
maps typed commands onto SessionManager operations. All I/O goes through a
``ui`` dict of callbacks (``ask``, ``inform``) so the loop can be scripted.
"""

from typing import Any, Callable, Dict, Optional

from ..engine.models import CompletionEvent
from ..engine.session_manager import SessionManager, SessionMode
from ..stats.stats import format_summary, review_items

HELP = (
    "Commands: <question#> <option letter|#> answer, n next page, p previous page, "
    "s submit, r recreate, q quit"
)


def _letter(i: int) -> str:
    return chr(ord("A") + i) if i < 26 else str(i + 1)


def _parse_option(token: str, n_options: int) -> Optional[int]:
    t = token.strip().upper()
    if len(t) == 1 and t.isalpha():
        idx = ord(t) - ord("A")
    elif t.isdigit():
        idx = int(t) - 1
    else:
        return None
    return idx if 0 <= idx < n_options else None


def _confirm(ask: Callable[[str], str], prompt: str) -> bool:
    return ask(f"{prompt} [y/N] ").strip().lower() in ("y", "yes")


def render_page(session: SessionManager) -> str:
    lines = [
        f"Page {session.batch_index + 1}/{session.total_pages}  "
        f"{session.attempted}/{session.total} attempted  "
        f"time {session.elapsed_seconds}s"
    ]
    if session.analysis_unlocked:
        lines.append(f"Score: {session.score}/{session.total}")
        for item in review_items(session, page_only=True):
            mark = "+" if item.is_correct else ("x" if item.attempted else "-")
            lines.append(f"[{mark}] {item.position + 1}. {item.question}")
            for i, opt in enumerate(item.options):
                tag = "*" if i == item.correct_answer else (">" if i == item.chosen else " ")
                lines.append(f"   {tag} {_letter(i)}) {opt}")
            if item.explanation:
                lines.append(f"     {item.explanation}")
        return "\n".join(lines)

    answers = session.answers
    for pos, q in zip(session.current_positions, session.current_page):
        lines.append(f"{pos + 1}. {q.question}")
        chosen = answers.get(pos)
        for i, opt in enumerate(q.options):
            tag = ">" if i == chosen else " "
            lines.append(f"   {tag} {_letter(i)}) {opt}")
    if not session.can_submit:
        lines.append(f"Min {session.min_required} required to submit")
    return "\n".join(lines)


def run_session(session: SessionManager, ui: Dict[str, Callable[..., Any]]) -> Optional[CompletionEvent]:
    """Drive ``session`` until the user quits; returns the completion event, if any."""
    ask = ui["ask"]
    inform = ui.get("inform", print)

    if session.mode is SessionMode.FRESH_START:
        session.initialize()

    if session.mode is SessionMode.RESUME_PENDING:
        if _confirm(ask, "We found an unfinished test. Resume where you left off?"):
            session.resume()
        else:
            session.restart()

    inform(render_page(session))
    inform(HELP)
    try:
        while True:
            try:
                raw = ask("> ")
            except EOFError:
                break
            cmd = raw.strip().lower()
            if not cmd:
                continue
            if cmd == "q":
                if session.has_unsaved_progress:
                    inform("Progress saved; you can resume this test later.")
                break
            if cmd == "n":
                if not session.next_batch():
                    inform("Answer every question on this page first." if session.has_next else "Already on the last page.")
                    continue
            elif cmd == "p":
                if not session.previous_batch():
                    inform("Already on the first page.")
                    continue
            elif cmd == "s":
                if not session.request_submit():
                    if session.analysis_unlocked:
                        inform("Already submitted.")
                    else:
                        inform(f"Answer at least {session.min_required} questions to submit.")
                    continue
                if _confirm(ask, f"You have answered {session.attempted} questions. Submit now?"):
                    event = session.confirm_submit()
                    if event is not None:
                        inform(format_summary(event))
                else:
                    session.cancel_confirmation()
                    continue
            elif cmd == "r":
                if not session.request_recreate():
                    inform("Nothing to restart yet.")
                    continue
                if _confirm(ask, "This will shuffle questions and reset your current progress. Are you sure?"):
                    session.confirm_recreate()
                else:
                    session.cancel_confirmation()
                    continue
            else:
                parts = cmd.split()
                if len(parts) != 2 or not parts[0].isdigit():
                    inform(HELP)
                    continue
                pos = int(parts[0]) - 1
                if not 0 <= pos < session.total:
                    inform(f"No question {parts[0]}.")
                    continue
                opt = _parse_option(parts[1], len(session.order[pos].options))
                if opt is None or not session.answer(pos, opt):
                    inform("Answer not accepted.")
                    continue
            inform(render_page(session))
    finally:
        session.close()
    return session.completion
