import unittest
from typing import Iterable, List

from quizsession.app.runner import render_page, run_session
from quizsession.engine.session_manager import SessionMode
from quizsession.storage.store import MemoryBackend, SessionStore

from _fixtures import make_session


def _scripted_ui(lines: Iterable[str]):
    it = iter(lines)
    prompts: List[str] = []
    output: List[str] = []

    def ask(prompt: str) -> str:
        prompts.append(prompt)
        try:
            return next(it)
        except StopIteration:
            raise EOFError

    return {"ask": ask, "inform": output.append}, prompts, output


class RunnerTests(unittest.TestCase):
    def test_answer_and_submit(self) -> None:
        s = make_session(3)
        ui, prompts, output = _scripted_ui(["1 a", "2 b", "3 3", "s", "y", "q"])
        event = run_session(s, ui)
        self.assertIsNotNone(event)
        self.assertEqual(event.attempted, 3)
        self.assertIs(s.mode, SessionMode.SUBMITTED)
        self.assertTrue(any("Score:" in line for line in output))
        self.assertFalse(s.timer.running)

    def test_submit_blocked_below_threshold(self) -> None:
        s = make_session(3)
        ui, _, output = _scripted_ui(["1 a", "s", "q"])
        self.assertIsNone(run_session(s, ui))
        self.assertIn("Answer at least 3 questions to submit.", output)

    def test_declined_submit_keeps_session_active(self) -> None:
        s = make_session(2)
        ui, _, _ = _scripted_ui(["1 a", "2 a", "s", "n", "q"])
        self.assertIsNone(run_session(s, ui))
        self.assertIs(s.mode, SessionMode.ACTIVE)
        self.assertIsNone(s.pending_confirmation)

    def test_quit_keeps_progress_for_resume(self) -> None:
        store = SessionStore(MemoryBackend())
        first = make_session(4, store=store)
        ui, _, output = _scripted_ui(["2 c", "q"])
        run_session(first, ui)
        self.assertIn("Progress saved; you can resume this test later.", output)

        second = make_session(4, store=store, seed=99)
        ui, prompts, _ = _scripted_ui(["y", "q"])
        run_session(second, ui)
        self.assertIn("unfinished test", prompts[0])
        self.assertEqual(dict(second.answers), {1: 2})
        self.assertEqual(second.order, first.order)

    def test_restart_from_prompt(self) -> None:
        store = SessionStore(MemoryBackend())
        run_session(make_session(4, store=store), _scripted_ui(["1 a", "q"])[0])
        second = make_session(4, store=store)
        run_session(second, _scripted_ui(["n", "q"])[0])
        self.assertEqual(second.attempted, 0)
        self.assertFalse(store.has_record("ch-1"))

    def test_recreate_command(self) -> None:
        s = make_session(4)
        ui, _, _ = _scripted_ui(["1 a", "r", "y", "q"])
        run_session(s, ui)
        self.assertEqual(s.attempted, 0)

    def test_bad_input_is_reported(self) -> None:
        s = make_session(2)
        ui, _, output = _scripted_ui(["hello", "9 a", "1 z", "n", "q"])
        run_session(s, ui)
        self.assertIn("No question 9.", output)
        self.assertIn("Answer not accepted.", output)
        self.assertIn("Already on the last page.", output)

    def test_render_history_page_marks_answers(self) -> None:
        s = make_session(2)
        s.initialize(historical_answers={0: 0, 1: 0})
        text = render_page(s)
        self.assertIn("Score: 1/2", text)
        self.assertIn("[+] 1. Question 0?", text)
        self.assertIn("[x] 2. Question 1?", text)


if __name__ == "__main__":
    unittest.main()
