from __future__ import annotations

"""ElapsedTimer: whole-second session clock that can be paused."""

import threading
from typing import Callable, Optional


class ElapsedTimer:
    """Counts seconds while running.

    With ``autorun`` a daemon ``threading.Timer`` chain calls :meth:`tick`
    every ``interval_s``; without it the owner calls :meth:`tick` itself.
    """

    def __init__(
        self,
        interval_s: float = 1.0,
        *,
        autorun: bool = True,
        on_tick: Optional[Callable[[int], None]] = None,
    ) -> None:
        self.interval_s = float(interval_s)
        self.autorun = autorun
        self.on_tick = on_tick
        self._seconds = 0
        self._running = False
        self._timer: Optional[threading.Timer] = None
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def seconds(self) -> int:
        return self._seconds

    @property
    def running(self) -> bool:
        return self._running

    def tick(self) -> None:
        with self._lock:
            if not self._running:
                return
            self._seconds += 1
            value = self._seconds
        if self.on_tick:
            self.on_tick(value)

    def set_running(self, running: bool) -> None:
        with self._lock:
            if running and not self._running:
                self._running = True
                self._arm()
            elif not running and self._running:
                self._running = False
                self._cancel()

    def reset(self) -> None:
        with self._lock:
            self._seconds = 0

    def stop(self) -> None:
        """Cancel the pending tick; the count is kept."""
        with self._lock:
            self._running = False
            self._cancel()

    @property
    def armed(self) -> bool:
        return self._timer is not None

    # Callers of _arm/_cancel hold self._lock

    def _arm(self) -> None:
        self._cancel()
        if not self.autorun or self.interval_s <= 0:
            return
        self._generation += 1
        self._timer = threading.Timer(self.interval_s, self._on_fire, args=(self._generation,))
        self._timer.daemon = True
        self._timer.start()

    def _cancel(self) -> None:
        if self._timer:
            self._timer.cancel()
            self._timer = None

    def _on_fire(self, generation: int) -> None:
        with self._lock:
            # A chain replaced or cancelled while this fire was waiting ends here
            if not self._running or generation != self._generation:
                return
            self._seconds += 1
            value = self._seconds
            self._arm()
        if self.on_tick:
            self.on_tick(value)
