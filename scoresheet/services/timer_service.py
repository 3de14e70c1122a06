"""Match clock for the Futsal Scoresheet application."""

import logging
import threading
from typing import Callable, Optional

from ..utils import TICK_INTERVAL_SECONDS, fmt_mmss

logger = logging.getLogger(__name__)


class MatchClock:
    """Elapsed-time counter advanced by one second per tick while running.

    The clock only stamps events; it never blocks a ledger operation.
    """

    def __init__(self, seconds: int = 0):
        self.seconds = max(0, int(seconds))
        self.running = False

    def start(self) -> None:
        """Start or resume counting."""
        self.running = True

    def pause(self) -> None:
        """Stop counting without losing the elapsed time."""
        self.running = False

    def reset(self) -> None:
        """Zero the counter and stop it."""
        self.seconds = 0
        self.running = False

    def tick(self) -> int:
        """Advance one second if running; return the elapsed seconds."""
        if self.running:
            self.seconds += 1
        return self.seconds

    @property
    def display(self) -> str:
        return fmt_mmss(self.seconds)


class ClockTicker:
    """
    Background thread calling ``on_tick`` once per interval.

    The ticker is a scoped resource: ``start`` it when the live phase is
    entered and ``stop`` it when the phase is left or the match discarded.
    Ticks run while holding ``lock``; pass the lock that guards the state the
    callback touches. Once ``stop`` returns no further tick is delivered.
    """

    def __init__(
        self,
        on_tick: Callable[[], None],
        interval: float = TICK_INTERVAL_SECONDS,
        lock: Optional[threading.RLock] = None,
    ) -> None:
        self._on_tick = on_tick
        self.interval = interval
        self._lock = lock or threading.RLock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def active(self) -> bool:
        return self._thread is not None and not self._stop_event.is_set()

    def start(self) -> None:
        """Start ticking; calling it on an active ticker does nothing."""
        with self._lock:
            if self.active:
                return
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(self._stop_event,),
                name="match-clock-ticker",
                daemon=True,
            )
            self._thread.start()
        logger.debug("Clock ticker started (interval %.2fs)", self.interval)

    def stop(self) -> None:
        """Cancel the ticker.

        The thread is not joined since it may be waiting for the lock the
        caller holds. It sees the stop flag under the lock and exits without
        ticking.
        """
        self._stop_event.set()
        with self._lock:
            was_running = self._thread is not None
            self._thread = None
        if was_running:
            logger.debug("Clock ticker stopped")

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self.interval):
            with self._lock:
                if stop_event.is_set():
                    break
                self._on_tick()

    def __enter__(self) -> "ClockTicker":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
