"""
Hard upper bound on a run: a child process that is killed if it does not
report a terminal event within time limit + grace.
"""

import logging
import multiprocessing
import queue
import time
from typing import Any, Callable, Optional

from .config import WATCHDOG_GRACE_SECONDS
from .errors import WatchdogKilled
from .progress import EmitFn, ErrorEvent, TerminalEvent, is_terminal

logger = logging.getLogger(__name__)


def _child_main(target: Callable[..., Any], args: tuple, events) -> None:
    """Child entry point: run `target(*args, emit)` with events sent to the parent."""
    target(*args, events.put)


class Watchdog:
    """
    Supervise one run in a separate process.

    Args:
        time_limit: Run budget in seconds
        grace: Extra seconds before the child is killed
        poll_interval: Seconds between liveness checks while waiting for events
        start_method: multiprocessing start method (None = platform default)
    """

    def __init__(
        self,
        time_limit: float,
        grace: float = WATCHDOG_GRACE_SECONDS,
        poll_interval: float = 0.05,
        start_method: Optional[str] = None,
    ):
        self.time_limit = time_limit
        self.grace = grace
        self.poll_interval = poll_interval
        self.start_method = start_method

    def run(
        self,
        target: Callable[..., Any],
        args: tuple = (),
        on_event: Optional[EmitFn] = None,
    ) -> TerminalEvent:
        """
        Start `target(*args, emit)` in a child and forward its events to `on_event`.

        Returns the terminal event: the child's own, or an ErrorEvent when the
        child was killed or died without reporting one.
        """
        mp = multiprocessing.get_context(self.start_method)
        events = mp.Queue()
        process = mp.Process(target=_child_main, args=(target, args, events), daemon=True)
        process.start()
        deadline = time.perf_counter() + self.time_limit + self.grace
        terminal: Optional[TerminalEvent] = None

        try:
            while terminal is None:
                remaining = deadline - time.perf_counter()
                if remaining <= 0:
                    terminal = self._kill(process)
                    break
                try:
                    event = events.get(timeout=min(self.poll_interval, remaining))
                except queue.Empty:
                    if process.is_alive():
                        continue
                    terminal = self._drain(events, on_event) or self._crashed(process)
                    break
                if is_terminal(event):
                    terminal = event
                elif on_event is not None:
                    on_event(event)

            if on_event is not None:
                on_event(terminal)
            return terminal
        finally:
            process.join(timeout=self.grace)
            if process.is_alive():
                process.terminate()
                process.join()
            events.close()

    def _drain(self, events, on_event: Optional[EmitFn]) -> Optional[TerminalEvent]:
        """Forward what a finished child left in the queue; return its terminal event."""
        while True:
            try:
                event = events.get(timeout=self.poll_interval)
            except queue.Empty:
                return None
            if is_terminal(event):
                return event
            if on_event is not None:
                on_event(event)

    def _crashed(self, process) -> ErrorEvent:
        event = ErrorEvent(message=f"Worker exited with code {process.exitcode} without a result")
        logger.error(event.message)
        return event

    def _kill(self, process) -> ErrorEvent:
        process.terminate()
        process.join(timeout=1.0)
        if process.is_alive():
            process.kill()
            process.join()
        exc = WatchdogKilled(
            f"no result within {self.time_limit + self.grace:.1f}s "
            f"(time limit {self.time_limit:.1f}s + grace {self.grace:.1f}s)"
        )
        logger.error(str(exc))
        return ErrorEvent(message=f"{type(exc).__name__}: {exc}")
