"""
ImageWatch Refresh Worker.

Background loop turning debounced signals into delayed refresh actions.
Requires Python 3.11+.
"""

import threading
from collections.abc import Callable
from typing import Any

from utils.logger import LoggerMixin
from watcher.debouncer import DebounceGate
from watcher.models import RefreshState


class RefreshWorker(LoggerMixin):
    """
    Runs the refresh loop on a dedicated thread.

    The loop blocks on the gate; each wake-up arms a timer that runs the
    action after the delay, then the loop goes straight back to waiting.
    The action always releases the gate when it finishes, whether it
    succeeded or not.
    """

    def __init__(
        self,
        gate: DebounceGate,
        action: Callable[[], Any],
        delay_ms: int = 500,
    ) -> None:
        """
        Initialize the worker.

        Args:
            gate: Gate signalled by the file watcher
            action: Refresh action run once per debounced signal
            delay_ms: Wait between the signal and the action
        """
        self._gate = gate
        self._action = action
        self._delay = delay_ms / 1000.0
        self._closing = threading.Event()
        self._thread: threading.Thread | None = None
        self._timers: list[threading.Timer] = []
        self._timers_lock = threading.Lock()
        self._acting = 0
        self._stopped = False
        self.cycles = 0

    @property
    def state(self) -> RefreshState:
        """Current state of the refresh cycle."""
        if self._stopped:
            return RefreshState.STOPPED
        with self._timers_lock:
            if self._acting:
                return RefreshState.ACTING
            if any(not t.finished.is_set() for t in self._timers):
                return RefreshState.DELAYING
        return RefreshState.WAITING

    def start(self) -> None:
        """Start the loop thread."""
        if self._thread is not None:
            return

        self._thread = threading.Thread(
            target=self._run,
            name="image-refresh-worker",
            daemon=True,
        )
        self._thread.start()

    def _run(self) -> None:
        self.log.debug("refresh_worker_started")
        while not self._closing.is_set():
            self._gate.wait()
            if self._closing.is_set():
                break
            self._schedule()
        self._stopped = True
        self.log.debug("refresh_worker_stopped")

    def _schedule(self) -> None:
        timer = threading.Timer(self._delay, self._run_action)
        timer.daemon = True
        with self._timers_lock:
            self._timers = [t for t in self._timers if t.is_alive()]
            self._timers.append(timer)
        timer.start()

    def _run_action(self) -> None:
        with self._timers_lock:
            self._acting += 1
        try:
            self._action()
        except Exception as e:
            self.log.error("refresh_action_failed", error=str(e))
        finally:
            with self._timers_lock:
                self._acting -= 1
                self.cycles += 1
            self._gate.release()

    def stop(self, timeout: float | None = 5.0) -> None:
        """
        Stop the loop.

        The closing flag is set before the wake-up so the loop exits instead
        of arming another timer. Timers that have not fired are cancelled;
        an action already running is allowed to finish.
        """
        self._closing.set()
        self._gate.wake()

        thread, self._thread = self._thread, None
        if thread is not None:
            thread.join(timeout=timeout)

        with self._timers_lock:
            timers, self._timers = self._timers, []
        for timer in timers:
            timer.cancel()
            timer.join(timeout=timeout)

        self._stopped = True

    @property
    def is_running(self) -> bool:
        """Check if the loop thread is alive."""
        return self._thread is not None and self._thread.is_alive()
