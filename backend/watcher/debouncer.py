"""
ImageWatch Debouncer.

Collapses bursts of file system events into a single refresh signal.
Requires Python 3.11+.
"""

import queue
import threading


class DebounceGate:
    """
    Gate admitting at most one pending refresh cycle.

    The first signal sets the pending flag and wakes the worker through a
    single-slot channel. Further signals are dropped until the refresh
    action releases the gate, so any number of raw events arriving while a
    cycle is in flight queue exactly one wake-up.
    """

    def __init__(self) -> None:
        """Initialize the gate in the not-pending state."""
        self._lock = threading.Lock()
        self._pending = False
        self._wakeup: queue.Queue[None] = queue.Queue(maxsize=1)

    def signal(self) -> bool:
        """
        Request a refresh cycle.

        Never blocks. Returns True if this call queued the cycle, False if
        one was already pending and the signal was dropped.
        """
        with self._lock:
            if self._pending:
                return False
            self._pending = True

        self.wake()
        return True

    def wake(self) -> None:
        """Release the wake-up slot without touching the pending flag."""
        try:
            self._wakeup.put_nowait(None)
        except queue.Full:
            pass

    def wait(self, timeout: float | None = None) -> bool:
        """
        Block until the slot is released.

        Args:
            timeout: Seconds to wait, or None to wait indefinitely

        Returns:
            True if woken, False on timeout
        """
        try:
            self._wakeup.get(timeout=timeout)
        except queue.Empty:
            return False
        return True

    def release(self) -> None:
        """Clear the pending flag so the next event starts a new cycle."""
        with self._lock:
            self._pending = False

    @property
    def is_pending(self) -> bool:
        """Whether a refresh cycle is queued or running."""
        with self._lock:
            return self._pending
