"""
ImageWatch Watcher Models.

Data structures shared by the image refresher components.
Requires Python 3.11+.
"""

import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol


class RefreshState(str, Enum):
    """Lifecycle state of the refresh worker."""

    WAITING = "waiting"
    DELAYING = "delaying"
    ACTING = "acting"
    STOPPED = "stopped"


@dataclass(frozen=True)
class WatchTarget:
    """The single file watched by a refresher session."""

    absolute_path: Path
    directory: Path
    filename: str

    @classmethod
    def from_path(cls, path: Path) -> "WatchTarget":
        """Build a target from an absolute file path."""
        path = Path(path)
        return cls(absolute_path=path, directory=path.parent, filename=path.name)

    @property
    def stem(self) -> str:
        """File name without extension."""
        return self.absolute_path.stem

    @property
    def suffix(self) -> str:
        """File extension including the dot."""
        return self.absolute_path.suffix

    def temporary_name(self, counter: int) -> str:
        """Name of the temporary copy for a refresh counter value."""
        return f"{self.stem}~{counter}{self.suffix}"

    def temporary_pattern(self) -> str:
        """Glob pattern matching every temporary copy of this target."""
        return f"{self.stem}~*{self.suffix}"


class ImageReference(Protocol):
    """Anything exposing a readable and settable image path."""

    @property
    def path(self) -> str: ...

    @path.setter
    def path(self, value: str) -> None: ...


class MemoryImageReference:
    """
    Thread-safe in-process image reference.

    Viewers subscribe to be told when the path changes.
    """

    def __init__(self, path: str = "") -> None:
        self._path = path
        self._lock = threading.Lock()
        self._subscribers: list[Callable[[str], None]] = []

    @property
    def path(self) -> str:
        with self._lock:
            return self._path

    @path.setter
    def path(self, value: str) -> None:
        with self._lock:
            changed = value != self._path
            self._path = value
            subscribers = list(self._subscribers)

        if changed:
            for callback in subscribers:
                callback(value)

    def subscribe(self, callback: Callable[[str], None]) -> None:
        """Register a callback invoked with the new path on every change."""
        with self._lock:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[str], None]) -> None:
        """Remove a previously registered callback."""
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)
