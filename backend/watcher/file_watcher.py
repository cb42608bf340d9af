"""
ImageWatch File Watcher.

Cross-platform monitoring of a single image file using watchdog.
Requires Python 3.11+.
"""

from pathlib import Path
from typing import Any

from watchdog.events import (
    DirCreatedEvent,
    DirModifiedEvent,
    DirMovedEvent,
    FileCreatedEvent,
    FileModifiedEvent,
    FileMovedEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from utils.logger import LoggerMixin
from watcher.debouncer import DebounceGate
from watcher.models import WatchTarget


class ImageFileHandler(FileSystemEventHandler, LoggerMixin):
    """
    Handles file system events for the watched image.

    Only events naming the exact target file reach the gate. Created events
    count as changes because some editors save by deleting the image and
    writing a new one; a move onto the target name counts for editors that
    save through a temporary file.
    """

    def __init__(self, target: WatchTarget, gate: DebounceGate) -> None:
        """
        Initialize the handler.

        Args:
            target: The watched file
            gate: Gate receiving change signals
        """
        super().__init__()
        self._target = target
        self._gate = gate

    def _is_target(self, path: str | bytes) -> bool:
        """Check if an event path names the watched file."""
        if isinstance(path, bytes):
            path = path.decode(errors="replace")
        return Path(path).name == self._target.filename

    def _changed(self, path: str | bytes, change_type: str) -> None:
        queued = self._gate.signal()
        self.log.debug("image_event", path=str(path), change_type=change_type, queued=queued)

    def on_modified(self, event: FileModifiedEvent | DirModifiedEvent) -> None:
        """Handle file modification."""
        if event.is_directory or not self._is_target(event.src_path):
            return
        self._changed(event.src_path, "modified")

    def on_created(self, event: FileCreatedEvent | DirCreatedEvent) -> None:
        """Handle file creation."""
        if event.is_directory or not self._is_target(event.src_path):
            return
        self._changed(event.src_path, "created")

    def on_moved(self, event: FileMovedEvent | DirMovedEvent) -> None:
        """Handle a rename onto the watched name."""
        if event.is_directory or not self._is_target(event.dest_path):
            return
        self._changed(event.dest_path, "created")


class FileWatcher(LoggerMixin):
    """
    Watches the directory containing one file.

    The observer is scheduled non-recursively on the target's directory;
    filtering to the file name happens in ImageFileHandler.
    """

    def __init__(self, target: WatchTarget, gate: DebounceGate) -> None:
        """
        Initialize the file watcher.

        Args:
            target: The watched file
            gate: Gate receiving change signals
        """
        self._target = target
        self._handler = ImageFileHandler(target, gate)
        self._observer: Observer | None = None

    @property
    def handler(self) -> ImageFileHandler:
        """The event handler fed by the observer."""
        return self._handler

    def start(self) -> None:
        """Start watching for file changes."""
        if self._observer is not None:
            return

        observer = Observer()
        observer.schedule(self._handler, str(self._target.directory), recursive=False)
        observer.start()
        self._observer = observer

        self.log.info(
            "file_watcher_started",
            path=str(self._target.absolute_path),
        )

    def stop(self) -> None:
        """Stop watching. Safe to call more than once."""
        observer, self._observer = self._observer, None
        if observer is None:
            return

        try:
            observer.unschedule_all()
        finally:
            observer.stop()
            observer.join(timeout=5.0)

        self.log.info("file_watcher_stopped", path=str(self._target.absolute_path))

    @property
    def is_running(self) -> bool:
        """Check if the watcher is running."""
        return self._observer is not None

    def __enter__(self) -> "FileWatcher":
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.stop()
