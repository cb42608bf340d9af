"""
ImageWatch Image Refresher.

Session tying together the watcher, debounce gate, worker and swapper.
Requires Python 3.11+.
"""

from pathlib import Path
from typing import Any

from utils.config import RefresherSettings, get_settings
from utils.errors import ResolutionError
from utils.logger import LoggerMixin
from watcher.debouncer import DebounceGate
from watcher.file_watcher import FileWatcher
from watcher.models import ImageReference, RefreshState, WatchTarget
from watcher.resources import resolve_uri
from watcher.swap import ImageSwapper
from watcher.worker import RefreshWorker


class ImageRefresher(LoggerMixin):
    """
    Hot-swaps an image whenever its file changes on disk.

    A session resolves the image reference once on start. If the image or
    its path cannot be determined the session logs an error and stays
    inert; it never raises into the caller.

    Usage:
        with ImageRefresher(image, project_dir=Path("project")) as refresher:
            ...
    """

    def __init__(
        self,
        image: ImageReference | None,
        project_dir: Path | None = None,
        output_dir: Path | None = None,
        delay_ms: int | None = None,
    ) -> None:
        """
        Initialize the refresher.

        Args:
            image: Reference whose path names the watched image
            project_dir: Root for project-relative URIs
            output_dir: Directory for temporary copies
            delay_ms: Wait between a change and the copy
        """
        settings = get_settings()

        self._image = image
        self._project_dir = Path(project_dir) if project_dir is not None else settings.project_dir
        self._output_dir = Path(output_dir) if output_dir is not None else (
            settings.refresher.output_dir or self._project_dir
        )
        self._delay_ms = delay_ms if delay_ms is not None else settings.refresher.delay_ms

        self._original_uri: str | None = None
        self._target: WatchTarget | None = None
        self._gate: DebounceGate | None = None
        self._watcher: FileWatcher | None = None
        self._worker: RefreshWorker | None = None
        self._swapper: ImageSwapper | None = None

    def _resolve_target(self) -> WatchTarget:
        if self._image is None:
            raise ResolutionError("Image not found")
        return WatchTarget.from_path(resolve_uri(self._image.path, self._project_dir))

    def start(self) -> bool:
        """
        Start watching the image.

        Returns:
            True if watching started, False if the session is inert
        """
        if self.is_active:
            return True

        try:
            target = self._resolve_target()
        except ResolutionError as e:
            self.log.error("image_resolution_failed", error=str(e))
            return False

        self._original_uri = self._image.path
        self._target = target
        self._gate = DebounceGate()
        self._swapper = ImageSwapper(
            target=target,
            image=self._image,
            output_dir=self._output_dir,
            project_dir=self._project_dir,
        )
        self._worker = RefreshWorker(
            gate=self._gate,
            action=self._swapper.refresh,
            delay_ms=self._delay_ms,
        )
        self._watcher = FileWatcher(target, self._gate)

        self._worker.start()
        try:
            self._watcher.start()
        except OSError as e:
            self.log.error("file_watcher_start_failed", path=str(target.directory), error=str(e))
            self._worker.stop()
            self._watcher = None
            self._worker = None
            return False

        self.log.info(
            "image_refresher_started",
            path=str(target.absolute_path),
            output_dir=str(self._output_dir),
            delay_ms=self._delay_ms,
        )
        return True

    def stop(self) -> None:
        """
        Stop the session.

        Unwatches first, then stops the worker, letting a running refresh
        finish before the temporary copies are deleted and the reference is
        pointed back at the original image.
        """
        if self._worker is None:
            return

        if self._watcher is not None:
            self._watcher.stop()
        self._worker.stop()

        if self._swapper is not None:
            self._swapper.cleanup()

        if self._image is not None and self._original_uri is not None:
            try:
                self._image.path = self._original_uri
            except Exception as e:
                self.log.error("image_path_restore_failed", error=str(e))

        self._watcher = None
        self._worker = None
        self.log.info("image_refresher_stopped")

    def trigger(self) -> bool:
        """
        Request a refresh as if the file had changed.

        Returns:
            True if a cycle was queued, False if inactive or one is pending
        """
        if not self.is_active or self._gate is None:
            return False
        return self._gate.signal()

    @property
    def is_active(self) -> bool:
        """Check if the session is watching."""
        return self._worker is not None

    @property
    def state(self) -> RefreshState:
        """State of the refresh worker."""
        if self._worker is None:
            return RefreshState.STOPPED
        return self._worker.state

    @property
    def target(self) -> WatchTarget | None:
        """The watched file, once started."""
        return self._target

    @property
    def counter(self) -> int:
        """Refresh counter value for the next copy."""
        return self._swapper.counter if self._swapper is not None else 1

    @property
    def gate(self) -> DebounceGate | None:
        """Debounce gate of the running session."""
        return self._gate

    @property
    def watcher(self) -> FileWatcher | None:
        """File watcher of the running session."""
        return self._watcher

    def status(self) -> dict[str, Any]:
        """Summarize the session for reporting."""
        return {
            "active": self.is_active,
            "state": self.state.value,
            "watched_path": str(self._target.absolute_path) if self._target else None,
            "image_path": self._image.path if self._image is not None else None,
            "output_dir": str(self._output_dir),
            "counter": self.counter,
        }

    def __enter__(self) -> "ImageRefresher":
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.stop()


def open_refresher(
    image: ImageReference | None,
    config: RefresherSettings | None = None,
    project_dir: Path | None = None,
) -> ImageRefresher:
    """
    Create and start a refresher session.

    Args:
        image: Reference whose path names the watched image
        config: Refresher settings, defaults to the application settings
        project_dir: Root for project-relative URIs

    Returns:
        The session, inert if the image could not be resolved
    """
    config = config or get_settings().refresher
    refresher = ImageRefresher(
        image=image,
        project_dir=project_dir,
        output_dir=config.output_dir,
        delay_ms=config.delay_ms,
    )
    refresher.start()
    return refresher


def close_refresher(refresher: ImageRefresher) -> None:
    """Stop a session opened with open_refresher."""
    refresher.stop()
