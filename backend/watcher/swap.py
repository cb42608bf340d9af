"""
ImageWatch Image Swapper.

Copies the watched image under a versioned temporary name and points the
image reference at the copy, so viewers caching by path reload it.
Requires Python 3.11+.
"""

import glob
import shutil
import threading
from pathlib import Path

from utils.logger import LoggerMixin
from watcher.models import ImageReference, WatchTarget
from watcher.resources import to_uri


class ImageSwapper(LoggerMixin):
    """
    Owns the temporary file set and the refresh counter of one session.

    Temporary copies are named ``<stem>~<counter><ext>`` and live in the
    output directory. The counter starts at 1 and only advances after a
    copy has been made and the reference updated.
    """

    def __init__(
        self,
        target: WatchTarget,
        image: ImageReference,
        output_dir: Path,
        project_dir: Path,
    ) -> None:
        """
        Initialize the swapper.

        Args:
            target: The watched file
            image: Reference updated after each copy
            output_dir: Directory receiving temporary copies
            project_dir: Root used to express project-relative URIs
        """
        self._target = target
        self._image = image
        self._output_dir = Path(output_dir)
        self._project_dir = Path(project_dir)
        self._counter = 1
        self._lock = threading.Lock()

    @property
    def counter(self) -> int:
        """Value used for the next temporary copy."""
        return self._counter

    def temporary_files(self) -> list[Path]:
        """List the temporary copies currently on disk."""
        pattern = glob.escape(self._target.stem) + "~*" + glob.escape(self._target.suffix)
        return sorted(p for p in self._output_dir.glob(pattern) if p.is_file())

    def cleanup(self) -> int:
        """
        Delete every temporary copy.

        Failures are logged per file and do not stop the pass.

        Returns:
            Number of files deleted
        """
        deleted = 0
        for path in self.temporary_files():
            try:
                path.unlink()
                deleted += 1
            except FileNotFoundError:
                continue
            except OSError as e:
                self.log.error("temporary_image_delete_failed", path=str(path), error=str(e))
        return deleted

    def swap(self) -> Path | None:
        """
        Copy the watched image and point the reference at the copy.

        Returns:
            Path of the new temporary copy, or None if the cycle failed
        """
        with self._lock:
            name = self._target.temporary_name(self._counter)
            destination = self._output_dir / name

            try:
                shutil.copyfile(self._target.absolute_path, destination)
            except OSError as e:
                self.log.error(
                    "image_copy_failed",
                    source=str(self._target.absolute_path),
                    destination=str(destination),
                    error=str(e),
                )
                return None

            try:
                self._image.path = to_uri(destination, self._project_dir)
            except Exception as e:
                self.log.error("image_path_update_failed", path=str(destination), error=str(e))
                return None

            self._counter += 1

        self.log.info("image_swapped", path=str(destination), counter=self._counter - 1)
        return destination

    def refresh(self) -> Path | None:
        """Run one full cycle: drop old copies, then swap in a new one."""
        self.cleanup()
        return self.swap()
