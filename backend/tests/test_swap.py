"""
Tests for the Image Swapper.

Requires Python 3.11+.
"""

from pathlib import Path

import pytest

from watcher.models import MemoryImageReference, WatchTarget
from watcher.swap import ImageSwapper


class BrokenReference:
    """Reference whose path cannot be assigned."""

    def __init__(self, path: str) -> None:
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    @path.setter
    def path(self, value: str) -> None:
        raise RuntimeError("read-only")


class TestImageSwapper:
    """Test cases for ImageSwapper."""

    @pytest.fixture
    def swapper(
        self,
        image_file: Path,
        image_reference: MemoryImageReference,
        project_dir: Path,
    ) -> ImageSwapper:
        """Create a swapper writing into the project directory."""
        return ImageSwapper(
            target=WatchTarget.from_path(image_file),
            image=image_reference,
            output_dir=project_dir,
            project_dir=project_dir,
        )

    def test_first_swap(self, swapper: ImageSwapper, image_reference, image_file: Path, project_dir: Path):
        """The first copy is img~1.png and the reference points at it."""
        result = swapper.refresh()

        assert result == project_dir / "img~1.png"
        assert result.read_bytes() == image_file.read_bytes()
        assert image_reference.path == "%PROJECTDIR%/img~1.png"
        assert swapper.counter == 2

    def test_refresh_replaces_previous_copy(self, swapper: ImageSwapper, image_file: Path, project_dir: Path):
        """Each cycle leaves exactly one temporary copy."""
        swapper.refresh()
        image_file.write_bytes(b"image-v2")
        swapper.refresh()

        assert swapper.temporary_files() == [project_dir / "img~2.png"]
        assert (project_dir / "img~2.png").read_bytes() == b"image-v2"

    def test_counter_increments_by_one(self, swapper: ImageSwapper):
        """The counter is never reused."""
        names = [swapper.refresh().name for _ in range(4)]

        assert names == ["img~1.png", "img~2.png", "img~3.png", "img~4.png"]
        assert swapper.counter == 5

    def test_cleanup_only_matches_own_copies(self, swapper: ImageSwapper, project_dir: Path):
        """Other files in the output directory survive cleanup."""
        for name in ["img~7.png", "img~old.png", "img.png", "img~1.jpg", "other~1.png", "img1.png"]:
            (project_dir / name).write_bytes(b"x")

        deleted = swapper.cleanup()

        assert deleted == 2
        remaining = sorted(p.name for p in project_dir.iterdir())
        assert remaining == ["img.png", "img1.png", "img~1.jpg", "other~1.png"]

    def test_cleanup_escapes_glob_characters(self, tmp_path: Path, project_dir: Path):
        """Brackets in the file name are matched literally."""
        source = tmp_path / "img[1].png"
        source.write_bytes(b"x")
        (project_dir / "img[1]~3.png").write_bytes(b"x")
        (project_dir / "img1~3.png").write_bytes(b"x")
        swapper = ImageSwapper(
            target=WatchTarget.from_path(source),
            image=MemoryImageReference(str(source)),
            output_dir=project_dir,
            project_dir=project_dir,
        )

        assert swapper.cleanup() == 1
        assert (project_dir / "img1~3.png").exists()

    def test_copy_failure_keeps_counter(self, swapper: ImageSwapper, image_file: Path, image_reference):
        """A missing source aborts the cycle without advancing."""
        image_file.unlink()

        assert swapper.refresh() is None
        assert swapper.counter == 1
        assert image_reference.path == str(image_file)

    def test_reference_failure_keeps_counter(self, image_file: Path, project_dir: Path):
        """A failed reference update aborts the cycle without advancing."""
        swapper = ImageSwapper(
            target=WatchTarget.from_path(image_file),
            image=BrokenReference(str(image_file)),
            output_dir=project_dir,
            project_dir=project_dir,
        )

        assert swapper.refresh() is None
        assert swapper.counter == 1

    def test_output_outside_project(self, image_file: Path, image_reference, tmp_path: Path):
        """Copies outside the project are referenced by absolute path."""
        out = tmp_path / "out"
        out.mkdir()
        swapper = ImageSwapper(
            target=WatchTarget.from_path(image_file),
            image=image_reference,
            output_dir=out,
            project_dir=tmp_path / "project",
        )

        swapper.refresh()

        assert image_reference.path == str(out / "img~1.png")
