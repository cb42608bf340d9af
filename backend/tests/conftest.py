"""
ImageWatch Test Configuration.

Pytest fixtures and configuration.
Requires Python 3.11+.
"""

import time
from collections.abc import Callable
from pathlib import Path

import pytest

from watcher.models import MemoryImageReference

# Only copied, never decoded
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"image-v1"


def wait_for(predicate: Callable[[], bool], timeout: float = 5.0, interval: float = 0.01) -> bool:
    """Poll until predicate is true or the timeout expires."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Project directory receiving temporary copies."""
    path = tmp_path / "project"
    path.mkdir()
    return path


@pytest.fixture
def images_dir(tmp_path: Path) -> Path:
    """Directory holding the watched image."""
    path = tmp_path / "images"
    path.mkdir()
    return path


@pytest.fixture
def image_file(images_dir: Path) -> Path:
    """The watched image."""
    path = images_dir / "img.png"
    path.write_bytes(PNG_BYTES)
    return path


@pytest.fixture
def image_reference(image_file: Path) -> MemoryImageReference:
    """Reference pointing at the watched image."""
    return MemoryImageReference(str(image_file))


@pytest.fixture
def wait() -> Callable[..., bool]:
    """Polling helper for thread timing assertions."""
    return wait_for
