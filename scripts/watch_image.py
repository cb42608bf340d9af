#!/usr/bin/env python3
"""
ImageWatch Image Refresher Script.

Watches an image and hot-swaps it into a versioned temporary copy on
every change, until interrupted.
Requires Python 3.11+.

Usage:
    python scripts/watch_image.py /path/to/image.png --output-dir /tmp/out
"""

import argparse
import sys
import threading
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from utils.config import get_settings
from utils.logger import configure_logging, get_logger
from watcher.models import MemoryImageReference
from watcher.refresher import ImageRefresher


configure_logging()
logger = get_logger("watch_image")


def watch_image(
    image_path: Path,
    output_dir: Path | None = None,
    delay_ms: int | None = None,
    stop_event: threading.Event | None = None,
) -> int:
    """
    Run a refresher session until stop_event is set.

    Args:
        image_path: Image to watch
        output_dir: Directory for temporary copies
        delay_ms: Wait between a change and the copy

    Returns:
        Number of completed swaps
    """
    settings = get_settings()
    stop_event = stop_event or threading.Event()
    swaps: list[str] = []

    image = MemoryImageReference(str(image_path.resolve()))
    image.subscribe(swaps.append)

    refresher = ImageRefresher(
        image,
        project_dir=settings.project_dir,
        output_dir=output_dir,
        delay_ms=delay_ms,
    )
    with refresher:
        if not refresher.is_active:
            return 0
        logger.info("watching_image", path=str(image_path), output_dir=str(output_dir or settings.output_dir))
        try:
            while not stop_event.wait(timeout=0.5):
                pass
        except KeyboardInterrupt:
            print("\nStopping")

    # Stopping after a swap notifies once more with the original path
    return max(len(swaps) - 1, 0)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Hot-swap an image whenever its file changes",
    )
    parser.add_argument(
        "path",
        type=Path,
        help="Path to the image to watch",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for temporary copies (default: project directory)",
    )
    parser.add_argument(
        "--delay-ms",
        type=int,
        default=None,
        help="Delay between a change and the copy",
    )

    args = parser.parse_args()

    if not args.path.is_file():
        print(f"Error: Image does not exist: {args.path}")
        sys.exit(1)

    swaps = watch_image(args.path, args.output_dir, args.delay_ms)
    print(f"Swaps: {swaps}")


if __name__ == "__main__":
    main()
