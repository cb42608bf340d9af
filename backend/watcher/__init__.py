"""
ImageWatch Watcher Package.

Debounced watching and hot-swapping of a single image file.
Requires Python 3.11+.
"""

from watcher.debouncer import DebounceGate
from watcher.file_watcher import FileWatcher
from watcher.models import MemoryImageReference, RefreshState, WatchTarget
from watcher.refresher import ImageRefresher, close_refresher, open_refresher

__all__ = [
    "DebounceGate",
    "FileWatcher",
    "ImageRefresher",
    "MemoryImageReference",
    "RefreshState",
    "WatchTarget",
    "close_refresher",
    "open_refresher",
]
