"""
ImageWatch Exceptions.

Requires Python 3.11+.
"""


class ImageWatchError(Exception):
    """Base class for application errors."""


class ResolutionError(ImageWatchError):
    """The watched image or its path cannot be determined."""


class CodeGenerationError(ImageWatchError):
    """A value cannot be rendered as the requested symbol."""
