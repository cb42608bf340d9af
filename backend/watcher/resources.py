"""
ImageWatch Resource URIs.

Resolves image URIs to filesystem paths and back.
Requires Python 3.11+.
"""

from pathlib import Path
from urllib.parse import unquote, urlparse

from utils.errors import ResolutionError

PROJECT_DIR_PREFIX = "%PROJECTDIR%"


def resolve_uri(uri: str | None, project_dir: Path) -> Path:
    """
    Resolve an image URI to an absolute path.

    Accepts ``%PROJECTDIR%/relative``, ``file://`` URIs, absolute paths and
    paths relative to the project directory.

    Raises:
        ResolutionError: If the URI is empty
    """
    if uri is None or not uri.strip():
        raise ResolutionError("Image path variable cannot be empty")

    uri = uri.strip()
    if uri.startswith("file://"):
        return Path(unquote(urlparse(uri).path))

    if uri.startswith(PROJECT_DIR_PREFIX):
        relative = uri[len(PROJECT_DIR_PREFIX):].lstrip("/\\")
        return Path(project_dir) / relative

    path = Path(uri)
    if path.is_absolute():
        return path
    return Path(project_dir) / path


def to_uri(path: Path, project_dir: Path) -> str:
    """Express a path project-relative when it lives under the project directory."""
    try:
        relative = Path(path).relative_to(project_dir)
    except ValueError:
        return str(path)
    return f"{PROJECT_DIR_PREFIX}/{relative.as_posix()}"
