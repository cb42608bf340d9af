"""
ImageWatch API Dependencies.

Shared dependencies for FastAPI routes.
Requires Python 3.11+.
"""

from typing import Any

from fastapi import HTTPException

from codes.generator import CodeGenerator
from watcher.refresher import ImageRefresher


# Shared state - populated by main.py lifespan
_state: dict[str, Any] = {}


def set_refresher(refresher: ImageRefresher | None) -> None:
    """Set the shared image refresher session."""
    _state["refresher"] = refresher


def get_refresher() -> ImageRefresher | None:
    """Get the shared image refresher session."""
    return _state.get("refresher")


def require_refresher() -> ImageRefresher:
    """
    Dependency that requires a running refresher.

    Raises HTTPException if no session is active.
    """
    refresher = get_refresher()
    if refresher is None or not refresher.is_active:
        raise HTTPException(
            status_code=503,
            detail="Image refresher is not running",
        )
    return refresher


def get_code_generator() -> CodeGenerator:
    """Get the shared code generator, creating it on first use."""
    generator = _state.get("code_generator")
    if generator is None:
        generator = CodeGenerator()
        _state["code_generator"] = generator
    return generator
