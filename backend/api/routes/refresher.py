"""
ImageWatch Refresher Routes.

Status and manual trigger for the image refresher.
Requires Python 3.11+.
"""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.dependencies import require_refresher
from watcher.refresher import ImageRefresher

router = APIRouter()


class RefresherStatus(BaseModel):
    """Snapshot of a refresher session."""

    active: bool
    state: str
    watched_path: str | None = None
    image_path: str | None = None
    output_dir: str
    counter: int


@router.get("", response_model=RefresherStatus)
async def get_status(
    refresher: ImageRefresher = Depends(require_refresher),
) -> RefresherStatus:
    """Report the state of the running session."""
    return RefresherStatus(**refresher.status())


@router.post("/refresh")
async def trigger_refresh(
    refresher: ImageRefresher = Depends(require_refresher),
) -> dict[str, Any]:
    """
    Queue a refresh as if the image had changed.

    Goes through the same debounce gate as file events, so a request made
    while a cycle is pending is dropped.
    """
    queued = refresher.trigger()
    return {"queued": queued, "counter": refresher.counter}
