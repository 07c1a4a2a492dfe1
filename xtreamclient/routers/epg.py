"""
EPG (Electronic Program Guide) API endpoints.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from xtreamclient.services.epg_resolver import prefetch_guides, resolve_now_next
from xtreamclient.services.session_controller import SessionController, get_session_controller

router = APIRouter(prefix="/api/epg", tags=["epg"])


@router.get("/guide")
async def get_guide(
    streams: str = Query(..., description="Comma-separated stream IDs"),
    now: Optional[int] = Query(None, description="Unix time to resolve at (defaults to now)"),
    controller: SessionController = Depends(get_session_controller)
):
    """
    Now/next for several channels.
    Channels whose guide can't be fetched come back with available=false.
    """
    try:
        stream_ids = [int(s) for s in streams.split(",") if s.strip()]
    except ValueError:
        raise HTTPException(status_code=400, detail="Stream IDs must be integers")

    if not stream_ids:
        raise HTTPException(status_code=400, detail="At least one stream ID required")

    guides = await prefetch_guides(controller.client, stream_ids, now=now)
    return {"channels": guides, "count": len(guides)}


@router.get("/{stream_id}")
async def get_channel_epg(
    stream_id: int,
    limit: Optional[int] = Query(None, ge=1, le=100, description="Number of listings"),
    now: Optional[int] = Query(None, description="Unix time to resolve at (defaults to now)"),
    controller: SessionController = Depends(get_session_controller)
):
    """Short EPG for one channel with the resolved now/next."""
    programs = await controller.client.get_short_epg(stream_id, limit)
    return {
        "stream_id": stream_id,
        "programs": programs,
        "now_next": resolve_now_next(programs, now),
        "count": len(programs)
    }
