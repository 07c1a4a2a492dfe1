"""
Stream address endpoints.
Return the provider media URL to hand to the external player.
"""
from fastapi import APIRouter, Depends

from xtreamclient.services.session_controller import SessionController, get_session_controller

router = APIRouter(prefix="/api/streams", tags=["streams"])


@router.get("/live/{stream_id}")
async def live_stream(
    stream_id: int,
    controller: SessionController = Depends(get_session_controller)
):
    return {"url": controller.streams.live_stream_url(stream_id)}


@router.get("/vod/{stream_id}")
async def vod_stream(
    stream_id: int,
    controller: SessionController = Depends(get_session_controller)
):
    return {"url": controller.streams.vod_stream_url(stream_id)}


@router.get("/series/{series_id}/{episode_id}")
async def series_stream(
    series_id: int,
    episode_id: str,
    controller: SessionController = Depends(get_session_controller)
):
    return {"url": controller.streams.series_stream_url(series_id, episode_id)}
