"""
Catalog API endpoints.
Categories, live channels, movies, series and search, proxied from the provider.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from xtreamclient.models.catalog import ContentKind
from xtreamclient.services.catalog_search import catalog_overview, search_catalog
from xtreamclient.services.session_controller import SessionController, get_session_controller

router = APIRouter(prefix="/api/catalog", tags=["catalog"])


@router.get("/{kind}/categories")
async def list_categories(
    kind: ContentKind,
    controller: SessionController = Depends(get_session_controller)
):
    """List categories for one content kind (live, movie or series)."""
    client = controller.client
    if kind == ContentKind.LIVE:
        categories = await client.get_live_categories()
    elif kind == ContentKind.MOVIE:
        categories = await client.get_vod_categories()
    else:
        categories = await client.get_series_categories()
    return {"kind": kind, "categories": categories, "count": len(categories)}


@router.get("/live/streams")
async def list_live_streams(
    category_id: Optional[str] = Query(None, description="Filter by category"),
    controller: SessionController = Depends(get_session_controller)
):
    channels = await controller.client.get_live_streams(category_id)
    return {"channels": channels, "count": len(channels)}


@router.get("/vod/streams")
async def list_movies(
    category_id: Optional[str] = Query(None, description="Filter by category"),
    controller: SessionController = Depends(get_session_controller)
):
    movies = await controller.client.get_vod_streams(category_id)
    return {"movies": movies, "count": len(movies)}


@router.get("/series")
async def list_series(
    category_id: Optional[str] = Query(None, description="Filter by category"),
    controller: SessionController = Depends(get_session_controller)
):
    series = await controller.client.get_series_list(category_id)
    return {"series": series, "count": len(series)}


@router.get("/series/{series_id}")
async def get_series(
    series_id: int,
    controller: SessionController = Depends(get_session_controller)
):
    """Series details with episodes grouped by season."""
    detail = await controller.client.get_series_info(series_id)
    return {
        "series": detail.series,
        "seasons": detail.seasons,
        "episodes": detail.episodes
    }


@router.get("/search")
async def search(
    q: str = Query(..., min_length=1, description="Search query"),
    controller: SessionController = Depends(get_session_controller)
):
    """Search channel, movie and series names."""
    results = await search_catalog(controller.client, q)
    return {**results.model_dump(), "total": results.total}


@router.get("/overview")
async def overview(
    sample: int = Query(10, ge=0, le=100, description="Items per kind"),
    controller: SessionController = Depends(get_session_controller)
):
    """Counts per content kind with a sample of each."""
    return await catalog_overview(controller.client, sample)
