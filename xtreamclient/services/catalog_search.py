"""
Cross-catalog search and overview.
Loads live, movie and series listings concurrently and filters them locally.
"""
import asyncio
import logging

from pydantic import BaseModel, Field

from xtreamclient.models.catalog import LiveChannel, Movie, Series

logger = logging.getLogger(__name__)


class SearchResults(BaseModel):
    query: str
    channels: list[LiveChannel] = Field(default_factory=list)
    movies: list[Movie] = Field(default_factory=list)
    series: list[Series] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.channels) + len(self.movies) + len(self.series)


class CatalogOverview(BaseModel):
    """Counts per content kind plus a sample of each."""
    channel_count: int
    movie_count: int
    series_count: int
    channels: list[LiveChannel] = Field(default_factory=list)
    movies: list[Movie] = Field(default_factory=list)
    series: list[Series] = Field(default_factory=list)


async def _load_all(client):
    return await asyncio.gather(
        client.get_live_streams(),
        client.get_vod_streams(),
        client.get_series_list(),
    )


def _matches(name: str, query: str) -> bool:
    return query in name.casefold()


async def search_catalog(client, term: str) -> SearchResults:
    """
    Case-insensitive substring search over channel, movie and series names.
    A blank term returns empty results without touching the network.
    """
    query = term.strip().casefold()
    if not query:
        return SearchResults(query=term)

    channels, movies, series = await _load_all(client)
    results = SearchResults(
        query=term,
        channels=[item for item in channels if _matches(item.name, query)],
        movies=[item for item in movies if _matches(item.name, query)],
        series=[item for item in series if _matches(item.name, query)],
    )
    logger.info(f"Search {term!r}: {results.total} matches")
    return results


async def catalog_overview(client, sample: int = 10) -> CatalogOverview:
    channels, movies, series = await _load_all(client)
    return CatalogOverview(
        channel_count=len(channels),
        movie_count=len(movies),
        series_count=len(series),
        channels=channels[:sample],
        movies=movies[:sample],
        series=series[:sample],
    )
