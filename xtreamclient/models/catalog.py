"""
Catalog data models: categories, live channels, movies, series and episodes.
Maps the provider's loosely-typed JSON records to tagged variants per content kind.
"""
import re
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ContentKind(str, Enum):
    LIVE = "live"
    MOVIE = "movie"
    SERIES = "series"


def _blank_to_none(value):
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


class ProviderRecord(BaseModel):
    """Base for provider records: accepts provider field names or our own."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Category(ProviderRecord):
    """Content grouping. Ids are only unique within one content kind."""
    id: str = Field(alias="category_id")
    name: str = Field(alias="category_name")
    parent_id: int = 0

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, value):
        return value if value is None else str(value)

    @field_validator("parent_id", mode="before")
    @classmethod
    def _parent(cls, value):
        return _blank_to_none(value) or 0


class ContentItem(ProviderRecord):
    """Fields shared by every content kind."""
    id: int
    name: str
    icon: Optional[str] = None
    rating: Optional[float] = None
    category_id: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, value):
        return "" if value is None else str(value)

    @field_validator("icon", mode="before")
    @classmethod
    def _icon(cls, value):
        return _blank_to_none(value)

    @field_validator("rating", mode="before")
    @classmethod
    def _rating(cls, value):
        value = _blank_to_none(value)
        if value is None:
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    @field_validator("category_id", mode="before")
    @classmethod
    def _category(cls, value):
        value = _blank_to_none(value)
        return None if value is None else str(value)

    @property
    def identity(self) -> tuple[ContentKind, int]:
        return (ContentKind(self.kind), self.id)


class LiveChannel(ContentItem):
    kind: Literal["live"] = "live"
    id: int = Field(alias="stream_id")
    icon: Optional[str] = Field(default=None, alias="stream_icon")
    num: Optional[int] = None
    epg_channel_id: Optional[str] = None
    tv_archive: int = 0
    tv_archive_duration: int = 0

    @field_validator("epg_channel_id", mode="before")
    @classmethod
    def _epg_id(cls, value):
        return _blank_to_none(value)

    @field_validator("num", "tv_archive", "tv_archive_duration", mode="before")
    @classmethod
    def _ints(cls, value):
        value = _blank_to_none(value)
        return value if value is not None else 0


class Movie(ContentItem):
    kind: Literal["movie"] = "movie"
    id: int = Field(alias="stream_id")
    icon: Optional[str] = Field(default=None, alias="stream_icon")
    container_extension: Optional[str] = None
    added: Optional[str] = None


class Series(ContentItem):
    kind: Literal["series"] = "series"
    id: int = Field(alias="series_id")
    icon: Optional[str] = Field(default=None, alias="cover")
    plot: Optional[str] = None
    cast: Optional[str] = None
    director: Optional[str] = None
    genre: Optional[str] = None
    release_date: Optional[str] = None

    @field_validator("plot", "cast", "director", "genre", "release_date", mode="before")
    @classmethod
    def _text(cls, value):
        return _blank_to_none(value)


class Episode(ProviderRecord):
    """Episode of a series. The id is an opaque string scoped to its series."""
    id: str
    episode_num: Optional[int] = None
    title: str = ""
    container_extension: Optional[str] = None
    season: Optional[int] = None
    plot: Optional[str] = None
    image: Optional[str] = None
    duration_secs: Optional[int] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, value):
        return value if value is None else str(value)

    @classmethod
    def from_provider(cls, raw: dict) -> "Episode":
        """Flatten the provider's nested ``info`` block."""
        info = raw.get("info") or {}
        if not isinstance(info, dict):
            info = {}
        return cls(
            id=raw.get("id"),
            episode_num=_blank_to_none(raw.get("episode_num")),
            title=raw.get("title") or "",
            container_extension=_blank_to_none(raw.get("container_extension")),
            season=_blank_to_none(raw.get("season")),
            plot=_blank_to_none(info.get("plot")),
            image=_blank_to_none(info.get("movie_image")),
            duration_secs=_blank_to_none(info.get("duration_secs")),
        )


def _season_sort_key(season: str):
    return (0, int(season), season) if re.fullmatch(r"\d+", season) else (1, 0, season)


class SeriesDetail(BaseModel):
    """A series plus its episodes keyed by season number (string keys, any numbering)."""
    series: Series
    episodes: dict[str, list[Episode]] = Field(default_factory=dict)

    @property
    def seasons(self) -> list[str]:
        return sorted(self.episodes, key=_season_sort_key)

    def find_episode(self, episode_id: str) -> Optional[Episode]:
        for season_episodes in self.episodes.values():
            for episode in season_episodes:
                if episode.id == episode_id:
                    return episode
        return None
