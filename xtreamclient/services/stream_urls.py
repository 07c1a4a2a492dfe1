"""
Playable media addresses for the external player.

Pure string construction from the session credentials; no network I/O,
safe to call synchronously right before playback starts.
"""
from typing import Union

from xtreamclient.errors import Unauthenticated
from xtreamclient.models.catalog import ContentKind
from xtreamclient.models.credentials import Credentials
from xtreamclient.services.credential_store import CredentialStore

# Path segment and container extension per content kind
STREAM_PATHS = {
    ContentKind.LIVE: ("live", "ts"),
    ContentKind.MOVIE: ("movie", "mp4"),
    ContentKind.SERIES: ("series", "mp4"),
}


def build_stream_url(credentials: Credentials, kind: ContentKind, media_id: Union[int, str]) -> str:
    """``{server}/{kind}/{username}/{password}/{id}.{ext}``, byte-for-byte stable."""
    segment, extension = STREAM_PATHS[kind]
    return (
        f"{credentials.base_url}/{segment}/"
        f"{credentials.username}/{credentials.password}/{media_id}.{extension}"
    )


class StreamUrlResolver:
    """Builds stream URLs from the credential store's session slot."""

    def __init__(self, store: CredentialStore):
        self.store = store

    def _credentials(self) -> Credentials:
        credentials = self.store.session
        if credentials is None:
            raise Unauthenticated("No active session; log in before playing")
        return credentials

    def live_stream_url(self, stream_id: int) -> str:
        return build_stream_url(self._credentials(), ContentKind.LIVE, stream_id)

    def vod_stream_url(self, stream_id: int) -> str:
        return build_stream_url(self._credentials(), ContentKind.MOVIE, stream_id)

    def series_stream_url(self, series_id: int, episode_id: str) -> str:
        # The episode id is the playable item; the series id only routes the request
        return build_stream_url(self._credentials(), ContentKind.SERIES, episode_id)
