"""
Provider API client.

All network interaction with the Xtream-style ``player_api.php`` endpoint:
authentication with bounded retry, catalog listings, series details and
short EPG. Only ``authenticate`` retries; catalog and EPG calls are
idempotent reads that callers retry explicitly if they want to.
"""
import asyncio
import logging
from typing import Any, Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from xtreamclient.config import Settings, get_settings
from xtreamclient.errors import (
    InvalidCredentials,
    NetworkError,
    ServerError,
    Timeout,
    Unauthenticated,
    Unreachable,
)
from xtreamclient.models.account import AuthResult
from xtreamclient.models.catalog import (
    Category,
    Episode,
    LiveChannel,
    Movie,
    Series,
    SeriesDetail,
)
from xtreamclient.models.credentials import (
    Credentials,
    normalize_server_address,
    validate_server_address,
)
from xtreamclient.models.epg import Program
from xtreamclient.services.credential_store import CredentialStore
from xtreamclient.services.epg_parser import parse_short_epg

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class ProviderClient:
    """Async client for one provider, reading credentials from the store's session slot."""

    API_PATH = "/player_api.php"

    # Failures worth another authenticate attempt (timeouts, aborted connections)
    TRANSIENT_ERRORS = (
        httpx.TimeoutException,
        httpx.ReadError,
        httpx.WriteError,
        httpx.RemoteProtocolError,
    )

    def __init__(
        self,
        store: CredentialStore,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        retry_interval: Optional[float] = None,
    ):
        self.store = store
        self.settings = settings or get_settings()
        self._transport = transport
        self.retry_interval = (
            self.settings.auth_retry_interval_seconds if retry_interval is None else retry_interval
        )

    def _http_client(self, timeout: Optional[float]) -> httpx.AsyncClient:
        """Build an HTTP client; ``timeout=None`` keeps the transport default."""
        kwargs: dict[str, Any] = {
            "headers": {"User-Agent": self.settings.user_agent},
            "follow_redirects": True,
        }
        if timeout is not None:
            kwargs["timeout"] = timeout
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return httpx.AsyncClient(**kwargs)

    def api_url(self, credentials: Credentials) -> str:
        """The API endpoint sits at the server root, whatever path the address carries."""
        return str(httpx.URL(credentials.base_url).join(self.API_PATH))

    @staticmethod
    def build_params(credentials: Credentials, action: Optional[str] = None, **filters) -> dict:
        """Query parameters: credentials, the action discriminator and any set filters."""
        params = {"username": credentials.username, "password": credentials.password}
        if action:
            params["action"] = action
        for key, value in filters.items():
            if value is not None and value != "":
                params[key] = str(value)
        return params

    # Authentication

    async def authenticate(
        self,
        server: str,
        username: str,
        password: str,
        max_retries: int = 0,
    ) -> AuthResult:
        """
        Authenticate against the provider.

        Args:
            server: Bare host, host:port or full URL
            username: Subscriber username
            password: Subscriber password
            max_retries: Extra attempts after a timeout or aborted connection

        Returns:
            User and server info. The credentials are saved to the session slot.

        Raises:
            InvalidAddress: Address fails syntax validation (never retried)
            InvalidCredentials: HTTP 401 or a refused login (never retried)
            ServerError: Any other non-success HTTP status
            Unreachable: No response from a syntactically valid address
            Timeout: Transient failures outlasted the retry budget
        """
        validate_server_address(server)
        credentials = Credentials(
            server=normalize_server_address(server),
            username=username,
            password=password,
        )

        remaining = max_retries
        attempt = 0
        while True:
            attempt += 1
            logger.info(f"Authenticating {username}@{credentials.server} (attempt {attempt})")
            try:
                result = await self._authenticate_once(credentials)
            except self.TRANSIENT_ERRORS as e:
                if remaining <= 0:
                    logger.warning(f"Authentication timed out after {attempt} attempt(s): {e!r}")
                    raise Timeout(f"No response from {credentials.server} after {attempt} attempt(s)") from e
                remaining -= 1
                logger.warning(
                    f"Authentication attempt {attempt} failed ({e!r}), "
                    f"retrying in {self.retry_interval}s ({remaining} retries left)"
                )
                await asyncio.sleep(self.retry_interval)
                continue

            self.store.save_session(credentials)
            logger.info(f"Authenticated {username}@{credentials.server}")
            return result

    async def _authenticate_once(self, credentials: Credentials) -> AuthResult:
        """One authentication request. Transient httpx errors propagate for the retry loop."""
        try:
            async with self._http_client(self.settings.auth_timeout_seconds) as client:
                response = await client.get(
                    self.api_url(credentials),
                    params=self.build_params(credentials),
                )
        except self.TRANSIENT_ERRORS:
            raise
        except httpx.HTTPError as e:
            raise Unreachable(f"Could not connect to {credentials.server}: {e}") from e

        if response.status_code == 401:
            raise InvalidCredentials("Username or password rejected")
        if not response.is_success:
            raise ServerError(response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise ServerError(response.status_code, "Authentication response is not JSON") from e

        user_info = data.get("user_info") if isinstance(data, dict) else None
        if not isinstance(user_info, dict) or str(user_info.get("auth", 1)) == "0":
            raise InvalidCredentials("Username or password rejected")

        try:
            return AuthResult(
                user_info=user_info,
                server_info=data.get("server_info") or {},
            )
        except ValidationError as e:
            raise ServerError(response.status_code, f"Malformed authentication response: {e}") from e

    # Catalog and EPG

    async def _fetch(self, action: str, **filters) -> Any:
        """Run one authenticated query and return the decoded JSON."""
        credentials = self.store.session
        if credentials is None:
            raise Unauthenticated(f"Cannot call {action} without an active session")

        try:
            async with self._http_client(self.settings.catalog_timeout_seconds) as client:
                response = await client.get(
                    self.api_url(credentials),
                    params=self.build_params(credentials, action, **filters),
                )
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"{action} failed with HTTP {status}")
            raise NetworkError(f"{action} failed with HTTP {status}", status=status) from e
        except httpx.HTTPError as e:
            logger.error(f"{action} failed: {e!r}")
            raise NetworkError(f"{action} failed: {e}") from e
        except ValueError as e:
            logger.error(f"{action} returned a non-JSON body")
            raise NetworkError(f"{action} returned a malformed response") from e

    def _parse_list(self, payload: Any, model: type[RecordT], action: str) -> list[RecordT]:
        """Validate a list payload record by record, skipping malformed entries."""
        if isinstance(payload, dict) and not payload:
            # Some panels answer an empty listing with {}
            return []
        if not isinstance(payload, list):
            raise NetworkError(f"{action} returned {type(payload).__name__}, expected a list")

        records = []
        for raw in payload:
            try:
                records.append(model.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Skipping malformed {model.__name__} record from {action}: {e.error_count()} error(s)")
        return records

    async def get_live_categories(self) -> list[Category]:
        payload = await self._fetch("get_live_categories")
        return self._parse_list(payload, Category, "get_live_categories")

    async def get_live_streams(self, category_id: Optional[str] = None) -> list[LiveChannel]:
        payload = await self._fetch("get_live_streams", category_id=category_id)
        return self._parse_list(payload, LiveChannel, "get_live_streams")

    async def get_vod_categories(self) -> list[Category]:
        payload = await self._fetch("get_vod_categories")
        return self._parse_list(payload, Category, "get_vod_categories")

    async def get_vod_streams(self, category_id: Optional[str] = None) -> list[Movie]:
        payload = await self._fetch("get_vod_streams", category_id=category_id)
        return self._parse_list(payload, Movie, "get_vod_streams")

    async def get_series_categories(self) -> list[Category]:
        payload = await self._fetch("get_series_categories")
        return self._parse_list(payload, Category, "get_series_categories")

    async def get_series_list(self, category_id: Optional[str] = None) -> list[Series]:
        payload = await self._fetch("get_series", category_id=category_id)
        return self._parse_list(payload, Series, "get_series")

    async def get_series_info(self, series_id: int) -> SeriesDetail:
        """Series metadata plus episodes grouped by season key."""
        payload = await self._fetch("get_series_info", series_id=series_id)
        if not isinstance(payload, dict):
            raise NetworkError("get_series_info returned a malformed response")

        info = payload.get("info")
        if not isinstance(info, dict):
            info = {}
        try:
            series = Series.model_validate({"name": "", **info, "series_id": series_id})
        except ValidationError as e:
            raise NetworkError(f"get_series_info returned malformed series info: {e.error_count()} error(s)") from e

        return SeriesDetail(series=series, episodes=self._parse_episodes(payload.get("episodes")))

    def _parse_episodes(self, raw_episodes: Any) -> dict[str, list[Episode]]:
        # Mapping of season -> episodes, or a bare list on some panels
        if isinstance(raw_episodes, dict):
            seasons = {str(season): items for season, items in raw_episodes.items()}
        elif isinstance(raw_episodes, list):
            seasons = {}
            for item in raw_episodes:
                for raw in item if isinstance(item, list) else [item]:
                    if isinstance(raw, dict):
                        seasons.setdefault(str(raw.get("season") or 1), []).append(raw)
        else:
            return {}

        episodes: dict[str, list[Episode]] = {}
        for season, items in seasons.items():
            parsed = []
            for raw in items if isinstance(items, list) else []:
                if not isinstance(raw, dict):
                    continue
                try:
                    parsed.append(Episode.from_provider(raw))
                except ValidationError:
                    logger.warning(f"Skipping malformed episode in season {season}")
            episodes[season] = parsed
        return episodes

    async def get_short_epg(self, stream_id: int, limit: Optional[int] = None) -> list[Program]:
        """Upcoming programs for one live channel, in provider order."""
        if limit is None:
            limit = self.settings.short_epg_limit
        payload = await self._fetch("get_short_epg", stream_id=stream_id, limit=limit)
        return parse_short_epg(payload)
