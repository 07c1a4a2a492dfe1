"""
Tests for the provider client: authentication retry/classification and catalog calls.
"""
import httpx
import pytest

from conftest import auth_payload
from xtreamclient.errors import (
    InvalidAddress,
    InvalidCredentials,
    NetworkError,
    ServerError,
    Timeout,
    Unauthenticated,
    Unreachable,
)


def ok(payload):
    return httpx.Response(200, json=payload)


class TestAuthenticate:

    @pytest.mark.asyncio
    async def test_success_saves_session(self, make_client, store):
        client, transport = make_client(ok(auth_payload()))
        result = await client.authenticate("provider.example:8080", "alice", "secret")

        assert result.user_info.username == "alice"
        assert result.user_info.is_active
        assert result.server_info.port == "8080"
        assert transport.attempts == 1

        request = transport.requests[0]
        assert str(request.url).startswith("http://provider.example:8080/player_api.php")
        assert transport.params() == {"username": "alice", "password": "secret"}

        assert store.session.server == "http://provider.example:8080"
        assert store.session.username == "alice"

    @pytest.mark.asyncio
    async def test_times_out_twice_then_succeeds(self, make_client, store):
        client, transport = make_client(httpx.ReadTimeout, httpx.ReadTimeout, ok(auth_payload()))
        result = await client.authenticate("provider.example", "alice", "secret", max_retries=2)

        assert result.user_info.username == "alice"
        assert transport.attempts == 3
        assert store.session is not None

    @pytest.mark.asyncio
    async def test_retry_budget_exhausted(self, make_client, store):
        client, transport = make_client(httpx.ReadTimeout, httpx.ReadTimeout, ok(auth_payload()))
        with pytest.raises(Timeout):
            await client.authenticate("provider.example", "alice", "secret", max_retries=1)

        assert transport.attempts == 2
        assert store.session is None

    @pytest.mark.asyncio
    async def test_aborted_connection_is_retried(self, make_client):
        client, transport = make_client(httpx.RemoteProtocolError, ok(auth_payload()))
        await client.authenticate("provider.example", "alice", "secret", max_retries=1)
        assert transport.attempts == 2

    @pytest.mark.asyncio
    async def test_zero_retries_single_attempt(self, make_client):
        client, transport = make_client(httpx.ConnectTimeout)
        with pytest.raises(Timeout):
            await client.authenticate("provider.example", "alice", "secret")
        assert transport.attempts == 1

    @pytest.mark.asyncio
    async def test_401_is_never_retried(self, make_client, store):
        client, transport = make_client(httpx.Response(401), ok(auth_payload()))
        with pytest.raises(InvalidCredentials):
            await client.authenticate("provider.example", "alice", "wrong", max_retries=2)

        assert transport.attempts == 1
        assert store.session is None

    @pytest.mark.asyncio
    async def test_refused_login_payload(self, make_client):
        client, transport = make_client(ok({"user_info": {"auth": 0}}))
        with pytest.raises(InvalidCredentials):
            await client.authenticate("provider.example", "alice", "wrong", max_retries=2)
        assert transport.attempts == 1

    @pytest.mark.asyncio
    async def test_missing_user_info(self, make_client):
        client, _ = make_client(ok([]))
        with pytest.raises(InvalidCredentials):
            await client.authenticate("provider.example", "alice", "secret")

    @pytest.mark.asyncio
    async def test_other_status_is_server_error(self, make_client):
        client, transport = make_client(httpx.Response(503))
        with pytest.raises(ServerError) as exc_info:
            await client.authenticate("provider.example", "alice", "secret", max_retries=2)
        assert exc_info.value.status == 503
        assert transport.attempts == 1

    @pytest.mark.asyncio
    async def test_non_json_body_is_server_error(self, make_client):
        client, _ = make_client(httpx.Response(200, text="<html>maintenance</html>"))
        with pytest.raises(ServerError):
            await client.authenticate("provider.example", "alice", "secret")

    @pytest.mark.asyncio
    async def test_invalid_address_makes_no_request(self, make_client):
        client, transport = make_client(ok(auth_payload()))
        with pytest.raises(InvalidAddress):
            await client.authenticate("not a host!", "alice", "secret", max_retries=2)
        assert transport.attempts == 0

    @pytest.mark.asyncio
    async def test_connection_refused_is_unreachable(self, make_client):
        client, transport = make_client(httpx.ConnectError)
        with pytest.raises(Unreachable):
            await client.authenticate("provider.example", "alice", "secret", max_retries=2)
        assert transport.attempts == 1

    @pytest.mark.asyncio
    async def test_user_info_replaced_wholesale(self, make_client):
        client, _ = make_client(
            ok(auth_payload(status="Active")),
            ok(auth_payload(status="Expired", exp_date="")),
        )
        first = await client.authenticate("provider.example", "alice", "secret")
        second = await client.authenticate("provider.example", "alice", "secret")
        assert first.user_info.expires_at is not None
        assert second.user_info.status == "Expired"
        assert second.user_info.expires_at is None

    @pytest.mark.asyncio
    async def test_loosely_typed_account_fields(self, make_client):
        payload = auth_payload()
        payload["user_info"].update({"username": 123456, "allowed_output_formats": None, "message": None})
        payload["server_info"].update({"timestamp_now": "", "port": 8080})
        client, _ = make_client(ok(payload))

        result = await client.authenticate("provider.example", "123456", "secret")

        assert result.user_info.username == "123456"
        assert result.user_info.allowed_output_formats == []
        assert result.user_info.message is None
        assert result.server_info.timestamp_now is None
        assert result.server_info.port == "8080"

    @pytest.mark.asyncio
    async def test_numeric_string_timestamp(self, make_client):
        payload = auth_payload()
        payload["server_info"]["timestamp_now"] = "1700000000"
        client, _ = make_client(ok(payload))

        result = await client.authenticate("provider.example", "alice", "secret")
        assert result.server_info.timestamp_now == 1700000000

    @pytest.mark.asyncio
    async def test_api_path_resolves_from_server_root(self, make_client, store):
        client, transport = make_client(ok(auth_payload()))
        await client.authenticate("http://provider.example:8080/portal/", "alice", "secret")

        url = transport.requests[0].url
        assert url.host == "provider.example"
        assert url.port == 8080
        assert url.path == "/player_api.php"
        assert store.session.server == "http://provider.example:8080/portal"


@pytest.fixture
def logged_in(store, credentials):
    store.save_session(credentials)
    return store


class TestCatalog:

    @pytest.mark.asyncio
    async def test_requires_session_before_network(self, make_client):
        client, transport = make_client(ok([]))
        for call in (
            client.get_live_categories(),
            client.get_live_streams(),
            client.get_vod_categories(),
            client.get_vod_streams(),
            client.get_series_categories(),
            client.get_series_list(),
            client.get_series_info(1),
            client.get_short_epg(1),
        ):
            with pytest.raises(Unauthenticated):
                await call
        assert transport.attempts == 0

    @pytest.mark.asyncio
    async def test_live_categories(self, make_client, logged_in):
        client, transport = make_client(ok([
            {"category_id": "1", "category_name": "News", "parent_id": 0},
            {"category_id": 2, "category_name": "Sports", "parent_id": ""},
        ]))
        categories = await client.get_live_categories()

        assert [c.name for c in categories] == ["News", "Sports"]
        assert categories[1].id == "2"
        assert categories[1].parent_id == 0
        assert transport.params() == {
            "username": "alice",
            "password": "secret",
            "action": "get_live_categories",
        }

    @pytest.mark.asyncio
    async def test_live_streams_with_category_filter(self, make_client, logged_in):
        client, transport = make_client(ok([
            {
                "num": 1,
                "name": "News 24",
                "stream_type": "live",
                "stream_id": "101",
                "stream_icon": "",
                "epg_channel_id": "news24.tv",
                "category_id": "1",
                "tv_archive": 0,
            },
        ]))
        channels = await client.get_live_streams("1")

        assert channels[0].id == 101
        assert channels[0].icon is None
        assert channels[0].identity == ("live", 101)
        assert transport.params()["category_id"] == "1"
        assert transport.params()["action"] == "get_live_streams"

    @pytest.mark.asyncio
    async def test_no_category_filter_omits_param(self, make_client, logged_in):
        client, transport = make_client(ok([]))
        await client.get_vod_streams()
        assert "category_id" not in transport.params()

    @pytest.mark.asyncio
    async def test_malformed_records_skipped(self, make_client, logged_in):
        client, _ = make_client(ok([
            {"stream_id": 5, "name": "Good Movie", "rating": "7.4", "container_extension": "mkv"},
            {"name": "No id"},
            "garbage",
        ]))
        movies = await client.get_vod_streams()
        assert len(movies) == 1
        assert movies[0].rating == pytest.approx(7.4)
        assert movies[0].kind == "movie"

    @pytest.mark.asyncio
    async def test_empty_object_is_empty_list(self, make_client, logged_in):
        client, _ = make_client(ok({}))
        assert await client.get_series_list() == []

    @pytest.mark.asyncio
    async def test_http_error_is_network_error_without_retry(self, make_client, logged_in):
        client, transport = make_client(httpx.Response(500), ok([]))
        with pytest.raises(NetworkError) as exc_info:
            await client.get_live_categories()
        assert exc_info.value.status == 500
        assert transport.attempts == 1

    @pytest.mark.asyncio
    async def test_transport_failure_is_network_error(self, make_client, logged_in):
        client, transport = make_client(httpx.ReadTimeout, ok([]))
        with pytest.raises(NetworkError):
            await client.get_live_streams()
        assert transport.attempts == 1

    @pytest.mark.asyncio
    async def test_non_json_is_network_error(self, make_client, logged_in):
        client, _ = make_client(httpx.Response(200, text="oops"))
        with pytest.raises(NetworkError):
            await client.get_series_categories()

    @pytest.mark.asyncio
    async def test_series_info(self, make_client, logged_in):
        client, transport = make_client(ok({
            "info": {"name": "Show", "cover": "http://img/cover.jpg", "plot": "Plot", "rating": "8"},
            "episodes": {
                "10": [{"id": "9001", "episode_num": 1, "title": "Pilot", "container_extension": "mp4",
                        "season": 10, "info": {"plot": "First", "duration_secs": 1500}}],
                "2": [
                    {"id": "8001", "episode_num": "1", "title": "S2E1", "info": []},
                    {"id": "8002", "episode_num": 2, "title": "S2E2"},
                ],
            },
        }))
        detail = await client.get_series_info(42)

        assert transport.params()["series_id"] == "42"
        assert detail.series.id == 42
        assert detail.series.icon == "http://img/cover.jpg"
        assert detail.seasons == ["2", "10"]
        assert [e.id for e in detail.episodes["2"]] == ["8001", "8002"]
        assert detail.episodes["10"][0].duration_secs == 1500
        assert detail.find_episode("8002").title == "S2E2"
        assert detail.find_episode("missing") is None

    @pytest.mark.asyncio
    async def test_series_info_without_episodes(self, make_client, logged_in):
        client, _ = make_client(ok({"info": [], "episodes": []}))
        detail = await client.get_series_info(7)
        assert detail.series.id == 7
        assert detail.episodes == {}

    @pytest.mark.asyncio
    async def test_short_epg(self, make_client, logged_in, settings):
        client, transport = make_client(ok({"epg_listings": [
            {"start_timestamp": "100", "stop_timestamp": "200", "title": "A"},
            {"start_timestamp": "200", "stop_timestamp": "300", "title": "B"},
        ]}))
        programs = await client.get_short_epg(101)

        assert [p.title for p in programs] == ["A", "B"]
        params = transport.params()
        assert params["action"] == "get_short_epg"
        assert params["stream_id"] == "101"
        assert params["limit"] == str(settings.short_epg_limit)

    @pytest.mark.asyncio
    async def test_catalog_reads_do_not_touch_credentials(self, make_client, logged_in, credentials):
        client, _ = make_client(ok([]))
        before = logged_in.session
        await client.get_live_streams()
        assert logged_in.session == before
        assert await logged_in.load_durable() is None
