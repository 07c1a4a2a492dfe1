"""
Pytest configuration and fixtures for the Xtream client tests.
"""
import httpx
import pytest

from xtreamclient.config import Settings
from xtreamclient.models.credentials import Credentials
from xtreamclient.services.credential_store import CredentialStore
from xtreamclient.services.provider_client import ProviderClient


class ScriptedTransport(httpx.MockTransport):
    """
    Mock transport that replays a script of outcomes in order.

    Each step is an httpx.Response, an exception class/instance to raise,
    or a callable taking the request. The last step repeats once the
    script runs out. Every request is recorded.
    """

    def __init__(self, *steps):
        self.steps = list(steps)
        self.requests: list[httpx.Request] = []
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        step = self.steps.pop(0) if len(self.steps) > 1 else self.steps[0]
        if isinstance(step, type) and issubclass(step, Exception):
            raise step("scripted failure", request=request)
        if isinstance(step, Exception):
            raise step
        if callable(step):
            return step(request)
        return step

    @property
    def attempts(self) -> int:
        return len(self.requests)

    def params(self, index: int = -1) -> dict:
        return dict(self.requests[index].url.params)


def auth_payload(username="alice", status="Active", exp_date="1893456000", auth=1):
    return {
        "user_info": {
            "username": username,
            "password": "secret",
            "message": "",
            "auth": auth,
            "status": status,
            "exp_date": exp_date,
            "is_trial": "0",
            "active_cons": "0",
            "created_at": "1600000000",
            "max_connections": "1",
            "allowed_output_formats": ["m3u8", "ts"],
        },
        "server_info": {
            "url": "provider.example",
            "port": "8080",
            "https_port": "443",
            "server_protocol": "http",
            "rtmp_port": "8880",
            "timezone": "UTC",
            "timestamp_now": 1700000000,
            "time_now": "2023-11-14 22:13:20",
        },
    }


@pytest.fixture
def settings(tmp_path):
    """Settings isolated from the environment with instant retries."""
    return Settings(
        credentials_db_path=str(tmp_path / "credentials.db"),
        auth_retry_interval_seconds=0.0,
        _env_file=None,
    )


@pytest.fixture
def store(settings):
    return CredentialStore(settings.credentials_db_path)


@pytest.fixture
def credentials():
    return Credentials(server="http://provider.example:8080", username="alice", password="secret")


@pytest.fixture
def make_client(store, settings):
    """Build a ProviderClient over a scripted transport."""
    def _make(*steps):
        transport = ScriptedTransport(*steps)
        return ProviderClient(store, settings=settings, transport=transport), transport
    return _make
