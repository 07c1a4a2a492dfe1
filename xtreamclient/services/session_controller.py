"""
Session lifecycle: silent startup login, interactive login and logout.

The controller is the only component that decides the authentication status
and the only writer of the Session record.
"""
import logging
from typing import Awaitable, Callable, Optional

from xtreamclient.config import Settings, get_settings
from xtreamclient.errors import (
    ErrorKind,
    LoginFailed,
    LoginInProgress,
    ProviderError,
    Unreachable,
)
from xtreamclient.models.account import AuthResult
from xtreamclient.models.credentials import Credentials
from xtreamclient.models.session import Session, SessionStatus
from xtreamclient.services.credential_store import CredentialStore
from xtreamclient.services.messages import login_message
from xtreamclient.services.provider_client import ProviderClient
from xtreamclient.services.stream_urls import StreamUrlResolver

logger = logging.getLogger(__name__)

# Failures that mean the remembered credentials will never work as-is
STALE_CREDENTIAL_ERRORS = {ErrorKind.INVALID_CREDENTIALS, ErrorKind.INVALID_ADDRESS}

ConnectivityCheck = Callable[[], Awaitable[bool]]


class SessionController:
    """
    Orchestrates authentication on top of the credential store and provider client.

    A fresh controller reads Unauthenticated until ``start()`` has run, even
    when credentials are remembered; the app lifespan awaits ``start()``
    before serving requests.
    """

    def __init__(
        self,
        client: ProviderClient,
        store: CredentialStore,
        settings: Optional[Settings] = None,
        connectivity: Optional[ConnectivityCheck] = None,
    ):
        self.client = client
        self.store = store
        self.settings = settings or get_settings()
        self.connectivity = connectivity
        self.streams = StreamUrlResolver(store)
        self.session = Session()
        self.last_error: Optional[ErrorKind] = None

    @property
    def status(self) -> SessionStatus:
        return self.session.status

    @property
    def is_authenticated(self) -> bool:
        return self.session.is_authenticated

    async def _is_online(self) -> bool:
        if self.connectivity is None:
            return True
        return await self.connectivity()

    def _begin(self):
        if self.session.status == SessionStatus.AUTHENTICATING:
            raise LoginInProgress("A login attempt is already in progress")
        self.session = Session(status=SessionStatus.AUTHENTICATING)

    def _establish(self, result: AuthResult) -> Session:
        self.session = Session(
            status=SessionStatus.AUTHENTICATED,
            credentials=self.store.session,
            user_info=result.user_info,
            server_info=result.server_info,
        )
        self.last_error = None
        logger.info(f"Session established for {self.session.credentials.username}")
        return self.session

    def _reset(self, error: Optional[ErrorKind] = None):
        self.store.clear_session()
        self.session = Session()
        self.last_error = error

    async def start(self) -> Session:
        """
        Attempt silent login with remembered credentials.

        The status reads Authenticating from the moment the remembered
        credentials are looked up until the attempt settles. Timeouts and
        unreachable servers keep the remembered credentials for the next
        start; rejected credentials or a bad address clear them.
        """
        self._begin()

        try:
            credentials = await self.store.load_durable()
            if credentials is None:
                logger.info("No remembered credentials, starting unauthenticated")
                self._reset()
                return self.session

            if not await self._is_online():
                logger.info("Offline at startup, keeping remembered credentials")
                self._reset(ErrorKind.UNREACHABLE)
                return self.session

            result = await self.client.authenticate(
                credentials.server,
                credentials.username,
                credentials.password,
                max_retries=self.settings.startup_max_retries,
            )
        except ProviderError as e:
            if e.kind in STALE_CREDENTIAL_ERRORS:
                logger.warning(f"Silent login rejected ({e.kind.value}), forgetting remembered credentials")
                await self.store.clear_durable()
            else:
                logger.warning(f"Silent login failed ({e.kind.value}), keeping remembered credentials")
            self._reset(e.kind)
            return self.session
        except BaseException:
            self._reset()
            raise

        return self._establish(result)

    async def login(
        self,
        server: str,
        username: str,
        password: str,
        remember: bool = False,
    ) -> Session:
        """
        Interactive login.

        Raises:
            LoginFailed: With the classified cause and a localized message
            LoginInProgress: Another attempt has not finished yet
        """
        self._begin()

        try:
            if not await self._is_online():
                raise Unreachable("No network connection")
            result = await self.client.authenticate(
                server,
                username,
                password,
                max_retries=self.settings.login_max_retries,
            )
            if remember:
                await self.store.save_durable(self.store.session)
        except ProviderError as e:
            logger.warning(f"Login failed for {username}: {e.kind.value}")
            self._reset(e.kind)
            raise LoginFailed(e, login_message(e.kind, self.settings.locale)) from e
        except BaseException:
            self._reset()
            raise

        return self._establish(result)

    async def logout(self) -> Session:
        """Clear both credential slots and drop the session."""
        await self.store.clear_durable()
        username = self.session.credentials.username if self.session.credentials else None
        self._reset()
        logger.info(f"Logged out {username or '(no session)'}")
        return self.session

    async def forget(self):
        """Stop remembering credentials without ending the live session."""
        await self.store.clear_durable()

    async def remembered_credentials(self) -> Optional[Credentials]:
        return await self.store.load_durable()


# Singleton
_controller: Optional[SessionController] = None


async def get_session_controller() -> SessionController:
    """Get or create the session controller singleton."""
    global _controller
    if _controller is None:
        store = CredentialStore()
        await store.initialize()
        _controller = SessionController(ProviderClient(store), store)
    return _controller
