"""
Two-tier credential storage.

The session slot lives in memory for the lifetime of the process and is the
only source consulted for authenticated requests and stream URLs. The durable
slot is a SQLite key-value table that survives restarts and is written only
when the user opts into "remember me".
"""
import logging
from pathlib import Path
from typing import Optional

import aiosqlite

from xtreamclient.config import get_settings
from xtreamclient.models.credentials import Credentials

logger = logging.getLogger(__name__)

SERVER_KEY = "xtream_server"
USERNAME_KEY = "xtream_username"
PASSWORD_KEY = "xtream_password"
DURABLE_KEYS = (SERVER_KEY, USERNAME_KEY, PASSWORD_KEY)


class CredentialStore:
    """Owns the session-scoped credential slot and its optional durable mirror."""

    def __init__(self, db_path: Optional[str] = None):
        settings = get_settings()
        self.db_path = db_path or settings.credentials_db_path
        self._session: Optional[Credentials] = None
        self._ensure_directory()

    def _ensure_directory(self):
        """Create data directory if it doesn't exist."""
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

    async def initialize(self):
        """Create the durable table if it doesn't exist."""
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute("""
                CREATE TABLE IF NOT EXISTS credentials (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)
            await db.commit()

    # Session slot

    @property
    def session(self) -> Optional[Credentials]:
        return self._session

    def save_session(self, credentials: Credentials):
        """Store credentials for the running process. Called after every successful authenticate."""
        self._session = credentials.normalized()

    def clear_session(self):
        self._session = None

    # Durable slot

    async def save_durable(self, credentials: Credentials):
        """Persist credentials across restarts ("remember me")."""
        await self.initialize()
        values = {
            SERVER_KEY: credentials.server,
            USERNAME_KEY: credentials.username,
            PASSWORD_KEY: credentials.password,
        }
        async with aiosqlite.connect(self.db_path) as db:
            await db.executemany(
                "INSERT OR REPLACE INTO credentials (key, value) VALUES (?, ?)",
                list(values.items())
            )
            await db.commit()
        logger.info(f"Remembered credentials for {credentials.username}@{credentials.server}")

    async def clear_durable(self):
        await self.initialize()
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute(
                f"DELETE FROM credentials WHERE key IN ({','.join('?' for _ in DURABLE_KEYS)})",
                DURABLE_KEYS
            )
            await db.commit()
        logger.info("Cleared remembered credentials")

    async def load_durable(self) -> Optional[Credentials]:
        """Return remembered credentials, or None unless all three values are present."""
        await self.initialize()
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                f"SELECT key, value FROM credentials WHERE key IN ({','.join('?' for _ in DURABLE_KEYS)})",
                DURABLE_KEYS
            )
            rows = dict(await cursor.fetchall())

        if not all(rows.get(key) for key in DURABLE_KEYS):
            return None
        return Credentials(
            server=rows[SERVER_KEY],
            username=rows[USERNAME_KEY],
            password=rows[PASSWORD_KEY],
        )

    async def has_durable(self) -> bool:
        return await self.load_durable() is not None
