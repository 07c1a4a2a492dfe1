"""
Session state owned by the session controller.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from xtreamclient.models.account import ServerInfo, UserInfo
from xtreamclient.models.credentials import Credentials


class SessionStatus(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"


class Session(BaseModel):
    status: SessionStatus = SessionStatus.UNAUTHENTICATED
    credentials: Optional[Credentials] = None
    user_info: Optional[UserInfo] = None
    server_info: Optional[ServerInfo] = None

    @property
    def is_authenticated(self) -> bool:
        return self.status == SessionStatus.AUTHENTICATED


class SessionResponse(BaseModel):
    """Session status and account profile, without the password."""
    status: SessionStatus
    server: Optional[str] = None
    username: Optional[str] = None
    account_status: Optional[str] = None
    expires_at: Optional[str] = None
    active_connections: Optional[str] = None
    max_connections: Optional[str] = None
    remembered: bool = False

    @classmethod
    def from_session(cls, session: Session, remembered: bool = False) -> "SessionResponse":
        user = session.user_info
        expires = user.expires_at if user else None
        return cls(
            status=session.status,
            server=session.credentials.server if session.credentials else None,
            username=session.credentials.username if session.credentials else None,
            account_status=user.status if user else None,
            expires_at=expires.isoformat() if expires else None,
            active_connections=user.active_cons if user else None,
            max_connections=user.max_connections if user else None,
            remembered=remembered,
        )
