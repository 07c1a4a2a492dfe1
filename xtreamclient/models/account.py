"""
Account metadata returned by the provider's authentication call.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UserInfo(BaseModel):
    """Subscriber account snapshot. Replaced wholesale on every authenticate."""
    model_config = ConfigDict(extra="ignore")

    username: str = ""
    message: Optional[str] = None
    auth: int = 1
    status: Optional[str] = None
    exp_date: Optional[str] = None
    is_trial: Optional[str] = None
    active_cons: Optional[str] = None
    created_at: Optional[str] = None
    max_connections: Optional[str] = None
    allowed_output_formats: list[str] = Field(default_factory=list)

    @field_validator(
        "status", "exp_date", "is_trial", "active_cons", "created_at", "max_connections", mode="before"
    )
    @classmethod
    def _stringify(cls, value):
        # Panels disagree on whether these are numbers or strings
        if value is None or value == "":
            return None
        return str(value)

    @field_validator("username", mode="before")
    @classmethod
    def _username(cls, value):
        return "" if value is None else str(value)

    @field_validator("message", mode="before")
    @classmethod
    def _message(cls, value):
        return None if value is None else str(value)

    @field_validator("allowed_output_formats", mode="before")
    @classmethod
    def _formats(cls, value):
        if not isinstance(value, list):
            return []
        return [str(item) for item in value]

    @field_validator("auth", mode="before")
    @classmethod
    def _auth_flag(cls, value):
        if value in (None, ""):
            return 0
        return int(value)

    @property
    def expires_at(self) -> Optional[datetime]:
        """Local expiry time, or None for unlimited/unknown."""
        if not self.exp_date:
            return None
        try:
            return datetime.fromtimestamp(int(self.exp_date))
        except (ValueError, OverflowError, OSError):
            return None

    @property
    def is_active(self) -> bool:
        return (self.status or "").lower() == "active"


class ServerInfo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    url: Optional[str] = None
    port: Optional[str] = None
    https_port: Optional[str] = None
    server_protocol: Optional[str] = None
    rtmp_port: Optional[str] = None
    timezone: Optional[str] = None
    timestamp_now: Optional[int] = None
    time_now: Optional[str] = None

    @field_validator(
        "url", "port", "https_port", "server_protocol", "rtmp_port", "timezone", "time_now", mode="before"
    )
    @classmethod
    def _stringify(cls, value):
        if value is None or value == "":
            return None
        return str(value)

    @field_validator("timestamp_now", mode="before")
    @classmethod
    def _timestamp(cls, value):
        if value is None or value == "":
            return None
        try:
            return int(float(value))
        except (TypeError, ValueError, OverflowError):
            return None


class AuthResult(BaseModel):
    """Successful authentication payload."""
    user_info: UserInfo
    server_info: ServerInfo = Field(default_factory=ServerInfo)
