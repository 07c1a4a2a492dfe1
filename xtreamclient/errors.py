"""
Error taxonomy for provider and session failures.

Every failure the core surfaces is a ProviderError carrying an ErrorKind,
so callers can branch on the kind (fix credentials vs. wait and retry vs.
check network) instead of parsing messages.
"""
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    INVALID_ADDRESS = "invalid_address"
    UNREACHABLE = "unreachable"
    TIMEOUT = "timeout"
    INVALID_CREDENTIALS = "invalid_credentials"
    SERVER_ERROR = "server_error"
    UNAUTHENTICATED = "unauthenticated"
    NETWORK_ERROR = "network_error"


class ProviderError(Exception):
    """Base class for all classified provider failures."""
    kind: ErrorKind = ErrorKind.NETWORK_ERROR

    def __init__(self, message: str = ""):
        super().__init__(message or self.kind.value)


class InvalidAddress(ProviderError):
    """Server address fails basic host-syntax validation."""
    kind = ErrorKind.INVALID_ADDRESS


class Unreachable(ProviderError):
    """No response at all (DNS failure, connection refused) from a valid address."""
    kind = ErrorKind.UNREACHABLE


class Timeout(ProviderError):
    """Authentication kept timing out until the retry budget ran out."""
    kind = ErrorKind.TIMEOUT


class InvalidCredentials(ProviderError):
    kind = ErrorKind.INVALID_CREDENTIALS


class ServerError(ProviderError):
    """Provider answered authentication with an unexpected HTTP status."""
    kind = ErrorKind.SERVER_ERROR

    def __init__(self, status: int, message: str = ""):
        self.status = status
        super().__init__(message or f"Server responded with HTTP {status}")


class Unauthenticated(ProviderError):
    """No session credentials are present for a call that requires them."""
    kind = ErrorKind.UNAUTHENTICATED


class NetworkError(ProviderError):
    """Transport failure on a catalog or EPG request. Never retried internally."""
    kind = ErrorKind.NETWORK_ERROR

    def __init__(self, message: str = "", status: Optional[int] = None):
        self.status = status
        super().__init__(message)


class LoginFailed(Exception):
    """Interactive login failed; carries the classified cause and a user-facing message."""

    def __init__(self, error: ProviderError, message: str):
        self.error = error
        self.kind = error.kind
        self.message = message
        super().__init__(message)


class LoginInProgress(Exception):
    """A login or startup attempt is already running."""
