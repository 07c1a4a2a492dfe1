"""
Credential model and server address handling.
"""
import ipaddress
import re

import httpx
from pydantic import BaseModel

from xtreamclient.errors import InvalidAddress

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")
_HOST_LABEL_RE = re.compile(r"^(?!-)[A-Za-z0-9-]{1,63}(?<!-)$")


def normalize_server_address(address: str) -> str:
    """
    Give a server address an explicit scheme.

    Bare hosts and host:port get ``http://``. Surrounding whitespace and
    trailing slashes are dropped so the result can be joined with paths.
    Applying it twice yields the same string.
    """
    address = address.strip()
    if not _SCHEME_RE.match(address):
        address = f"http://{address}"
    scheme, rest = address.split("://", 1)
    return f"{scheme}://{rest.rstrip('/')}"


def _is_valid_host(host: str) -> bool:
    if not host:
        return False
    try:
        ipaddress.ip_address(host)
        return True
    except ValueError:
        pass
    # Dotted-quad lookalikes that are not real IPv4 addresses
    if re.fullmatch(r"[0-9.]+", host):
        return False
    host = host.rstrip(".")
    if len(host) > 253:
        return False
    return all(_HOST_LABEL_RE.match(label) for label in host.split("."))


def validate_server_address(address: str) -> httpx.URL:
    """
    Normalize and syntax-check a server address.

    Raises:
        InvalidAddress: scheme is not http(s), host is missing or malformed,
            or the port is out of range.
    """
    normalized = normalize_server_address(address)
    try:
        url = httpx.URL(normalized)
        port = url.port
    except (httpx.InvalidURL, ValueError) as e:
        raise InvalidAddress(f"Malformed server address: {address!r}") from e

    if url.scheme not in ("http", "https"):
        raise InvalidAddress(f"Unsupported scheme in server address: {url.scheme!r}")
    if not _is_valid_host(url.host):
        raise InvalidAddress(f"Invalid host in server address: {address!r}")
    if port is not None and not 0 < port < 65536:
        raise InvalidAddress(f"Invalid port in server address: {port}")
    return url


class Credentials(BaseModel):
    """Server address, username and password for one provider account."""
    server: str
    username: str
    password: str

    @property
    def base_url(self) -> str:
        return normalize_server_address(self.server)

    def normalized(self) -> "Credentials":
        """Copy with the server address normalized."""
        return self.model_copy(update={"server": self.base_url})

    def __repr__(self) -> str:
        return f"Credentials(server={self.server!r}, username={self.username!r}, password='***')"
