"""
Authentication methods and credential variants
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from .core.constants import AUTH_TAG_KEY, AUTH_TAG_PASSWORD
from .core.interfaces import SSHTransport
from .core.logging import get_logger

logger = get_logger(__name__)


class AuthMethod(str, Enum):
    """Closed set of supported authentication methods"""
    PASSWORD = AUTH_TAG_PASSWORD
    KEY = AUTH_TAG_KEY

    @classmethod
    def parse(cls, value: Any) -> Optional["AuthMethod"]:
        """Map a tag or alias onto a method, None if unrecognized"""
        if isinstance(value, cls):
            return value
        return _ALIASES.get(str(value).strip().lower())


_ALIASES = {
    "pass": AuthMethod.PASSWORD,
    "password": AuthMethod.PASSWORD,
    "key": AuthMethod.KEY,
    "pubkey": AuthMethod.KEY,
    "publickey": AuthMethod.KEY,
}


@dataclass(frozen=True)
class PasswordCredentials:
    user: str
    password: str = field(repr=False)

    method = AuthMethod.PASSWORD


@dataclass(frozen=True)
class KeyCredentials:
    user: str
    private_key: str
    pub_key: Optional[str] = None
    passphrase: Optional[str] = field(default=None, repr=False)

    method = AuthMethod.KEY


Credentials = Union[PasswordCredentials, KeyCredentials]


def authenticate(transport: SSHTransport, handle: Any, credentials: Credentials) -> bool:
    """
    Submit credentials to the transport, once, without fallback.

    Returns:
        Whether the remote host accepted them
    """
    if isinstance(credentials, PasswordCredentials):
        logger.debug("Password authentication as %s", credentials.user)
        return bool(transport.authenticate_password(
            handle, credentials.user, credentials.password
        ))

    if isinstance(credentials, KeyCredentials):
        logger.debug(
            "Key authentication as %s with %s", credentials.user, credentials.private_key
        )
        return bool(transport.authenticate_pubkey(
            handle,
            credentials.user,
            credentials.pub_key,
            credentials.private_key,
            credentials.passphrase,
        ))

    raise TypeError(f"Unsupported credentials: {type(credentials).__name__}")
