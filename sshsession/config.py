"""
Session configuration resolution
"""
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from .auth import AuthMethod, Credentials, KeyCredentials, PasswordCredentials
from .core.constants import (
    AUTH_TAG_PASSWORD,
    DEFAULT_FINGERPRINT_HASH,
    DEFAULT_HOST,
    DEFAULT_SSH_PORT,
    DEFAULT_SSH_TIMEOUT,
)
from .core.exceptions import ConfigError
from .core.logging import get_logger
from .core.utils import normalize_fingerprint

logger = get_logger(__name__)


# ============================================================
# Defaults
# ============================================================

DEFAULT_CONFIG: Mapping[str, Any] = MappingProxyType({
    "host": DEFAULT_HOST,
    "host_fingerprint": None,
    "port": DEFAULT_SSH_PORT,
    "user": None,
    "authentication_method": AUTH_TAG_PASSWORD,
    "password": None,
    "pub_key": None,
    "private_key": None,
    "passphrase": None,
    "auto_connect": True,
    "timeout": DEFAULT_SSH_TIMEOUT,
    "fingerprint_hash": DEFAULT_FINGERPRINT_HASH,
})


@dataclass(frozen=True)
class SessionConfig:
    """Resolved, immutable session configuration"""
    host: str = DEFAULT_HOST
    port: int = DEFAULT_SSH_PORT
    host_fingerprint: Optional[str] = None
    user: Optional[str] = None
    authentication_method: AuthMethod = AuthMethod.PASSWORD
    password: Optional[str] = field(default=None, repr=False)
    pub_key: Optional[str] = None
    private_key: Optional[str] = None
    passphrase: Optional[str] = field(default=None, repr=False)
    auto_connect: bool = True
    timeout: Optional[float] = DEFAULT_SSH_TIMEOUT
    fingerprint_hash: str = DEFAULT_FINGERPRINT_HASH
    extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def credentials(self, method: Optional[AuthMethod] = None) -> Credentials:
        """
        Build the credential variant for the configured (or given) method.

        Raises:
            ConfigError: If a field required by the method is missing
        """
        method = method or self.authentication_method
        if not self.user:
            raise ConfigError(f"'user' is required for {method.name.lower()} authentication")

        if method is AuthMethod.PASSWORD:
            if self.password is None:
                raise ConfigError("'password' is required for password authentication")
            return PasswordCredentials(user=self.user, password=self.password)

        if not self.private_key:
            raise ConfigError("'private_key' is required for key authentication")
        return KeyCredentials(
            user=self.user,
            private_key=self.private_key,
            pub_key=self.pub_key,
            passphrase=self.passphrase,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Options dictionary, secrets included, suitable for resolve()"""
        data = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "extra"}
        data["authentication_method"] = self.authentication_method.value
        data.update(self.extra)
        return data


# ============================================================
# Resolution
# ============================================================

_FIELD_NAMES = frozenset(f.name for f in fields(SessionConfig)) - {"extra"}


def _coerce_number(name: str, value: Any, cast) -> Any:
    if isinstance(value, str) and value.strip():
        try:
            return cast(value.strip())
        except ValueError:
            logger.warning("Option %r is not numeric: %r", name, value)
    return value


def resolve(
    overrides: Optional[Mapping[str, Any]] = None,
    defaults: Mapping[str, Any] = DEFAULT_CONFIG,
) -> SessionConfig:
    """
    Merge caller options over the defaults.

    Never raises: usability of the result is checked when it is used.
    Unrecognized keys are kept in ``SessionConfig.extra``.
    """
    merged: Dict[str, Any] = dict(defaults)
    merged.update(overrides or {})

    known = {k: v for k, v in merged.items() if k in _FIELD_NAMES}
    extra = {k: v for k, v in merged.items() if k not in _FIELD_NAMES}

    known["host_fingerprint"] = normalize_fingerprint(known.get("host_fingerprint"))

    method = AuthMethod.parse(known.get("authentication_method", AUTH_TAG_PASSWORD))
    if method is None:
        logger.warning(
            "Unknown authentication method %r, using password authentication",
            known.get("authentication_method"),
        )
        method = AuthMethod.PASSWORD
    known["authentication_method"] = method

    if "port" in known:
        known["port"] = _coerce_number("port", known["port"], int)
    if known.get("timeout") is not None:
        known["timeout"] = _coerce_number("timeout", known["timeout"], float)
    if known.get("fingerprint_hash"):
        known["fingerprint_hash"] = str(known["fingerprint_hash"]).lower()
    if "auto_connect" in known:
        known["auto_connect"] = bool(known["auto_connect"])

    return SessionConfig(**known, extra=MappingProxyType(extra))
