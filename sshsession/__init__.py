"""
sshsession - controlled lifecycle for a single SSH session

- Connect, optionally pin the host key fingerprint, then authenticate
  with either a password or a key pair
- SCP file transfer in both directions
- Remote file move / copy and command execution
- Deterministic teardown on disconnect(), ``with`` exit or collection
"""

__version__ = "0.1.0"

from .auth import AuthMethod, PasswordCredentials, KeyCredentials
from .client import RemoteSession, fetch_host_fingerprint
from .config import DEFAULT_CONFIG, SessionConfig, resolve
from .core.exceptions import (
    SessionError,
    ConfigError,
    ConnectionError,
    IdentityVerificationError,
    AuthenticationError,
    NotConnectedError,
    LocalFileNotFoundError,
    TransportError,
    RemoteOperationError,
    RemoteWriteError,
    RemoteReadError,
    RemoteCommandError,
)
from .core.interfaces import CommandResult, SSHTransport
from .core.utils import load_ssh_config
from .transport import ParamikoTransport

__all__ = [
    # Version
    "__version__",
    # Session
    "RemoteSession",
    "fetch_host_fingerprint",
    # Configuration
    "DEFAULT_CONFIG",
    "SessionConfig",
    "resolve",
    "load_ssh_config",
    # Authentication
    "AuthMethod",
    "PasswordCredentials",
    "KeyCredentials",
    # Transport
    "SSHTransport",
    "ParamikoTransport",
    "CommandResult",
    # Errors
    "SessionError",
    "ConfigError",
    "ConnectionError",
    "IdentityVerificationError",
    "AuthenticationError",
    "NotConnectedError",
    "LocalFileNotFoundError",
    "TransportError",
    "RemoteOperationError",
    "RemoteWriteError",
    "RemoteReadError",
    "RemoteCommandError",
]
