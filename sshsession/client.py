from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from .auth import AuthMethod, authenticate
from .config import SessionConfig, resolve
from .core.constants import DEFAULT_CREATE_MODE, GRACEFUL_EXIT_COMMAND
from .core.exceptions import (
    AuthenticationError,
    IdentityVerificationError,
    LocalFileNotFoundError,
    NotConnectedError,
    RemoteCommandError,
    RemoteReadError,
    RemoteWriteError,
    TransportError,
)
from .core.interfaces import CommandResult, SSHTransport
from .core.logging import get_logger
from .core.utils import remote_command

logger = get_logger(__name__)


class RemoteSession:
    """
    One SSH session with a controlled lifecycle:

    - connect -> optional host fingerprint check -> authenticate
    - SCP file transfer, remote mv / cp and command execution
    - disconnect on demand, on ``with`` exit or when the object is collected

    Any failure during connect() releases the freshly opened handle and leaves
    the session unconnected.
    """

    def __init__(
        self,
        config: Union[SessionConfig, Mapping[str, Any], None] = None,
        transport: Optional[SSHTransport] = None,
        **options: Any,
    ) -> None:
        if isinstance(config, SessionConfig):
            if options:
                config = resolve({**config.to_dict(), **options})
        else:
            config = resolve({**(config or {}), **options})
        self.config: SessionConfig = config

        if transport is None:
            from .transport import ParamikoTransport
            transport = ParamikoTransport()
        self.transport = transport

        self._handle: Any = None
        self._connected = False
        self._lock = threading.RLock()

        if self.config.auto_connect:
            self.connect()

    def __repr__(self) -> str:
        state = "connected" if self._connected else "unconnected"
        return f"<RemoteSession {self.config.user}@{self.config.host}:{self.config.port} {state}>"

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def handle(self) -> Any:
        """The underlying transport handle, None when disconnected"""
        return self._handle

    # --------------------
    # Connection management
    # --------------------
    def connect(self) -> None:
        """
        Open the transport, verify the host fingerprint when one is
        configured, then authenticate with the configured method.

        Raises:
            ConnectionError: The host could not be reached
            IdentityVerificationError: The host fingerprint did not match
            AuthenticationError: The credentials or key were rejected
            ConfigError: The selected method is missing required fields
        """
        cfg = self.config
        with self._lock:
            if self._handle is not None:
                logger.debug("Dropping existing connection before reconnecting")
                self.disconnect()

            logger.info("Connecting to %s:%s", cfg.host, cfg.port)
            self._handle = self.transport.open(cfg.host, cfg.port, cfg.timeout)
            try:
                if cfg.host_fingerprint is not None:
                    if not self.verify_host_fingerprint():
                        raise IdentityVerificationError(
                            f"Unable to verify host fingerprint for {cfg.host}"
                        )

                if cfg.authentication_method is AuthMethod.KEY:
                    accepted = self.login_key()
                else:
                    accepted = self.login_password()
                if not accepted:
                    raise AuthenticationError(
                        f"Authentication as {cfg.user} on {cfg.host} was rejected"
                    )
            except BaseException:
                self._release()
                raise

            self._connected = True
            logger.info("Connected to %s as %s", cfg.host, cfg.user)

    def check_connection(self) -> bool:
        """Whether the session is connected and the transport still alive"""
        with self._lock:
            return self._connected and self.transport.is_active(self._handle)

    def host_fingerprint(self) -> str:
        """Live fingerprint of the open transport"""
        with self._lock:
            self._require_handle()
            return self.transport.fingerprint(self._handle, self.config.fingerprint_hash)

    def verify_host_fingerprint(self) -> bool:
        """Compare the live fingerprint against the configured one"""
        live = self.host_fingerprint()
        expected = self.config.host_fingerprint
        if live != expected:
            logger.error("Host fingerprint mismatch: expected %s, got %s", expected, live)
            return False
        logger.debug("Host fingerprint %s verified", live)
        return True

    def login_password(self) -> bool:
        """Authenticate with user and password; True if accepted"""
        return self._login(AuthMethod.PASSWORD)

    def login_key(self) -> bool:
        """Authenticate with the configured key pair; True if accepted"""
        return self._login(AuthMethod.KEY)

    def _login(self, method: AuthMethod) -> bool:
        with self._lock:
            self._require_handle()
            credentials = self.config.credentials(method)
            return authenticate(self.transport, self._handle, credentials)

    def disconnect(self) -> None:
        """
        Ask the remote side to end the session, then drop the handle whether
        or not that request succeeded. No-op when already disconnected.
        """
        with self._lock:
            if self._handle is None:
                return
            try:
                self.transport.exec(self._handle, GRACEFUL_EXIT_COMMAND)
            except TransportError as e:
                logger.debug("Exit request failed: %s", e)
            finally:
                self._release()
            logger.info("Disconnected from %s", self.config.host)

    def _release(self) -> None:
        handle, self._handle = self._handle, None
        self._connected = False
        if handle is not None:
            self.transport.close(handle)

    def _require_handle(self) -> None:
        if self._handle is None:
            raise NotConnectedError(f"No open connection to {self.config.host}")

    def _require_connected(self) -> None:
        if not self._connected or self._handle is None:
            raise NotConnectedError(f"Session to {self.config.host} is not connected")

    # --------------------
    # Remote operations
    # --------------------
    def send_file(
        self,
        local_path: Union[str, Path],
        remote_path: str,
        create_mode: int = DEFAULT_CREATE_MODE,
    ) -> bool:
        """
        Send a local file to the remote host over SCP.

        Raises:
            LocalFileNotFoundError: If local_path does not exist
            RemoteWriteError: If the copy failed
        """
        with self._lock:
            self._require_connected()
            local = Path(local_path).expanduser()
            if not local.exists():
                raise LocalFileNotFoundError(f"File does not exist locally: {local}")

            logger.debug("Sending %s -> %s (mode %04o)", local, remote_path, create_mode)
            if not self.transport.copy_send(self._handle, str(local), remote_path, create_mode):
                raise RemoteWriteError(f"Unable to save file remotely: {remote_path}")
            return True

    def request_file(self, local_path: Union[str, Path], remote_path: str) -> bool:
        """
        Fetch a remote file over SCP into local_path.

        Raises:
            RemoteReadError: If the copy failed
        """
        with self._lock:
            self._require_connected()
            local = str(Path(local_path).expanduser())
            logger.debug("Requesting %s -> %s", remote_path, local)
            if not self.transport.copy_receive(self._handle, remote_path, local):
                raise RemoteReadError(f"Unable to save file from remote: {remote_path}")
            return True

    def move_remote_file(self, old_path: str, new_path: str) -> bool:
        """Move a file on the remote host"""
        self._run_checked(remote_command("mv", old_path, new_path), "move file on remote server")
        return True

    def copy_remote_file(self, path: str, copy_to: str) -> bool:
        """Copy a file on the remote host"""
        self._run_checked(remote_command("cp", path, copy_to), "copy file on remote server")
        return True

    def execute(self, command: str) -> CommandResult:
        """
        Run a command on the remote host. The command string is sent as-is,
        so callers are responsible for quoting.

        Raises:
            RemoteCommandError: If the command could not be dispatched
        """
        with self._lock:
            self._require_connected()
            logger.debug("Executing: %s", command)
            try:
                return self.transport.exec(self._handle, command)
            except TransportError as e:
                raise RemoteCommandError(f"Unable to execute command: {e}") from e

    def _run_checked(self, command: str, action: str) -> CommandResult:
        result = self.execute(command)
        if not result.success:
            raise RemoteCommandError(
                f"Unable to {action} (exit code {result.exit_code}): {result.stderr.strip()}"
            )
        return result

    # --------------------
    # Context manager
    # --------------------
    def __enter__(self) -> RemoteSession:
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.disconnect()

    def __del__(self) -> None:
        # __init__ may have failed before the handle attribute existed
        if getattr(self, "_handle", None) is not None:
            self.disconnect()


def fetch_host_fingerprint(config: SessionConfig, transport: Optional[SSHTransport] = None) -> str:
    """
    Open a transport just long enough to read the host key fingerprint.
    No authentication is attempted.
    """
    if transport is None:
        from .transport import ParamikoTransport
        transport = ParamikoTransport()

    handle = transport.open(config.host, config.port, config.timeout)
    try:
        return transport.fingerprint(handle, config.fingerprint_hash)
    finally:
        transport.close(handle)
