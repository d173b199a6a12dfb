"""
Paramiko/SCP implementation of the transport interface
"""
from __future__ import annotations

import hashlib
import socket
import time
from typing import List, Optional, Tuple

import paramiko
from scp import SCPClient, SCPException

from .core.constants import DEFAULT_SSH_TIMEOUT
from .core.exceptions import ConnectionError, TransportError
from .core.interfaces import CommandResult, SSHTransport
from .core.logging import get_logger
from .core.utils import load_private_key, public_key_matches

logger = get_logger(__name__)

_SCP_ERRORS = (SCPException, paramiko.SSHException, socket.error, OSError)
_LINK_ERRORS = (paramiko.SSHException, socket.error, EOFError)
_RECV_SIZE = 4096
_POLL_INTERVAL = 0.01


class ParamikoTransport(SSHTransport):
    """
    Transport built directly on ``paramiko.Transport``.

    The handle is the ``paramiko.Transport`` itself; host key policy is left
    to the session's fingerprint check rather than a known_hosts file.
    """

    def __init__(self, banner_timeout: Optional[float] = None) -> None:
        self.banner_timeout = banner_timeout

    # --------------------
    # Connection
    # --------------------
    def open(self, host: str, port: int, timeout: Optional[float] = DEFAULT_SSH_TIMEOUT) -> paramiko.Transport:
        sock = None
        transport = None
        try:
            sock = socket.create_connection((host, port), timeout=timeout)
            transport = paramiko.Transport(sock)
            if self.banner_timeout is not None:
                transport.banner_timeout = self.banner_timeout
            transport.start_client(timeout=timeout)
            return transport
        except (socket.error, paramiko.SSHException, OSError, EOFError) as e:
            if transport is not None:
                transport.close()
            elif sock is not None:
                sock.close()
            raise ConnectionError(f"Unable to connect to {host} on port {port}: {e}") from e

    def fingerprint(self, handle: paramiko.Transport, hash_name: str = "md5") -> str:
        try:
            key = handle.get_remote_server_key()
        except paramiko.SSHException as e:
            raise ConnectionError(f"Unable to read host key: {e}") from e

        if hash_name == "md5":
            digest = key.get_fingerprint()
        else:
            try:
                digest = hashlib.new(hash_name, key.asbytes()).digest()
            except ValueError as e:
                raise ConnectionError(f"Unsupported fingerprint hash: {hash_name}") from e
        return digest.hex().upper()

    def is_active(self, handle: paramiko.Transport) -> bool:
        return bool(handle is not None and handle.is_active())

    def close(self, handle: paramiko.Transport) -> None:
        try:
            handle.close()
        except Exception as e:
            logger.debug("Ignoring error while closing transport: %s", e)

    # --------------------
    # Authentication
    # --------------------
    def authenticate_password(self, handle: paramiko.Transport, user: str, password: str) -> bool:
        try:
            handle.auth_password(user, password)
        except paramiko.AuthenticationException as e:
            logger.warning("Password rejected for %s: %s", user, e)
            return False
        except _LINK_ERRORS as e:
            raise ConnectionError(f"Connection lost during password authentication: {e}") from e
        return handle.is_authenticated()

    def authenticate_pubkey(
        self,
        handle: paramiko.Transport,
        user: str,
        pub_key_path: Optional[str],
        private_key_path: str,
        passphrase: Optional[str] = None,
    ) -> bool:
        try:
            pkey = load_private_key(private_key_path, passphrase)
            if pub_key_path and not public_key_matches(pkey, pub_key_path):
                logger.warning("Public key %s does not match %s", pub_key_path, private_key_path)
                return False
        except (paramiko.SSHException, OSError) as e:
            logger.warning("Unable to load key %s: %s", private_key_path, e)
            return False

        try:
            handle.auth_publickey(user, pkey)
        except paramiko.AuthenticationException as e:
            logger.warning("Key rejected for %s: %s", user, e)
            return False
        except _LINK_ERRORS as e:
            raise ConnectionError(f"Connection lost during key authentication: {e}") from e
        return handle.is_authenticated()

    # --------------------
    # Transfer
    # --------------------
    def copy_send(self, handle: paramiko.Transport, local_path: str, remote_path: str, mode: int) -> bool:
        scp = SCPClient(handle)
        try:
            with open(local_path, "rb") as fl:
                scp.putfo(fl, remote_path, mode=format(mode, "04o"))
            return True
        except _SCP_ERRORS as e:
            logger.warning("SCP send %s -> %s failed: %s", local_path, remote_path, e)
            return False
        finally:
            scp.close()

    def copy_receive(self, handle: paramiko.Transport, remote_path: str, local_path: str) -> bool:
        scp = SCPClient(handle)
        try:
            scp.get(remote_path, local_path)
            return True
        except _SCP_ERRORS as e:
            logger.warning("SCP receive %s -> %s failed: %s", remote_path, local_path, e)
            return False
        finally:
            scp.close()

    # --------------------
    # Commands
    # --------------------
    def exec(self, handle: paramiko.Transport, command: str) -> CommandResult:
        try:
            channel = handle.open_session()
        except _LINK_ERRORS as e:
            raise TransportError(f"Unable to open channel: {e}") from e

        try:
            channel.exec_command(command)
            out, err = self._drain(channel)
            exit_code = channel.recv_exit_status()
        except _LINK_ERRORS as e:
            raise TransportError(f"Command dispatch failed: {e}") from e
        finally:
            channel.close()

        return CommandResult(
            exit_code=exit_code,
            stdout=out.decode("utf-8", errors="replace"),
            stderr=err.decode("utf-8", errors="replace"),
        )

    def _drain(self, channel: paramiko.Channel) -> Tuple[bytes, bytes]:
        """Read stdout and stderr side by side so neither window fills up"""
        out_buf: List[bytes] = []
        err_buf: List[bytes] = []

        while True:
            has_output = False
            if channel.recv_ready():
                out_buf.append(channel.recv(_RECV_SIZE))
                has_output = True
            if channel.recv_stderr_ready():
                err_buf.append(channel.recv_stderr(_RECV_SIZE))
                has_output = True
            if has_output:
                continue
            if channel.exit_status_ready():
                break
            time.sleep(_POLL_INTERVAL)

        return b"".join(out_buf), b"".join(err_buf)
