"""
Core interfaces for dependency injection
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class CommandResult:
    """Command execution result"""
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.exit_code == 0

    def __str__(self) -> str:
        if self.success:
            return self.stdout
        return f"Error (exit code {self.exit_code}): {self.stderr}"


class SSHTransport(ABC):
    """
    Transport/protocol collaborator used by a session.

    Every method takes the opaque handle returned by :meth:`open`. Only
    ``open``, ``fingerprint`` and ``exec`` raise; the boolean methods report
    rejection or copy failure through their return value.
    """

    @abstractmethod
    def open(self, host: str, port: int, timeout: Optional[float] = None) -> Any:
        """Open a transport connection, raising ConnectionError on failure"""
        pass

    @abstractmethod
    def fingerprint(self, handle: Any, hash_name: str = "md5") -> str:
        """Return the host key fingerprint as uppercase hex without separators"""
        pass

    @abstractmethod
    def authenticate_password(self, handle: Any, user: str, password: str) -> bool:
        """Password authentication"""
        pass

    @abstractmethod
    def authenticate_pubkey(
        self,
        handle: Any,
        user: str,
        pub_key_path: Optional[str],
        private_key_path: str,
        passphrase: Optional[str] = None,
    ) -> bool:
        """Public key authentication"""
        pass

    @abstractmethod
    def copy_send(self, handle: Any, local_path: str, remote_path: str, mode: int) -> bool:
        """Copy a local file to the remote host"""
        pass

    @abstractmethod
    def copy_receive(self, handle: Any, remote_path: str, local_path: str) -> bool:
        """Copy a remote file to the local filesystem"""
        pass

    @abstractmethod
    def exec(self, handle: Any, command: str) -> CommandResult:
        """Execute a command, raising TransportError if it cannot be dispatched"""
        pass

    @abstractmethod
    def is_active(self, handle: Any) -> bool:
        """Whether the handle is still usable"""
        pass

    @abstractmethod
    def close(self, handle: Any) -> None:
        """Release the handle"""
        pass
