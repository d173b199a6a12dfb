from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import pytest

from sshsession.core.exceptions import ConnectionError
from sshsession.core.interfaces import CommandResult, SSHTransport


@dataclass
class FakeHandle:
    host: str
    port: int
    active: bool = True


@dataclass
class FakeTransport(SSHTransport):
    """In-memory transport recording every call it receives."""

    reachable: Tuple[str, int] = ("host1", 22)
    host_fingerprint: str = "DEADBEEF"
    passwords: Dict[str, str] = field(default_factory=lambda: {"alice": "secret"})
    keys: Dict[str, str] = field(default_factory=dict)
    send_ok: bool = True
    receive_ok: bool = True
    exec_results: Dict[str, CommandResult] = field(default_factory=dict)
    exec_error: Optional[Exception] = None
    calls: List[Tuple[Any, ...]] = field(default_factory=list)
    opened: List[FakeHandle] = field(default_factory=list)
    closed: List[FakeHandle] = field(default_factory=list)

    def names(self) -> List[str]:
        return [c[0] for c in self.calls]

    def open(self, host, port, timeout=None):
        self.calls.append(("open", host, port))
        if (host, port) != self.reachable:
            raise ConnectionError(f"Unable to connect to {host} on port {port}")
        handle = FakeHandle(host, port)
        self.opened.append(handle)
        return handle

    def fingerprint(self, handle, hash_name="md5"):
        self.calls.append(("fingerprint", hash_name))
        return self.host_fingerprint

    def authenticate_password(self, handle, user, password):
        self.calls.append(("authenticate_password", user, password))
        return self.passwords.get(user) == password

    def authenticate_pubkey(self, handle, user, pub_key_path, private_key_path, passphrase=None):
        self.calls.append(("authenticate_pubkey", user, pub_key_path, private_key_path, passphrase))
        return self.keys.get(user) == private_key_path

    def copy_send(self, handle, local_path, remote_path, mode):
        self.calls.append(("copy_send", local_path, remote_path, mode))
        return self.send_ok

    def copy_receive(self, handle, remote_path, local_path):
        self.calls.append(("copy_receive", remote_path, local_path))
        return self.receive_ok

    def exec(self, handle, command):
        self.calls.append(("exec", command))
        if self.exec_error is not None:
            raise self.exec_error
        return self.exec_results.get(command, CommandResult(exit_code=0))

    def is_active(self, handle):
        return handle is not None and handle.active

    def close(self, handle):
        self.calls.append(("close",))
        handle.active = False
        self.closed.append(handle)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def password_options() -> Dict[str, Any]:
    return {
        "host": "host1",
        "host_fingerprint": "DE:AD:BE:EF",
        "user": "alice",
        "authentication_method": "PASS",
        "password": "secret",
    }


@pytest.fixture
def key_options() -> Dict[str, Any]:
    return {
        "host": "host1",
        "user": "alice",
        "authentication_method": "KEY",
        "pub_key": "/keys/id_ed25519.pub",
        "private_key": "/keys/id_ed25519",
        "passphrase": "pp",
    }
