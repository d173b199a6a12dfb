"""
Core infrastructure layer
"""
from .constants import *
from .exceptions import *
from .logging import setup_logging, get_logger, get_stdout_console, get_stderr_console
from .interfaces import CommandResult, SSHTransport
from .utils import (
    load_ssh_config,
    load_private_key,
    normalize_fingerprint,
    remote_command,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "get_stdout_console",
    "get_stderr_console",
    "CommandResult",
    "SSHTransport",
    "load_ssh_config",
    "load_private_key",
    "normalize_fingerprint",
    "remote_command",
]
