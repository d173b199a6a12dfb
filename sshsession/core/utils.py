"""
Core utility functions
"""
import shlex
import paramiko
from pathlib import Path
from typing import Dict, Any, Optional

from .constants import SSH_CONFIG_PATH, DEFAULT_SSH_PORT
from .exceptions import ConfigError


# ============================================================
# SSH Config Management
# ============================================================

def load_ssh_config(hostname: str, config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration for specified Host from ~/.ssh/config.

    Args:
        hostname: Host name in SSH configuration
        config_path: Alternative ssh_config file

    Returns:
        Session options: host, user, port and private_key when an
        IdentityFile is configured

    Raises:
        ConfigError: If the ssh_config file doesn't exist
    """
    path = (config_path or Path(SSH_CONFIG_PATH)).expanduser()
    if not path.exists():
        raise ConfigError(f"{path} does not exist")

    ssh_config = paramiko.SSHConfig.from_path(str(path))
    entry = ssh_config.lookup(hostname)

    options: Dict[str, Any] = {
        "host": entry.get("hostname", hostname),
        "port": int(entry.get("port", DEFAULT_SSH_PORT)),
    }
    if entry.get("user"):
        options["user"] = entry["user"]
    identity = entry.get("identityfile")
    if identity:
        options["private_key"] = identity[0]
        options["authentication_method"] = "KEY"
    return options


# ============================================================
# Fingerprints
# ============================================================

def normalize_fingerprint(fingerprint: Optional[str]) -> Optional[str]:
    """Strip ':' separators and upper-case, e.g. "aa:bb:cc" -> "AABBCC" """
    if fingerprint is None:
        return None
    return str(fingerprint).replace(":", "").upper()


# ============================================================
# Key Loading
# ============================================================

_KEY_CLASSES = (paramiko.Ed25519Key, paramiko.RSAKey, paramiko.ECDSAKey)


def load_private_key(path: str, passphrase: Optional[str] = None) -> paramiko.PKey:
    """
    Load a private key, probing Ed25519, RSA and ECDSA in turn.

    Raises:
        FileNotFoundError: If the key file doesn't exist
        paramiko.SSHException: If no key type can read the file
    """
    p = Path(path).expanduser()
    if not p.exists():
        raise FileNotFoundError(f"Private key not found: {p}")

    last_error: Optional[Exception] = None
    for key_cls in _KEY_CLASSES:
        try:
            return key_cls.from_private_key_file(str(p), password=passphrase)
        except paramiko.PasswordRequiredException:
            raise
        except (paramiko.SSHException, ValueError) as e:
            last_error = e
    raise paramiko.SSHException(f"Failed to load private key at {p}: {last_error}")


def public_key_matches(private_key: paramiko.PKey, pub_key_path: str) -> bool:
    """Check that an OpenSSH public key file belongs to the private key"""
    p = Path(pub_key_path).expanduser()
    if not p.exists():
        raise FileNotFoundError(f"Public key not found: {p}")
    fields = p.read_text().split()
    if len(fields) < 2:
        return False
    return fields[1] == private_key.get_base64()


# ============================================================
# Remote Commands
# ============================================================

def remote_command(*argv: str) -> str:
    """
    Build a shell command line with every argument quoted.

    ``--`` is inserted after the program name so that paths starting with a
    dash are never read as options.
    """
    program, *args = argv
    return " ".join([shlex.quote(program), "--", *(shlex.quote(str(a)) for a in args)])
