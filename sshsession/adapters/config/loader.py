"""
Option loader with priority: CLI > env > TOML > defaults
"""
import os
import tomllib
from pathlib import Path
from typing import Dict, Any, Optional

from ...core.constants import ENV_PREFIX
from ...core.exceptions import ConfigError


class ConfigLoader:
    """Loads raw session options; resolution into SessionConfig happens later"""

    # Environment suffix -> session option
    ENV_MAPPINGS = {
        "HOST": "host",
        "PORT": "port",
        "USER": "user",
        "PASSWORD": "password",
        "AUTH_METHOD": "authentication_method",
        "PUB_KEY": "pub_key",
        "PRIVATE_KEY": "private_key",
        "PASSPHRASE": "passphrase",
        "FINGERPRINT": "host_fingerprint",
        "TIMEOUT": "timeout",
    }

    # Values that must never be coerced (a password of "1" or a host named "yes" stays a string)
    _RAW_KEYS = frozenset({
        "host", "user", "password", "passphrase", "host_fingerprint", "pub_key", "private_key",
    })

    def __init__(self, env_prefix: str = ENV_PREFIX):
        self._env_prefix = env_prefix

    def load_toml(self, path: Path) -> Dict[str, Any]:
        """
        Load a TOML file. Options may live at top level or under a
        ``[session]`` table.
        """
        path = path.expanduser()
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        try:
            data = tomllib.loads(path.read_text(encoding='utf-8'))
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Failed to parse TOML configuration: {e}") from e

        session = data.pop("session", None)
        if isinstance(session, dict):
            data.update(session)
        return data

    def load_env(self, environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        """Load options from environment variables"""
        environ = os.environ if environ is None else environ
        config = {}

        for suffix, key in self.ENV_MAPPINGS.items():
            value = environ.get(self._env_prefix + suffix)
            if value:
                config[key] = value if key in self._RAW_KEYS else self._convert_value(value)

        return config

    def _convert_value(self, value: str) -> Any:
        """Convert string value to appropriate type"""
        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False

        try:
            return int(value)
        except ValueError:
            pass

        return value

    def merge_configs(self, *configs: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge multiple configurations with priority.
        Later configs override earlier ones; None values never override.
        """
        result: Dict[str, Any] = {}
        for config in configs:
            result.update({k: v for k, v in config.items() if v is not None})
        return result

    def load(
        self,
        toml_path: Optional[Path] = None,
        cli_overrides: Optional[Dict[str, Any]] = None,
        use_env: bool = True,
    ) -> Dict[str, Any]:
        """
        Load options with priority: CLI > env > TOML

        Args:
            toml_path: Path to TOML configuration file
            cli_overrides: CLI parameter overrides
            use_env: Whether to load from environment variables

        Returns:
            Merged options, ready for resolve()
        """
        configs = []

        if toml_path:
            configs.append(self.load_toml(toml_path))

        if use_env:
            env_config = self.load_env()
            if env_config:
                configs.append(env_config)

        if cli_overrides:
            configs.append(cli_overrides)

        return self.merge_configs(*configs)
