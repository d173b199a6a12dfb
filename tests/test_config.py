from types import MappingProxyType

import pytest

from sshsession.auth import AuthMethod, KeyCredentials, PasswordCredentials
from sshsession.config import DEFAULT_CONFIG, SessionConfig, resolve
from sshsession.core.exceptions import ConfigError


class TestDefaults:
    def test_defaults_are_read_only(self):
        assert isinstance(DEFAULT_CONFIG, MappingProxyType)
        with pytest.raises(TypeError):
            DEFAULT_CONFIG["host"] = "elsewhere"  # type: ignore[index]

    def test_resolve_without_overrides(self):
        cfg = resolve()
        assert cfg.host == "localhost"
        assert cfg.port == 22
        assert cfg.host_fingerprint is None
        assert cfg.authentication_method is AuthMethod.PASSWORD
        assert cfg.auto_connect is True
        assert cfg.fingerprint_hash == "md5"

    def test_resolve_does_not_mutate_defaults(self):
        resolve({"host": "other", "port": 2222})
        assert DEFAULT_CONFIG["host"] == "localhost"
        assert DEFAULT_CONFIG["port"] == 22


class TestResolve:
    def test_overrides_win(self):
        cfg = resolve({"host": "host1", "port": 2222, "user": "alice", "auto_connect": False})
        assert (cfg.host, cfg.port, cfg.user, cfg.auto_connect) == ("host1", 2222, "alice", False)

    def test_fingerprint_normalized(self):
        assert resolve({"host_fingerprint": "aa:bb:cc"}).host_fingerprint == "AABBCC"

    def test_fingerprint_already_canonical(self):
        assert resolve({"host_fingerprint": "DEADBEEF"}).host_fingerprint == "DEADBEEF"

    def test_unknown_keys_preserved(self):
        cfg = resolve({"host": "h", "jump_host": "bastion"})
        assert cfg.extra == {"jump_host": "bastion"}
        assert not hasattr(cfg, "jump_host")

    @pytest.mark.parametrize("tag", ["KEY", "key", "publickey", AuthMethod.KEY])
    def test_key_method_tags(self, tag):
        assert resolve({"authentication_method": tag}).authentication_method is AuthMethod.KEY

    @pytest.mark.parametrize("tag", ["PASS", "pass", "password"])
    def test_password_method_tags(self, tag):
        assert resolve({"authentication_method": tag}).authentication_method is AuthMethod.PASSWORD

    def test_unknown_method_falls_back_to_password(self):
        assert resolve({"authentication_method": "kerberos"}).authentication_method is AuthMethod.PASSWORD

    def test_numeric_strings_coerced(self):
        cfg = resolve({"port": "2222", "timeout": "2.5"})
        assert cfg.port == 2222
        assert cfg.timeout == 2.5

    def test_resolution_never_fails_on_bad_port(self):
        assert resolve({"port": "ssh"}).port == "ssh"

    def test_custom_defaults(self):
        cfg = resolve({"user": "bob"}, defaults={"host": "base", "port": 10022})
        assert (cfg.host, cfg.port, cfg.user) == ("base", 10022, "bob")

    def test_config_is_frozen(self):
        cfg = resolve({"host": "h"})
        with pytest.raises(Exception):
            cfg.host = "x"  # type: ignore[misc]

    def test_secrets_hidden_from_repr(self):
        cfg = resolve({"password": "hunter2", "passphrase": "open sesame"})
        assert "hunter2" not in repr(cfg)
        assert "open sesame" not in repr(cfg)

    def test_to_dict_round_trips_through_resolve(self):
        cfg = resolve({"host": "h", "host_fingerprint": "ab:cd", "authentication_method": "KEY", "x": 1})
        assert resolve(cfg.to_dict()) == cfg


class TestCredentials:
    def test_password_credentials(self):
        creds = resolve({"user": "alice", "password": "secret"}).credentials()
        assert creds == PasswordCredentials(user="alice", password="secret")

    def test_key_credentials(self, key_options):
        creds = resolve(key_options).credentials()
        assert isinstance(creds, KeyCredentials)
        assert creds.private_key == "/keys/id_ed25519"
        assert creds.pub_key == "/keys/id_ed25519.pub"
        assert creds.passphrase == "pp"

    def test_missing_password_detected_lazily(self):
        cfg = resolve({"user": "alice"})
        with pytest.raises(ConfigError, match="password"):
            cfg.credentials()

    def test_missing_private_key(self):
        cfg = resolve({"user": "alice", "authentication_method": "KEY"})
        with pytest.raises(ConfigError, match="private_key"):
            cfg.credentials()

    def test_missing_user(self):
        with pytest.raises(ConfigError, match="user"):
            SessionConfig(password="secret").credentials()

    def test_explicit_method_overrides_configured_one(self):
        cfg = resolve({"user": "alice", "password": "secret", "authentication_method": "KEY"})
        assert isinstance(cfg.credentials(AuthMethod.PASSWORD), PasswordCredentials)
