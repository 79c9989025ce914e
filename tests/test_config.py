"""Tests for template_sync.config: env-var config loading and validation."""

import logging

import pytest

from template_sync.config import (
    ENVIRONMENTS,
    Config,
    ShutdownMode,
    load_config,
    resolve_base_url,
    validate_config,
    workspace_root_for,
)

_ENV_VARS = (
    "TEMPLATE_SYNC_TOKEN",
    "TEMPLATE_SYNC_ENV",
    "TEMPLATE_SYNC_PATH",
    "TEMPLATE_SYNC_DEBOUNCE_MS",
    "TEMPLATE_SYNC_TIMEOUT",
    "TEMPLATE_SYNC_SHUTDOWN_MODE",
    "TEMPLATE_SYNC_DEBUG",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


# -------------------------------------------------------------------------
# resolve_base_url() / workspace_root_for()
# -------------------------------------------------------------------------


class TestEnvironments:
    @pytest.mark.parametrize("name", ["localhost", "development", "production"])
    def test_known_names(self, name):
        assert resolve_base_url(name) == (name, ENVIRONMENTS[name])

    def test_case_insensitive(self):
        assert resolve_base_url("Development")[0] == "development"

    def test_unknown_falls_back_to_production(self, caplog):
        with caplog.at_level(logging.WARNING):
            env, url = resolve_base_url("staging")
        assert env == "production"
        assert url == ENVIRONMENTS["production"]
        assert "staging" in caplog.text

    def test_none_is_production(self):
        assert resolve_base_url(None)[0] == "production"


class TestWorkspaceRoot:
    def test_uses_token_prefix(self, tmp_path):
        assert workspace_root_for("abc123-secret-part", tmp_path) == (
            tmp_path / "abc123-views"
        ).resolve()

    def test_token_without_dash(self, tmp_path):
        assert workspace_root_for("plain", tmp_path).name == "plain-views"

    def test_config_property(self, mock_config, tmp_path):
        assert mock_config.workspace_root == (tmp_path / "site42-views").resolve()


# -------------------------------------------------------------------------
# validate_config()
# -------------------------------------------------------------------------


class TestValidateConfig:
    def test_valid_config(self, mock_config):
        validate_config(mock_config)

    def test_empty_token(self):
        with pytest.raises(ValueError, match="token cannot be empty"):
            validate_config(Config(token="   "))

    def test_token_starting_with_dash(self):
        with pytest.raises(ValueError, match="must not start with"):
            validate_config(Config(token="-abc"))

    def test_bad_base_url(self):
        with pytest.raises(ValueError, match="http:// or https://"):
            validate_config(Config(token="abc", base_url="ftp://x"))

    def test_trailing_slash_stripped(self):
        config = Config(token="abc", base_url="https://x.test/api/")
        validate_config(config)
        assert config.base_url == "https://x.test/api"

    @pytest.mark.parametrize("value", [-1, 60_001])
    def test_debounce_range(self, value):
        with pytest.raises(ValueError, match="debounce"):
            validate_config(Config(token="abc", debounce_ms=value))

    def test_timeout_positive(self):
        with pytest.raises(ValueError, match="timeout"):
            validate_config(Config(token="abc", request_timeout=0))

    def test_discard_mode_warns(self, caplog):
        with caplog.at_level(logging.WARNING):
            validate_config(Config(token="abc", shutdown_mode=ShutdownMode.DISCARD))
        assert "discard" in caplog.text


# -------------------------------------------------------------------------
# load_config()
# -------------------------------------------------------------------------


class TestLoadConfig:
    def test_missing_token_raises(self):
        with pytest.raises(ValueError, match="API token not found"):
            load_config()

    def test_defaults(self):
        config = load_config(token="abc-1")
        assert config.env == "production"
        assert config.base_url == ENVIRONMENTS["production"]
        assert config.debounce_ms == 1000
        assert config.shutdown_mode is ShutdownMode.FLUSH
        assert config.parent_dir == "."
        assert config.debug is False

    def test_cli_beats_env(self, monkeypatch):
        monkeypatch.setenv("TEMPLATE_SYNC_TOKEN", "from-env")
        monkeypatch.setenv("TEMPLATE_SYNC_ENV", "development")
        config = load_config(token="from-cli", env="localhost")
        assert config.token == "from-cli"
        assert config.env == "localhost"

    def test_env_beats_yaml(self, monkeypatch):
        monkeypatch.setenv("TEMPLATE_SYNC_DEBOUNCE_MS", "250")
        config = load_config(
            token="abc", yaml_fallbacks={"debounce_ms": 900, "env": "development"}
        )
        assert config.debounce_ms == 250
        assert config.env == "development"

    def test_yaml_fallbacks(self):
        config = load_config(
            yaml_fallbacks={
                "token": "yaml-token",
                "path": "/srv/work",
                "request_timeout": 12,
                "shutdown_mode": "discard",
                "debug": True,
            }
        )
        assert config.token == "yaml-token"
        assert config.parent_dir == "/srv/work"
        assert config.request_timeout == 12.0
        assert config.shutdown_mode is ShutdownMode.DISCARD
        assert config.debug is True

    def test_invalid_env_number(self, monkeypatch):
        monkeypatch.setenv("TEMPLATE_SYNC_DEBOUNCE_MS", "soon")
        with pytest.raises(ValueError, match="must be a number"):
            load_config(token="abc")

    def test_invalid_shutdown_mode(self):
        with pytest.raises(ValueError, match="shutdown mode"):
            load_config(token="abc", shutdown_mode="later")

    def test_debug_env_var(self, monkeypatch):
        monkeypatch.setenv("TEMPLATE_SYNC_DEBUG", "yes")
        assert load_config(token="abc").debug is True
