"""Tests for settings resolution and DataSourceConfig."""

import os

import pytest

from odata_simple_client.config import DataSourceConfig, SettingsResolver
from odata_simple_client.errors.exceptions import ConstructionError, SettingNotFoundError


class TestSettingsResolverInit:
    """Test SettingsResolver initialization."""

    def test_init_skip_dotenv(self):
        """Test initialization with dotenv loading disabled."""
        resolver = SettingsResolver(load_dotenv=False)
        assert not resolver._dotenv_loaded

    def test_init_with_custom_dotenv_path(self, tmp_path, monkeypatch):
        """Values from a custom .env file become resolvable."""
        dotenv_file = tmp_path / ".env"
        dotenv_file.write_text("TEST_DOTENV_HOST=oda.ft.dk\n")
        monkeypatch.delenv("TEST_DOTENV_HOST", raising=False)

        resolver = SettingsResolver(dotenv_path=str(dotenv_file))

        assert resolver._dotenv_loaded
        assert resolver.resolve(env_var_name="TEST_DOTENV_HOST") == "oda.ft.dk"
        os.environ.pop("TEST_DOTENV_HOST", None)


class TestSettingsResolverResolve:
    """Test resolution priority ordering."""

    def test_explicit_value_overrides_all(self, monkeypatch):
        monkeypatch.setenv("TEST_PRIORITY_KEY", "env-value")
        resolver = SettingsResolver(load_dotenv=False)

        result = resolver.resolve(value="explicit-value", env_var_name="TEST_PRIORITY_KEY", default="default-value")

        assert result == "explicit-value"

    def test_environment_overrides_default(self, monkeypatch):
        monkeypatch.setenv("TEST_PRIORITY_KEY", "env-value")
        resolver = SettingsResolver(load_dotenv=False)

        assert resolver.resolve(env_var_name="TEST_PRIORITY_KEY", default="default-value") == "env-value"

    def test_default_used_when_nothing_else_set(self):
        resolver = SettingsResolver(load_dotenv=False)

        assert resolver.resolve(env_var_name="NONEXISTENT_VAR", default="default-value") == "default-value"

    def test_returns_none_when_not_found(self):
        resolver = SettingsResolver(load_dotenv=False)

        assert resolver.resolve(env_var_name="NONEXISTENT_VAR") is None

    def test_raises_when_required_and_not_found(self):
        resolver = SettingsResolver(load_dotenv=False)

        with pytest.raises(SettingNotFoundError) as exc_info:
            resolver.resolve(env_var_name="NONEXISTENT_VAR", required=True)

        assert "Required setting not found" in str(exc_info.value)
        assert exc_info.value.env_var_name == "NONEXISTENT_VAR"

    def test_missing_setting_is_a_construction_error(self):
        """Configuration failures belong to the construction error family."""
        assert issubclass(SettingNotFoundError, ConstructionError)


class TestDataSourceConfig:
    """Test DataSourceConfig.from_env."""

    def test_from_env_reads_all_settings(self, monkeypatch):
        monkeypatch.setenv("ODATA_HOST", "oda.ft.dk")
        monkeypatch.setenv("ODATA_BASE_PATH", "/api")
        monkeypatch.setenv("ODATA_SCHEME", "HTTP")
        monkeypatch.setenv("ODATA_RATE_LIMIT", "2.5")
        monkeypatch.setenv("ODATA_TIMEOUT", "10")

        config = DataSourceConfig.from_env(resolver=SettingsResolver(load_dotenv=False))

        assert config == DataSourceConfig(
            host="oda.ft.dk",
            base_path="/api",
            scheme="http",
            rate_limit=2.5,
            timeout=10.0,
        )

    def test_from_env_defaults(self, monkeypatch):
        monkeypatch.setenv("ODATA_HOST", "oda.ft.dk")

        config = DataSourceConfig.from_env(resolver=SettingsResolver(load_dotenv=False))

        assert config.base_path is None
        assert config.scheme == "https"
        assert config.rate_limit is None
        assert config.timeout == 30.0

    def test_from_env_custom_prefix_and_overrides(self, monkeypatch):
        monkeypatch.setenv("TEST_FT_HOST", "ignored.example.com")
        monkeypatch.setenv("TEST_FT_BASE_PATH", "/api")

        config = DataSourceConfig.from_env(
            "TEST_FT_",
            resolver=SettingsResolver(load_dotenv=False),
            host="oda.ft.dk",
        )

        assert config.host == "oda.ft.dk"
        assert config.base_path == "/api"

    def test_from_env_requires_host(self):
        with pytest.raises(SettingNotFoundError) as exc_info:
            DataSourceConfig.from_env(resolver=SettingsResolver(load_dotenv=False))

        assert exc_info.value.env_var_name == "ODATA_HOST"

    @pytest.mark.parametrize(
        ("name", "value"),
        [("ODATA_RATE_LIMIT", "fast"), ("ODATA_RATE_LIMIT", "0"), ("ODATA_TIMEOUT", "soon")],
    )
    def test_from_env_rejects_malformed_numbers(self, monkeypatch, name, value):
        monkeypatch.setenv("ODATA_HOST", "oda.ft.dk")
        monkeypatch.setenv(name, value)

        with pytest.raises(ConstructionError, match=name):
            DataSourceConfig.from_env(resolver=SettingsResolver(load_dotenv=False))
