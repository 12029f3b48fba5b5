"""Unit tests for server configuration settings model.

Tests verify that the Settings model binds environment variables and that
the grouped configuration views are built from the flat settings.
"""

from pathlib import Path

import pytest

from telloom.server.core.config import (
    CORSConfig,
    LoopsConfig,
    MuxConfig,
    PostgreSQLConfig,
    Settings,
    SupabaseConfig,
)


@pytest.fixture
def env_example_path() -> Path:
    """Get path to the test .env.example file."""
    return Path(__file__).resolve().parent.parent.parent.parent / ".env.example"


@pytest.fixture
def env_example_vars(env_example_path: Path) -> dict[str, str]:
    """Parse .env.example file and return environment variables."""
    env_vars = {}
    with open(env_example_path) as f:
        for line in f:
            line = line.strip()
            # Skip comments and empty lines
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                key, value = line.split("=", 1)
                env_vars[key.strip()] = value.strip()
    return env_vars


class TestSettingsBinding:
    """Test Settings model environment variable binding."""

    def test_server_host_binding(self, monkeypatch):
        monkeypatch.setenv("TELLOOM_SERVER_HOST", "127.0.0.1")
        assert Settings().server_host == "127.0.0.1"

    def test_server_port_binding(self, monkeypatch):
        monkeypatch.setenv("TELLOOM_SERVER_PORT", "9001")
        assert Settings().server_port == 9001

    def test_log_level_binding(self, env_example_vars: dict[str, str], monkeypatch):
        log_level = env_example_vars.get("TELLOOM_LOG_LEVEL", "INFO")
        monkeypatch.setenv("TELLOOM_LOG_LEVEL", log_level)
        assert Settings().log_level.upper() == log_level.upper()

    def test_database_url_binding(self, env_example_vars: dict[str, str], monkeypatch):
        monkeypatch.setenv("DATABASE_URL", env_example_vars["DATABASE_URL"])
        assert Settings().database_url.startswith("sqlite+aiosqlite")

    def test_domain_defaults(self, monkeypatch):
        for name in (
            "TELLOOM_INVITATION_LIFETIME_DAYS",
            "TELLOOM_SIGNED_URL_TTL_SECONDS",
            "TELLOOM_WEBHOOK_TOLERANCE_SECONDS",
            "TELLOOM_SECURE_COOKIES",
        ):
            monkeypatch.delenv(name, raising=False)
        settings = Settings(_env_file=None)
        assert settings.invitation_lifetime_days == 30
        assert settings.signed_url_ttl_seconds == 3600
        assert settings.webhook_tolerance_seconds == 300
        assert settings.secure_cookies is False

    def test_signed_url_ttl_has_a_floor(self, monkeypatch):
        monkeypatch.setenv("TELLOOM_SIGNED_URL_TTL_SECONDS", "30")
        with pytest.raises(ValueError):
            Settings()

    def test_secure_cookies_binding(self, monkeypatch):
        monkeypatch.setenv("TELLOOM_SECURE_COOKIES", "true")
        assert Settings().secure_cookies is True


class TestSupabaseConfigBinding:
    def test_model_validate_by_alias(self):
        config = SupabaseConfig.model_validate(
            {"SUPABASE_URL": "http://mock-supabase", "SUPABASE_ANON_KEY": "anon", "SUPABASE_STORAGE_BUCKET": "files"}
        )
        assert config.url == "http://mock-supabase"
        assert config.anon_key == "anon"
        assert config.storage_bucket == "files"
        assert config.service_role_key is None

    def test_grouped_from_settings(self, monkeypatch):
        monkeypatch.setenv("SUPABASE_URL", "http://mock-project")
        monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "service")
        supabase = Settings().supabase
        assert isinstance(supabase, SupabaseConfig)
        assert supabase.url == "http://mock-project"
        assert supabase.service_role_key == "service"


class TestMuxConfigBinding:
    def test_defaults(self):
        config = MuxConfig()
        assert config.base_url == "https://api.mux.com"
        assert config.cors_origin == "*"
        assert config.webhook_secret is None

    def test_grouped_from_settings(self, monkeypatch):
        monkeypatch.setenv("MUX_TOKEN_ID", "token-id")
        monkeypatch.setenv("MUX_TOKEN_SECRET", "token-secret")
        monkeypatch.setenv("MUX_WEBHOOK_SECRET", "whsec")
        mux = Settings().mux
        assert mux.token_id == "token-id"
        assert mux.token_secret == "token-secret"
        assert mux.webhook_secret == "whsec"

    def test_group_follows_attribute_changes(self, monkeypatch):
        settings = Settings()
        monkeypatch.setattr(settings, "mux_webhook_secret", "changed")
        assert settings.mux.webhook_secret == "changed"


class TestLoopsConfigBinding:
    def test_template_ids(self, monkeypatch):
        monkeypatch.setenv("LOOPS_API_KEY", "loops-key")
        monkeypatch.setenv("LOOPS_INVITATION_TEMPLATE_ID", "tmpl-invite")
        monkeypatch.setenv("LOOPS_FOLLOW_REQUEST_TEMPLATE_ID", "tmpl-follow")
        loops = Settings().loops
        assert isinstance(loops, LoopsConfig)
        assert loops.api_key == "loops-key"
        assert loops.invitation_template_id == "tmpl-invite"
        assert loops.follow_request_template_id == "tmpl-follow"


class TestPostgreSQLConfigBinding:
    def test_defaults(self):
        config = PostgreSQLConfig()
        assert config.db == "telloom"
        assert config.port == 5432

    def test_grouped_from_settings(self, monkeypatch):
        monkeypatch.setenv("POSTGRES_HOST", "db.internal")
        monkeypatch.setenv("POSTGRES_PORT", "6543")
        postgres = Settings().postgres
        assert postgres.host == "db.internal"
        assert postgres.port == 6543


class TestCORSConfig:
    def test_defaults_allow_everything(self):
        cors = Settings().cors
        assert isinstance(cors, CORSConfig)
        assert cors.origins == ["*"]
        assert cors.allow_credentials is True
