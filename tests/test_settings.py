"""Startup configuration tests."""

import pytest

from app.config.settings import Settings
from app.core.errors import ConfigError


def _settings(**overrides):
    values = {
        "jwt_secret": "s",
        "supabase_url": "https://example.supabase.co",
        "supabase_service_key": "key",
        "store_backend": "supabase",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def test_complete_configuration_is_accepted():
    _settings().validate_runtime()


@pytest.mark.parametrize("field", ["jwt_secret", "supabase_url", "supabase_service_key"])
def test_missing_required_setting_is_fatal(field):
    with pytest.raises(ConfigError) as exc:
        _settings(**{field: ""}).validate_runtime()
    assert field.upper() in str(exc.value)


def test_memory_backend_only_needs_secret():
    _settings(store_backend="memory", supabase_url="", supabase_service_key="").validate_runtime()
    with pytest.raises(ConfigError):
        _settings(store_backend="memory", jwt_secret="").validate_runtime()


def test_unknown_backend_is_fatal():
    with pytest.raises(ConfigError):
        _settings(store_backend="redis").validate_runtime()


def test_cors_origins_list():
    assert _settings(cors_origins="http://a, http://b,").get_cors_origins_list() == ["http://a", "http://b"]
