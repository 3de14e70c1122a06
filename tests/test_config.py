"""Tests for environment-driven application settings."""

import pytest

from scoresheet.config import AppConfig


def test_defaults_are_valid():
    config = AppConfig()
    assert config.backend == "memory"
    assert config.port == 7122


def test_from_env_reads_values():
    config = AppConfig.from_env({
        "SCORESHEET_BACKEND": " JSON ",
        "SCORESHEET_DATA_FILE": "club.json",
        "SCORESHEET_PORT": "8080",
        "SCORESHEET_REQUEST_TIMEOUT": "2.5",
        "SCORESHEET_LOG_LEVEL": "DEBUG",
    })
    assert config.backend == "json"
    assert config.data_file == "club.json"
    assert config.port == 8080
    assert config.request_timeout == 2.5
    assert config.log_level == "DEBUG"


def test_from_env_empty_mapping_gives_defaults():
    assert AppConfig.from_env({}) == AppConfig()


def test_unknown_backend_is_rejected():
    with pytest.raises(ValueError):
        AppConfig(backend="sqlite")


def test_rest_backend_needs_credentials():
    with pytest.raises(ValueError):
        AppConfig.from_env({"SCORESHEET_BACKEND": "rest", "SUPABASE_URL": "https://x.supabase.co"})

    config = AppConfig.from_env({
        "SCORESHEET_BACKEND": "rest",
        "SUPABASE_URL": "https://x.supabase.co",
        "SUPABASE_KEY": "anon",
    })
    assert config.supabase_key == "anon"
