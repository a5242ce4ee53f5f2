from __future__ import annotations

import pytest

from sasscmd.config import Settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "ENVIRONMENT",
        "ALLOWED_ORIGINS",
        "SASS_COMMAND_NAME",
        "COMMAND_NAME",
        "SASS_SAFE_HOST",
        "SAFE_HOST",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = Settings(_env_file=None)
    assert config.command_name == "sass"
    assert config.package_name == "sass"
    assert config.package_version == "1.0"
    assert config.safe_host is False
    assert not config.is_production


def test_allowed_origins_from_comma_list(monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example")
    config = Settings(_env_file=None)
    assert config.cors_origins == ["https://a.example", "https://b.example"]


def test_allowed_origins_from_json(monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", '["https://a.example"]')
    assert Settings(_env_file=None).cors_origins == ["https://a.example"]


def test_allowed_origins_empty(monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", "")
    assert Settings(_env_file=None).cors_origins == []


def test_command_name_aliases(monkeypatch):
    monkeypatch.setenv("COMMAND_NAME", "scss")
    assert Settings(_env_file=None).command_name == "scss"
    monkeypatch.setenv("SASS_COMMAND_NAME", "libsass")
    assert Settings(_env_file=None).command_name == "libsass"


def test_safe_host(monkeypatch):
    monkeypatch.setenv("SASS_SAFE_HOST", "true")
    assert Settings(_env_file=None).safe_host is True


def test_production(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "production")
    assert Settings(_env_file=None).is_production
