"""Tests for environment settings."""

import pytest
from pydantic import ValidationError

from app.core.config import Settings


def test_signing_key_is_required(monkeypatch):
    monkeypatch.delenv("JWT_SECRET_KEY", raising=False)
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_short_signing_key_rejected(monkeypatch):
    monkeypatch.setenv("JWT_SECRET_KEY", "change-me")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("JWT_SECRET_KEY", "k" * 32)
    monkeypatch.setenv("SERVER_URL", "https://api.example.com")
    config = Settings(_env_file=None).upload_config()
    assert config.server_url == "https://api.example.com"
    assert config.max_file_size == 5 * 1024 * 1024
