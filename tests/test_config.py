"""Unit tests for core/config.py -- signing secret policy and defaults."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from core.config import Settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("PORT", "MONGODB_URI", "MONGODB_DB", "TOKEN_EXPIRE_SECONDS"):
        monkeypatch.delenv(var, raising=False)
    s = Settings(jwt_secret="s" * 32, _env_file=None)
    assert s.port == 3000
    assert s.mongodb_uri == "mongodb://localhost:27017"
    assert s.mongodb_db == "inventory"
    assert s.token_expire_seconds == 3600


def test_missing_secret_rejected_in_production(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("JWT_SECRET", raising=False)
    with pytest.raises(ValidationError, match="JWT_SECRET is required"):
        Settings(debug=False, _env_file=None)


def test_short_secret_rejected() -> None:
    with pytest.raises(ValidationError, match="at least 32 characters"):
        Settings(jwt_secret="too-short", _env_file=None)


def test_debug_generates_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("JWT_SECRET", raising=False)
    s = Settings(debug=True, _env_file=None)
    assert len(s.jwt_secret) >= 32


def test_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JWT_SECRET", "e" * 40)
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("MONGODB_URI", "mongodb://db.internal:27017")
    s = Settings(_env_file=None)
    assert s.jwt_secret == "e" * 40
    assert s.port == 8080
    assert s.mongodb_uri == "mongodb://db.internal:27017"


def test_settings_are_frozen() -> None:
    s = Settings(jwt_secret="s" * 32, _env_file=None)
    with pytest.raises(ValidationError):
        s.port = 1
