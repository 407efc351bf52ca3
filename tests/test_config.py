from datetime import timedelta

import pytest
from pydantic import ValidationError

from shoplist.common.config import Settings


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.storage_backend in ("file", "memory")
    assert settings.cart_cache_ttl == timedelta(seconds=settings.cart_cache_ttl_seconds)


def test_env_prefix(monkeypatch):
    monkeypatch.setenv("SHOPLIST_STORAGE_BACKEND", "MEMORY")
    monkeypatch.setenv("SHOPLIST_LOG_LEVEL", "debug")
    monkeypatch.setenv("SHOPLIST_STATE_MAX_AGE_HOURS", "12")
    monkeypatch.setenv("SHOPLIST_STRICT_VALIDATION", "true")

    settings = Settings(_env_file=None)

    assert settings.storage_backend == "memory"
    assert settings.log_level == "DEBUG"
    assert settings.state_max_age == timedelta(hours=12)
    assert settings.strict_validation is True


def test_state_max_age_defaults_to_never(monkeypatch):
    monkeypatch.delenv("SHOPLIST_STATE_MAX_AGE_HOURS", raising=False)
    assert Settings(_env_file=None).state_max_age is None


@pytest.mark.parametrize("field, value", [
    ("log_level", "LOUD"),
    ("environment", "qa"),
    ("storage_backend", "s3"),
    ("fetch_timeout_seconds", 0),
])
def test_invalid_values(field, value):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **{field: value})


def test_configure_logging_picks_renderer(monkeypatch):
    import structlog

    from shoplist.common import logging_setup

    captured = {}
    monkeypatch.setattr(structlog, "configure", lambda **kwargs: captured.update(kwargs))

    logging_setup.configure_logging(level="warning", json=True)
    assert isinstance(captured["processors"][-1], structlog.processors.JSONRenderer)

    logging_setup.configure_logging(level="debug", json=False)
    assert isinstance(captured["processors"][-1], structlog.dev.ConsoleRenderer)
