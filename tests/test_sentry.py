import sentry_sdk

from app.config import get_settings
from app.main import create_app
from app.observability.sentry import init_error_reporting


def test_error_reporting_disabled_without_dsn(monkeypatch, recording_log) -> None:
    calls = []
    monkeypatch.setattr(sentry_sdk, "init", lambda **kwargs: calls.append(kwargs))

    assert init_error_reporting(get_settings(), recording_log) is False
    assert calls == []
    assert recording_log.records == []


def test_error_reporting_enabled_with_dsn(monkeypatch, recording_log) -> None:
    calls = []
    monkeypatch.setattr(sentry_sdk, "init", lambda **kwargs: calls.append(kwargs))
    monkeypatch.setenv("SENTRY_DSN", "https://public@example.invalid/1")
    monkeypatch.setenv("ENVIRONMENT", "staging")
    get_settings.cache_clear()

    assert init_error_reporting(get_settings(), recording_log) is True
    assert calls == [
        {"dsn": "https://public@example.invalid/1", "environment": "staging", "release": "0.1.0"}
    ]
    assert recording_log.events("error_reporting_enabled")[0]["fields"] == {"environment": "staging"}


def test_create_app_registers_error_reporting_when_configured(monkeypatch, recording_log) -> None:
    calls = []
    monkeypatch.setattr(sentry_sdk, "init", lambda **kwargs: calls.append(kwargs))
    monkeypatch.setenv("SENTRY_DSN", "https://public@example.invalid/1")
    get_settings.cache_clear()

    create_app(log_service=recording_log)

    assert len(calls) == 1
