import logging

from contribmap.core.observability import configure_logging
from contribmap.core.observability import init_sentry
from contribmap.settings import Settings


def test_init_sentry_skips_when_dsn_missing(monkeypatch) -> None:
    """Sentry initialization is skipped when DSN is absent."""

    calls: list[dict[str, object]] = []

    def fake_init(**kwargs):
        calls.append(kwargs)

    monkeypatch.setattr("contribmap.core.observability.sentry_sdk.init", fake_init)

    settings = Settings(sentry_dsn=None)
    init_sentry(settings)

    assert calls == []


def test_init_sentry_initializes_sdk_with_settings(monkeypatch) -> None:
    """Sentry SDK is initialized with configured runtime settings."""

    calls: list[dict[str, object]] = []

    def fake_init(**kwargs):
        calls.append(kwargs)

    monkeypatch.setattr("contribmap.core.observability.sentry_sdk.init", fake_init)

    settings = Settings(
        sentry_dsn="https://examplePublicKey@o0.ingest.sentry.io/0",
        environment="production",
        release="abc123",
        sentry_traces_sample_rate=0.2,
    )
    init_sentry(settings)

    assert len(calls) == 1
    assert calls[0] == {
        "dsn": "https://examplePublicKey@o0.ingest.sentry.io/0",
        "environment": "production",
        "release": "abc123",
        "traces_sample_rate": 0.2,
        "send_default_pii": False,
    }


def test_settings_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("GITEA_URL", "https://codeberg.org")
    monkeypatch.setenv("HTTP_TIMEOUT_SECONDS", "3.5")

    settings = Settings()

    assert settings.gitea_url == "https://codeberg.org"
    assert settings.http_timeout_seconds == 3.5
    assert settings.github_graphql_url == "https://api.github.com/graphql"


def test_configure_logging_sets_root_level() -> None:
    configure_logging("debug")

    assert logging.getLogger().level == logging.DEBUG

    configure_logging("INFO")
