import xml.etree.ElementTree as ET
from datetime import date

import pytest

from contribmap.core.errors import UpstreamError
from contribmap.main import main
from contribmap.schemas.contributions import CategoryTotals
from contribmap.services.normalizer import build_trailing_year


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path) -> None:
    for name in ("GITHUB_TOKEN", "GITEA_TOKEN", "GITEA_URL", "SENTRY_DSN", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def fetch_calls(monkeypatch) -> list[dict[str, object]]:
    calls: list[dict[str, object]] = []

    def fake_fetch_contributions(platform, username, settings, token=None, gitea_url=None):
        calls.append(
            {"platform": platform, "username": username, "token": token, "gitea_url": gitea_url}
        )
        weeks = build_trailing_year({date(2024, 1, 1): 3}, date(2024, 1, 2))
        return weeks, CategoryTotals(commits=2, pull_requests=1, issues=1, code_reviews=0)

    monkeypatch.setattr("contribmap.main.fetch_contributions", fake_fetch_contributions)
    return calls


def test_github_run_writes_both_images(fetch_calls, tmp_path, capsys) -> None:
    exit_code = main(["--user", "octocat", "--token", "secret"])

    output = capsys.readouterr().out.splitlines()
    assert exit_code == 0
    assert fetch_calls[0]["platform"] == "github"
    assert fetch_calls[0]["token"] == "secret"
    assert output == [
        "Fetching contributions for GitHub user octocat...",
        "Contribution map generated and saved to contributions.svg",
        "Cross diagram generated and saved to contributions_cross.svg",
    ]

    heatmap = ET.parse(tmp_path / "contributions.svg").getroot()
    cross = ET.parse(tmp_path / "contributions_cross.svg").getroot()
    assert heatmap.get("width") == str(53 * 14 + 2)
    assert cross.get("width") == "300"


def test_gitea_run_does_not_need_token(fetch_calls, tmp_path, capsys) -> None:
    exit_code = main(
        ["--platform", "gitea", "--user", "alice", "--gitea-url", "https://gitea.test", "--light-mode"]
    )

    assert exit_code == 0
    assert fetch_calls[0]["platform"] == "gitea"
    assert fetch_calls[0]["gitea_url"] == "https://gitea.test"
    assert fetch_calls[0]["token"] is None
    assert "from https://gitea.test" in capsys.readouterr().out
    assert 'fill="#ffffff"' in (tmp_path / "contributions.svg").read_text()


def test_token_falls_back_to_environment(fetch_calls, monkeypatch) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "env-secret")

    assert main(["--user", "octocat"]) == 0
    assert fetch_calls[0]["token"] == "env-secret"


@pytest.mark.parametrize(
    ("argv", "message"),
    [
        (["--token", "secret"], "--user"),
        (["--user", "octocat"], "GitHub token is required"),
        (["--user", "octocat", "--token", "secret", "--output", "png"], "Unknown output format"),
        (["--user", "octocat", "--platform", "gitlab"], "invalid choice"),
    ],
)
def test_usage_errors_exit_nonzero(fetch_calls, capsys, argv, message) -> None:
    with pytest.raises(SystemExit) as exc_info:
        main(argv)

    assert exc_info.value.code == 2
    assert message in capsys.readouterr().err
    assert fetch_calls == []


def test_fetch_error_exits_with_message(monkeypatch, tmp_path, capsys) -> None:
    def failing_fetch(*args, **kwargs):
        raise UpstreamError("GitHub", 502, "bad gateway body")

    monkeypatch.setattr("contribmap.main.fetch_contributions", failing_fetch)

    exit_code = main(["--user", "octocat", "--token", "secret"])

    assert exit_code == 1
    assert "bad gateway body" in capsys.readouterr().err
    assert not (tmp_path / "contributions.svg").exists()


def test_write_error_after_first_image_exits(fetch_calls, tmp_path, capsys) -> None:
    (tmp_path / "contributions_cross.svg").mkdir()

    exit_code = main(["--user", "octocat", "--token", "secret"])

    assert exit_code == 1
    assert (tmp_path / "contributions.svg").exists()
    assert "Error" in capsys.readouterr().err


def test_fatal_errors_are_reported_to_sentry(monkeypatch, capsys) -> None:
    captured: list[BaseException] = []

    def failing_fetch(*args, **kwargs):
        raise UpstreamError("Gitea", 404, "user does not exist")

    monkeypatch.setattr("contribmap.main.fetch_contributions", failing_fetch)
    monkeypatch.setattr("contribmap.main.sentry_sdk.capture_exception", captured.append)

    assert main(["--platform", "gitea", "--user", "ghost"]) == 1
    assert isinstance(captured[0], UpstreamError)
