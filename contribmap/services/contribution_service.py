import logging
from collections.abc import Callable
from datetime import date

import httpx

from contribmap.clients.gitea_client import fetch_user_events
from contribmap.clients.github_client import fetch_contributions_collection
from contribmap.core.errors import DecodeError
from contribmap.core.errors import InvalidTokenError
from contribmap.core.errors import TransportError
from contribmap.core.errors import UpstreamError
from contribmap.core.errors import UsageError
from contribmap.schemas.contributions import CategoryTotals
from contribmap.schemas.contributions import Platform
from contribmap.schemas.contributions import WeekGrid
from contribmap.services.normalizer import normalize_gitea
from contribmap.services.normalizer import normalize_github
from contribmap.settings import Settings


logger = logging.getLogger(__name__)

Fetcher = Callable[..., tuple[WeekGrid, CategoryTotals]]


def _fetch_github(
    username: str,
    settings: Settings,
    token: str | None,
    gitea_url: str | None,
    today: date | None,
) -> tuple[WeekGrid, CategoryTotals]:
    token = token or settings.github_token
    if not token:
        raise UsageError(
            "A GitHub token is required when using the GitHub platform. "
            "Provide it using the --token option."
        )

    collection = fetch_contributions_collection(
        username=username,
        token=token,
        graphql_url=settings.github_graphql_url,
        timeout=settings.http_timeout_seconds,
    )
    return normalize_github(collection)


def _fetch_gitea(
    username: str,
    settings: Settings,
    token: str | None,
    gitea_url: str | None,
    today: date | None,
) -> tuple[WeekGrid, CategoryTotals]:
    events = fetch_user_events(
        username=username,
        base_url=gitea_url or settings.gitea_url,
        token=token or settings.gitea_token,
        timeout=settings.http_timeout_seconds,
    )
    logger.debug("Fetched %d Gitea events for %s", len(events), username)
    return normalize_gitea(events, today=today)


FETCHERS: dict[Platform, Fetcher] = {
    Platform.GITHUB: _fetch_github,
    Platform.GITEA: _fetch_gitea,
}


def fetch_contributions(
    platform: Platform | str,
    username: str,
    settings: Settings,
    token: str | None = None,
    gitea_url: str | None = None,
    today: date | None = None,
) -> tuple[WeekGrid, CategoryTotals]:
    """Fetch and normalize contributions of a user on the given platform.

    Raises:
        UsageError: If the platform is unknown or a required token is missing.
        InvalidTokenError: If the platform rejects the token.
        UpstreamError: If the platform answers with a non-success status.
        TransportError: If the platform cannot be reached.
        DecodeError: If the response payload is malformed.
    """

    try:
        selected = Platform(str(platform).lower())
    except ValueError as exc:
        raise UsageError(
            f"Unknown platform: {platform}. Use 'github' or 'gitea'."
        ) from exc

    fetcher = FETCHERS[selected]
    platform_name = "GitHub" if selected is Platform.GITHUB else "Gitea"

    try:
        return fetcher(username, settings, token, gitea_url, today)
    except httpx.HTTPStatusError as exc:
        status_code = exc.response.status_code
        body = exc.response.text
        if status_code in {401, 403}:
            raise InvalidTokenError(platform_name, status_code, body) from exc
        raise UpstreamError(platform_name, status_code, body) from exc
    except httpx.HTTPError as exc:
        raise TransportError(f"{platform_name} request failed: {exc}") from exc
    except ValueError as exc:
        raise DecodeError(f"{platform_name} response could not be decoded: {exc}") from exc
