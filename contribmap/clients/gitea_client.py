from collections.abc import Mapping
from typing import Any

import httpx

from contribmap.core.errors import DecodeError


USER_AGENT = "contribmap"


def events_url(base_url: str, username: str) -> str:
    return f"{base_url.rstrip('/')}/api/v1/users/{username}/events"


def fetch_user_events(
    username: str,
    base_url: str,
    token: str | None = None,
    timeout: float = 20.0,
) -> list[Mapping[str, Any]]:
    """Fetch the public event list of a Gitea user."""

    headers = {"Accept": "application/json", "User-Agent": USER_AGENT}
    if token:
        headers["Authorization"] = f"token {token}"

    response = httpx.get(events_url(base_url, username), headers=headers, timeout=timeout)
    response.raise_for_status()

    payload = response.json()
    if not isinstance(payload, list):
        raise DecodeError("Gitea events response is invalid")

    return [item for item in payload if isinstance(item, Mapping)]
