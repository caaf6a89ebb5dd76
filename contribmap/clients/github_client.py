from collections.abc import Mapping
from typing import Any

import httpx

from contribmap.core.errors import DecodeError
from contribmap.core.errors import UsageError


USER_AGENT = "contribmap"

CONTRIBUTIONS_QUERY = """
query($login: String!) {
  user(login: $login) {
    contributionsCollection {
      totalCommitContributions
      totalPullRequestContributions
      totalIssueContributions
      totalPullRequestReviewContributions
      contributionCalendar {
        totalContributions
        weeks {
          contributionDays {
            date
            contributionCount
          }
        }
      }
    }
  }
}
"""


def fetch_contributions_collection(
    username: str,
    token: str,
    graphql_url: str,
    timeout: float = 20.0,
) -> Mapping[str, Any]:
    """Fetch the contributionsCollection of a user from GitHub GraphQL API."""

    if not token:
        raise UsageError("GitHub token is required for GraphQL requests")

    headers = {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
        "User-Agent": USER_AGENT,
    }

    response = httpx.post(
        graphql_url,
        json={"query": CONTRIBUTIONS_QUERY, "variables": {"login": username}},
        headers=headers,
        timeout=timeout,
    )
    response.raise_for_status()

    payload = response.json()
    if not isinstance(payload, Mapping):
        raise DecodeError("GitHub GraphQL response is invalid")

    if payload.get("errors"):
        raise DecodeError(f"GitHub GraphQL returned errors: {response.text}")

    data = payload.get("data")
    if not isinstance(data, Mapping):
        raise DecodeError("GitHub GraphQL data is missing")

    user = data.get("user")
    if not isinstance(user, Mapping):
        raise DecodeError(f"GitHub user not found: {username}")

    collection = user.get("contributionsCollection")
    if not isinstance(collection, Mapping):
        raise DecodeError("GitHub contributionsCollection is missing")

    return collection
