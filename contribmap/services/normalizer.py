import logging
from collections.abc import Iterable
from collections.abc import Mapping
from collections.abc import Sequence
from datetime import date
from datetime import datetime
from datetime import timedelta
from typing import Any

from contribmap.core.errors import DecodeError
from contribmap.schemas.contributions import CategoryTotals
from contribmap.schemas.contributions import ContributionDay
from contribmap.schemas.contributions import WeekGrid
from contribmap.schemas.contributions import padding_day


logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7
TRAILING_DAYS = 364

# Ordered rules: the first category with a matching pattern wins, so the more
# specific review/comment patterns are checked before the pull request ones.
DEFAULT_EVENT_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("code_reviews", ("review", "comment")),
    ("pull_requests", ("pullrequest", "pull_request")),
    ("issues", ("issue",)),
    ("commits", ("push", "commit")),
)

GITHUB_TOTAL_FIELDS = {
    "commits": "totalCommitContributions",
    "pull_requests": "totalPullRequestContributions",
    "issues": "totalIssueContributions",
    "code_reviews": "totalPullRequestReviewContributions",
}


def sunday_index(day: date) -> int:
    """Return the weekday with Sunday as 0 and Saturday as 6."""

    return (day.weekday() + 1) % 7


def parse_event_datetime(raw_value: str) -> datetime:
    return datetime.fromisoformat(raw_value.replace("Z", "+00:00"))


def pad_week(days: list[ContributionDay]) -> list[ContributionDay]:
    """Right-pad a partial week with padding cells."""

    return days + [padding_day() for _ in range(DAYS_PER_WEEK - len(days))]


def _align_week(days: list[ContributionDay]) -> list[ContributionDay]:
    """Place days in their Sunday-first weekday slots.

    A full week is returned unchanged. A partial one gets padding cells in the
    slots its dates do not cover.
    """

    if len(days) == DAYS_PER_WEEK:
        return days

    slots: list[ContributionDay | None] = [None] * DAYS_PER_WEEK
    for day in days:
        try:
            slot = sunday_index(date.fromisoformat(day.date))
        except ValueError as exc:
            raise DecodeError(f"GitHub contribution date is invalid: {day.date!r}") from exc
        slots[slot] = day
    return [slot if slot is not None else padding_day() for slot in slots]


def normalize_github(
    collection: Mapping[str, Any],
) -> tuple[WeekGrid, CategoryTotals]:
    """Convert a GitHub contributionsCollection into a week grid and totals."""

    calendar = collection.get("contributionCalendar")
    if not isinstance(calendar, Mapping):
        raise DecodeError("GitHub contributionCalendar is missing")

    raw_weeks = calendar.get("weeks")
    if not isinstance(raw_weeks, list):
        raise DecodeError("GitHub contribution weeks are missing")

    weeks: WeekGrid = []
    for raw_week in raw_weeks:
        if not isinstance(raw_week, Mapping):
            raise DecodeError("GitHub contribution week is invalid")
        raw_days = raw_week.get("contributionDays")
        if not isinstance(raw_days, list):
            raise DecodeError("GitHub contributionDays are missing")

        days: list[ContributionDay] = []
        for item in raw_days:
            if not isinstance(item, Mapping):
                raise DecodeError("GitHub contribution day is invalid")
            raw_date = item.get("date")
            raw_count = item.get("contributionCount")
            if not isinstance(raw_date, str) or not isinstance(raw_count, int):
                raise DecodeError("GitHub contribution day is missing required fields")
            days.append(ContributionDay(date=raw_date, count=raw_count))

        if days:
            weeks.append(_align_week(days))

    values: dict[str, int] = {}
    for field, key in GITHUB_TOTAL_FIELDS.items():
        raw_total = collection.get(key)
        if not isinstance(raw_total, int):
            raise DecodeError(f"GitHub {key} is missing")
        values[field] = raw_total

    logger.debug(
        "Normalized %d GitHub weeks, %s contributions reported",
        len(weeks),
        calendar.get("totalContributions"),
    )
    return weeks, CategoryTotals(**values)


def classify_event(
    event_type: str,
    rules: Iterable[tuple[str, Sequence[str]]] = DEFAULT_EVENT_RULES,
) -> str | None:
    """Return the CategoryTotals field an event type counts toward.

    Matching is case-insensitive on substrings, which also covers exact
    matches. Unrecognized types return None.
    """

    lowered = event_type.lower()
    for category, patterns in rules:
        if any(pattern.lower() in lowered for pattern in patterns):
            return category
    return None


def build_trailing_year(counts: Mapping[date, int], today: date) -> WeekGrid:
    """Lay out the 365 days ending today as Sunday-first weeks."""

    start = today - timedelta(days=TRAILING_DAYS)
    current = start - timedelta(days=sunday_index(start))

    weeks: WeekGrid = []
    current_week: list[ContributionDay] = []
    while current <= today:
        current_week.append(
            ContributionDay(date=current.isoformat(), count=counts.get(current, 0))
        )
        if sunday_index(current) == DAYS_PER_WEEK - 1:
            weeks.append(current_week)
            current_week = []
        current += timedelta(days=1)

    if current_week:
        weeks.append(pad_week(current_week))

    return weeks


def normalize_gitea(
    events: Iterable[Mapping[str, Any]],
    today: date | None = None,
    rules: Iterable[tuple[str, Sequence[str]]] = DEFAULT_EVENT_RULES,
) -> tuple[WeekGrid, CategoryTotals]:
    """Aggregate Gitea events into a trailing-year week grid and totals."""

    rules = tuple(rules)
    counts: dict[date, int] = {}
    totals = CategoryTotals()
    skipped = 0

    for event in events:
        created_at = event.get("created_at")
        if not isinstance(created_at, str):
            skipped += 1
            continue
        try:
            day = parse_event_datetime(created_at).date()
        except ValueError:
            skipped += 1
            continue

        counts[day] = counts.get(day, 0) + 1

        event_type = event.get("type")
        category = classify_event(event_type, rules) if isinstance(event_type, str) else None
        if category is not None:
            setattr(totals, category, getattr(totals, category) + 1)

    if skipped:
        logger.debug("Skipped %d Gitea events without a usable timestamp", skipped)

    weeks = build_trailing_year(counts, today or date.today())
    return weeks, totals
