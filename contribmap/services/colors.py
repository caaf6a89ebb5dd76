import math

from contribmap.schemas.contributions import WeekGrid


BUCKET_COUNT = 5

# Darkest to brightest.
DARK_BUCKET_COLORS = ("#0B3D0B", "#0F4F0F", "#129012", "#16B316", "#1AFF1A")
LIGHT_BUCKET_COLORS = ("#216e39", "#30a14e", "#40c463", "#8fdc85", "#c6f7d0")

ZERO_COLOR_DARK = "#000000"
ZERO_COLOR_LIGHT = "#ebedf0"

BACKGROUND_DARK = "#000000"
BACKGROUND_LIGHT = "#ffffff"


def palette_for(light_mode: bool) -> tuple[str, ...]:
    return LIGHT_BUCKET_COLORS if light_mode else DARK_BUCKET_COLORS


def background_for(light_mode: bool) -> str:
    return BACKGROUND_LIGHT if light_mode else BACKGROUND_DARK


def bucket_index(count: int, max_count: int) -> int:
    """Map a nonzero count to a bucket in range 0..BUCKET_COUNT-1.

    The range 1..max_count is split into BUCKET_COUNT equal-width buckets.
    """

    bucket_width = max(1, math.ceil((max_count - 1) / BUCKET_COUNT))
    index = (count - 1) // bucket_width
    return min(max(index, 0), BUCKET_COUNT - 1)


def color_for(count: int, max_count: int, light_mode: bool) -> str:
    """Return the heatmap color for a daily count."""

    if count == 0:
        return ZERO_COLOR_LIGHT if light_mode else ZERO_COLOR_DARK
    return palette_for(light_mode)[bucket_index(count, max_count)]


def max_count(weeks: WeekGrid) -> int:
    return max((day.count for week in weeks for day in week), default=0)


def colorize_weeks(weeks: WeekGrid, light_mode: bool) -> None:
    """Assign a color to every day of the grid in place.

    Buckets depend on the maximum over the whole grid, so the maximum is
    computed first and only then applied to each day.
    """

    highest = max_count(weeks)
    for week in weeks:
        for day in week:
            day.color = color_for(day.count, highest, light_mode)
