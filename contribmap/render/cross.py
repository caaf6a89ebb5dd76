import svgwrite

from contribmap.schemas.contributions import CategoryTotals
from contribmap.services.colors import background_for
from contribmap.services.colors import palette_for


CROSS_WIDTH = 300
CROSS_HEIGHT = 300
CENTER_X = CROSS_WIDTH // 2
CENTER_Y = CROSS_HEIGHT // 2

TOP_Y = 50
BOTTOM_Y = 250
LEFT_X = 50
RIGHT_X = 250

INDICATOR_RADIUS = 10
PERCENT_OFFSET = 18

# (field, label, anchor)
ARMS = (
    ("code_reviews", "Code Reviews", (CENTER_X, TOP_Y)),
    ("pull_requests", "Pull Requests", (CENTER_X, BOTTOM_Y)),
    ("commits", "Commits", (LEFT_X, CENTER_Y)),
    ("issues", "Issues", (RIGHT_X, CENTER_Y)),
)


def percentages(totals: CategoryTotals) -> dict[str, float]:
    """Share of each category in percent, all zero when nothing was counted."""

    total = totals.total
    result: dict[str, float] = {}
    for field, _, _ in ARMS:
        value = getattr(totals, field)
        result[field] = value / total * 100 if total > 0 else 0.0
    return result


def _blend(low: int, high: int, low_weight: int, high_weight: int, default: float) -> float:
    pair = low_weight + high_weight
    if pair == 0:
        return default
    return low + high_weight / pair * (high - low)


def indicator_point(totals: CategoryTotals) -> tuple[float, float]:
    """Return where the activity leans.

    The x axis only weighs commits (left) against issues (right), the y axis
    only code reviews (top) against pull requests (bottom).
    """

    x = _blend(LEFT_X, RIGHT_X, totals.commits, totals.issues, float(CENTER_X))
    y = _blend(TOP_Y, BOTTOM_Y, totals.code_reviews, totals.pull_requests, float(CENTER_Y))
    return x, y


def render_cross(totals: CategoryTotals, light_mode: bool) -> bytes:
    """Render the four-way activity breakdown as an SVG cross diagram."""

    palette = palette_for(light_mode)
    dot_color = palette[-1]
    text_color = palette[2]

    drawing = svgwrite.Drawing(size=(CROSS_WIDTH, CROSS_HEIGHT), profile="full")
    drawing.add(
        drawing.rect(insert=(0, 0), size=(CROSS_WIDTH, CROSS_HEIGHT), fill=background_for(light_mode))
    )
    drawing.add(
        drawing.line(
            start=(CENTER_X, 0),
            end=(CENTER_X, CROSS_HEIGHT),
            stroke=dot_color,
            stroke_dasharray="4",
        )
    )
    drawing.add(
        drawing.line(
            start=(0, CENTER_Y),
            end=(CROSS_WIDTH, CENTER_Y),
            stroke=dot_color,
            stroke_dasharray="4",
        )
    )

    shares = percentages(totals)
    for field, label, (x, y) in ARMS:
        drawing.add(
            drawing.text(
                label,
                insert=(x, y),
                text_anchor="middle",
                font_family="sans-serif",
                font_size="14px",
                fill=text_color,
                class_="label",
            )
        )
        drawing.add(
            drawing.text(
                f"{shares[field]:.1f}%",
                insert=(x, y + PERCENT_OFFSET),
                text_anchor="middle",
                font_family="sans-serif",
                font_size="12px",
                fill=text_color,
                class_="percent",
            )
        )

    cx, cy = indicator_point(totals)
    drawing.add(drawing.circle(center=(round(cx, 1), round(cy, 1)), r=INDICATOR_RADIUS, fill=dot_color))

    return drawing.tostring().encode("utf-8")
