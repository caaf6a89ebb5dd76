from datetime import date

import svgwrite

from contribmap.schemas.contributions import MonthLabel
from contribmap.schemas.contributions import WeekGrid
from contribmap.services.colors import background_for


CELL_SIZE = 12
CELL_MARGIN = 2
TOP_MARGIN = 20
DAYS_PER_WEEK = 7
CELL_STROKE_DARK = "#333333"

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def canvas_size(num_weeks: int) -> tuple[int, int]:
    width = num_weeks * (CELL_SIZE + CELL_MARGIN) + CELL_MARGIN
    height = TOP_MARGIN + DAYS_PER_WEEK * (CELL_SIZE + CELL_MARGIN) + CELL_MARGIN
    return width, height


def week_x(week_index: int) -> int:
    return CELL_MARGIN + week_index * (CELL_SIZE + CELL_MARGIN)


def month_labels(weeks: WeekGrid) -> list[MonthLabel]:
    """Return one label per week holding the first day of a month.

    A label equal to the previously emitted one is skipped.
    """

    labels: list[MonthLabel] = []
    for week_index, week in enumerate(weeks):
        for day in week:
            if day.is_padding:
                continue
            try:
                parsed = date.fromisoformat(day.date)
            except ValueError:
                continue
            if parsed.day != 1:
                continue
            label = MONTH_ABBREVIATIONS[parsed.month - 1]
            if not labels or labels[-1].label != label:
                labels.append(MonthLabel(x=week_x(week_index), label=label))
            break
    return labels


def render_heatmap(weeks: WeekGrid, light_mode: bool) -> bytes:
    """Render a colorized week grid as an SVG contribution map."""

    width, height = canvas_size(len(weeks))
    drawing = svgwrite.Drawing(size=(width, height), profile="full")
    drawing.add(drawing.rect(insert=(0, 0), size=(width, height), fill=background_for(light_mode)))

    text_fill = "black" if light_mode else "white"
    for month in month_labels(weeks):
        drawing.add(
            drawing.text(
                month.label,
                insert=(month.x, TOP_MARGIN - 4),
                fill=text_fill,
                font_family="sans-serif",
                font_size="10px",
                class_="month",
            )
        )

    stroke = {} if light_mode else {"stroke": CELL_STROKE_DARK, "stroke_width": 1}
    for week_index, week in enumerate(weeks):
        for day_index, day in enumerate(week):
            y = TOP_MARGIN + CELL_MARGIN + day_index * (CELL_SIZE + CELL_MARGIN)
            cell = drawing.rect(
                insert=(week_x(week_index), y),
                size=(CELL_SIZE, CELL_SIZE),
                fill=day.color,
                class_="day",
                **stroke,
            )
            if not day.is_padding:
                cell.set_desc(title=f"{day.date}: {day.count} contributions")
            drawing.add(cell)

    return drawing.tostring().encode("utf-8")
