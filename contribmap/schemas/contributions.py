from enum import StrEnum

from pydantic import BaseModel
from pydantic import Field


class Platform(StrEnum):
    """Code hosting platforms contributions can be fetched from."""

    GITHUB = "github"
    GITEA = "gitea"


class ContributionDay(BaseModel):
    """Single heatmap cell.

    An empty `date` marks a padding cell. `color` stays empty until the whole
    grid has been colorized.
    """

    date: str = ""
    count: int = Field(default=0, ge=0)
    color: str = ""

    @property
    def is_padding(self) -> bool:
        return not self.date


WeekGrid = list[list[ContributionDay]]


class CategoryTotals(BaseModel):
    """Activity split used by the cross diagram."""

    commits: int = Field(default=0, ge=0)
    pull_requests: int = Field(default=0, ge=0)
    issues: int = Field(default=0, ge=0)
    code_reviews: int = Field(default=0, ge=0)

    @property
    def total(self) -> int:
        return self.commits + self.pull_requests + self.issues + self.code_reviews


class MonthLabel(BaseModel):
    x: int
    label: str


def padding_day() -> ContributionDay:
    return ContributionDay(date="", count=0)
