"""View models placed into StreamableHandles.

Views are plain, frozen data. How they look is up to the renderer; the
chat core only decides which view a turn is showing at any moment.
"""

from datetime import date
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class View(BaseModel):
    """Base class for every renderable view."""

    model_config = ConfigDict(frozen=True)

    kind: str


class SpinnerView(View):
    """Placeholder shown before anything has been produced."""

    kind: Literal["spinner"] = "spinner"


class MarkdownView(View):
    """Assistant text, rendered as markdown."""

    kind: Literal["markdown"] = "markdown"
    content: str


class ErrorView(View):
    kind: Literal["error"] = "error"
    title: str
    message: str
    details: dict[str, Any] | None = None


class FederalRegisterSkeletonView(View):
    kind: Literal["federal_register_skeleton"] = "federal_register_skeleton"


class FederalRegisterDocument(BaseModel):
    """The subset of a Federal Register document shown to the user."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    title: str = ""
    publication_date: str = ""
    document_number: str = ""
    html_url: str | None = None
    type: str | None = None


class FederalRegisterDocumentsView(View):
    kind: Literal["federal_register_documents"] = "federal_register_documents"
    documents: list[FederalRegisterDocument] = Field(default_factory=list)


class FredChartSkeletonView(View):
    kind: Literal["fred_chart_skeleton"] = "fred_chart_skeleton"


class FredObservation(BaseModel):
    """One FRED observation. FRED reports missing values as '.'."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    date: str
    value: str
    realtime_start: str | None = None
    realtime_end: str | None = None

    @property
    def numeric_value(self) -> float | None:
        try:
            return float(self.value)
        except ValueError:
            return None


class FredChartView(View):
    """Time-series chart for one FRED series.

    Derived figures mirror what the chart header shows: the latest value
    and its percent change from the previous observation.
    """

    kind: Literal["fred_chart"] = "fred_chart"
    indicator: str
    observations: list[FredObservation] = Field(default_factory=list)

    def _numeric(self) -> list[tuple[str, float]]:
        return [
            (obs.date, obs.numeric_value)
            for obs in self.observations
            if obs.numeric_value is not None
        ]

    @property
    def values(self) -> list[float]:
        return [value for _, value in self._numeric()]

    @property
    def current_value(self) -> float | None:
        values = self.values
        return values[-1] if values else None

    @property
    def previous_value(self) -> float | None:
        values = self.values
        if not values:
            return None
        return values[-2] if len(values) > 1 else values[-1]

    @property
    def percent_change(self) -> float | None:
        current, previous = self.current_value, self.previous_value
        if current is None or previous is None or previous == 0:
            return None
        return (current - previous) / previous * 100

    @property
    def date_range(self) -> tuple[date, date] | None:
        points = self._numeric()
        if not points:
            return None
        return date.fromisoformat(points[0][0]), date.fromisoformat(points[-1][0])


class SearchResultsSkeletonView(View):
    kind: Literal["search_results_skeleton"] = "search_results_skeleton"


class SearchResultItem(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    title: str = ""
    link: str = ""
    displayLink: str = ""
    snippet: str = ""


class SearchResultsView(View):
    kind: Literal["search_results"] = "search_results"
    items: list[SearchResultItem] = Field(default_factory=list)
    total_results: str | None = None
