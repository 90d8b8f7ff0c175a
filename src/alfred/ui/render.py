"""Terminal rendering of views.

Hides how each view looks in a terminal. Only reads views; never touches
the handle that holds them.
"""

from rich.console import Group, RenderableType
from rich.markdown import Markdown
from rich.panel import Panel
from rich.spinner import Spinner
from rich.table import Table
from rich.text import Text

from ..config import MAX_DOCUMENTS_DISPLAYED
from .views import (
    ErrorView,
    FederalRegisterDocumentsView,
    FederalRegisterSkeletonView,
    FredChartSkeletonView,
    FredChartView,
    MarkdownView,
    SearchResultsSkeletonView,
    SearchResultsView,
    SpinnerView,
    View,
)

_SPARK_BLOCKS = "▁▂▃▄▅▆▇█"


def sparkline(values: list[float], width: int = 60) -> str:
    """Render values as a one-line block chart, resampled to `width` points."""
    if not values:
        return ""
    if len(values) > width:
        step = len(values) / width
        values = [values[int(i * step)] for i in range(width)]

    low, high = min(values), max(values)
    span = high - low
    if span == 0:
        return _SPARK_BLOCKS[len(_SPARK_BLOCKS) // 2] * len(values)

    last = len(_SPARK_BLOCKS) - 1
    return "".join(_SPARK_BLOCKS[round((v - low) / span * last)] for v in values)


def _loading(label: str) -> RenderableType:
    return Panel(Spinner("dots", text=Text(label, style="dim")), border_style="dim")


def _render_fred_chart(view: FredChartView) -> RenderableType:
    if view.current_value is None:
        return Panel(Text("No observations returned.", style="dim"), title=view.indicator)

    header = Text()
    header.append(f"{view.indicator}  ", style="bold")
    header.append(f"{view.current_value:.2f}", style="bold")
    change = view.percent_change
    if change is not None:
        arrow, style = ("▲", "green") if change >= 0 else ("▼", "red")
        header.append(f"  {arrow} {abs(change):.2f}%", style=style)

    parts: list[RenderableType] = [header]
    date_range = view.date_range
    if date_range is not None:
        start, end = date_range
        parts.append(Text(f"{start:%b %d, %Y} - {end:%b %d, %Y}", style="dim"))
    parts.append(Text(sparkline(view.values), style="cyan"))
    return Panel(Group(*parts), border_style="cyan")


def _render_documents(view: FederalRegisterDocumentsView) -> RenderableType:
    if not view.documents:
        return Text("No Federal Register documents found.", style="dim")

    table = Table(title="Federal Register", show_lines=False)
    table.add_column("Title", style="bold")
    table.add_column("Published", style="dim")
    table.add_column("Document #")
    for doc in view.documents[:MAX_DOCUMENTS_DISPLAYED]:
        table.add_row(doc.title, doc.publication_date, doc.document_number)
    return table


def _render_search_results(view: SearchResultsView) -> RenderableType:
    if not view.items:
        return Text("No search results found.", style="dim")

    table = Table(title="Web results")
    table.add_column("Title", style="bold")
    table.add_column("Source", style="dim")
    table.add_column("Snippet")
    for item in view.items:
        table.add_row(item.title, item.displayLink, item.snippet)
    return table


def render_view(view: View) -> RenderableType:
    """Turn a view into a rich renderable."""
    if isinstance(view, SpinnerView):
        return Spinner("dots")
    if isinstance(view, MarkdownView):
        return Markdown(view.content)
    if isinstance(view, ErrorView):
        return Panel(Text(view.message), title=f"[bold red]{view.title}[/]", border_style="red")
    if isinstance(view, FederalRegisterSkeletonView):
        return _loading("Searching the Federal Register...")
    if isinstance(view, FederalRegisterDocumentsView):
        return _render_documents(view)
    if isinstance(view, FredChartSkeletonView):
        return _loading("Fetching FRED data...")
    if isinstance(view, FredChartView):
        return _render_fred_chart(view)
    if isinstance(view, SearchResultsSkeletonView):
        return _loading("Searching the web...")
    if isinstance(view, SearchResultsView):
        return _render_search_results(view)
    return Text(repr(view), style="dim")
