"""UI state container for streamed replies.

Exposes the StreamableHandle contract and the view models it carries.
"""

from .handle import HandleState, StreamableHandle
from .views import (
    ErrorView,
    FederalRegisterDocument,
    FederalRegisterDocumentsView,
    FederalRegisterSkeletonView,
    FredChartSkeletonView,
    FredChartView,
    FredObservation,
    MarkdownView,
    SearchResultItem,
    SearchResultsSkeletonView,
    SearchResultsView,
    SpinnerView,
    View,
)

__all__ = [
    "HandleState",
    "StreamableHandle",
    "View",
    "SpinnerView",
    "MarkdownView",
    "ErrorView",
    "FederalRegisterDocument",
    "FederalRegisterDocumentsView",
    "FederalRegisterSkeletonView",
    "FredChartSkeletonView",
    "FredChartView",
    "FredObservation",
    "SearchResultItem",
    "SearchResultsSkeletonView",
    "SearchResultsView",
]
