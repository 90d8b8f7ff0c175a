from typing import Any

from ..config import FEDERAL_REGISTER_URL
from ..ui.views import FederalRegisterDocumentsView, FederalRegisterSkeletonView, View
from .base import ExternalFunction
from .models import FederalRegisterSearchParams, FunctionKind, FunctionParameters


class FederalRegisterSearch(ExternalFunction):
    """Search Federal Register documents published since 1994."""

    kind = FunctionKind.SEARCH_FEDERAL_REGISTER
    description = (
        "Search all Federal Register documents published since 1994. "
        "Specify agencies like this 'consumer-financial-protection-bureau' "
        "or 'defense-department' or 'energy-department'."
    )
    parameters_model = FederalRegisterSearchParams
    endpoint = FEDERAL_REGISTER_URL

    def skeleton_view(self) -> View:
        return FederalRegisterSkeletonView()

    def result_view(self, params: FunctionParameters, payload: Any) -> View:
        results = payload.get("results") if isinstance(payload, dict) else None
        return FederalRegisterDocumentsView(documents=results or [])
