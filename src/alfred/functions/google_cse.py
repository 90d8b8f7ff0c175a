from typing import Any

import httpx

from ..config import GOOGLE_CSE_URL
from ..ui.views import SearchResultsSkeletonView, SearchResultsView, View
from .base import ExternalFunction
from .models import FunctionKind, FunctionParameters, GoogleCSEParams


class GoogleCSESearch(ExternalFunction):
    """Web search through a Google Custom Search engine.

    When an engine id is configured it is always used, whatever `cx` the
    model sent; the schema description tells the model which id to pass.
    """

    kind = FunctionKind.GOOGLE_CSE_SEARCH
    description = (
        "Perform searches using Google Custom Search Engine. The search can be "
        "customized with various parameters, including date restrictions, "
        "language, and file types."
    )
    parameters_model = GoogleCSEParams
    endpoint = GOOGLE_CSE_URL

    def __init__(
        self,
        api_key: str | None = None,
        engine_id: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(client)
        self._api_key = api_key
        self._engine_id = engine_id

    @property
    def parameters_schema(self) -> dict[str, Any]:
        schema = super().parameters_schema
        if self._engine_id:
            schema["properties"]["cx"]["description"] = f"USE {self._engine_id}"
        return schema

    def build_query(self, params: FunctionParameters) -> dict[str, Any]:
        query = super().build_query(params)
        if self._engine_id:
            query["cx"] = self._engine_id
        return query

    def credentials(self) -> dict[str, str]:
        return {"key": self._api_key} if self._api_key else {}

    def skeleton_view(self) -> View:
        return SearchResultsSkeletonView()

    def result_view(self, params: FunctionParameters, payload: Any) -> View:
        if not isinstance(payload, dict):
            return SearchResultsView()
        info = payload.get("searchInformation") or {}
        return SearchResultsView(
            items=payload.get("items") or [],
            total_results=info.get("formattedTotalResults"),
        )
