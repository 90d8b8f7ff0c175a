from typing import Any

import httpx

from ..config import FRED_OBSERVATIONS_URL
from ..ui.views import FredChartSkeletonView, FredChartView, View
from .base import ExternalFunction
from .models import FredObservationParams, FunctionKind, FunctionParameters

# Series the model is told about; any valid FRED id is accepted
KNOWN_SERIES = {
    "UNRATE": "unemployment rate",
    "GDPC1": "real GDP",
    "A939RX0Q048SBEA": "real GDP per capita",
    "RSAHORUSQ156S": "homeownership rate in the US",
    "TMBACBW027SBOG": "Mortgage-Backed Securities (MBS)",
    "OBMMIFHA30YF": "FHA Mortgage Index",
    "BOAAAHORUSQ156N": "Black homeownership rate in the US",
    "RRVRUSQ156N": "rental vacancy rate",
    "CPILFESL": "inflation",
    "MORTGAGE30US": "30-year mortgage rate",
}


def _describe() -> str:
    lines = [
        "Fetches data from the FRED API based on the provided series identifier. "
        "Available series identifiers include:"
    ]
    for i, (series_id, label) in enumerate(KNOWN_SERIES.items(), 1):
        lines.append(f"  {i}. '{series_id}' for the {label}.")
    return "\n".join(lines)


class FredSeriesObservations(ExternalFunction):
    """Economic time-series observations from FRED."""

    kind = FunctionKind.GET_FRED_DATA
    description = _describe()
    parameters_model = FredObservationParams
    endpoint = FRED_OBSERVATIONS_URL

    def __init__(self, api_key: str | None = None, client: httpx.AsyncClient | None = None) -> None:
        super().__init__(client)
        self._api_key = api_key

    def credentials(self) -> dict[str, str]:
        return {"api_key": self._api_key} if self._api_key else {}

    def skeleton_view(self) -> View:
        return FredChartSkeletonView()

    def result_view(self, params: FunctionParameters, payload: Any) -> View:
        observations = payload.get("observations") if isinstance(payload, dict) else None
        return FredChartView(
            indicator=params.series_id,
            observations=observations or [],
        )
