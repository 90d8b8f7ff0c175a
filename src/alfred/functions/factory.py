import httpx

from ..config import HTTP_TIMEOUT
from .federal_register import FederalRegisterSearch
from .fred import FredSeriesObservations
from .google_cse import GoogleCSESearch
from .registry import FunctionRegistry


def create_function_registry(
    fred_api_key: str | None = None,
    google_api_key: str | None = None,
    google_cse_id: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> FunctionRegistry:
    """Create the registry with all three declared functions.

    Args:
        fred_api_key: FRED API key
        google_api_key: Google Custom Search API key
        google_cse_id: Google Custom Search engine id
        client: Optional shared HTTP client owned by the caller. When
            omitted, the registry creates one with the default transport
            timeout and closes it in close().

    Returns:
        FunctionRegistry in declaration order: Federal Register, FRED, Google CSE
    """
    owned = None if client is not None else httpx.AsyncClient(timeout=HTTP_TIMEOUT)
    shared = client or owned
    return FunctionRegistry([
        FederalRegisterSearch(client=shared),
        FredSeriesObservations(api_key=fred_api_key, client=shared),
        GoogleCSESearch(api_key=google_api_key, engine_id=google_cse_id, client=shared),
    ], client=owned)
