"""Base class for externally backed functions the model may call."""

import json
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, ClassVar

import httpx
from pydantic import ValidationError

from ..config import HTTP_TIMEOUT
from ..errors import ExternalAPIError, SchemaValidationError
from ..ui.views import View
from .models import FunctionKind, FunctionParameters, FunctionResult

DebugCallback = Callable[[str, str, str], None]


class ExternalFunction(ABC):
    """A named, schema-validated action backed by one HTTP GET endpoint.

    Subclasses declare the function kind, description, parameter model and
    endpoint, and decide how loading and result states are shown.
    """

    kind: ClassVar[FunctionKind]
    description: ClassVar[str]
    parameters_model: ClassVar[type[FunctionParameters]]
    endpoint: ClassVar[str]

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        """Initialize the function.

        Args:
            client: Shared HTTP client. When omitted the function owns a
                private client and closes it in close().
        """
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=HTTP_TIMEOUT)
        self._debug_callback: DebugCallback | None = None

    def set_debug_callback(self, callback: DebugCallback | None) -> None:
        """Set debug callback for logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, self.name, message)

    @property
    def name(self) -> str:
        return self.kind.value

    @property
    def parameters_schema(self) -> dict[str, Any]:
        """JSON schema of the parameters, keyed by wire names."""
        return self.parameters_model.model_json_schema(by_alias=True)

    def to_llm_spec(self) -> dict[str, Any]:
        """Function declaration in the shape the completion API expects."""
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters_schema,
        }

    def validate(self, arguments: str | dict[str, Any] | None) -> FunctionParameters:
        """Parse and validate model-proposed arguments.

        Args:
            arguments: Raw JSON string as streamed by the model, or a dict

        Raises:
            SchemaValidationError: If the JSON is malformed or violates the schema
        """
        if arguments is None or arguments == "":
            arguments = {}
        if isinstance(arguments, str):
            try:
                arguments = json.loads(arguments)
            except json.JSONDecodeError as e:
                raise SchemaValidationError(self.name, f"Arguments are not valid JSON: {e}") from e
        if not isinstance(arguments, dict):
            raise SchemaValidationError(self.name, "Arguments must be a JSON object")

        try:
            return self.parameters_model.model_validate(arguments)
        except ValidationError as e:
            raise SchemaValidationError(
                self.name,
                e.errors(include_url=False, include_context=False),
            ) from e

    def build_query(self, params: FunctionParameters) -> dict[str, Any]:
        """Serialize parameters to query-string values.

        Unset fields are dropped; list values become repeated keys.
        """
        return params.model_dump(by_alias=True, exclude_none=True, mode="json")

    def credentials(self) -> dict[str, str]:
        """Query parameters carrying secrets. Never logged."""
        return {}

    async def invoke(self, params: FunctionParameters) -> FunctionResult:
        """Perform a single GET against the endpoint.

        No retries and no caching: each call is sent exactly once.

        Raises:
            ExternalAPIError: On transport failure, non-2xx status or invalid JSON
        """
        query = self.build_query(params)
        self._debug("info", f"GET {self.endpoint} {query}")

        try:
            response = await self._client.get(
                self.endpoint,
                params={**query, **self.credentials()},
            )
        except httpx.HTTPError as e:
            raise ExternalAPIError(self.name, f"Request failed: {e}") from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if response.is_error:
            raise ExternalAPIError(
                self.name,
                f"HTTP {response.status_code} from {self.endpoint}",
                status_code=response.status_code,
                payload=payload if payload is not None else response.text[:1000],
            )
        if payload is None:
            raise ExternalAPIError(
                self.name,
                "Response was not valid JSON",
                status_code=response.status_code,
            )

        self._debug("debug", f"HTTP {response.status_code}, {len(response.content)} bytes")
        return FunctionResult(name=self.name, payload=payload)

    @abstractmethod
    def skeleton_view(self) -> View:
        """View shown while the call is in flight."""
        pass

    @abstractmethod
    def result_view(self, params: FunctionParameters, payload: Any) -> View:
        """View shown once the call returned."""
        pass

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
