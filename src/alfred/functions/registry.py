"""Lookup table from function name to its validator and implementation."""

from collections.abc import Iterable
from typing import Any

import httpx

from ..errors import UnknownFunctionError
from .base import DebugCallback, ExternalFunction
from .models import FunctionCallRequest, FunctionKind, FunctionResult


class FunctionRegistry:
    """Closed registry of the functions declared to the model.

    Hidden design decisions:
    - Which functions exist and how names map to implementations
    - Whether functions share one HTTP client
    """

    def __init__(
        self,
        functions: Iterable[ExternalFunction],
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the registry.

        Args:
            functions: Functions to declare, in declaration order
            client: HTTP client shared by the functions and owned by the
                registry; closed in close()
        """
        self._client = client
        self._functions: dict[FunctionKind, ExternalFunction] = {}
        for function in functions:
            if function.kind in self._functions:
                raise ValueError(f"Function registered twice: {function.name}")
            self._functions[function.kind] = function

    def set_debug_callback(self, callback: DebugCallback | None) -> None:
        for function in self._functions.values():
            function.set_debug_callback(callback)

    def __contains__(self, name: object) -> bool:
        try:
            return FunctionKind(name) in self._functions
        except ValueError:
            return False

    def __iter__(self):
        return iter(self._functions.values())

    def __len__(self) -> int:
        return len(self._functions)

    def get(self, name: str | FunctionKind) -> ExternalFunction:
        """Look up a function by the name the model used.

        Raises:
            UnknownFunctionError: If no function with that name is declared
        """
        try:
            return self._functions[FunctionKind(name)]
        except (ValueError, KeyError):
            raise UnknownFunctionError(str(name)) from None

    def specs(self) -> list[dict[str, Any]]:
        """Declarations for every registered function, in registration order."""
        return [function.to_llm_spec() for function in self._functions.values()]

    def validate(self, name: str, arguments: str | dict[str, Any] | None) -> FunctionCallRequest:
        """Resolve a name and validate its arguments into a call request.

        Raises:
            UnknownFunctionError: If the name is not declared
            SchemaValidationError: If the arguments violate the schema
        """
        function = self.get(name)
        return FunctionCallRequest(name=function.kind, arguments=function.validate(arguments))

    async def invoke(self, request: FunctionCallRequest) -> FunctionResult:
        return await self.get(request.name).invoke(request.arguments)

    async def close(self) -> None:
        for function in self._functions.values():
            await function.close()
        if self._client is not None:
            await self._client.aclose()
