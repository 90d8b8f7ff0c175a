"""Error taxonomy for the chat core.

Every error that can end up in model-state knows how to describe itself
as a JSON-serializable payload, so the model can see what went wrong and
react in a follow-up turn.
"""

from typing import Any


class AlfredError(Exception):
    """Base class for all alfred errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_payload(self) -> dict[str, Any]:
        """Describe the error as a JSON-serializable dict."""
        return {"error": {"type": type(self).__name__, "message": self.message}}


class RetrievalError(AlfredError):
    """Embedding or vector-database lookup failed.

    Always recovered locally: the prompt is built without context.
    """


class SchemaValidationError(AlfredError):
    """Model-proposed function arguments violate the declared schema."""

    def __init__(
        self,
        function_name: str,
        details: list[dict[str, Any]] | str,
    ) -> None:
        self.function_name = function_name
        self.details = details
        super().__init__(f"Invalid arguments for '{function_name}'")

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["error"]["function"] = self.function_name
        payload["error"]["details"] = self.details
        return payload


class UnknownFunctionError(AlfredError):
    """The model named a function that is not declared."""

    def __init__(self, function_name: str) -> None:
        self.function_name = function_name
        super().__init__(f"Unknown function: '{function_name}'")

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["error"]["function"] = self.function_name
        return payload


class ExternalAPIError(AlfredError):
    """An external data API answered with a non-2xx status or invalid JSON."""

    def __init__(
        self,
        function_name: str,
        message: str,
        status_code: int | None = None,
        payload: Any = None,
    ) -> None:
        self.function_name = function_name
        self.status_code = status_code
        self.payload = payload
        super().__init__(message)

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["error"]["function"] = self.function_name
        payload["error"]["status_code"] = self.status_code
        if self.payload is not None:
            payload["error"]["response"] = self.payload
        return payload


class StreamError(AlfredError):
    """The completion stream failed or disconnected."""


class HandleClosedError(AlfredError):
    """A StreamableHandle was updated after it was sealed."""


class SessionBusyError(AlfredError):
    """A submission arrived while another turn was still in flight."""


class ConcurrentModificationError(AlfredError):
    """Conversation log was replaced by someone else since it was read."""

    def __init__(self, expected_version: int, actual_version: int) -> None:
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Conversation log changed: expected version {expected_version}, "
            f"found {actual_version}"
        )
