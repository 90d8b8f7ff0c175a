from dataclasses import dataclass
from enum import Enum

from ..errors import AlfredError
from ..functions.models import FunctionCallRequest


class DispatcherState(str, Enum):
    """Lifecycle of one completion stream."""

    IDLE = "idle"
    STREAMING = "streaming"
    FINALIZING = "finalizing"
    DONE = "done"


@dataclass(frozen=True)
class TextDelta:
    """Cumulative text after one delta, or the final text when `is_final`."""

    content: str
    delta: str
    is_final: bool = False


@dataclass(frozen=True)
class FunctionCallEvent:
    """A fully specified function call.

    Exactly one of `request` (arguments validated) and `error` (unknown
    name or schema violation) is set.
    """

    name: str
    request: FunctionCallRequest | None = None
    error: AlfredError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
