"""Completion dispatcher: one streaming request, demultiplexed."""

from .dispatcher import CompletionDispatcher
from .models import DispatcherState, FunctionCallEvent, TextDelta

__all__ = [
    "CompletionDispatcher",
    "DispatcherState",
    "FunctionCallEvent",
    "TextDelta",
]
