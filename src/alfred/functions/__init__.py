"""Function registry: external data actions the model may call."""

from .base import ExternalFunction
from .factory import create_function_registry
from .federal_register import FederalRegisterSearch
from .fred import FredSeriesObservations
from .google_cse import GoogleCSESearch
from .models import (
    FederalRegisterSearchParams,
    FredObservationParams,
    FunctionCallRequest,
    FunctionKind,
    FunctionParameters,
    FunctionResult,
    GoogleCSEParams,
)
from .registry import FunctionRegistry

__all__ = [
    "ExternalFunction",
    "FederalRegisterSearch",
    "FredSeriesObservations",
    "GoogleCSESearch",
    "FunctionRegistry",
    "create_function_registry",
    "FunctionKind",
    "FunctionParameters",
    "FunctionCallRequest",
    "FunctionResult",
    "FederalRegisterSearchParams",
    "FredObservationParams",
    "GoogleCSEParams",
]
