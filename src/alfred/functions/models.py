"""Data structures for the function registry.

Each declared function has a pydantic parameter model. The model is the
single source of truth: its JSON schema is what the LLM sees, and its
validation is what every model-proposed call must pass before it is
invoked.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


class FunctionKind(str, Enum):
    """Closed set of functions the model may call."""

    SEARCH_FEDERAL_REGISTER = "searchFederalRegisterDocuments"
    GET_FRED_DATA = "getFredData"
    GOOGLE_CSE_SEARCH = "googleCSESearch"


class FunctionParameters(BaseModel):
    """Base for parameter models: unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class FederalRegisterSearchParams(FunctionParameters):
    """Query parameters for the Federal Register documents search."""

    format: Literal["json"] = "json"
    field_list: list[str] | None = Field(default=None, alias="fields[]")
    per_page: int = Field(default=20, ge=1, le=1000)
    page: int | None = Field(default=None, ge=1)
    order: Literal["relevance", "newest", "oldest", "executive_order_number"] | None = None

    term: str | None = Field(default=None, alias="conditions[term]")
    publication_date_is: str | None = Field(
        default=None, alias="conditions[publication_date][is]", pattern=_DATE_PATTERN
    )
    publication_date_year: str | None = Field(default=None, alias="conditions[publication_date][year]")
    publication_date_gte: str | None = Field(
        default=None, alias="conditions[publication_date][gte]", pattern=_DATE_PATTERN
    )
    publication_date_lte: str | None = Field(
        default=None, alias="conditions[publication_date][lte]", pattern=_DATE_PATTERN
    )
    effective_date_is: str | None = Field(
        default=None, alias="conditions[effective_date][is]", pattern=_DATE_PATTERN
    )
    effective_date_year: str | None = Field(default=None, alias="conditions[effective_date][year]")
    effective_date_gte: str | None = Field(
        default=None, alias="conditions[effective_date][gte]", pattern=_DATE_PATTERN
    )
    effective_date_lte: str | None = Field(
        default=None, alias="conditions[effective_date][lte]", pattern=_DATE_PATTERN
    )
    agencies: list[str] | None = Field(default=None, alias="conditions[agencies][]")
    type: list[str] | None = Field(default=None, alias="conditions[type][]")
    presidential_document_type: list[str] | None = Field(
        default=None, alias="conditions[presidential_document_type][]"
    )
    president: list[str] | None = Field(default=None, alias="conditions[president][]")
    docket_id: str | None = Field(default=None, alias="conditions[docket_id]")
    regulation_id_number: str | None = Field(default=None, alias="conditions[regulation_id_number]")
    sections: list[str] | None = Field(default=None, alias="conditions[sections][]")
    topics: list[str] | None = Field(default=None, alias="conditions[topics][]")
    significant: Literal["0", "1"] | None = Field(default=None, alias="conditions[significant]")
    cfr_title: int | None = Field(default=None, alias="conditions[cfr][title]")
    cfr_part: int | None = Field(default=None, alias="conditions[cfr][part]")
    near_location: str | None = Field(default=None, alias="conditions[near][location]")
    near_within: int | None = Field(default=None, ge=1, alias="conditions[near][within]")


class FredObservationParams(FunctionParameters):
    """Query parameters for FRED series observations.

    The API key is not a parameter; it is injected from configuration
    when the request is sent.
    """

    series_id: str = Field(min_length=1)
    observation_start: str = Field(pattern=_DATE_PATTERN)
    observation_end: str = Field(pattern=_DATE_PATTERN)
    file_type: Literal["json"] = "json"
    realtime_start: str | None = Field(default=None, pattern=_DATE_PATTERN)
    realtime_end: str | None = Field(default=None, pattern=_DATE_PATTERN)
    limit: int | None = Field(default=None, ge=1, le=100000)
    offset: int | None = Field(default=None, ge=0)
    sort_order: Literal["asc", "desc"] | None = None
    units: Literal["lin", "chg", "ch1", "pch", "pc1", "pca", "cch", "cca", "log"] | None = None
    frequency: Literal[
        "d", "w", "bw", "m", "q", "sa", "a",
        "wef", "weth", "wew", "wetu", "wem", "wesu", "wesa", "bwew", "bwem",
    ] | None = None
    aggregation_method: Literal["avg", "sum", "eop"] | None = None
    output_type: Literal["1", "2", "3", "4"] | None = None
    vintage_dates: str | None = None


class GoogleCSEParams(FunctionParameters):
    """Query parameters for Google Custom Search."""

    q: str = Field(min_length=1, description="Search query string.")
    cx: str = Field(description="Custom Search engine id.")
    dateRestrict: str | None = Field(
        default=None,
        pattern=r"^[dwmy]\d+$",
        description="Restricts results to URLs based on date. Format: 'd[number]', 'w[number]', 'm[number]', 'y[number]'.",
    )
    lr: str | None = Field(
        default=None,
        description="Restricts the search to documents written in a particular language.",
    )
    cr: str | None = Field(default=None, description="Country restrict for the search results.")
    num: int = Field(default=10, ge=1, le=10, description="Number of search results to return (1-10).")
    start: int | None = Field(default=None, ge=1, description="The index of the first result to return.")
    fileType: str | None = Field(
        default=None,
        description="Restricts results to files of a specified extension.",
    )
    sort: str | None = Field(default=None, description="The sort expression to apply to the results.")


@dataclass(frozen=True)
class FunctionCallRequest:
    """A model-proposed call whose arguments already passed validation."""

    name: FunctionKind
    arguments: FunctionParameters


class FunctionResult(BaseModel):
    """JSON payload returned by (or describing the failure of) a function call."""

    name: str
    payload: Any
    error: bool = False

    def to_content(self) -> str:
        """Serialize the payload for a `function` role conversation entry."""
        return json.dumps(self.payload)
