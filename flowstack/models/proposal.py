"""Proposal-related models - Inbound lead payload and pipeline results."""

import math
from typing import Optional, List, Dict, Any, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

from flowstack.models.generation import FallbackAttempt

Number = Union[int, float]


def _to_number(value: Any) -> Optional[Number]:
    """Coerce loosely-typed form values to a number, defaulting to 0."""
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return int(number) if number.is_integer() else number


class IngestFields(BaseModel):
    """Contact and business fields captured by the ingest form."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    agency_name: Optional[str] = Field(None, alias="agencyName", description="Agency or company name")
    niche: Optional[str] = Field(None, description="Sector niche")
    contact_email: Optional[str] = Field(None, alias="contactEmail", description="Contact email")
    bottleneck: Optional[str] = Field(None, description="Primary bottleneck")

    @field_validator("agency_name", "niche", "contact_email", "bottleneck", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Optional[str]:
        if value is None or isinstance(value, str):
            return value
        return str(value)


class CalculatedMetrics(BaseModel):
    """Leakage figures computed by the calculator step."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    monthly_leakage: Optional[Number] = Field(None, alias="monthlyLeakage", description="Monthly revenue leakage")
    annual_leakage: Optional[Number] = Field(None, alias="annualLeakage", description="Annual revenue leakage")

    @field_validator("monthly_leakage", "annual_leakage", mode="before")
    @classmethod
    def _numeric(cls, value: Any) -> Optional[Number]:
        return _to_number(value)

    @property
    def monthly(self) -> Number:
        return self.monthly_leakage or 0

    @property
    def annual(self) -> Number:
        return self.annual_leakage or 0


class ProposalRequest(BaseModel):
    """The `payload` object posted by the proposal view."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    request_id: Optional[str] = Field(None, alias="requestId", description="Caller supplied request ID")
    ingest: IngestFields = Field(default_factory=IngestFields)
    calculated_metrics: CalculatedMetrics = Field(
        default_factory=CalculatedMetrics,
        alias="calculatedMetrics"
    )

    @field_validator("request_id", mode="before")
    @classmethod
    def _request_id(cls, value: Any) -> Optional[str]:
        if value is None or value == "":
            return None
        return str(value)

    @field_validator("ingest", "calculated_metrics", mode="before")
    @classmethod
    def _mapping_or_empty(cls, value: Any) -> Any:
        return value if isinstance(value, (dict, BaseModel)) else {}


class ModelsUsed(BaseModel):
    """Model chosen by each pass."""
    pass1: Optional[str] = None
    pass2: Optional[str] = None


class ProposalDebug(BaseModel):
    """Debug metadata returned alongside every proposal."""
    request_id: str = Field(..., description="Request correlation ID")
    models_used: ModelsUsed = Field(default_factory=ModelsUsed)
    tried_pass1: List[FallbackAttempt] = Field(default_factory=list)
    tried_pass2: List[FallbackAttempt] = Field(default_factory=list)


class ProposalResult(BaseModel):
    """Outcome of the two-pass proposal pipeline."""
    success: bool = Field(..., description="Pass 1 produced an acceptable document")
    markdown: str = Field(..., description="Final proposal or failure placeholder")
    ingest: Dict[str, Any] = Field(default_factory=dict, description="Echo of ingest fields")
    metrics: Dict[str, Any] = Field(default_factory=dict, description="Echo of calculated metrics")
    debug: ProposalDebug
    error: Optional[str] = Field(None, description="Error identifier on failure")
    message: Optional[str] = Field(None, description="Upstream failure message")
    retry_after_seconds: Optional[int] = Field(None, description="Provider retry hint")
