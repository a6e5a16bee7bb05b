"""Models package - All Pydantic models organized by domain."""

from flowstack.models.enums import ErrorCode, Decision, SectionName
from flowstack.models.generation import (
    ChatMessage,
    GenerationRequest,
    ProviderError,
    GenerationOutcome,
    FallbackAttempt,
    FallbackResult,
    dump_attempts,
)
from flowstack.models.proposal import (
    IngestFields,
    CalculatedMetrics,
    ProposalRequest,
    ModelsUsed,
    ProposalDebug,
    ProposalResult,
)
from flowstack.models.lead import ForwardResult

__all__ = [
    # Enums
    "ErrorCode",
    "Decision",
    "SectionName",
    # Generation models
    "ChatMessage",
    "GenerationRequest",
    "ProviderError",
    "GenerationOutcome",
    "FallbackAttempt",
    "FallbackResult",
    "dump_attempts",
    # Proposal models
    "IngestFields",
    "CalculatedMetrics",
    "ProposalRequest",
    "ModelsUsed",
    "ProposalDebug",
    "ProposalResult",
    # Lead models
    "ForwardResult",
]
