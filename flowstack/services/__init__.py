"""Services module - Proposal generation orchestration."""

from flowstack.services.fallback import FallbackOrchestrator, decide, is_retryable
from flowstack.services.sections import extract_sections, merge_sections
from flowstack.services.proposal_pipeline import ProposalPipeline, get_proposal_pipeline

__all__ = [
    "FallbackOrchestrator",
    "decide",
    "is_retryable",
    "extract_sections",
    "merge_sections",
    "ProposalPipeline",
    "get_proposal_pipeline",
]
