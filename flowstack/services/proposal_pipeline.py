"""Proposal Pipeline - two-pass generation with multi-model fallback.

Pass 1 writes the full diagnostic report. Pass 2 rewrites only the Executive
Summary and Solution Architecture sections and is merged back when usable;
a Pass 2 failure never fails the request.
"""

import logging
import re
from typing import List, Optional, Union

from pydantic import BaseModel

from flowstack.core.config import Settings, get_settings
from flowstack.integrations.groq import GroqClient
from flowstack.models import (
    CalculatedMetrics,
    ChatMessage,
    FallbackResult,
    ModelsUsed,
    ProposalDebug,
    ProposalRequest,
    ProposalResult,
    SectionName,
)
from flowstack.services.fallback import FallbackOrchestrator
from flowstack.services.sections import DocumentSections, extract_sections, merge_sections

logger = logging.getLogger(__name__)

PROPOSAL_GENERATION_FAILED = "PROPOSAL_GENERATION_FAILED"

# Pass 2 output is merged only above this length
MIN_POLISH_LENGTH = 100

FAILURE_PLACEHOLDER = (
    "## Executive Summary\n"
    "- Proposal generation failed temporarily.\n"
    "\n"
    "## Next Steps\n"
    "- Retry in a few minutes.\n"
)

PASS1_SYSTEM_PROMPT = "You are a precise revenue-ops analyst."
PASS2_SYSTEM_PROMPT = "You rewrite sections while preserving facts."

_RETRY_AFTER = re.compile(r"try again in\s+(\d+)m([\d.]+)s", re.IGNORECASE)


def format_money(value: Optional[Union[int, float]]) -> str:
    """Render a positive amount as "$1,234" (up to 3 decimals), else "N/A"."""
    amount = float(value or 0)
    if amount <= 0:
        return "N/A"
    text = f"{amount:,.3f}".rstrip("0").rstrip(".")
    return f"${text}"


def extract_retry_after_seconds(message: Optional[str]) -> Optional[int]:
    """Parse "try again in 1m30.5s" style rate-limit hints into whole seconds."""
    if not message:
        return None
    match = _RETRY_AFTER.search(message)
    if not match:
        return None
    try:
        seconds = int(match.group(1)) * 60 + float(match.group(2))
    except ValueError:
        return None
    return max(0, round(seconds))


class PromptContext(BaseModel):
    """Prompt variables derived from the inbound payload."""
    agency: str
    niche: str
    bottleneck: str
    monthly: Union[int, float]
    annual: Union[int, float]

    @classmethod
    def from_request(cls, request: ProposalRequest) -> "PromptContext":
        ingest = request.ingest
        metrics: CalculatedMetrics = request.calculated_metrics
        return cls(
            agency=ingest.agency_name or "Lead",
            niche=ingest.niche or "Unknown",
            bottleneck=ingest.bottleneck or "Not provided",
            monthly=metrics.monthly,
            annual=metrics.annual,
        )


def build_pass1_messages(context: PromptContext) -> List[ChatMessage]:
    """System and user prompt for the full report."""
    prompt = f"""
Generate a concise Markdown diagnostic report.

Hard rules:
- Keep under ~900-1200 tokens.
- No filler. Bullets > paragraphs.
- MUST include these exact lines somewhere:
  Monthly Leakage: {format_money(context.monthly)}
  Annual Leakage: {format_money(context.annual)}
  Current Bottleneck: {context.bottleneck}

Use these headings (exact):
## Executive Summary
## Diagnosis
## Revenue at Risk
## SOLUTION ARCHITECTURE: “FlowStackOS 3-Module System”
## Next Steps

Context:
Company: {context.agency}
Niche: {context.niche}
""".strip()

    return [
        ChatMessage(role="system", content=PASS1_SYSTEM_PROMPT),
        ChatMessage(role="user", content=prompt),
    ]


def build_pass2_messages(sections: DocumentSections) -> List[ChatMessage]:
    """Rewrite-only prompt for the polish pass."""
    executive = sections.get(SectionName.EXECUTIVE_SUMMARY, "")
    solution = sections.get(SectionName.SOLUTION_ARCHITECTURE, "")

    prompt = f"""
Rewrite ONLY the two sections below for clarity and persuasion.
Rules:
- Do NOT change any numeric values or money amounts.
- Keep headings exactly as-is.
- Keep it concise.

Sections:
{executive}

{solution}
""".strip()

    return [
        ChatMessage(role="system", content=PASS2_SYSTEM_PROMPT),
        ChatMessage(role="user", content=prompt),
    ]


class ProposalPipeline:
    """
    Two-pass proposal generation.

    Pass 1 runs across the primary model and two fallbacks with a larger
    token budget and low temperature. Pass 2 polishes two sections across
    a second model ordering. Only a Pass 1 failure is terminal.
    """

    def __init__(
        self,
        orchestrator: FallbackOrchestrator,
        settings: Optional[Settings] = None
    ):
        self.orchestrator = orchestrator
        self.settings = settings or get_settings()

    async def generate(self, request: ProposalRequest, request_id: str) -> ProposalResult:
        """
        Produce the proposal for one lead.

        Args:
            request: Parsed inbound payload
            request_id: Correlation ID echoed in debug output

        Returns:
            ProposalResult; on Pass 1 failure it carries a placeholder
            document and a retry hint when the provider gave one
        """
        context = PromptContext.from_request(request)
        ingest_echo = {
            **request.ingest.model_dump(by_alias=True, exclude_none=True),
            "bottleneck": context.bottleneck,
        }
        metrics_echo = {
            **request.calculated_metrics.model_dump(by_alias=True, exclude_none=True),
            "monthlyLeakage": context.monthly,
            "annualLeakage": context.annual,
        }

        logger.info(f"[{request_id}] Pass 1 starting for {context.agency}")
        pass1 = await self._run_pass1(context)

        if not pass1.ok:
            message = self._failure_message(pass1)
            logger.error(f"[{request_id}] Pass 1 failed: {message}")
            return ProposalResult(
                success=False,
                markdown=FAILURE_PLACEHOLDER,
                ingest=ingest_echo,
                metrics=metrics_echo,
                debug=ProposalDebug(
                    request_id=request_id,
                    tried_pass1=pass1.attempts,
                ),
                error=PROPOSAL_GENERATION_FAILED,
                message=message,
                retry_after_seconds=extract_retry_after_seconds(message),
            )

        logger.info(f"[{request_id}] Pass 1 succeeded with {pass1.model}")

        markdown = pass1.content
        pass2 = await self._run_pass2(markdown)

        if pass2 is None:
            logger.info(f"[{request_id}] No polishable sections - Pass 2 skipped")
        elif pass2.ok and len(pass2.content) > MIN_POLISH_LENGTH:
            markdown = merge_sections(markdown, pass2.content)
            logger.info(f"[{request_id}] Pass 2 merged from {pass2.model}")
        else:
            logger.warning(f"[{request_id}] Pass 2 unusable - keeping Pass 1 document")

        return ProposalResult(
            success=True,
            markdown=markdown,
            ingest=ingest_echo,
            metrics=metrics_echo,
            debug=ProposalDebug(
                request_id=request_id,
                models_used=ModelsUsed(
                    pass1=pass1.model,
                    pass2=pass2.model if pass2 is not None and pass2.ok else None,
                ),
                tried_pass1=pass1.attempts,
                tried_pass2=pass2.attempts if pass2 is not None else [],
            ),
        )

    async def _run_pass1(self, context: PromptContext) -> FallbackResult:
        return await self.orchestrator.run(
            models=self.settings.PASS1_MODELS,
            messages=build_pass1_messages(context),
            max_tokens=self.settings.PASS1_MAX_TOKENS,
            temperature=self.settings.PASS1_TEMPERATURE,
            timeout_ms=self.settings.PASS1_TIMEOUT_MS,
        )

    async def _run_pass2(self, markdown: str) -> Optional[FallbackResult]:
        sections = extract_sections(markdown)
        if not sections:
            return None
        return await self.orchestrator.run(
            models=self.settings.PASS2_MODELS,
            messages=build_pass2_messages(sections),
            max_tokens=self.settings.PASS2_MAX_TOKENS,
            temperature=self.settings.PASS2_TEMPERATURE,
            timeout_ms=self.settings.PASS2_TIMEOUT_MS,
        )

    @staticmethod
    def _failure_message(result: FallbackResult) -> str:
        if result.error and result.error.message:
            return result.error.message
        raw = result.raw_response
        if isinstance(raw, dict) and isinstance(raw.get("error"), dict):
            message = raw["error"].get("message")
            if message:
                return str(message)
        return "Upstream failure"


def get_proposal_pipeline() -> ProposalPipeline:
    """Build a pipeline wired to the configured provider."""
    settings = get_settings()
    client = GroqClient(settings.provider)
    return ProposalPipeline(FallbackOrchestrator(client), settings)
