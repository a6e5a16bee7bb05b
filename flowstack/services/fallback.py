"""Fallback Orchestrator - ordered multi-model retry policy."""

import logging
from typing import List, Optional, Sequence

from flowstack.integrations.groq import GroqClient
from flowstack.models import (
    ChatMessage,
    Decision,
    ErrorCode,
    FallbackAttempt,
    FallbackResult,
    GenerationOutcome,
    GenerationRequest,
)

logger = logging.getLogger(__name__)

MIN_ACCEPTABLE_LENGTH = 200

RETRYABLE_STATUSES = frozenset({429, 500, 502, 503, 504})


def is_retryable(status: int, code: Optional[str]) -> bool:
    """Whether a failed attempt should advance to the next model."""
    if status in RETRYABLE_STATUSES:
        return True
    return code == ErrorCode.RATE_LIMIT_EXCEEDED.value


def decide(
    outcome: GenerationOutcome,
    min_content_length: int = MIN_ACCEPTABLE_LENGTH
) -> Decision:
    """
    Classify one attempt.

    An ok response shorter than `min_content_length` is not accepted; it
    only advances to the next model if its status is itself retryable.
    """
    if outcome.ok and len(outcome.content) >= min_content_length:
        return Decision.ACCEPT
    if is_retryable(outcome.http_status, outcome.error_code):
        return Decision.RETRY
    return Decision.FAIL


class FallbackOrchestrator:
    """
    Drives an ordered model list through the model client.

    Stops at the first acceptable response or the first non-retryable
    failure; otherwise exhausts the list.
    """

    def __init__(self, client: GroqClient):
        self.client = client

    async def run(
        self,
        models: Sequence[str],
        messages: List[ChatMessage],
        max_tokens: int,
        temperature: float,
        timeout_ms: int,
        min_content_length: int = MIN_ACCEPTABLE_LENGTH
    ) -> FallbackResult:
        """
        Try each model in order.

        Args:
            models: Model identifiers in priority order (at least one)
            messages: Prompt messages shared by every attempt
            max_tokens: Completion token budget
            temperature: Sampling temperature
            timeout_ms: Per-call wall-clock timeout
            min_content_length: Shortest content accepted as success

        Returns:
            FallbackResult with the full audit trail
        """
        if not models:
            raise ValueError("At least one model is required")

        attempts: List[FallbackAttempt] = []

        for model in models:
            request = GenerationRequest(
                model=model,
                messages=messages,
                max_tokens=max_tokens,
                temperature=temperature,
                timeout_ms=timeout_ms,
            )
            outcome = await self.client.complete(request)

            attempts.append(FallbackAttempt(
                model=model,
                status=outcome.http_status,
                code=outcome.error_code
            ))

            decision = decide(outcome, min_content_length)
            logger.info(
                f"Model {model}: status={outcome.http_status} "
                f"chars={len(outcome.content)} -> {decision.value}"
            )

            if decision is Decision.ACCEPT:
                return FallbackResult(
                    ok=True,
                    model=model,
                    content=outcome.content,
                    attempts=attempts,
                    raw_response=outcome.raw_response,
                )

            if decision is Decision.FAIL:
                return FallbackResult(
                    ok=False,
                    model=model,
                    content=outcome.content,
                    attempts=attempts,
                    error=outcome.error,
                    raw_response=outcome.raw_response,
                )

        logger.warning(f"All {len(models)} models exhausted")
        return FallbackResult(
            ok=False,
            model=models[-1],
            content="",
            attempts=attempts,
        )
