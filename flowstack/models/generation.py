"""Generation models - Provider requests, outcomes and fallback audit trail."""

from typing import Optional, List, Any, Literal
from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    """A single chat-completions message."""
    model_config = ConfigDict(frozen=True)

    role: Literal["system", "user"] = Field(..., description="Message role")
    content: str = Field(..., description="Message text")


class GenerationRequest(BaseModel):
    """One provider call: model, prompts and generation parameters."""
    model_config = ConfigDict(frozen=True)

    model: str = Field(..., min_length=1, description="Provider model identifier")
    messages: List[ChatMessage] = Field(..., min_length=1, description="Ordered prompt messages")
    max_tokens: int = Field(..., gt=0, description="Completion token budget")
    temperature: float = Field(..., ge=0.0, le=2.0, description="Sampling temperature")
    timeout_ms: int = Field(..., gt=0, description="Wall-clock timeout for the call")

    def to_payload(self) -> dict:
        """Provider JSON body."""
        return {
            "model": self.model,
            "messages": [message.model_dump() for message in self.messages],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }


class ProviderError(BaseModel):
    """Error envelope as reported by the provider or synthesized locally."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    message: Optional[str] = Field(None, description="Human readable error message")
    type: Optional[str] = Field(None, description="Provider error type")
    code: Optional[str] = Field(None, description="Machine-readable error code")


class GenerationOutcome(BaseModel):
    """Classified result of a single model client call."""
    model_config = ConfigDict(frozen=True)

    ok: bool = Field(..., description="Provider returned 2xx")
    http_status: int = Field(..., description="HTTP status (synthesized for local failures)")
    error: Optional[ProviderError] = Field(None, description="Error envelope, if any")
    content: str = Field("", description="Trimmed generated text")
    raw_response: Optional[Any] = Field(None, description="Parsed provider body")

    @property
    def error_code(self) -> Optional[str]:
        return self.error.code if self.error else None


class FallbackAttempt(BaseModel):
    """Audit entry for one model tried during a fallback run."""
    model: str
    status: int
    code: Optional[str] = None


def dump_attempts(attempts: List[FallbackAttempt]) -> List[dict]:
    """Audit trail as plain dicts for debug output, omitting missing codes."""
    return [attempt.model_dump(exclude_none=True) for attempt in attempts]


class FallbackResult(BaseModel):
    """Aggregated result of an ordered multi-model run."""
    ok: bool = Field(..., description="An acceptable response was produced")
    model: str = Field(..., description="Last model tried")
    content: str = Field("", description="Generated text of the last attempt")
    attempts: List[FallbackAttempt] = Field(
        default_factory=list,
        description="Every model tried, in trial order"
    )
    error: Optional[ProviderError] = Field(None, description="Last error, None on exhaustion")
    raw_response: Optional[Any] = Field(None, description="Provider body of the last attempt")

    def tried(self) -> List[dict]:
        return dump_attempts(self.attempts)
