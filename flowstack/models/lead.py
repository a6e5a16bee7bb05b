"""Lead export models."""

from pydantic import BaseModel, Field


class ForwardResult(BaseModel):
    """Result of forwarding a lead to the automation webhook."""
    ok: bool = Field(..., description="Webhook answered with 2xx")
    status_code: int = Field(..., description="Webhook HTTP status")
    body: str = Field("", description="Webhook response text")
    content_type: str = Field("text/plain", description="Webhook response media type")
