"""Integrations module - External service connectors."""

from flowstack.integrations.groq import GroqClient
from flowstack.integrations.webhook import (
    LeadWebhookService,
    WebhookNotConfigured,
    lead_webhook_service,
)

__all__ = [
    "GroqClient",
    "LeadWebhookService",
    "WebhookNotConfigured",
    "lead_webhook_service",
]
