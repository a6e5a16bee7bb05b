"""n8n webhook integration for lead export."""

import logging
from typing import Optional, Any

import httpx

from flowstack.core.config import Settings, get_settings
from flowstack.models import ForwardResult

logger = logging.getLogger(__name__)


class WebhookNotConfigured(Exception):
    """Raised when the n8n webhook URL or secret is missing."""


class LeadWebhookService:
    """
    Service forwarding captured leads to the n8n automation webhook.

    The request body is passed through untouched; authentication is a
    shared secret in the `x-flowstack-secret` header.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """Initialize service; settings are loaded lazily when not given."""
        self._settings = settings
        self._transport = transport

    @property
    def settings(self):
        """Lazy load settings."""
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def is_configured(self) -> bool:
        return bool(self.settings.N8N_WEBHOOK_URL and self.settings.N8N_WEBHOOK_SECRET)

    async def forward_lead(self, body: Any) -> ForwardResult:
        """
        POST the lead payload to n8n.

        Args:
            body: JSON-serializable lead payload

        Returns:
            ForwardResult with the webhook status and response text

        Raises:
            WebhookNotConfigured: URL or secret missing
            httpx.HTTPError: network failure
        """
        if not self.is_configured:
            raise WebhookNotConfigured("Missing N8N_WEBHOOK_URL or N8N_WEBHOOK_SECRET")

        headers = {
            "Content-Type": "application/json",
            "x-flowstack-secret": self.settings.N8N_WEBHOOK_SECRET,
        }

        logger.info(f"Forwarding lead to n8n: {self.settings.N8N_WEBHOOK_URL}")

        async with httpx.AsyncClient(
            timeout=self.settings.WEBHOOK_TIMEOUT_SECONDS,
            transport=self._transport
        ) as client:
            response = await client.post(
                self.settings.N8N_WEBHOOK_URL,
                json=body if body is not None else {},
                headers=headers
            )

        logger.info(f"n8n response status: {response.status_code}")

        if not response.is_success:
            logger.error(f"n8n webhook error: {response.status_code} - {response.text}")

        return ForwardResult(
            ok=response.is_success,
            status_code=response.status_code,
            body=response.text,
            content_type=response.headers.get("content-type", "text/plain")
        )


# Singleton instance
lead_webhook_service = LeadWebhookService()
