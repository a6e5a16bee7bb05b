"""Groq integration - single chat-completions call per model attempt."""

import asyncio
import logging
from typing import Optional, Any

import httpx

from flowstack.core.config import ProviderConfig
from flowstack.models import (
    ErrorCode,
    GenerationOutcome,
    GenerationRequest,
    ProviderError,
)

logger = logging.getLogger(__name__)


class GroqClient:
    """
    Client for an OpenAI-compatible chat-completions endpoint.

    Issues exactly one HTTP call per `complete()` and never raises for
    provider or network conditions: every result is returned as a
    GenerationOutcome for the fallback orchestrator to classify.
    """

    def __init__(
        self,
        config: ProviderConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize client.

        Args:
            config: Provider credentials and endpoint
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.config = config
        self._transport = transport

    async def complete(self, request: GenerationRequest) -> GenerationOutcome:
        """
        Run one completion request within its wall-clock timeout.

        Args:
            request: Model, messages and generation parameters

        Returns:
            GenerationOutcome (synthesized 500 when unconfigured, 504 on
            network failure or timeout)
        """
        if not self.config.is_configured:
            logger.error("Missing GROQ_API_KEY - skipping provider call")
            return GenerationOutcome(
                ok=False,
                http_status=500,
                error=ProviderError(
                    message="Missing GROQ_API_KEY on server",
                    code=ErrorCode.SERVER_MISCONFIG.value
                ),
            )

        logger.debug(f"Calling {request.model} (timeout={request.timeout_ms}ms)")

        try:
            return await asyncio.wait_for(
                self._post(request),
                timeout=request.timeout_ms / 1000
            )
        except asyncio.TimeoutError:
            logger.error(f"Provider timeout for {request.model} after {request.timeout_ms}ms")
            return self._fetch_failed("Timeout/Network error")
        except Exception as e:
            logger.error(f"Provider call failed for {request.model}: {e}")
            return self._fetch_failed(str(e) or "Timeout/Network error")

    @staticmethod
    def _fetch_failed(message: str) -> GenerationOutcome:
        return GenerationOutcome(
            ok=False,
            http_status=504,
            error=ProviderError(
                message=message,
                code=ErrorCode.FETCH_FAILED.value
            ),
        )

    async def _post(self, request: GenerationRequest) -> GenerationOutcome:
        headers = {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json"
        }

        async with httpx.AsyncClient(timeout=None, transport=self._transport) as client:
            response = await client.post(
                self.config.api_url,
                json=request.to_payload(),
                headers=headers
            )

        raw = self._parse_body(response)
        error = self._parse_error(raw)
        ok = response.is_success

        if not ok or error:
            logger.warning(
                f"Provider error for {request.model}: {response.status_code} - "
                f"{error.code if error else 'no error envelope'}"
            )

        return GenerationOutcome(
            ok=ok,
            http_status=response.status_code,
            error=error,
            content=self._extract_content(raw),
            raw_response=raw,
        )

    @staticmethod
    def _parse_body(response: httpx.Response) -> Optional[Any]:
        try:
            return response.json()
        except ValueError:
            return None

    @staticmethod
    def _parse_error(raw: Optional[Any]) -> Optional[ProviderError]:
        if not isinstance(raw, dict) or not raw.get("error"):
            return None
        error = raw["error"]
        if not isinstance(error, dict):
            return ProviderError(message=str(error))

        fields = {}
        for key in ("message", "type", "code"):
            value = error.get(key)
            if value is not None:
                fields[key] = str(value)
        return ProviderError(**fields)

    @staticmethod
    def _extract_content(raw: Optional[Any]) -> str:
        """Text of the first choice: message.content, else legacy `text`."""
        if not isinstance(raw, dict):
            return ""
        choices = raw.get("choices")
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            return ""
        choice = choices[0]
        message = choice.get("message")
        content = message.get("content") if isinstance(message, dict) else None
        if content is None:
            content = choice.get("text")
        return str(content or "").strip()
