"""Pytest fixtures and configuration for FlowStack Proposal Engine tests."""

import os
import pytest
from typing import Any, Callable, Dict, Generator, List, Optional

from fastapi.testclient import TestClient

# Set test environment variables before importing app
os.environ.setdefault("GROQ_API_KEY", "gsk_test")
os.environ.setdefault("N8N_WEBHOOK_URL", "https://n8n.test/webhook/flowstack")
os.environ.setdefault("N8N_WEBHOOK_SECRET", "n8n-test-secret")
os.environ.setdefault("DEBUG", "true")

from flowstack.core.config import Settings
from flowstack.models import GenerationOutcome, GenerationRequest, ProviderError
from flowstack.services.fallback import FallbackOrchestrator
from flowstack.services.proposal_pipeline import ProposalPipeline


PASS1_MODELS = ["scout-test", "qwen-test", "instant-test"]
PASS2_MODELS = ["qwen-test", "scout-test", "instant-test"]


# ===========================================
# Sample Documents
# ===========================================

PASS1_MARKDOWN = """## Executive Summary
Acme Growth loses revenue every month to slow lead follow-up.
Monthly Leakage: $40,000
Annual Leakage: $480,000
Current Bottleneck: Slow follow-up

## Diagnosis
- Leads wait more than 24 hours for first contact.

## Revenue at Risk
- $480,000 per year.

## SOLUTION ARCHITECTURE: “FlowStackOS 3-Module System”
- Module 1: instant lead routing.
- Module 2: automated booking.
- Module 3: retention follow-up.

## Next Steps
- Book the installation call."""

POLISHED_SECTIONS = """## Executive Summary
Acme Growth is leaking $40,000 every month ($480,000 a year) because slow follow-up lets warm leads go cold.

## SOLUTION ARCHITECTURE: “FlowStackOS 3-Module System”
- Module 1: route every lead in under a minute.
- Module 2: book calls automatically.
- Module 3: keep clients engaged after the sale."""


@pytest.fixture
def pass1_markdown() -> str:
    return PASS1_MARKDOWN


@pytest.fixture
def polished_sections() -> str:
    return POLISHED_SECTIONS


@pytest.fixture
def sample_proposal_body() -> Dict[str, Any]:
    """Body posted by the proposal view."""
    return {
        "payload": {
            "requestId": "fs_test_123",
            "ingest": {
                "agencyName": "Acme Growth",
                "niche": "Real estate",
                "contactEmail": "owner@acme.test",
                "bottleneck": "Slow follow-up",
            },
            "calculatedMetrics": {
                "monthlyLeakage": 40000,
                "annualLeakage": 480000,
            },
        }
    }


# ===========================================
# Model Client Fixtures
# ===========================================

class ScriptedClient:
    """Model client stand-in returning queued outcomes in call order."""

    def __init__(self, outcomes: List[GenerationOutcome]):
        self.outcomes = list(outcomes)
        self.requests: List[GenerationRequest] = []

    async def complete(self, request: GenerationRequest) -> GenerationOutcome:
        self.requests.append(request)
        return self.outcomes.pop(0)

    @property
    def models_called(self) -> List[str]:
        return [request.model for request in self.requests]


def ok_outcome(content: str, status: int = 200) -> GenerationOutcome:
    return GenerationOutcome(
        ok=True,
        http_status=status,
        content=content,
        raw_response={"choices": [{"message": {"content": content}}]},
    )


def error_outcome(
    status: int,
    code: Optional[str] = None,
    message: Optional[str] = None
) -> GenerationOutcome:
    error = ProviderError(message=message, code=code)
    return GenerationOutcome(
        ok=False,
        http_status=status,
        error=error,
        raw_response={"error": error.model_dump(exclude_none=True)},
    )


@pytest.fixture
def scripted_client() -> Callable[..., ScriptedClient]:
    """Factory for ScriptedClient instances."""
    return lambda *outcomes: ScriptedClient(list(outcomes))


@pytest.fixture
def app_settings() -> Settings:
    """Settings with short model lists, isolated from the environment file."""
    return Settings(
        _env_file=None,
        GROQ_API_KEY="gsk_test",
        PASS1_MODELS=PASS1_MODELS,
        PASS2_MODELS=PASS2_MODELS,
    )


@pytest.fixture
def make_pipeline(app_settings) -> Callable[[Any], ProposalPipeline]:
    """Build a pipeline around any model client."""
    return lambda client: ProposalPipeline(FallbackOrchestrator(client), app_settings)


# ===========================================
# Client Fixtures
# ===========================================

@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Test client for the FastAPI app."""
    from flowstack.main import app
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def override_pipeline(make_pipeline) -> Generator[Callable[[Any], None], None, None]:
    """Route /api/proposal through a pipeline built on the given client."""
    from flowstack.main import app
    from flowstack.services.proposal_pipeline import get_proposal_pipeline

    def _override(model_client) -> None:
        app.dependency_overrides[get_proposal_pipeline] = lambda: make_pipeline(model_client)

    yield _override
    app.dependency_overrides.clear()


# ===========================================
# Pytest Configuration
# ===========================================

def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
