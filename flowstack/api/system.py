"""System API Routes - configuration status and health."""

from typing import Dict

from fastapi import APIRouter

from flowstack.core.config import get_settings

router = APIRouter(prefix="/api", tags=["system"])


@router.get("/debug")
async def config_status() -> Dict[str, str]:
    """Report which credentials are configured, never their values."""
    settings = get_settings()
    return {
        "N8N_WEBHOOK_URL": settings.N8N_WEBHOOK_URL or "NOT SET",
        "N8N_WEBHOOK_SECRET": "SET" if settings.N8N_WEBHOOK_SECRET else "NOT SET",
        "GROQ_API_KEY": "SET" if settings.GROQ_API_KEY else "NOT SET",
        "ENVIRONMENT": "development" if settings.DEBUG else "production",
    }


@router.get("/health")
async def health_check() -> Dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": "flowstack-proposal-engine"}
