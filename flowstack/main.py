"""
FlowStack Proposal Engine - FastAPI application.

Run with:
    uvicorn flowstack.main:app --port 8000
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from flowstack import __version__
from flowstack.api import proposal_router, lead_router, system_router
from flowstack.core.config import get_settings

ENDPOINTS = {
    "proposal": "POST /api/proposal",
    "lead": "POST /api/lead",
    "debug": "GET /api/debug",
    "health": "GET /api/health",
}


def setup_logging() -> logging.Logger:
    """Send all application logs to stdout, once per process."""
    level = logging.DEBUG if get_settings().DEBUG else logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))
        root_logger.addHandler(handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return logging.getLogger(__name__)


logger = setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Report missing credentials at startup; nothing to release on shutdown."""
    settings = get_settings()
    logger.info(f"Pass 1 models: {settings.PASS1_MODELS}, Pass 2 models: {settings.PASS2_MODELS}")

    if not settings.provider.is_configured:
        logger.warning("GROQ_API_KEY not configured - proposals will fail")
    if not settings.N8N_WEBHOOK_URL or not settings.N8N_WEBHOOK_SECRET:
        logger.warning("n8n webhook not configured - lead export disabled")

    yield


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": str(exc) if get_settings().DEBUG else "An error occurred"
        }
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title="FlowStack Proposal Engine",
        version=__version__,
        lifespan=lifespan,
    )

    # The proposal view is served from a different origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(proposal_router)
    app.include_router(lead_router)
    app.include_router(system_router)

    @app.get("/", tags=["root"])
    async def root():
        return {
            "service": "FlowStack Proposal Engine",
            "version": __version__,
            "status": "running",
            "endpoints": ENDPOINTS,
        }

    return app


app = create_app()
