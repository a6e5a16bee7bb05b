"""Proposal API Route - entry point for the proposal view."""

import json
import logging
import secrets
import time
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from flowstack.models import ProposalRequest, ProposalResult, dump_attempts
from flowstack.services.proposal_pipeline import (
    FAILURE_PLACEHOLDER,
    ProposalPipeline,
    get_proposal_pipeline,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["proposal"])


def new_request_id() -> str:
    return f"fs_{int(time.time() * 1000)}_{secrets.token_hex(6)}"


async def read_json_body(request: Request) -> Any:
    """Request JSON, tolerating empty, invalid or double-encoded bodies."""
    try:
        raw = await request.json()
    except ValueError:
        return {}

    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            return {}
    return raw


def parse_proposal_request(raw: Any) -> ProposalRequest:
    """
    Extract the `payload` object, defaulting anything malformed.

    Args:
        raw: Decoded request body

    Returns:
        ProposalRequest (empty when the body has no usable payload)
    """
    if not isinstance(raw, dict):
        return ProposalRequest()

    # Handle nested body structure from webhook relays
    if "body" in raw and isinstance(raw["body"], dict):
        raw = raw["body"]

    payload = raw.get("payload")
    if not isinstance(payload, dict):
        return ProposalRequest()

    try:
        return ProposalRequest.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Malformed proposal payload, using defaults: {e.error_count()} errors")
        return ProposalRequest()


def build_envelope(result: ProposalResult) -> Dict[str, Any]:
    """Map a pipeline result to the JSON response body."""
    debug = result.debug
    payload = {
        "proposalMarkdown": result.markdown,
        "ingest": result.ingest,
        "calculatedMetrics": result.metrics,
    }

    if not result.success:
        return {
            "success": False,
            "error": result.error,
            "message": result.message,
            "retryAfterSeconds": result.retry_after_seconds,
            "debug": {
                "requestId": debug.request_id,
                "tried": dump_attempts(debug.tried_pass1),
            },
            "payload": payload,
        }

    return {
        "success": True,
        "payload": payload,
        "debug": {
            "requestId": debug.request_id,
            "modelsUsed": debug.models_used.model_dump(),
            "tried": {
                "pass1": dump_attempts(debug.tried_pass1),
                "pass2": dump_attempts(debug.tried_pass2),
            },
        },
    }


# ===========================================
# Proposal Generation
# ===========================================

@router.post("/proposal", summary="Generate Proposal")
async def generate_proposal(
    request: Request,
    pipeline: ProposalPipeline = Depends(get_proposal_pipeline)
) -> JSONResponse:
    """
    Generate the two-pass proposal for a lead.

    Always answers 200 with a success or failure envelope; failure is
    signaled in the body.
    """
    proposal_request = parse_proposal_request(await read_json_body(request))
    request_id = proposal_request.request_id or new_request_id()

    logger.info(f"Received proposal request {request_id}")

    try:
        result = await pipeline.generate(proposal_request, request_id)
    except Exception as e:
        logger.error(f"Proposal pipeline error for {request_id}: {e}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "INTERNAL_ERROR",
                "message": str(e),
                "retryAfterSeconds": None,
                "debug": {"requestId": request_id, "tried": []},
                "payload": {
                    "proposalMarkdown": FAILURE_PLACEHOLDER,
                    "ingest": proposal_request.ingest.model_dump(by_alias=True, exclude_none=True),
                    "calculatedMetrics": proposal_request.calculated_metrics.model_dump(
                        by_alias=True, exclude_none=True
                    ),
                },
            }
        )

    return JSONResponse(status_code=200, content=build_envelope(result))


@router.api_route(
    "/proposal",
    methods=["GET", "PUT", "PATCH", "DELETE"],
    include_in_schema=False
)
async def proposal_method_not_allowed() -> JSONResponse:
    return JSONResponse(
        status_code=405,
        content={"success": False, "error": "METHOD_NOT_ALLOWED"}
    )
