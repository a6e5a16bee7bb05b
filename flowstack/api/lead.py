"""Lead API Route - forwards captured leads to the n8n automation webhook."""

import logging

import httpx
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response

from flowstack.integrations.webhook import WebhookNotConfigured, lead_webhook_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["lead"])


@router.post("/lead", summary="Export Lead to n8n")
async def export_lead(request: Request) -> Response:
    """
    Pass the lead payload through to n8n.

    Returns the webhook's response text on success, a 500 error body
    otherwise.
    """
    try:
        body = await request.json() if await request.body() else None
    except ValueError as e:
        logger.error(f"Invalid lead body: {e}")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "details": str(e)}
        )

    try:
        result = await lead_webhook_service.forward_lead({} if body is None else body)
    except WebhookNotConfigured as e:
        logger.error(str(e))
        return JSONResponse(status_code=500, content={"error": str(e)})
    except httpx.HTTPError as e:
        logger.error(f"Lead endpoint error: {e}")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "details": str(e)}
        )

    if not result.ok:
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to forward lead to n8n", "details": result.body}
        )

    return Response(
        content=result.body,
        status_code=200,
        media_type=result.content_type
    )


@router.api_route(
    "/lead",
    methods=["GET", "PUT", "PATCH", "DELETE"],
    include_in_schema=False
)
async def lead_method_not_allowed() -> JSONResponse:
    return JSONResponse(status_code=405, content={"error": "Method not allowed"})
