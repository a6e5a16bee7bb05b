"""API module - FastAPI routers."""

from flowstack.api.proposal import router as proposal_router
from flowstack.api.lead import router as lead_router
from flowstack.api.system import router as system_router

__all__ = [
    "proposal_router",
    "lead_router",
    "system_router",
]
