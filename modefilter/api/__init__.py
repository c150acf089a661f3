"""API layer module.

Contains FastAPI routers and request/response schemas.
"""

from modefilter.api.embed import router as embed_router
from modefilter.api.fetch import router as fetch_router
from modefilter.api.health import router as health_router

__all__ = [
    "embed_router",
    "fetch_router",
    "health_router",
]
