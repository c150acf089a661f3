"""Application layer module.

Contains the request handlers (use cases) that orchestrate the domain
engine, the entry store and rendering.
"""

from modefilter.application.embed_service import (
    EmbedCommand,
    EmbedResult,
    EmbedService,
    get_embed_service,
)
from modefilter.application.fetch_service import (
    FetchCommand,
    FetchResult,
    FetchService,
    get_fetch_service,
)

__all__ = [
    "EmbedCommand",
    "EmbedResult",
    "EmbedService",
    "get_embed_service",
    "FetchCommand",
    "FetchResult",
    "FetchService",
    "get_fetch_service",
]
