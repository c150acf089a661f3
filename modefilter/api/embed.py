"""Embed API endpoints.

Called server-side by the host page to render the initial shell of a
listing widget. Protected by the API key.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from modefilter.api.schemas import (
    EmbedRequest,
    EmbedResponse,
    ErrorResponse,
    block_to_schema,
)
from modefilter.application.embed_service import (
    EmbedCommand,
    EmbedResult,
    EmbedService,
    get_embed_service,
)
from modefilter.catalog.store import EntryStore
from modefilter.domain.value_objects import PriceRange, SortKey
from modefilter.infrastructure.stores import get_entry_store

router = APIRouter(prefix="/embed", tags=["Embed"])


# ============================================================================
# Dependencies
# ============================================================================


def get_service(store: Annotated[EntryStore, Depends(get_entry_store)]) -> EmbedService:
    """Get embed service bound to the request's entry store."""
    return get_embed_service(store)


# ============================================================================
# Converters
# ============================================================================


def request_to_command(request: EmbedRequest) -> EmbedCommand:
    """Convert an embed request to a command, validating ranges and sort."""
    return EmbedCommand(
        pool_type=request.pool_type,
        base_group_slug=request.category,
        includes=request.includes(),
        excludes=request.excludes(),
        price_range=PriceRange.from_bounds(request.price_min, request.price_max),
        rating_min=request.rating_min,
        sort=SortKey.parse(request.sort),
        random_seed=request.random_seed,
        facets=request.to_facet_options(),
        display=request.display.to_domain(),
    )


def result_to_response(result: EmbedResult) -> EmbedResponse:
    """Convert an embed result to the response schema."""
    return EmbedResponse(
        html=result.html,
        token=result.token,
        widget_attrs=result.widget_attrs,
        facet_blocks=[block_to_schema(block) for block in result.facet_blocks],
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.post(
    "",
    response_model=EmbedResponse,
    responses={
        401: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
    summary="Render widget shell",
    description="Render the facet sidebar, sort bar and empty grid of a listing widget.",
)
async def embed_widget(
    request: EmbedRequest,
    service: Annotated[EmbedService, Depends(get_service)],
) -> EmbedResponse:
    """Render a widget shell.

    Args:
        request: Widget attributes.
        service: Embed service.

    Returns:
        Shell markup, widget attributes and fetch token.
    """
    result = await service.embed(request_to_command(request))
    return result_to_response(result)


@router.post(
    "/catalog",
    response_model=EmbedResponse,
    responses={
        401: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
    summary="Render catalog widget shell",
    description="Render a catalog-only listing widget with an enquiry button.",
)
async def embed_catalog_widget(
    request: EmbedRequest,
    service: Annotated[EmbedService, Depends(get_service)],
) -> EmbedResponse:
    """Render a catalog-only widget shell.

    Args:
        request: Widget attributes; ``pool_type`` is ignored.
        service: Embed service.

    Returns:
        Shell markup, widget attributes and fetch token.
    """
    result = await service.embed_catalog(request_to_command(request))
    return result_to_response(result)
