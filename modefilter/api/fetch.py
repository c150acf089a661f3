"""Fetch API endpoint.

Serves pages of listing widgets. Public (called from shoppers' browsers)
but guarded by the fetch token the embed directive issued.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from modefilter.api.schemas import (
    ErrorResponse,
    FetchRequest,
    FetchResponse,
    LayoutParamsSchema,
    block_to_schema,
)
from modefilter.application.fetch_service import FetchCommand, FetchResult, get_fetch_service
from modefilter.catalog.store import EntryStore
from modefilter.infrastructure.stores import get_entry_store
from modefilter.infrastructure.tokens import FetchTokenSigner, get_token_signer

router = APIRouter(prefix="/products", tags=["Products"])


def result_to_response(result: FetchResult) -> FetchResponse:
    """Convert a fetch result to the response schema."""
    return FetchResponse(
        status=result.status,
        entries_html=result.entries_html,
        entry_ids=result.entry_ids,
        page=result.page,
        total_pages=result.total_pages,
        total_count=result.total_count,
        columns=result.columns,
        per_page=result.per_page,
        layout_params=LayoutParamsSchema(
            grid_layout=result.layout.grid_layout,
            masonry_gap=result.layout.masonry_gap,
            justified_row_height=result.layout.justified_row_height,
        ),
        facet_blocks=(
            [block_to_schema(block) for block in result.facet_blocks]
            if result.facet_blocks is not None
            else None
        ),
        message=result.message,
        pool_truncated=result.pool_truncated,
    )


@router.post(
    "/fetch",
    response_model=FetchResponse,
    response_model_exclude_none=True,
    responses={
        401: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
    summary="Fetch a page of products",
    description="Render one page of a listing widget, filtered by effective mode.",
)
async def fetch_products(
    request: FetchRequest,
    store: Annotated[EntryStore, Depends(get_entry_store)],
    signer: Annotated[FetchTokenSigner, Depends(get_token_signer)],
) -> FetchResponse:
    """Fetch one page of a widget.

    The token is verified and the whole request validated before the
    entry store is touched.

    Args:
        request: Fetch request.
        store: Entry store for this request.
        signer: Fetch token signer.

    Returns:
        Rendered page.

    Raises:
        InvalidTokenError: If the token is missing, expired or forged.
        ScopeValidationError: If the scope or selections are invalid.
        BackendUnavailableError: If the entry store fails.
    """
    signer.verify(request.token)

    command = FetchCommand(
        scope=request.scope.to_domain(),
        selections=request.active_facet_selections.to_domain(),
        facets=request.to_facet_options(),
        display=request.display.to_domain(),
        page=request.page,
        include_facets=request.include_facets,
    )
    result = await get_fetch_service(store).fetch(command)
    return result_to_response(result)
