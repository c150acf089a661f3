"""Tests for the embed directive."""

import pytest

from modefilter.api.schemas import FetchRequest
from modefilter.application.embed_service import (
    CATALOG_BUTTON_TEXT,
    EmbedCommand,
    EmbedService,
)
from modefilter.catalog.memory import InMemoryEntryStore
from modefilter.domain.exceptions import ScopeValidationError
from modefilter.domain.scope import DisplayOptions, FacetOptions
from modefilter.domain.value_objects import (
    Axis,
    FacetId,
    FiltersMode,
    GlobalSettings,
    PoolType,
    SortKey,
)
from modefilter.infrastructure.settings_provider import StaticSettingsProvider
from modefilter.infrastructure.tokens import FetchTokenSigner


@pytest.fixture
def signer() -> FetchTokenSigner:
    """Signer with a fixed clock."""
    return FetchTokenSigner(secret="test-secret", ttl_seconds=60, clock=lambda: 1_000_000.0)


@pytest.fixture
def service(scenario_store: InMemoryEntryStore, signer: FetchTokenSigner) -> EmbedService:
    """Embed service over the scenario store."""
    return EmbedService(
        scenario_store,
        StaticSettingsProvider(GlobalSettings()),
        signer,
        max_pool_size=1000,
        facet_sample_size=50,
    )


class TestEmbedService:
    """Tests for EmbedService."""

    @pytest.mark.asyncio
    async def test_terms_resolved_and_token_issued(
        self, service: EmbedService, signer: FetchTokenSigner
    ) -> None:
        """Slugs, names and ids resolve; the token verifies."""
        result = await service.embed(
            EmbedCommand(
                includes={Axis.CATEGORY: "shoes"},
                excludes={Axis.TAG: "Summer, unknown", Axis.BRAND: "20"},
                sort=SortKey.PRICE_ASC,
            )
        )
        assert dict(result.scope.includes) == {Axis.CATEGORY: (2,)}
        assert dict(result.scope.excludes) == {Axis.TAG: (10,), Axis.BRAND: (20,)}
        signer.verify(result.token)

        scope_attrs = result.widget_attrs["scope"]
        assert scope_attrs["includes"] == {"categories": [2], "tags": [], "brands": []}
        assert scope_attrs["sort"] == "price_asc"
        assert result.widget_attrs["token"] == result.token

    @pytest.mark.asyncio
    async def test_attributes_round_trip_into_fetch_request(self, service: EmbedService) -> None:
        """The serialized attributes are a valid fetch request body."""
        command = EmbedCommand(
            pool_type=PoolType.SELLABLE,
            base_group_slug="shoes",
            excludes={Axis.TAG: "10"},
            rating_min=2,
            facets=FacetOptions(mode=FiltersMode.AUTO, requested=(FacetId.PRICE,)),
            display=DisplayOptions(per_page=6),
        )
        result = await service.embed(command)

        request = FetchRequest.model_validate(result.widget_attrs)
        assert request.scope.to_domain() == result.scope
        assert request.to_facet_options() == command.facets
        assert request.display.to_domain() == command.display

    @pytest.mark.asyncio
    async def test_shell_markup(self, service: EmbedService) -> None:
        """The shell carries the sidebar, an empty grid and the attributes."""
        result = await service.embed(
            EmbedCommand(facets=FacetOptions(mode=FiltersMode.AUTO))
        )
        assert [block.facet for block in result.facet_blocks] == [
            FacetId.CATEGORIES,
            FacetId.TAGS,
            FacetId.PRICE,
            FacetId.RATING,
        ]
        assert 'data-filter="category"' in result.html
        assert "data-widget-attrs=" in result.html
        assert "modep-card" not in result.html

    @pytest.mark.asyncio
    async def test_catalog_directive(self, service: EmbedService) -> None:
        """The catalog directive forces the pool and the button label."""
        result = await service.embed_catalog(
            EmbedCommand(facets=FacetOptions(requested=(FacetId.CATEGORIES,)))
        )
        assert result.scope.pool_type == PoolType.CATALOG_ONLY
        assert result.widget_attrs["display"]["catalog_button_text"] == CATALOG_BUTTON_TEXT
        assert [chip.label for chip in result.facet_blocks[0].group_chips] == ["Furniture (10)"]

    @pytest.mark.asyncio
    async def test_catalog_directive_keeps_custom_label(self, service: EmbedService) -> None:
        """An explicit button label is kept."""
        result = await service.embed_catalog(
            EmbedCommand(display=DisplayOptions(catalog_button_text="Call us"))
        )
        assert result.widget_attrs["display"]["catalog_button_text"] == "Call us"


class GroupCountingStore(InMemoryEntryStore):
    """In-memory store that counts group lookups."""

    def __init__(self) -> None:
        super().__init__()
        self.group_calls = 0

    async def get_groups(self, axis=None):
        self.group_calls += 1
        return await super().get_groups(axis)


class TestEmbedValidation:
    """Tests for validation ahead of store access."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rating_min", [0, 9])
    async def test_bad_rating_rejected_before_store(
        self, signer: FetchTokenSigner, rating_min: int
    ) -> None:
        """An out-of-range rating never reaches the store."""
        store = GroupCountingStore()
        service = EmbedService(store, StaticSettingsProvider(GlobalSettings()), signer)

        with pytest.raises(ScopeValidationError) as exc_info:
            await service.embed(EmbedCommand(rating_min=rating_min))

        assert exc_info.value.field == "rating_min"
        assert store.group_calls == 0
