"""Entry store wiring.

Selects the configured backend (``memory`` or ``sql``) and hands one
store per request to the API layer.
"""

from collections.abc import AsyncGenerator

import structlog

from modefilter.catalog.generator import CatalogGenerator, GeneratorConfig
from modefilter.catalog.memory import InMemoryEntryStore
from modefilter.catalog.repository import SqlEntryStore
from modefilter.catalog.store import EntryStore
from modefilter.infrastructure.config import settings
from modefilter.infrastructure.database import get_session_factory

logger = structlog.get_logger()

_memory_store: InMemoryEntryStore | None = None


def get_memory_store() -> InMemoryEntryStore:
    """Get the seeded in-memory store (created on first use)."""
    global _memory_store
    if _memory_store is None:
        config = GeneratorConfig(
            seed=settings.seed,
            entries_per_category=settings.entries_per_category,
        )
        catalog = CatalogGenerator(config).generate()
        _memory_store = InMemoryEntryStore(entries=catalog.entries, groups=catalog.groups)
        logger.info(
            "memory_store_seeded",
            seed=config.seed,
            entries=len(catalog.entries),
            groups=len(catalog.groups),
        )
    return _memory_store


async def get_entry_store() -> AsyncGenerator[EntryStore, None]:
    """FastAPI dependency yielding the configured entry store.

    Yields:
        EntryStore for the duration of one request.
    """
    if settings.store_backend == "sql":
        async with get_session_factory()() as session:
            yield SqlEntryStore(session)
    else:
        yield get_memory_store()
