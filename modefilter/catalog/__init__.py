"""Entry Catalog.

Provides the entry store abstraction with in-memory and SQL backends,
classification term lookup, attribute-store mode overrides and a
deterministic demo catalog generator.
"""

from modefilter.catalog.generator import CatalogGenerator, GeneratedCatalog, GeneratorConfig
from modefilter.catalog.memory import InMemoryEntryStore
from modefilter.catalog.models import EntryRecord, GroupRecord
from modefilter.catalog.overrides import AttributeStoreOverrides, override_attributes
from modefilter.catalog.repository import SqlEntryStore
from modefilter.catalog.store import EntryQuery, EntryStore, GroupConstraint, sort_entries
from modefilter.catalog.taxonomy import TermResolver, slugify, split_csv

__all__ = [
    # Store
    "EntryQuery",
    "EntryStore",
    "GroupConstraint",
    "sort_entries",
    "InMemoryEntryStore",
    "SqlEntryStore",
    # Models
    "EntryRecord",
    "GroupRecord",
    # Taxonomy
    "TermResolver",
    "slugify",
    "split_csv",
    # Overrides
    "AttributeStoreOverrides",
    "override_attributes",
    # Generator
    "CatalogGenerator",
    "GeneratedCatalog",
    "GeneratorConfig",
]
