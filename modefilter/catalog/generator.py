"""Demo catalog generator with deterministic seeding.

Generates a storefront catalog (groups on all three axes and entries
with memberships, prices, ratings, stock and mode overrides). Uses
seeded random per entry so the same config always yields the same
catalog.
"""

import hashlib
import random
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from modefilter.catalog.overrides import override_attributes
from modefilter.catalog.taxonomy import slugify
from modefilter.domain.entities import ClassificationGroup, Entry
from modefilter.domain.value_objects import (
    Axis,
    EffectiveMode,
    StockStatus,
    Visibility,
)


# ============================================================================
# Constants
# ============================================================================

# Storefront categories with price ranges (whole currency units)
CATEGORIES: dict[str, tuple[int, int]] = {
    "Apparel": (15, 120),
    "Shoes": (40, 260),
    "Bags": (25, 300),
    "Audio": (20, 450),
    "Computers": (300, 2500),
    "Furniture": (90, 1800),
    "Lighting": (20, 350),
    "Kitchen": (10, 220),
    "Toys": (8, 90),
    "Books": (6, 45),
    "Garden": (12, 400),
    "Sports": (15, 600),
}

TAGS = [
    "New Arrival",
    "Bestseller",
    "Eco",
    "Limited Edition",
    "Gift Idea",
    "Handmade",
    "Imported",
    "Clearance",
]

# Synthetic brand names (fictional companies)
BRANDS = [
    "Acme",
    "Contoso",
    "Northwind",
    "Fabrikam",
    "Tailwind",
    "Globex",
    "Initech",
    "Umbrella",
]

NOUNS: dict[str, list[str]] = {
    "Apparel": ["T-Shirt", "Hoodie", "Jacket", "Chinos"],
    "Shoes": ["Sneakers", "Boots", "Loafers", "Runners"],
    "Bags": ["Backpack", "Tote", "Duffel", "Messenger"],
    "Audio": ["Headphones", "Speaker", "Earbuds", "Soundbar"],
    "Computers": ["Laptop", "Desktop", "Tablet", "Monitor"],
    "Furniture": ["Armchair", "Desk", "Bookshelf", "Sofa"],
    "Lighting": ["Floor Lamp", "Pendant", "Desk Lamp", "Sconce"],
    "Kitchen": ["Kettle", "Knife Set", "Skillet", "Blender"],
    "Toys": ["Puzzle", "Playset", "Plush", "Board Game"],
    "Books": ["Cookbook", "Novel", "Field Guide", "Atlas"],
    "Garden": ["Planter", "Hose Reel", "Pruner", "Bench"],
    "Sports": ["Yoga Mat", "Racket", "Kettlebell", "Helmet"],
}

# Adjectives for entry titles
ADJECTIVES = [
    "Premium", "Classic", "Essential", "Compact", "Deluxe",
    "Urban", "Nordic", "Vintage", "Studio", "Travel", "Pro",
]

# Categories whose group default is catalog-only (showroom items)
CATALOG_CATEGORIES = ("Furniture", "Lighting")

EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


# ============================================================================
# Generator Configuration
# ============================================================================


@dataclass
class GeneratorConfig:
    """Configuration for catalog generation.

    Attributes:
        seed: Random seed for reproducibility.
        entries_per_category: Number of entries per category.
        catalog_categories: Categories carrying a catalog-only group default.
        override_share: Share of entries with their own mode override.
        hidden_share: Share of unpublished entries.
        unpriced_share: Share of entries without a price.
    """

    seed: int = 42
    entries_per_category: int = 10
    catalog_categories: tuple[str, ...] = field(default=CATALOG_CATEGORIES)
    override_share: float = 0.1
    hidden_share: float = 0.05
    unpriced_share: float = 0.03

    @classmethod
    def small(cls) -> "GeneratorConfig":
        """Create config for a small catalog (~60 entries).

        Returns:
            Config for small catalog.
        """
        return cls(seed=42, entries_per_category=5)

    @classmethod
    def full(cls) -> "GeneratorConfig":
        """Create config for a full catalog (~1200 entries).

        Returns:
            Config for full catalog.
        """
        return cls(seed=42, entries_per_category=100)


@dataclass
class GeneratedCatalog:
    """Output of the generator.

    Attributes:
        groups: Groups on all axes, ids unique across axes.
        entries: Entries ordered by id.
    """

    groups: list[ClassificationGroup]
    entries: list[Entry]

    def groups_on(self, axis: Axis) -> list[ClassificationGroup]:
        """Groups of one axis."""
        return [group for group in self.groups if group.axis == axis]


# ============================================================================
# Catalog Generator
# ============================================================================


class CatalogGenerator:
    """Generates demo catalogs with deterministic seeding.

    Example usage:
        catalog = CatalogGenerator(GeneratorConfig.small()).generate()
        store = InMemoryEntryStore(catalog.entries, catalog.groups)
    """

    def __init__(self, config: GeneratorConfig) -> None:
        """Initialize generator with configuration.

        Args:
            config: Generator configuration.
        """
        self.config = config

    def _deterministic_seed(self, *args: str | int) -> int:
        """Create deterministic seed from arguments.

        Args:
            args: Values to include in seed.

        Returns:
            Deterministic integer seed.
        """
        data = "|".join(str(a) for a in args)
        hash_bytes = hashlib.md5(data.encode()).digest()
        return int.from_bytes(hash_bytes[:4], "big")

    def _build_groups(self) -> list[ClassificationGroup]:
        """Build category, tag and brand groups with sequential ids."""
        groups: list[ClassificationGroup] = []
        next_id = 1
        for name in CATEGORIES:
            mode = EffectiveMode.CATALOG_ONLY if name in self.config.catalog_categories else None
            groups.append(
                ClassificationGroup(
                    id=next_id,
                    axis=Axis.CATEGORY,
                    name=name,
                    slug=slugify(name),
                    attributes=override_attributes(mode, group=True),
                )
            )
            next_id += 1
        for axis, names in ((Axis.TAG, TAGS), (Axis.BRAND, BRANDS)):
            for name in names:
                groups.append(
                    ClassificationGroup(id=next_id, axis=axis, name=name, slug=slugify(name))
                )
                next_id += 1
        return groups

    def _generate_entry(
        self,
        entry_id: int,
        category: ClassificationGroup,
        index: int,
        tags: list[ClassificationGroup],
        brands: list[ClassificationGroup],
    ) -> Entry:
        """Generate a single entry.

        Args:
            entry_id: Id to assign.
            category: Primary category group.
            index: Entry index within category.
            tags: All tag groups.
            brands: All brand groups.

        Returns:
            Generated Entry.
        """
        rng = random.Random(self._deterministic_seed(self.config.seed, category.slug, index))

        brand = rng.choice(brands)
        title = f"{brand.name} {rng.choice(ADJECTIVES)} {rng.choice(NOUNS[category.name])}"
        entry_tags = sorted(rng.sample(tags, rng.randint(0, 2)), key=lambda g: g.id)

        price: Decimal | None = None
        if rng.random() >= self.config.unpriced_share:
            low, high = CATEGORIES[category.name]
            price = Decimal(rng.randint(low, high)) - Decimal("0.01")

        rated = rng.random() > 0.2
        rating_average = round(rng.uniform(2.5, 5.0), 1) if rated else 0.0
        rating_count = rng.randint(1, 400) if rated else 0

        roll = rng.random()
        if roll < 0.08:
            stock = StockStatus.OUT_OF_STOCK
        elif roll < 0.14:
            stock = StockStatus.ON_BACKORDER
        else:
            stock = StockStatus.IN_STOCK

        override: EffectiveMode | None = None
        if rng.random() < self.config.override_share:
            override = rng.choice([EffectiveMode.SELLABLE, EffectiveMode.CATALOG_ONLY])

        visibility = (
            Visibility.HIDDEN if rng.random() < self.config.hidden_share else Visibility.PUBLISHED
        )

        return Entry(
            id=entry_id,
            title=title,
            visibility=visibility,
            groups={
                Axis.CATEGORY: (category.id,),
                Axis.TAG: tuple(tag.id for tag in entry_tags),
                Axis.BRAND: (brand.id,),
            },
            price=price,
            rating_average=rating_average,
            rating_count=rating_count,
            stock_status=stock,
            attributes=override_attributes(override),
            excerpt=(
                f"A {category.name.lower()} piece from {brand.name}, "
                f"built for everyday use and made to last."
            ),
            permalink=f"/products/{slugify(title)}-{entry_id}",
            image_url=f"https://picsum.photos/seed/{self._deterministic_seed(entry_id)}/400/400",
            on_sale=price is not None and rng.random() < 0.15,
            published_at=EPOCH + timedelta(minutes=rng.randint(0, 60 * 24 * 365)),
        )

    def generate(self) -> GeneratedCatalog:
        """Generate the whole catalog.

        Returns:
            Groups and entries.
        """
        groups = self._build_groups()
        categories = [g for g in groups if g.axis == Axis.CATEGORY]
        tags = [g for g in groups if g.axis == Axis.TAG]
        brands = [g for g in groups if g.axis == Axis.BRAND]

        entries: list[Entry] = []
        for category in categories:
            for index in range(self.config.entries_per_category):
                entries.append(
                    self._generate_entry(len(entries) + 1, category, index, tags, brands)
                )

        counts: dict[int, int] = {}
        for entry in entries:
            for group_id in entry.all_group_ids():
                counts[group_id] = counts.get(group_id, 0) + 1
        for group in groups:
            group.count = counts.get(group.id, 0)

        return GeneratedCatalog(groups=groups, entries=entries)

    @property
    def expected_count(self) -> int:
        """Get expected number of entries.

        Returns:
            Expected entry count.
        """
        return len(CATEGORIES) * self.config.entries_per_category
