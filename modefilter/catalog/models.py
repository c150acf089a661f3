"""SQLAlchemy models for the catalog.

Defines the entries, groups and entry_groups tables backing the SQL
entry store, plus conversions to and from domain entities.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from modefilter.domain.entities import ClassificationGroup, Entry
from modefilter.domain.value_objects import Axis, StockStatus, Visibility
from modefilter.infrastructure.database import Base

# Membership of entries in groups; axis is denormalized for per-axis queries
entry_groups = Table(
    "entry_groups",
    Base.metadata,
    Column("entry_id", Integer, ForeignKey("entries.id", ondelete="CASCADE"), primary_key=True),
    Column("group_id", Integer, ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True),
    Column("axis", String(20), nullable=False, index=True),
)


class GroupRecord(Base):
    """Classification group row.

    Attributes:
        id: Group id, unique across axes.
        axis: category, tag or brand.
        name: Display name.
        slug: Slug, unique within the axis.
        count: Store-wide membership count.
        attributes: Group attribute store (JSON object).
    """

    __tablename__ = "groups"
    __table_args__ = (UniqueConstraint("axis", "slug", name="uq_groups_axis_slug"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    axis: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    attributes: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    def __repr__(self) -> str:
        """String representation."""
        return f"<GroupRecord(id={self.id}, axis={self.axis}, slug={self.slug})>"

    def to_domain(self) -> ClassificationGroup:
        """Convert to a domain group."""
        return ClassificationGroup(
            id=self.id,
            axis=Axis(self.axis),
            name=self.name,
            slug=self.slug,
            count=self.count,
            attributes={str(k): str(v) for k, v in (self.attributes or {}).items()},
        )

    @classmethod
    def from_domain(cls, group: ClassificationGroup) -> "GroupRecord":
        """Build a row from a domain group."""
        return cls(
            id=group.id,
            axis=group.axis.value,
            name=group.name,
            slug=group.slug,
            count=group.count,
            attributes=dict(group.attributes),
        )


class EntryRecord(Base):
    """Catalog entry row.

    Memberships live in ``entry_groups``.
    """

    __tablename__ = "entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    visibility: Mapped[str] = mapped_column(
        String(20), nullable=False, default=Visibility.PUBLISHED.value, index=True
    )
    price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True, index=True)
    rating_average: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    rating_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    stock_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=StockStatus.IN_STOCK.value, index=True
    )
    attributes: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    excerpt: Mapped[str] = mapped_column(Text, nullable=False, default="")
    permalink: Mapped[str] = mapped_column(String(1000), nullable=False, default="")
    image_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    on_sale: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    published_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<EntryRecord(id={self.id}, title={self.title[:30]}...)>"

    def to_domain(self, groups: dict[Axis, tuple[int, ...]]) -> Entry:
        """Convert to a domain entry.

        Args:
            groups: Memberships loaded from ``entry_groups``.

        Returns:
            Domain Entry.
        """
        return Entry(
            id=self.id,
            title=self.title,
            visibility=Visibility(self.visibility),
            groups=groups,
            price=Decimal(self.price) if self.price is not None else None,
            rating_average=float(self.rating_average),
            rating_count=self.rating_count,
            stock_status=StockStatus(self.stock_status),
            attributes={str(k): str(v) for k, v in (self.attributes or {}).items()},
            excerpt=self.excerpt,
            permalink=self.permalink,
            image_url=self.image_url,
            on_sale=self.on_sale,
            published_at=self.published_at,
        )

    @classmethod
    def from_domain(cls, entry: Entry) -> "EntryRecord":
        """Build a row from a domain entry (memberships not included)."""
        return cls(
            id=entry.id,
            title=entry.title,
            visibility=entry.visibility.value,
            price=entry.price,
            rating_average=entry.rating_average,
            rating_count=entry.rating_count,
            stock_status=entry.stock_status.value,
            attributes=dict(entry.attributes),
            excerpt=entry.excerpt,
            permalink=entry.permalink,
            image_url=entry.image_url,
            on_sale=entry.on_sale,
            published_at=entry.published_at,
        )


def membership_rows(entry: Entry) -> list[dict[str, Any]]:
    """Rows for ``entry_groups`` describing one entry's memberships."""
    return [
        {"entry_id": entry.id, "group_id": group_id, "axis": axis.value}
        for axis, group_ids in entry.groups.items()
        for group_id in sorted(set(group_ids))
    ]
