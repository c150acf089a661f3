"""Classification term lookup.

Widgets name groups in their attributes as a CSV of ids, slugs or names
(``"12, shoes, Summer Sale"``). This module turns those lists into group
ids against the groups of one axis.

Resolution order per token:
    1. all digits -> taken as a group id as-is
    2. slug match (the token is slugified first)
    3. case-insensitive name match
Unknown tokens are dropped; the result is de-duplicated in input order.
"""

import re
import unicodedata
from collections.abc import Iterable

from modefilter.domain.entities import ClassificationGroup
from modefilter.domain.value_objects import Axis

_NON_SLUG = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """Turn a display name into a slug.

    Args:
        name: Display name, e.g. "Shirts & Tops".

    Returns:
        Lowercase ASCII slug, e.g. "shirts-tops".
    """
    ascii_name = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode()
    return _NON_SLUG.sub("-", ascii_name.lower()).strip("-")


def split_csv(raw: str | Iterable[str] | None) -> list[str]:
    """Split a CSV attribute (or list) into trimmed, non-empty tokens."""
    if raw is None:
        return []
    parts = raw.split(",") if isinstance(raw, str) else list(raw)
    return [part.strip() for part in parts if part and part.strip()]


class TermResolver:
    """Resolves id/slug/name tokens to group ids.

    Example usage:
        resolver = TermResolver(await store.get_groups())
        resolver.resolve(Axis.CATEGORY, "shoes, 12")  # (4, 12)
    """

    def __init__(self, groups: Iterable[ClassificationGroup]) -> None:
        """Index groups by axis, slug and lowercase name.

        Args:
            groups: Groups of any axes.
        """
        self._by_slug: dict[tuple[Axis, str], int] = {}
        self._by_name: dict[tuple[Axis, str], int] = {}
        for group in sorted(groups, key=lambda g: g.id):
            self._by_slug.setdefault((group.axis, group.slug), group.id)
            self._by_name.setdefault((group.axis, group.name.strip().lower()), group.id)

    def resolve_token(self, axis: Axis, token: str) -> int | None:
        """Resolve one token on one axis.

        Args:
            axis: Axis to search.
            token: Id, slug or name.

        Returns:
            Group id, or None if nothing matches.
        """
        token = token.strip()
        if not token:
            return None
        if token.isdigit():
            group_id = int(token)
            return group_id or None
        group_id = self._by_slug.get((axis, slugify(token)))
        if group_id is not None:
            return group_id
        return self._by_name.get((axis, token.lower()))

    def resolve(self, axis: Axis, raw: str | Iterable[str] | None) -> tuple[int, ...]:
        """Resolve a CSV (or list) of tokens to unique group ids."""
        ids: list[int] = []
        for token in split_csv(raw):
            group_id = self.resolve_token(axis, token)
            if group_id is not None and group_id not in ids:
                ids.append(group_id)
        return tuple(ids)
