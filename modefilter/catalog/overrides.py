"""Attribute-store mode overrides.

Entries and groups carry free-form attribute stores. Mode overrides live
under fixed keys with the values ``sell`` / ``catalog``; this accessor is
the only place that knows those keys.
"""

from modefilter.domain.entities import ClassificationGroup, Entry
from modefilter.domain.value_objects import EffectiveMode

ENTRY_OVERRIDE_KEY = "_modep_catalog_override"
GROUP_DEFAULT_KEY = "_modep_catalog_default"


class AttributeStoreOverrides:
    """Reads mode overrides from entry and group attribute stores."""

    def get_mode_override(self, entity: Entry | ClassificationGroup) -> EffectiveMode | None:
        """Return the entity's override, or None when absent or invalid.

        Args:
            entity: Entry (per-entry override) or group (group default).

        Returns:
            The overriding mode, or None.
        """
        key = GROUP_DEFAULT_KEY if isinstance(entity, ClassificationGroup) else ENTRY_OVERRIDE_KEY
        return EffectiveMode.from_store_value(entity.attributes.get(key))


def override_attributes(mode: EffectiveMode | None, *, group: bool = False) -> dict[str, str]:
    """Build the attribute-store fragment that sets (or omits) an override.

    Args:
        mode: Mode to store, None for no override.
        group: Use the group-default key instead of the entry key.

    Returns:
        A dict suitable for an entity's ``attributes``.
    """
    if mode is None:
        return {}
    key = GROUP_DEFAULT_KEY if group else ENTRY_OVERRIDE_KEY
    return {key: mode.to_store_value()}
