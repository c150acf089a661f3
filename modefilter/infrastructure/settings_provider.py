"""Storefront settings collaborator.

Global settings are persisted outside this service. The provider reads
them once per request and hands an immutable snapshot to the engine.
"""

from typing import Protocol

from modefilter.domain.value_objects import GlobalSettings
from modefilter.infrastructure.config import Settings, settings


class SettingsProvider(Protocol):
    """Read-only source of the global storefront settings."""

    def get_global_settings(self) -> GlobalSettings:
        """Return the current settings snapshot."""
        ...


class EnvSettingsProvider:
    """Settings provider backed by the application configuration."""

    def __init__(self, config: Settings | None = None) -> None:
        """Initialize provider.

        Args:
            config: Application settings. Defaults to the module settings.
        """
        self._config = config or settings

    def get_global_settings(self) -> GlobalSettings:
        """Build a snapshot from configuration."""
        return GlobalSettings(
            global_mode=self._config.global_mode,
            hide_prices=self._config.hide_prices,
            replace_button=self._config.replace_button,
            button_label=self._config.button_label,
            button_url=self._config.button_url,
        )


class StaticSettingsProvider:
    """Settings provider returning a fixed snapshot."""

    def __init__(self, global_settings: GlobalSettings) -> None:
        self._global_settings = global_settings

    def get_global_settings(self) -> GlobalSettings:
        """Return the fixed snapshot."""
        return self._global_settings


_provider: SettingsProvider | None = None


def get_settings_provider() -> SettingsProvider:
    """Get the process-wide settings provider."""
    global _provider
    if _provider is None:
        _provider = EnvSettingsProvider()
    return _provider
