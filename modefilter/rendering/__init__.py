"""HTML rendering for entry cards and widget shells."""

from modefilter.rendering.cards import (
    CardContext,
    CardRenderer,
    JinjaCardRenderer,
    render_cards,
    resolve_card_parts,
    trim_excerpt,
)
from modefilter.rendering.shell import ShellRenderer

__all__ = [
    "CardContext",
    "CardRenderer",
    "JinjaCardRenderer",
    "ShellRenderer",
    "render_cards",
    "resolve_card_parts",
    "trim_excerpt",
]
