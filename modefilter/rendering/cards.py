"""Entry card rendering.

The card collaborator turns one resolved entry into an HTML fragment. The
default renderer uses a Jinja2 template; hosts may plug in any object
implementing ``CardRenderer``.
"""

from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache
from typing import Protocol

from jinja2 import Environment, PackageLoader, select_autoescape

from modefilter.domain.entities import Entry
from modefilter.domain.scope import DisplayOptions
from modefilter.domain.value_objects import (
    EffectiveMode,
    ExcerptLengthType,
    GlobalSettings,
    PoolType,
    StockStatus,
)

SELLABLE_PARTS: tuple[str, ...] = ("badge", "image", "title", "price", "add_to_cart", "excerpt")
CATALOG_PARTS: tuple[str, ...] = ("badge", "image", "title", "excerpt", "add_to_cart")

ELLIPSIS = "…"


@lru_cache(maxsize=1)
def get_environment() -> Environment:
    """Shared Jinja2 environment for package templates."""
    return Environment(
        loader=PackageLoader("modefilter.rendering", "templates"),
        autoescape=select_autoescape(["html", "j2"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )


# ============================================================================
# Card Parts
# ============================================================================


def resolve_card_parts(custom_layout: str, pool_type: PoolType) -> list[str]:
    """Visible card parts in display order.

    ``custom_layout`` is a ``|``-separated token list; a ``!`` prefix keeps
    the part out. Unknown tokens are ignored and an empty result falls back
    to the defaults. Catalog listings without a custom layout never show
    prices.

    Args:
        custom_layout: Custom layout string, "" for defaults.
        pool_type: Listing pool type.

    Returns:
        Visible part names.
    """
    defaults = CATALOG_PARTS if pool_type == PoolType.CATALOG_ONLY else SELLABLE_PARTS

    order: list[str] = []
    visible: dict[str, bool] = {}
    for raw in custom_layout.split("|"):
        token = raw.strip()
        hide = token.startswith("!")
        key = token.lstrip("!").strip().lower()
        if key in defaults and key not in visible:
            order.append(key)
            visible[key] = not hide

    if not order:
        order = list(defaults)
        visible = dict.fromkeys(defaults, True)
        if pool_type == PoolType.CATALOG_ONLY:
            visible["price"] = False

    return [part for part in order if visible.get(part)]


def trim_excerpt(text: str, length: int, unit: ExcerptLengthType) -> str:
    """Trim an excerpt by words or characters, appending an ellipsis.

    Args:
        text: Raw excerpt.
        length: Maximum words or characters.
        unit: Trim unit.

    Returns:
        Trimmed excerpt ("" for empty input).
    """
    text = text.strip()
    if not text:
        return ""
    if unit == ExcerptLengthType.CHARS:
        return text[:length] + ELLIPSIS if len(text) > length else text
    words = text.split()
    if len(words) > length:
        return " ".join(words[:length]) + ELLIPSIS
    return " ".join(words)


def badge_label(entry: Entry) -> str:
    """Stock or sale badge for a card, "" when none applies."""
    if entry.stock_status == StockStatus.OUT_OF_STOCK:
        return "Out of stock"
    if entry.stock_status == StockStatus.ON_BACKORDER:
        return "Pre-Order"
    if entry.on_sale:
        return "Sale"
    return ""


def format_price(price: Decimal | None) -> str:
    """Format a price for display."""
    if price is None:
        return ""
    return f"{price:,.2f}"


# ============================================================================
# Renderers
# ============================================================================


@dataclass(frozen=True)
class CardContext:
    """Everything a card template needs besides the entry."""

    mode: EffectiveMode
    pool_type: PoolType
    display: DisplayOptions
    settings: GlobalSettings


class CardRenderer(Protocol):
    """Renders one entry card."""

    def render(self, entry: Entry, context: CardContext) -> str:
        """Return the HTML fragment (one ``<li>``) for the entry."""
        ...


class JinjaCardRenderer:
    """Default card renderer backed by ``card.html.j2``."""

    template_name = "card.html.j2"

    def __init__(self, environment: Environment | None = None) -> None:
        self.environment = environment or get_environment()

    def render(self, entry: Entry, context: CardContext) -> str:
        """Render one card.

        Args:
            entry: Entry to render.
            context: Mode, listing and display context.

        Returns:
            HTML fragment.
        """
        parts = resolve_card_parts(context.display.custom_layout, context.pool_type)
        catalog_only = context.mode == EffectiveMode.CATALOG_ONLY
        settings = context.settings

        if catalog_only and settings.hide_prices and "price" in parts:
            parts.remove("price")
        if not context.display.show_excerpt and "excerpt" in parts:
            parts.remove("excerpt")

        enquiry = catalog_only and settings.replace_button
        button_label = context.display.catalog_button_text or settings.button_label

        template = self.environment.get_template(self.template_name)
        return template.render(
            entry=entry,
            parts=parts,
            badge=badge_label(entry),
            price=format_price(entry.price),
            excerpt=trim_excerpt(
                entry.excerpt,
                context.display.excerpt_length,
                context.display.excerpt_length_type,
            ),
            enquiry=enquiry,
            button_label=button_label,
            button_url=settings.button_url or entry.permalink,
            mode=context.mode.value,
        )


def render_cards(
    renderer: CardRenderer,
    entries: list[tuple[Entry, EffectiveMode]],
    pool_type: PoolType,
    display: DisplayOptions,
    settings: GlobalSettings,
) -> str:
    """Render cards in the given order and join them."""
    fragments = [
        renderer.render(
            entry,
            CardContext(mode=mode, pool_type=pool_type, display=display, settings=settings),
        )
        for entry, mode in entries
    ]
    return "".join(fragments)
