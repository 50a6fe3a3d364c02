"""
Order message composition.

Turns the cart into the text a shopper sends over WhatsApp:

    *Pedido Xepi*

    *Cuadros 20x30*
    - CU-014 x 2 @ Q25.00 = Q50.00
    - Atardecer x 3 @ Q25.00 = Q75.00

    *Total: Q125.00*

Only the engine's public queries are used here.
"""
import re
from typing import Dict, List, Optional
from urllib.parse import quote

from storefront import config
from storefront.cart import CartEngine, CartLine
from storefront.errors import ConfigurationError, EmptyCartError, ERROR_ORDER_PHONE_NOT_CONFIGURED
from storefront.services.catalog import DEFAULT_SUBCATEGORY
from storefront.services.money import format_money

WHATSAPP_URL = "https://wa.me"
ORDER_TITLE = "Pedido Xepi"


def group_lines(lines: List[CartLine]) -> Dict[str, List[CartLine]]:
    """Lines grouped by subcategory label, in first-seen order."""
    groups: Dict[str, List[CartLine]] = {}
    for line in lines:
        groups.setdefault(line.subcategory_label or DEFAULT_SUBCATEGORY, []).append(line)
    return groups


def compose_order_message(engine: CartEngine, currency_symbol: Optional[str] = None) -> str:
    """Order summary: one block per subcategory, then the grand total."""
    symbol = config.CURRENCY_SYMBOL if currency_symbol is None else currency_symbol
    blocks = [f"*{ORDER_TITLE}*"]

    for subcategory, lines in group_lines(engine.lines).items():
        rows = [f"*{subcategory}*"]
        for line in lines:
            unit = engine.effective_unit_price(line)
            rows.append(
                f"- {line.label} x {line.quantity} @ {format_money(unit, symbol)}"
                f" = {format_money(engine.line_total(line), symbol)}"
            )
        blocks.append("\n".join(rows))

    blocks.append(f"*Total: {format_money(engine.total(), symbol)}*")
    return "\n\n".join(blocks)


def build_order_link(phone: str, message: str) -> str:
    """wa.me deep link with the message pre-filled."""
    digits = re.sub(r"\D", "", phone or "")
    if not digits:
        raise ConfigurationError(ERROR_ORDER_PHONE_NOT_CONFIGURED)
    return f"{WHATSAPP_URL}/{digits}?text={quote(message, safe='')}"


def build_order_link_for_cart(engine: CartEngine, phone: Optional[str] = None) -> str:
    """
    Compose the order for the current cart and wrap it in a deep link.

    Raises:
        EmptyCartError: If the cart has no lines
        ConfigurationError: If no order phone is configured
    """
    if engine.is_empty():
        raise EmptyCartError()
    return build_order_link(phone or config.ORDER_PHONE, compose_order_message(engine))
