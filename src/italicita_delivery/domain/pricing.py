
"""Composição de preço de um prato configurado (pura, aditiva, sem arredondar)."""
from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP
from typing import Protocol
from .models import Selection

ZERO = Decimal("0")
CENTS = Decimal("0.01")


class Priceable(Protocol):
    base_price: Decimal
    selection: Selection


def calculate_item_price(item: Priceable) -> Decimal:
    """Preço unitário = base + massa + tamanho + molho + adicionais + extras.

    Não arredonda: o valor guardado em `final_price` é o decimal cheio; só a
    apresentação formata com 2 casas (ver `format_brl`).
    """
    sel = item.selection
    price = item.base_price
    if sel.selected_pasta is not None:
        price += sel.selected_pasta.price_adjustment
    price += sel.selected_size.price_adjustment
    if sel.selected_sauce is not None:
        price += sel.selected_sauce.price
    price += sum((a.price for a in sel.selected_add_ons), ZERO)
    price += sum((e.price for e in sel.selected_extras), ZERO)
    return price


def format_brl(value: Decimal) -> str:
    """Formata para exibição: `R$ 40.90`."""
    return f"R$ {value.quantize(CENTS, rounding=ROUND_HALF_UP)}"
