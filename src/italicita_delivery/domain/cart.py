
"""Carrinho em memória: linhas por identidade estrutural e totais recalculados.

- Identidade = hash estável (blake2b, 64 bits) da tupla canônica
  (prato, massa, tamanho, molho, adicionais ordenados, extras ordenados).
- Toda mutação recalcula `total`/`item_count` do zero, nunca incremental.
- Ids ausentes em update/remove são no-op: referência velha, não erro.
"""
from __future__ import annotations
import hashlib
import json
from decimal import Decimal
from .models import CartLine, CartState, MenuItem, Selection
from .pricing import ZERO, calculate_item_price
from ..core.logging import get_logger

# 8 bytes -> colisão ~ n²/2^65; para carrinhos de dezenas de linhas é desprezível
IDENTITY_DIGEST_SIZE = 8

log = get_logger()


def canonical_selection(menu_item_id: str, selection: Selection) -> tuple:
    """Tupla canônica da seleção; ordem de adicionais/extras não importa."""
    return (
        menu_item_id,
        selection.selected_pasta.id if selection.selected_pasta else None,
        selection.selected_size.id,
        selection.selected_sauce.id if selection.selected_sauce else None,
        tuple(sorted(a.id for a in selection.selected_add_ons)),
        tuple(sorted(e.id for e in selection.selected_extras)),
    )


def line_identity(menu_item_id: str, selection: Selection) -> str:
    """Gera id curto e reprodutível `<menu_item_id>-<16 hex>`."""
    raw = json.dumps(canonical_selection(menu_item_id, selection), separators=(",", ":"))
    digest = hashlib.blake2b(raw.encode(), digest_size=IDENTITY_DIGEST_SIZE).hexdigest()
    return f"{menu_item_id}-{digest}"


def compute_state(items: list[CartLine]) -> CartState:
    total = sum((line.final_price * line.quantity for line in items), ZERO)
    item_count = sum(line.quantity for line in items)
    return CartState(items=tuple(items), total=total, item_count=item_count)


class Cart:
    """Agregador de um único carrinho (um escritor por vez)."""

    def __init__(self, session_id: str | None = None):
        self.session_id = session_id
        self._state = CartState()

    @property
    def state(self) -> CartState:
        return self._state

    @property
    def is_empty(self) -> bool:
        return not self._state.items

    def find_line(self, line_id: str) -> CartLine | None:
        return next((line for line in self._state.items if line.id == line_id), None)

    def _commit(self, items: list[CartLine]) -> CartState:
        self._state = compute_state(items)
        return self._state

    def add_item(self, menu_item: MenuItem, selection: Selection) -> CartState:
        """Adiciona prato configurado; se a identidade já existe, soma 1."""
        line_id = line_identity(menu_item.id, selection)
        items = list(self._state.items)
        for idx, line in enumerate(items):
            if line.id == line_id:
                items[idx] = line.model_copy(update={"quantity": line.quantity + 1})
                log.info("cart_item_merged", line_id=line_id, quantity=line.quantity + 1)
                break
        else:
            line = CartLine(
                id=line_id,
                menu_item_id=menu_item.id,
                name=menu_item.name,
                base_price=menu_item.base_price,
                quantity=1,
                selection=selection,
                final_price=Decimal("0"),
            )
            line = line.model_copy(update={"final_price": calculate_item_price(line)})
            items.append(line)
            log.info("cart_item_added", line_id=line_id, menu_item_id=menu_item.id, final_price=str(line.final_price))
        return self._commit(items)

    def update_quantity(self, line_id: str, quantity: int) -> CartState:
        """Troca a quantidade; `quantity <= 0` remove a linha."""
        if quantity <= 0:
            return self.remove_item(line_id)
        if self.find_line(line_id) is None:
            log.info("cart_stale_reference", op="update_quantity", line_id=line_id)
            return self._state
        items = [
            line.model_copy(update={"quantity": quantity}) if line.id == line_id else line
            for line in self._state.items
        ]
        log.info("cart_quantity_updated", line_id=line_id, quantity=quantity)
        return self._commit(items)

    def remove_item(self, line_id: str) -> CartState:
        items = [line for line in self._state.items if line.id != line_id]
        if len(items) == len(self._state.items):
            log.info("cart_stale_reference", op="remove_item", line_id=line_id)
            return self._state
        log.info("cart_item_removed", line_id=line_id)
        return self._commit(items)

    def clear_cart(self) -> CartState:
        """Esvazia o carrinho (idempotente)."""
        self._state = CartState()
        log.info("cart_cleared", session_id=self.session_id)
        return self._state
