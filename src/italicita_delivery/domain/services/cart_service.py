
"""Sessões de carrinho: um `Cart` por sessão do storefront.

Criado no início da sessão e descartado no fim; nunca há carrinho global.
"""
from __future__ import annotations
from typing import Dict
from uuid import uuid4
from ..cart import Cart
from ..errors import SessionNotFoundError
from ...core.logging import get_logger

log = get_logger()

class CartSessions:
    """Registro de carrinhos por session_id (registrado no container DI)."""
    def __init__(self):
        self._carts: Dict[str, Cart] = {}

    def open(self, session_id: str | None = None) -> Cart:
        sid = session_id or uuid4().hex
        cart = self._carts.get(sid)
        if cart is None:
            cart = self._carts[sid] = Cart(session_id=sid)
            log.info("session_opened", session_id=sid)
        return cart

    def get(self, session_id: str) -> Cart:
        try:
            return self._carts[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    def close(self, session_id: str) -> None:
        """Encerra a sessão (idempotente)."""
        if self._carts.pop(session_id, None) is not None:
            log.info("session_closed", session_id=session_id)

    def __len__(self) -> int:
        return len(self._carts)
