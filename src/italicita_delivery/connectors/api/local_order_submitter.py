
"""Submissor local (modo demonstração): aceita o pedido sem backend."""
from __future__ import annotations
import random
import time
from ...core.logging import get_logger
from ...domain.errors import OrderSubmissionError
from ...ports.interfaces import OrderReceiptDTO, OrderRequestDTO

log = get_logger()

def generate_order_number() -> str:
    """`IT` + últimos 6 dígitos do epoch em ms + 3 dígitos aleatórios."""
    return f"IT{str(int(time.time() * 1000))[-6:]}{random.randint(0, 999):03d}"

class LocalOrderSubmitter:
    """Gera o número do pedido localmente, como o app fazia antes do backend."""
    def __init__(self):
        self.orders: dict[str, OrderRequestDTO] = {}

    def submit_order(self, order: OrderRequestDTO) -> OrderReceiptDTO:
        if not order.items:
            raise OrderSubmissionError("pedido sem itens", status_code=422)
        order_id = generate_order_number()
        self.orders[order_id] = order
        log.info("order_accepted_locally", order_id=order_id, total=str(order.total), payment_method=order.payment_method)
        return OrderReceiptDTO(order_id=order_id, status="preparing")
