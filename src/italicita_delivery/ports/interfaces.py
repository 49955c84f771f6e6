
"""Portas hexagonais (interfaces) e DTOs dos colaboradores externos."""
from decimal import Decimal
from typing import Literal, Protocol
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from ..domain.models import CartLine, DeliveryData, MenuItem

class OrderRequestDTO(BaseModel):
    """Pedido enviado ao backend. `total` já inclui a taxa de entrega."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: str | None = None
    items: list[CartLine]
    total: Decimal
    payment_method: Literal["card", "pix"]
    delivery_data: DeliveryData

class OrderReceiptDTO(BaseModel):
    """Resposta do backend: id opaco do pedido e status."""
    order_id: str
    status: str = "preparing"

class PixPayloadDTO(BaseModel):
    payload: str
    qr_code: str
    copy_paste: str

class CatalogProvider(Protocol):
    def get_products(self) -> list[MenuItem]: ...

class OrderSubmitter(Protocol):
    def submit_order(self, order: OrderRequestDTO) -> OrderReceiptDTO: ...

class PaymentCodeGenerator(Protocol):
    def generate(self, order_id: str, amount: Decimal) -> PixPayloadDTO: ...
