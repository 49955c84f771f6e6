
"""Adapter de handoff para WhatsApp: mensagem do pedido + deep link wa.me."""
from __future__ import annotations
from decimal import Decimal
from urllib.parse import quote
from kink import di
from pydantic import BaseModel
from ...core.guardrails import only_digits
from ...core.settings import Settings
from ...domain.models import CartLine, DeliveryData
from ...domain.pricing import format_brl

SUPPORT_MESSAGE = "Olá! Gostaria de tirar uma dúvida sobre meu pedido."

class OrderDetails(BaseModel):
    """Dados que vão na mensagem. `total` já inclui a taxa de entrega."""
    order_number: str
    items: list[CartLine]
    total: Decimal
    delivery_data: DeliveryData
    payment_method: str
    delivery_fee: Decimal

def build_order_message(order: OrderDetails) -> str:
    """Gera o resumo do pedido em PT-BR (formatação do WhatsApp com *negrito*)."""
    lines = [
        "🍝 *PEDIDO ITALICITA DELIVERY* 🍝",
        "",
        f"*Nº do Pedido:* {order.order_number}",
        "",
        "*ITENS DO PEDIDO:*",
    ]
    for it in order.items:
        lines.append(f"• {it.quantity}x {it.name} - {format_brl(it.line_total)}")
    lines += [
        "",
        "*RESUMO DO PEDIDO:*",
        f"Subtotal: {format_brl(order.total - order.delivery_fee)}",
        f"Taxa de entrega: {format_brl(order.delivery_fee)}",
        f"*Total: {format_brl(order.total)}*",
        "",
        "*DADOS DE ENTREGA:*",
        f"Nome: {order.delivery_data.name}",
        f"Endereço: {order.delivery_data.address}",
    ]
    if order.delivery_data.complement:
        lines.append(f"Complemento: {order.delivery_data.complement}")
    lines += [
        f"Telefone: {order.delivery_data.phone}",
        "",
        "*FORMA DE PAGAMENTO:*",
        "PIX" if order.payment_method == "pix" else "Cartão",
        "",
    ]
    if order.payment_method == "pix":
        lines += [
            "💰 *INSTRUÇÕES PIX:*",
            "1. Aguarde o código PIX",
            "2. Realize o pagamento",
            "3. Seu pedido será preparado após confirmação",
        ]
    else:
        lines += ["💳 *PAGAMENTO VIA CARTÃO:*", "Pagamento processado com sucesso!"]
    lines += ["", "⏰ *TEMPO DE ENTREGA:*", "Previsão: 30-45 minutos", "", "📞 *DÚVIDAS?* Entre em contato!"]
    return "\n".join(lines) + "\n"

def build_whatsapp_link(phone: str, text: str) -> str:
    """Deep link universal (funciona em iOS, Android e web)."""
    return f"https://wa.me/{only_digits(phone)}?text={quote(text, safe='')}"

class WhatsAppHandoffAdapter:
    """Gera links de handoff para o número do restaurante."""
    def __init__(self, settings: Settings | None = None):
        self.s = settings or di[Settings]

    def order_link(self, order: OrderDetails) -> str:
        return build_whatsapp_link(self.s.restaurant_phone, build_order_message(order))

    def support_link(self, message: str | None = None) -> str:
        return build_whatsapp_link(self.s.restaurant_phone, message or SUPPORT_MESSAGE)
