
"""Serviço de checkout: validação, envio do pedido e handoff de pagamento.

Regra do carrinho: só é limpo após sucesso confirmado (cartão: pedido aceito e
link do WhatsApp gerado; PIX: cliente confirma o pagamento) ou quando a
cobrança PIX é cancelada/expira. Falha no envio NUNCA limpa o carrinho.
"""
from __future__ import annotations
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, Dict, Literal
from kink import di
from pydantic import BaseModel
from ..cart import Cart
from ..errors import (
    EmptyCartError,
    InvalidCheckoutError,
    OrderSubmissionError,
    PaymentNotFoundError,
    PixSessionExpiredError,
)
from ..models import DeliveryData, PaymentData
from ...connectors.pix.pix_service import PixService
from ...connectors.whatsapp.handoff_adapter import OrderDetails, WhatsAppHandoffAdapter
from ...core.guardrails import mask_card_number, only_digits, sanitize_text
from ...core.logging import get_logger
from ...core.settings import Settings
from ...ports.interfaces import OrderReceiptDTO, OrderRequestDTO, OrderSubmitter, PaymentCodeGenerator

log = get_logger()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CheckoutSummary(BaseModel):
    subtotal: Decimal
    delivery_fee: Decimal
    total: Decimal
    item_count: int


class CardCheckoutResult(BaseModel):
    order_id: str
    status: str
    total: Decimal
    whatsapp_link: str


class PixSession(BaseModel):
    """Cobrança PIX pendente. O timer é da UI; aqui só guardamos o prazo."""
    order_id: str
    cart_session_id: str | None = None
    amount: Decimal
    payload: str
    qr_code: str
    copy_paste: str
    expires_at: datetime
    status: Literal["pending", "paid", "cancelled", "expired"] = "pending"

    def seconds_left(self, now: datetime) -> int:
        return max(0, int((self.expires_at - now).total_seconds()))


class PixSessionStore:
    """Cobranças PIX em memória, por order_id."""
    def __init__(self):
        self._sessions: Dict[str, PixSession] = {}

    def save(self, session: PixSession) -> None:
        self._sessions[session.order_id] = session

    def get(self, order_id: str, cart_session_id: str | None = None) -> PixSession:
        session = self._sessions.get(order_id)
        if session is None or (cart_session_id and session.cart_session_id != cart_session_id):
            raise PaymentNotFoundError(order_id)
        return session

    def drop_cart_session(self, cart_session_id: str) -> int:
        """Descarta as cobranças de uma sessão de carrinho encerrada."""
        stale = [oid for oid, s in self._sessions.items() if s.cart_session_id == cart_session_id]
        for oid in stale:
            del self._sessions[oid]
        return len(stale)

    def __len__(self) -> int:
        return len(self._sessions)


class CheckoutService:
    """Orquestra o checkout de um carrinho. Colaboradores vêm do DI se omitidos."""

    def __init__(
        self,
        cart: Cart,
        submitter: OrderSubmitter | None = None,
        pix: PaymentCodeGenerator | None = None,
        whatsapp: WhatsAppHandoffAdapter | None = None,
        pix_sessions: PixSessionStore | None = None,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.cart = cart
        self.settings = settings or di[Settings]
        self.submitter = submitter or di["order_submitter"]
        self.pix = pix or PixService(self.settings)
        self.whatsapp = whatsapp or WhatsAppHandoffAdapter(self.settings)
        self.pix_sessions = pix_sessions or di[PixSessionStore]
        self.clock = clock

    # --- validação ---
    @staticmethod
    def validate_delivery(data: DeliveryData) -> DeliveryData:
        """Nome, endereço e telefone obrigatórios (já sanitizados)."""
        clean = DeliveryData(
            name=sanitize_text(data.name),
            address=sanitize_text(data.address),
            phone=sanitize_text(data.phone),
            complement=sanitize_text(data.complement) or None,
        )
        if not clean.name:
            raise InvalidCheckoutError("Por favor, informe seu nome completo.")
        if not clean.address:
            raise InvalidCheckoutError("Por favor, informe seu endereço de entrega.")
        if not only_digits(clean.phone):
            raise InvalidCheckoutError("Por favor, informe seu telefone.")
        return clean

    @staticmethod
    def validate_payment(data: PaymentData, expected: Literal["card", "pix"] | None = None) -> PaymentData:
        """Campos do cartão são obrigatórios no pagamento com cartão.

        `expected`: método exigido pelo fluxo (o checkout de cartão exige "card").
        """
        if expected and data.method != expected:
            raise InvalidCheckoutError(f"forma de pagamento {data.method!r} não corresponde ao checkout {expected!r}")
        if data.method == "card":
            required = (
                (data.card_number, "o número do cartão"),
                (data.card_name, "o nome no cartão"),
                (data.card_expiry, "a validade do cartão"),
                (data.card_cvv, "o CVV do cartão"),
            )
            for value, label in required:
                if not sanitize_text(value):
                    raise InvalidCheckoutError(f"Por favor, informe {label}.")
        return data

    # --- totais ---
    def summary(self) -> CheckoutSummary:
        state = self.cart.state
        fee = self.settings.delivery_fee
        return CheckoutSummary(subtotal=state.total, delivery_fee=fee, total=state.total + fee, item_count=state.item_count)

    def _submit(self, delivery: DeliveryData, method: Literal["card", "pix"]) -> tuple[OrderReceiptDTO, CheckoutSummary]:
        if self.cart.is_empty:
            raise EmptyCartError("carrinho vazio")
        summary = self.summary()
        order = OrderRequestDTO(
            user_id=self.settings.api_user_id,
            items=list(self.cart.state.items),
            total=summary.total,
            payment_method=method,
            delivery_data=delivery,
        )
        try:
            receipt = self.submitter.submit_order(order)
        except OrderSubmissionError as exc:
            # carrinho permanece intacto para nova tentativa
            log.warning("order_submit_failed", session_id=self.cart.session_id, method=method, error=str(exc))
            raise
        log.info("order_created", session_id=self.cart.session_id, order_id=receipt.order_id, total=str(summary.total))
        return receipt, summary

    # --- cartão + WhatsApp ---
    def place_card_order(self, delivery: DeliveryData, payment: PaymentData) -> CardCheckoutResult:
        delivery = self.validate_delivery(delivery)
        self.validate_payment(payment, expected="card")
        log.info("card_payment_validated", card=mask_card_number(payment.card_number))
        receipt, summary = self._submit(delivery, "card")
        link = self.whatsapp.order_link(OrderDetails(
            order_number=receipt.order_id,
            items=list(self.cart.state.items),
            total=summary.total,
            delivery_data=delivery,
            payment_method="card",
            delivery_fee=summary.delivery_fee,
        ))
        self.cart.clear_cart()
        return CardCheckoutResult(order_id=receipt.order_id, status=receipt.status, total=summary.total, whatsapp_link=link)

    # --- PIX ---
    def start_pix_payment(self, delivery: DeliveryData) -> PixSession:
        """Envia o pedido e gera a cobrança. O carrinho só é limpo na confirmação."""
        delivery = self.validate_delivery(delivery)
        receipt, summary = self._submit(delivery, "pix")
        code = self.pix.generate(receipt.order_id, summary.total)
        session = PixSession(
            order_id=receipt.order_id,
            cart_session_id=self.cart.session_id,
            amount=summary.total,
            payload=code.payload,
            qr_code=code.qr_code,
            copy_paste=code.copy_paste,
            expires_at=self.clock() + timedelta(seconds=self.settings.pix_expiration_s),
        )
        self.pix_sessions.save(session)
        log.info("pix_started", order_id=session.order_id, amount=str(session.amount))
        return session

    def confirm_pix_payment(self, order_id: str) -> PixSession:
        """Cliente informou "já paguei". Expirada -> limpa e levanta erro."""
        session = self.pix_sessions.get(order_id, self.cart.session_id)
        if session.status != "pending":
            return session
        if session.seconds_left(self.clock()) <= 0:
            return self._close_pix(session, "expired", raise_expired=True)
        return self._close_pix(session, "paid")

    def cancel_pix_payment(self, order_id: str) -> PixSession:
        session = self.pix_sessions.get(order_id, self.cart.session_id)
        if session.status != "pending":
            return session
        return self._close_pix(session, "cancelled")

    def _close_pix(self, session: PixSession, status: str, raise_expired: bool = False) -> PixSession:
        closed = session.model_copy(update={"status": status})
        self.pix_sessions.save(closed)
        self.cart.clear_cart()
        log.info("pix_closed", order_id=closed.order_id, status=status)
        if raise_expired:
            raise PixSessionExpiredError(closed.order_id)
        return closed
