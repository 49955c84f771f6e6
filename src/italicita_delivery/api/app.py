
"""API Flask do storefront: cardápio, sessões de carrinho e checkout (cartão/PIX)."""
from __future__ import annotations
from flask import Flask, request, jsonify
from kink import di
from pydantic import BaseModel, Field, ValidationError
from ..core.di import bootstrap_di, reload_catalog
from ..core.logging import bind_session, get_logger
from ..core.settings import Settings
from ..connectors.api.order_api_client import OrderApiClient
from ..connectors.pix.pix_service import PixService
from ..connectors.whatsapp.handoff_adapter import WhatsAppHandoffAdapter
from ..domain.cart import Cart
from ..domain.customization import build_selection, preview_price
from ..domain.errors import (
    CatalogUnavailableError,
    EmptyCartError,
    InvalidCheckoutError,
    InvalidSelectionError,
    MenuItemNotFoundError,
    OrderSubmissionError,
    PaymentNotFoundError,
    PixSessionExpiredError,
    SessionNotFoundError,
    StorefrontError,
)
from ..domain.models import DeliveryData, PaymentData, ProductCategory
from ..domain.pricing import format_brl
from ..domain.services.cart_service import CartSessions
from ..domain.services.checkout_service import CheckoutService, PixSessionStore
from ..domain.services.menu_service import MenuService

class AddItemArgs(BaseModel):
    menu_item_id: str
    pasta_id: str | None = None
    size_id: str | None = None
    sauce_id: str | None = None
    add_on_ids: list[str] = []
    extra_ids: list[str] = []

class UpdateQuantityArgs(BaseModel):
    quantity: int

class CheckoutArgs(BaseModel):
    delivery: DeliveryData
    payment: PaymentData = Field(default_factory=lambda: PaymentData(method="card"))

ERROR_STATUS = {
    InvalidSelectionError: 400,
    InvalidCheckoutError: 400,
    MenuItemNotFoundError: 404,
    SessionNotFoundError: 404,
    PaymentNotFoundError: 404,
    EmptyCartError: 409,
    PixSessionExpiredError: 410,
    OrderSubmissionError: 502,
    CatalogUnavailableError: 503,
}

app = Flask(__name__)
bootstrap_di()
log = get_logger()

@app.errorhandler(StorefrontError)
def handle_storefront_error(exc: StorefrontError):
    status = next((code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)), 400)
    log.info("request_error", error=type(exc).__name__, detail=str(exc), status=status)
    return jsonify({"error": type(exc).__name__, "detail": str(exc)}), status

@app.errorhandler(ValidationError)
def handle_validation_error(exc: ValidationError):
    return jsonify({"error": "ValidationError", "detail": exc.errors(include_url=False, include_context=False)}), 400

def _body() -> dict:
    return request.get_json(force=True, silent=True) or {}

def _cart(session_id: str) -> Cart:
    bind_session(session_id)
    return di[CartSessions].get(session_id)

def _checkout(cart: Cart) -> CheckoutService:
    return CheckoutService(cart, pix=di[PixService], whatsapp=di[WhatsAppHandoffAdapter])

def _cart_view(cart: Cart) -> dict:
    state = cart.state
    return state.model_dump(mode="json") | {"session_id": cart.session_id, "total_display": format_brl(state.total)}

@app.get("/healthz")
def healthz():
    """Health check básico."""
    return {"ok": True, "catalog_items": len(di["catalog"])}

@app.post("/admin/reload-catalog")
def admin_reload_catalog():
    """`?source=api` busca o catálogo no backend em vez do arquivo local."""
    provider = di[OrderApiClient] if request.args.get("source") == "api" else None
    return {"ok": True, "items_count": reload_catalog(provider)}

# ---------- Cardápio ----------
@app.get("/menu")
def menu_list():
    menu = di[MenuService]
    q = request.args.get("q")
    category = request.args.get("category")
    try:
        cat = ProductCategory(category) if category else None
    except ValueError:
        return jsonify({"error": "ValidationError", "detail": f"categoria inválida: {category}"}), 400
    items = menu.search(q) if q else menu.list_items(category=cat)
    if q and cat:
        items = [it for it in items if it.category == cat]
    return jsonify({
        "categories": [c.value for c in menu.categories()],
        "items": [it.model_dump(mode="json") for it in items],
    })

@app.get("/menu/<item_id>")
def menu_detail(item_id: str):
    return jsonify(di[MenuService].get_item(item_id).model_dump(mode="json"))

# ---------- Sessões / carrinho ----------
@app.post("/sessions")
def open_session():
    cart = di[CartSessions].open()
    bind_session(cart.session_id)
    return jsonify(_cart_view(cart)), 201

@app.delete("/sessions/<session_id>")
def close_session(session_id: str):
    di[CartSessions].close(session_id)
    di[PixSessionStore].drop_cart_session(session_id)
    return "", 204

@app.get("/sessions/<session_id>/cart")
def get_cart(session_id: str):
    return jsonify(_cart_view(_cart(session_id)))

@app.post("/sessions/<session_id>/cart/items")
def add_cart_item(session_id: str):
    """Monta a seleção a partir de ids e adiciona (ou soma) no carrinho."""
    cart = _cart(session_id)
    args = AddItemArgs.model_validate(_body())
    item = di[MenuService].get_item(args.menu_item_id)
    selection = build_selection(
        item,
        pasta_id=args.pasta_id,
        size_id=args.size_id,
        sauce_id=args.sauce_id,
        add_on_ids=args.add_on_ids,
        extra_ids=args.extra_ids,
    )
    cart.add_item(item, selection)
    return jsonify(_cart_view(cart) | {"unit_price": str(preview_price(item, selection))}), 201

@app.patch("/sessions/<session_id>/cart/items/<line_id>")
def update_cart_item(session_id: str, line_id: str):
    cart = _cart(session_id)
    args = UpdateQuantityArgs.model_validate(_body())
    cart.update_quantity(line_id, args.quantity)
    return jsonify(_cart_view(cart))

@app.delete("/sessions/<session_id>/cart/items/<line_id>")
def remove_cart_item(session_id: str, line_id: str):
    cart = _cart(session_id)
    cart.remove_item(line_id)
    return jsonify(_cart_view(cart))

@app.delete("/sessions/<session_id>/cart")
def clear_cart(session_id: str):
    cart = _cart(session_id)
    cart.clear_cart()
    return jsonify(_cart_view(cart))

# ---------- Checkout ----------
@app.get("/sessions/<session_id>/checkout/summary")
def checkout_summary(session_id: str):
    return jsonify(_checkout(_cart(session_id)).summary().model_dump(mode="json"))

@app.post("/sessions/<session_id>/checkout/card")
def checkout_card(session_id: str):
    """Pedido no cartão: envia ao backend e devolve o link do WhatsApp."""
    args = CheckoutArgs.model_validate(_body())
    result = _checkout(_cart(session_id)).place_card_order(args.delivery, args.payment)
    return jsonify(result.model_dump(mode="json")), 201

@app.post("/sessions/<session_id>/checkout/pix")
def checkout_pix(session_id: str):
    args = CheckoutArgs.model_validate(_body())
    session = _checkout(_cart(session_id)).start_pix_payment(args.delivery)
    return jsonify(session.model_dump(mode="json")), 201

@app.post("/sessions/<session_id>/checkout/pix/<order_id>/confirm")
def checkout_pix_confirm(session_id: str, order_id: str):
    session = _checkout(_cart(session_id)).confirm_pix_payment(order_id)
    return jsonify(session.model_dump(mode="json"))

@app.post("/sessions/<session_id>/checkout/pix/<order_id>/cancel")
def checkout_pix_cancel(session_id: str, order_id: str):
    session = _checkout(_cart(session_id)).cancel_pix_payment(order_id)
    return jsonify(session.model_dump(mode="json"))

@app.get("/support/whatsapp")
def support_whatsapp():
    return {"link": di[WhatsAppHandoffAdapter].support_link(request.args.get("message"))}

def main() -> None:
    """Sobe o servidor de desenvolvimento do Flask."""
    s = di[Settings]
    app.run(host=s.host, port=s.port, debug=s.flask_debug)
