
"""Cliente HTTP (httpx) do backend de produtos/pedidos.

Envelope de resposta: {"success": bool, "data": ..., "message"?: str, "error"?: str}.
Implementa as portas CatalogProvider e OrderSubmitter.
"""
from __future__ import annotations
from typing import Any
import httpx
from kink import di
from ...core.catalog import parse_menu_items
from ...core.logging import get_logger
from ...core.settings import Settings
from ...domain.errors import CatalogUnavailableError, OrderSubmissionError
from ...domain.models import MenuItem
from ...ports.interfaces import OrderReceiptDTO, OrderRequestDTO

log = get_logger()

class ApiError(Exception):
    """Falha de transporte ou resposta de erro do backend."""
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code

class OrderApiClient:
    """Cliente síncrono do backend. `transport` permite injetar httpx.MockTransport."""
    def __init__(self, settings: Settings | None = None, transport: httpx.BaseTransport | None = None):
        self.settings = settings or di[Settings]
        self.transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.settings.api_base_url,
            timeout=self.settings.api_timeout_s,
            transport=self.transport,
            headers={"Content-Type": "application/json"},
        )

    def _request(self, method: str, endpoint: str, json: Any = None) -> Any:
        try:
            with self._client() as cli:
                r = cli.request(method, endpoint, json=json)
        except httpx.HTTPError as exc:
            log.error("api_transport_error", endpoint=endpoint, error=str(exc))
            raise ApiError(f"falha de rede: {exc}") from exc
        body: dict = {}
        if "application/json" in r.headers.get("content-type", ""):
            try:
                parsed = r.json()
            except ValueError as exc:
                log.error("api_invalid_json", endpoint=endpoint, status=r.status_code)
                raise ApiError("resposta JSON inválida", status_code=r.status_code) from exc
            if parsed is not None and not isinstance(parsed, dict):
                raise ApiError("resposta fora do envelope {success, data}", status_code=r.status_code)
            body = parsed or {}
        if r.status_code // 100 != 2 or body.get("success") is False:
            detail = body.get("error") or body.get("message") or "API request failed"
            log.error("api_request_failed", endpoint=endpoint, status=r.status_code, error=detail)
            raise ApiError(detail, status_code=r.status_code)
        return body.get("data")

    # --- Catálogo ---
    def get_products(self) -> list[MenuItem]:
        try:
            data = self._request("GET", "/products")
            return parse_menu_items(data or [])
        except (ApiError, ValueError) as exc:
            raise CatalogUnavailableError(str(exc)) from exc

    def get_product(self, product_id: str) -> MenuItem:
        try:
            return MenuItem.model_validate(self._request("GET", f"/products/{product_id}"))
        except (ApiError, ValueError) as exc:
            raise CatalogUnavailableError(str(exc)) from exc

    # --- Pedidos ---
    def submit_order(self, order: OrderRequestDTO) -> OrderReceiptDTO:
        """POST /orders. Qualquer falha vira OrderSubmissionError (carrinho fica intacto)."""
        payload = order.model_dump(mode="json", by_alias=True)
        try:
            data = self._request("POST", "/orders", json=payload)
            receipt = OrderReceiptDTO(order_id=str(data["id"]), status=data.get("status", "preparing"))
        except ApiError as exc:
            raise OrderSubmissionError(str(exc), status_code=exc.status_code) from exc
        except (KeyError, TypeError, ValueError) as exc:
            raise OrderSubmissionError(f"resposta inválida do backend: {exc}") from exc
        log.info("order_submitted", order_id=receipt.order_id, status=receipt.status)
        return receipt

    def get_order(self, order_id: str) -> dict:
        try:
            data = self._request("GET", f"/orders/{order_id}")
        except ApiError as exc:
            raise OrderSubmissionError(str(exc), status_code=exc.status_code) from exc
        if not isinstance(data, dict):
            raise OrderSubmissionError(f"pedido {order_id} sem dados")
        return data
