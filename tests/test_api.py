import pytest

from conftest import FakeSubmitter
from italicita_delivery.api.app import app
from italicita_delivery.domain.services.checkout_service import PixSessionStore

SCENARIO = {"menu_item_id": "item-1", "size_id": "size-2", "sauce_id": "sauce-1", "add_on_ids": ["addon-3"]}
DELIVERY = {"name": "Maria Souza", "address": "Rua das Flores, 123", "phone": "21999990000"}
CARD = {"method": "card", "cardNumber": "4111111111111111", "cardName": "MARIA", "cardExpiry": "12/30", "cardCvv": "123"}


@pytest.fixture
def client(container):
    app.config.update(TESTING=True)
    return app.test_client()


@pytest.fixture
def session_id(client):
    resp = client.post("/sessions")
    assert resp.status_code == 201, resp.text
    return resp.get_json()["session_id"]


def test_healthz(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.get_json() == {"ok": True, "catalog_items": 8}


def test_menu_list_and_filters(client):
    body = client.get("/menu").get_json()
    assert len(body["items"]) == 8
    assert "massas" in body["categories"]
    massas = client.get("/menu", query_string={"category": "massas"}).get_json()["items"]
    assert [it["id"] for it in massas] == ["item-1", "item-2", "item-3"]
    found = client.get("/menu", query_string={"q": "batata"}).get_json()["items"]
    assert [it["id"] for it in found] == ["item-8"]
    assert client.get("/menu", query_string={"category": "pizzas"}).status_code == 400


def test_menu_detail(client):
    resp = client.get("/menu/item-1")
    assert resp.status_code == 200
    assert resp.get_json()["base_price"] == "25.90"
    assert client.get("/menu/item-99").status_code == 404


def test_add_same_item_twice_merges(client, session_id):
    url = f"/sessions/{session_id}/cart/items"
    first = client.post(url, json=SCENARIO)
    assert first.status_code == 201, first.text
    assert first.get_json()["unit_price"] == "40.90"
    body = client.post(url, json=SCENARIO).get_json()
    assert len(body["items"]) == 1
    assert body["items"][0]["quantity"] == 2
    assert body["total"] == "81.80"
    assert body["item_count"] == 2
    assert body["total_display"] == "R$ 81.80"


def test_add_invalid_selection_is_400(client, session_id):
    url = f"/sessions/{session_id}/cart/items"
    resp = client.post(url, json={"menu_item_id": "item-1", "size_id": "size-9"})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "InvalidSelectionError"
    assert client.post(url, json={"menu_item_id": "item-99"}).status_code == 404
    assert client.post(url, json={"size_id": "size-1"}).status_code == 400
    assert client.get(f"/sessions/{session_id}/cart").get_json()["items"] == []


def test_update_remove_and_clear(client, session_id):
    url = f"/sessions/{session_id}/cart/items"
    line_id = client.post(url, json=SCENARIO).get_json()["items"][0]["id"]
    client.post(url, json={"menu_item_id": "item-8"})

    body = client.patch(f"{url}/{line_id}", json={"quantity": 3}).get_json()
    assert body["items"][0]["quantity"] == 3
    assert body["item_count"] == 4

    body = client.patch(f"{url}/{line_id}", json={"quantity": 0}).get_json()
    assert [it["menu_item_id"] for it in body["items"]] == ["item-8"]

    assert client.delete(f"{url}/nao-existe").status_code == 200

    body = client.delete(f"/sessions/{session_id}/cart").get_json()
    assert body["items"] == [] and body["total"] == "0" and body["item_count"] == 0


def test_unknown_session_is_404(client):
    assert client.get("/sessions/nao-existe/cart").status_code == 404


def test_closed_session_is_gone(client, session_id):
    assert client.delete(f"/sessions/{session_id}").status_code == 204
    assert client.get(f"/sessions/{session_id}/cart").status_code == 404


def test_checkout_summary(client, session_id):
    client.post(f"/sessions/{session_id}/cart/items", json=SCENARIO)
    body = client.get(f"/sessions/{session_id}/checkout/summary").get_json()
    assert body == {"subtotal": "40.90", "delivery_fee": "5.00", "total": "45.90", "item_count": 1}


def test_card_checkout_clears_cart(client, session_id, submitter):
    client.post(f"/sessions/{session_id}/cart/items", json=SCENARIO)
    resp = client.post(f"/sessions/{session_id}/checkout/card", json={"delivery": DELIVERY, "payment": CARD})
    assert resp.status_code == 201, resp.text
    body = resp.get_json()
    assert body["total"] == "45.90"
    assert body["whatsapp_link"].startswith("https://wa.me/")
    assert len(submitter.orders) == 1
    assert client.get(f"/sessions/{session_id}/cart").get_json()["items"] == []


def test_checkout_failure_keeps_cart(client, session_id):
    from kink import di

    di["order_submitter"] = FakeSubmitter(fail=True)
    client.post(f"/sessions/{session_id}/cart/items", json=SCENARIO)
    resp = client.post(f"/sessions/{session_id}/checkout/card", json={"delivery": DELIVERY, "payment": CARD})
    assert resp.status_code == 502
    assert resp.get_json()["error"] == "OrderSubmissionError"
    assert client.get(f"/sessions/{session_id}/cart").get_json()["item_count"] == 1


def test_checkout_validation_errors(client, session_id):
    url = f"/sessions/{session_id}/checkout/card"
    assert client.post(url, json={"delivery": DELIVERY, "payment": CARD}).status_code == 409
    client.post(f"/sessions/{session_id}/cart/items", json=SCENARIO)
    assert client.post(url, json={"delivery": DELIVERY | {"name": ""}, "payment": CARD}).status_code == 400
    assert client.post(url, json={"payment": CARD}).status_code == 400


def test_pix_flow_confirm(client, session_id):
    client.post(f"/sessions/{session_id}/cart/items", json=SCENARIO)
    resp = client.post(f"/sessions/{session_id}/checkout/pix", json={"delivery": DELIVERY})
    assert resp.status_code == 201, resp.text
    pix = resp.get_json()
    assert pix["amount"] == "45.90"
    assert pix["status"] == "pending"
    # navegar para o pagamento não limpa o carrinho
    assert client.get(f"/sessions/{session_id}/cart").get_json()["item_count"] == 1

    confirmed = client.post(f"/sessions/{session_id}/checkout/pix/{pix['order_id']}/confirm")
    assert confirmed.get_json()["status"] == "paid"
    assert client.get(f"/sessions/{session_id}/cart").get_json()["item_count"] == 0


def test_pix_flow_cancel(client, session_id):
    client.post(f"/sessions/{session_id}/cart/items", json=SCENARIO)
    pix = client.post(f"/sessions/{session_id}/checkout/pix", json={"delivery": DELIVERY}).get_json()
    resp = client.post(f"/sessions/{session_id}/checkout/pix/{pix['order_id']}/cancel")
    assert resp.get_json()["status"] == "cancelled"
    assert client.get(f"/sessions/{session_id}/cart").get_json()["items"] == []
    assert client.post(f"/sessions/{session_id}/checkout/pix/IT0/confirm").status_code == 404


def test_support_link(client):
    link = client.get("/support/whatsapp").get_json()["link"]
    assert link.startswith("https://wa.me/5521998526500?text=")


def test_reload_catalog(client):
    assert client.post("/admin/reload-catalog").get_json() == {"ok": True, "items_count": 8}


def test_card_checkout_with_pix_method_is_rejected(client, session_id, submitter):
    client.post(f"/sessions/{session_id}/cart/items", json=SCENARIO)
    resp = client.post(f"/sessions/{session_id}/checkout/card", json={"delivery": DELIVERY, "payment": {"method": "pix"}})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "InvalidCheckoutError"
    assert submitter.orders == []
    assert client.get(f"/sessions/{session_id}/cart").get_json()["item_count"] == 1


def test_closing_session_discards_pix_charges(client, session_id, container):
    for _ in range(3):
        client.post(f"/sessions/{session_id}/cart/items", json=SCENARIO)
        pix = client.post(f"/sessions/{session_id}/checkout/pix", json={"delivery": DELIVERY}).get_json()
        client.post(f"/sessions/{session_id}/checkout/pix/{pix['order_id']}/confirm")
    assert len(container[PixSessionStore]) == 3
    client.delete(f"/sessions/{session_id}")
    assert len(container[PixSessionStore]) == 0


def test_menu_search_with_invalid_category_is_400(client):
    resp = client.get("/menu", query_string={"q": "massa", "category": "pizzas"})
    assert resp.status_code == 400
    found = client.get("/menu", query_string={"q": "molho", "category": "massas"}).get_json()["items"]
    assert found and all(it["category"] == "massas" for it in found)
