import pytest
from kink import di

from italicita_delivery.core.catalog import load_catalog
from italicita_delivery.core.di import bootstrap_di
from italicita_delivery.core.logging import get_logger
from italicita_delivery.core.settings import DEFAULT_CATALOG_PATH, Settings
from italicita_delivery.domain.cart import Cart
from italicita_delivery.domain.errors import OrderSubmissionError
from italicita_delivery.domain.models import DeliveryData
from italicita_delivery.domain.services.menu_service import MenuService
from italicita_delivery.ports.interfaces import OrderReceiptDTO, OrderRequestDTO


class FakeSubmitter:
    """Backend falso: guarda pedidos e pode falhar sob demanda."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.orders: list[OrderRequestDTO] = []

    def submit_order(self, order: OrderRequestDTO) -> OrderReceiptDTO:
        if self.fail:
            raise OrderSubmissionError("backend fora do ar", status_code=503)
        self.orders.append(order)
        return OrderReceiptDTO(order_id=f"IT{len(self.orders):09d}", status="preparing")


@pytest.fixture(autouse=True)
def _fresh_log_stream():
    # structlog guarda o sys.stdout do momento do configure; um teste com capsys
    # deixaria o stream fechado para os seguintes. Reconfigura a cada teste.
    get_logger()


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def catalog():
    return load_catalog(DEFAULT_CATALOG_PATH)


@pytest.fixture
def menu(catalog):
    return MenuService(catalog)


@pytest.fixture
def spaghetti(menu):
    return menu.get_item("item-1")


@pytest.fixture
def cart():
    return Cart(session_id="sess-test")


@pytest.fixture
def submitter():
    return FakeSubmitter()


@pytest.fixture
def delivery():
    return DeliveryData(name="Maria Souza", address="Rua das Flores, 123", phone="(21) 99999-0000")


@pytest.fixture
def container(settings, submitter):
    bootstrap_di(settings)
    di["order_submitter"] = submitter
    return di
