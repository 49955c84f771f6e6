
"""Bootstrap do container de DI (kink): a raiz de composição do storefront."""
from kink import di
from .settings import Settings
from .logging import get_logger
from .catalog import load_catalog
from ..connectors.api.local_order_submitter import LocalOrderSubmitter
from ..connectors.api.order_api_client import OrderApiClient
from ..connectors.pix.pix_service import PixService
from ..connectors.whatsapp.handoff_adapter import WhatsAppHandoffAdapter
from ..domain.services.cart_service import CartSessions
from ..domain.services.checkout_service import PixSessionStore
from ..domain.services.menu_service import MenuService
from ..ports.interfaces import CatalogProvider

def bootstrap_di(settings: Settings | None = None) -> None:
    settings = settings or Settings()
    di[Settings] = settings
    di["logger"] = get_logger(settings.log_level)
    di["catalog"] = load_catalog(settings.catalog_path)
    di[MenuService] = MenuService(di["catalog"])
    di[CartSessions] = CartSessions()
    di[PixSessionStore] = PixSessionStore()
    di[PixService] = PixService(settings)
    di[WhatsAppHandoffAdapter] = WhatsAppHandoffAdapter(settings)
    di[OrderApiClient] = OrderApiClient(settings)
    # "api" envia ao backend; "local" aceita o pedido em memória (demonstração)
    di["order_submitter"] = di[OrderApiClient] if settings.order_backend == "api" else LocalOrderSubmitter()

def reload_catalog(provider: CatalogProvider | None = None) -> int:
    """Recarrega o catálogo (disco, ou `provider` se informado) e reconstrói o MenuService."""
    di["catalog"] = provider.get_products() if provider else load_catalog(di[Settings].catalog_path)
    di[MenuService] = MenuService(di["catalog"])
    return len(di["catalog"])
