
"""Configurações Pydantic Settings para o storefront."""
from decimal import Decimal
from pathlib import Path
from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

DEFAULT_CATALOG_PATH = str(Path(__file__).resolve().parent.parent / "data" / "catalog.json")

class Settings(BaseSettings):
    """Configurações da aplicação. Carrega de env (prefixo ITD_) e .env.

    Tudo tem default para o app subir em modo demonstração.
    """
    model_config = SettingsConfigDict(env_file=".env", env_prefix="ITD_", case_sensitive=False)

    # Flask
    flask_debug: bool = Field(default=False)
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Catálogo local (JSON)
    catalog_path: str = Field(default=DEFAULT_CATALOG_PATH)

    # Backend de pedidos
    api_base_url: str = Field(default="http://localhost:5000/api", description="URL base da API de pedidos/produtos")
    api_timeout_s: float = Field(default=10.0)
    api_user_id: str = Field(default="user-demo-1")
    order_backend: Literal["api", "local"] = Field(default="local", description="local = aceita pedidos em memória")

    # Pedido
    delivery_fee: Decimal = Field(default=Decimal("5.00"), ge=0)
    restaurant_phone: str = Field(default="5521998526500", description="55 + DDD + número")

    # PIX (mock)
    pix_key: str = Field(default="12345678900")
    pix_recipient: str = Field(default="ITALICITA DELIVERY")
    pix_city: str = Field(default="NITEROI")
    pix_expiration_s: int = Field(default=30 * 60)

    # Logs
    log_level: int = Field(default=20)
