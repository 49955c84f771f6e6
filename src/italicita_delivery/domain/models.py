
"""Modelos Pydantic do cardápio, personalizações e carrinho.

Opções e pratos são imutáveis (vêm do catálogo). `Selection` é o tipo fechado
que atravessa a fronteira entre a UI e o carrinho; nada de payloads soltos.
"""
from __future__ import annotations
from decimal import Decimal
from enum import Enum
from typing import Literal
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

# No fio (feed do backend, POST /orders) os campos são camelCase; em Python, snake_case.
WIRE_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)
FROZEN_WIRE_CONFIG = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class ProductCategory(str, Enum):
    MASSAS = "massas"
    RISOTOS = "risotos"
    CARNES = "carnes"
    SALADAS = "saladas"
    SOBREMESAS = "sobremesas"
    BEBIDAS = "bebidas"
    ACOMPANHAMENTOS = "acompanhamentos"


class _Option(BaseModel):
    model_config = FROZEN_WIRE_CONFIG

    id: str = Field(min_length=1)
    name: str
    description: str = ""
    is_available: bool = True


class PastaOption(_Option):
    """Massa: ajuste aplicado uma vez (pode ser 0)."""
    weight: str = ""
    price_adjustment: Decimal = Field(default=Decimal("0"), ge=0)


class SizeOption(_Option):
    """Tamanho (Junior/Adulto nos dados de referência, mas o nome é livre)."""
    weight: str = ""
    price_adjustment: Decimal = Field(default=Decimal("0"), ge=0)


class SauceOption(_Option):
    weight: str = ""
    price: Decimal = Field(default=Decimal("0"), ge=0)


class AddOnOption(_Option):
    weight: str = ""
    price: Decimal = Field(default=Decimal("0"), ge=0)


class ExtraOption(_Option):
    price: Decimal = Field(default=Decimal("0"), ge=0)


class MenuItem(BaseModel):
    """Prato do catálogo com as opções que ele aceita."""
    model_config = FROZEN_WIRE_CONFIG

    id: str = Field(min_length=1)
    name: str
    description: str = ""
    category: ProductCategory
    base_price: Decimal = Field(ge=0)
    images: tuple[str, ...] = ()
    is_available: bool = True
    preparation_time: int = Field(default=0, ge=0)  # minutos
    tags: frozenset[str] = frozenset()
    allowed_pasta: tuple[PastaOption, ...] = ()
    allowed_sizes: tuple[SizeOption, ...] = ()
    allowed_sauces: tuple[SauceOption, ...] = ()
    allowed_add_ons: tuple[AddOnOption, ...] = ()
    allowed_extras: tuple[ExtraOption, ...] = ()


class Selection(BaseModel):
    """Escolhas do cliente para um prato. Tamanho é obrigatório."""
    model_config = FROZEN_WIRE_CONFIG

    selected_pasta: PastaOption | None = None
    selected_size: SizeOption
    selected_sauce: SauceOption | None = None
    selected_add_ons: tuple[AddOnOption, ...] = ()
    selected_extras: tuple[ExtraOption, ...] = ()

    @model_validator(mode="after")
    def _unique_ids(self) -> "Selection":
        for label, opts in (("adicional", self.selected_add_ons), ("extra", self.selected_extras)):
            ids = [o.id for o in opts]
            if len(ids) != len(set(ids)):
                raise ValueError(f"{label} repetido na seleção: {ids}")
        return self


class ConfiguredItem(BaseModel):
    """Prato + seleção, antes de entrar no carrinho (usado para preview de preço)."""
    model_config = FROZEN_WIRE_CONFIG

    menu_item_id: str
    name: str
    base_price: Decimal
    selection: Selection


class CartLine(BaseModel):
    """Linha do carrinho. Só a quantidade muda (via model_copy)."""
    model_config = FROZEN_WIRE_CONFIG

    id: str
    menu_item_id: str
    name: str
    base_price: Decimal
    quantity: int = Field(ge=1)
    selection: Selection
    final_price: Decimal

    @property
    def line_total(self) -> Decimal:
        return self.final_price * self.quantity


class CartState(BaseModel):
    """Snapshot derivado das linhas; nunca editado diretamente."""
    model_config = FROZEN_WIRE_CONFIG

    items: tuple[CartLine, ...] = ()
    total: Decimal = Decimal("0")
    item_count: int = 0


class DeliveryData(BaseModel):
    model_config = WIRE_CONFIG

    name: str = ""
    address: str = ""
    phone: str = ""
    complement: str | None = None


class PaymentData(BaseModel):
    model_config = WIRE_CONFIG

    method: Literal["card", "pix"] = "pix"
    card_number: str | None = None
    card_name: str | None = None
    card_expiry: str | None = None
    card_cvv: str | None = None
