
"""Fronteira de personalização: ids vindos da UI -> `Selection` validada.

É aqui (e não no carrinho) que seleções inválidas são barradas.
"""
from __future__ import annotations
from decimal import Decimal
from typing import Iterable, Sequence, TypeVar
from .errors import InvalidSelectionError
from .models import ConfiguredItem, MenuItem, Selection, SizeOption
from .pricing import calculate_item_price

# Pratos sem tamanhos (sobremesas, bebidas) recebem este tamanho neutro.
DEFAULT_SIZE = SizeOption(
    id="size-default",
    name="Junior",
    description="Tamanho padrão",
    weight="300g",
    price_adjustment=Decimal("0"),
)

T = TypeVar("T")


def _pick(options: Sequence[T], option_id: str, label: str, item: MenuItem) -> T:
    opt = next((o for o in options if o.id == option_id), None)
    if opt is None:
        raise InvalidSelectionError(f"{label} {option_id!r} não é oferecido em {item.name}")
    if not opt.is_available:
        raise InvalidSelectionError(f"{label} {opt.name!r} indisponível no momento")
    return opt


def _first_available(options: Sequence[T], label: str, item: MenuItem) -> T:
    opt = next((o for o in options if o.is_available), None)
    if opt is None:
        raise InvalidSelectionError(f"nenhum(a) {label} disponível para {item.name}")
    return opt


def _pick_many(options: Sequence[T], ids: Iterable[str], label: str, item: MenuItem) -> tuple[T, ...]:
    ids = list(ids)
    if len(ids) != len(set(ids)):
        raise InvalidSelectionError(f"{label} repetido: {ids}")
    return tuple(_pick(options, i, label, item) for i in ids)


def build_selection(
    menu_item: MenuItem,
    *,
    pasta_id: str | None = None,
    size_id: str | None = None,
    sauce_id: str | None = None,
    add_on_ids: Iterable[str] = (),
    extra_ids: Iterable[str] = (),
) -> Selection:
    """Resolve ids contra as opções do prato e monta a seleção.

    - tamanho: obrigatório; sem id usa o primeiro disponível, ou `DEFAULT_SIZE`
      quando o prato não tem tamanhos.
    - massa: se o prato oferece massas e nenhuma veio, usa a primeira disponível.
    - molho/adicionais/extras: opcionais, mas precisam ser oferecidos e estar disponíveis.

    :raises InvalidSelectionError: prato indisponível ou opção inválida.
    """
    if not menu_item.is_available:
        raise InvalidSelectionError(f"{menu_item.name} indisponível no momento")

    if menu_item.allowed_sizes:
        if size_id:
            size = _pick(menu_item.allowed_sizes, size_id, "tamanho", menu_item)
        else:
            size = _first_available(menu_item.allowed_sizes, "tamanho", menu_item)
    elif size_id in (None, DEFAULT_SIZE.id):
        size = DEFAULT_SIZE
    else:
        raise InvalidSelectionError(f"{menu_item.name} não aceita escolha de tamanho")

    pasta = None
    if menu_item.allowed_pasta:
        if pasta_id:
            pasta = _pick(menu_item.allowed_pasta, pasta_id, "massa", menu_item)
        else:
            pasta = _first_available(menu_item.allowed_pasta, "massa", menu_item)
    elif pasta_id:
        raise InvalidSelectionError(f"{menu_item.name} não aceita escolha de massa")

    sauce = _pick(menu_item.allowed_sauces, sauce_id, "molho", menu_item) if sauce_id else None

    return Selection(
        selected_pasta=pasta,
        selected_size=size,
        selected_sauce=sauce,
        selected_add_ons=_pick_many(menu_item.allowed_add_ons, add_on_ids, "adicional", menu_item),
        selected_extras=_pick_many(menu_item.allowed_extras, extra_ids, "extra", menu_item),
    )


def preview_price(menu_item: MenuItem, selection: Selection) -> Decimal:
    """Preço mostrado enquanto o cliente personaliza o prato."""
    return calculate_item_price(
        ConfiguredItem(menu_item_id=menu_item.id, name=menu_item.name, base_price=menu_item.base_price, selection=selection)
    )
