from decimal import Decimal

from italicita_delivery.domain.models import (
    AddOnOption,
    ConfiguredItem,
    ExtraOption,
    PastaOption,
    SauceOption,
    Selection,
    SizeOption,
)
from italicita_delivery.domain.pricing import calculate_item_price, format_brl

JUNIOR = SizeOption(id="size-1", name="Junior", price_adjustment=Decimal("0"))
ADULTO = SizeOption(id="size-2", name="Adulto", price_adjustment=Decimal("8.00"))
FETTUCCINE = PastaOption(id="pasta-2", name="Fettuccine", price_adjustment=Decimal("2.00"))
BOLONHESA = SauceOption(id="sauce-1", name="Molho Bolonhesa", price=Decimal("3.00"))
BACON = AddOnOption(id="addon-3", name="Bacon", price=Decimal("4.00"))
FRANGO = AddOnOption(id="addon-1", name="Frango Grelhado", price=Decimal("7.00"))
PARMESAO = ExtraOption(id="extra-1", name="Queijo Parmesão", price=Decimal("2.00"))


def configured(selection: Selection, base: str = "25.90") -> ConfiguredItem:
    return ConfiguredItem(menu_item_id="item-1", name="Spaghetti Clássico", base_price=Decimal(base), selection=selection)


def test_spaghetti_adulto_bolonhesa_bacon():
    sel = Selection(selected_size=ADULTO, selected_sauce=BOLONHESA, selected_add_ons=(BACON,))
    assert calculate_item_price(configured(sel)) == Decimal("40.90")


def test_only_size_gives_base_plus_adjustment():
    assert calculate_item_price(configured(Selection(selected_size=JUNIOR))) == Decimal("25.90")
    assert calculate_item_price(configured(Selection(selected_size=ADULTO))) == Decimal("33.90")


def test_price_is_sum_of_every_effect():
    sel = Selection(
        selected_pasta=FETTUCCINE,
        selected_size=ADULTO,
        selected_sauce=BOLONHESA,
        selected_add_ons=(BACON, FRANGO),
        selected_extras=(PARMESAO,),
    )
    expected = Decimal("25.90") + 2 + 8 + 3 + 4 + 7 + 2
    assert calculate_item_price(configured(sel)) == expected


def test_dropping_optional_selection_never_increases_price():
    full = Selection(
        selected_pasta=FETTUCCINE,
        selected_size=ADULTO,
        selected_sauce=BOLONHESA,
        selected_add_ons=(BACON,),
        selected_extras=(PARMESAO,),
    )
    full_price = calculate_item_price(configured(full))
    reduced = [
        full.model_copy(update={"selected_pasta": None}),
        full.model_copy(update={"selected_sauce": None}),
        full.model_copy(update={"selected_add_ons": ()}),
        full.model_copy(update={"selected_extras": ()}),
    ]
    for sel in reduced:
        assert calculate_item_price(configured(sel)) <= full_price


def test_add_on_order_does_not_change_price():
    a = Selection(selected_size=JUNIOR, selected_add_ons=(BACON, FRANGO))
    b = Selection(selected_size=JUNIOR, selected_add_ons=(FRANGO, BACON))
    assert calculate_item_price(configured(a)) == calculate_item_price(configured(b))


def test_price_is_not_rounded():
    tiny = ExtraOption(id="extra-x", name="Pitada", price=Decimal("0.005"))
    sel = Selection(selected_size=JUNIOR, selected_extras=(tiny,))
    assert calculate_item_price(configured(sel, base="10")) == Decimal("10.005")


def test_format_brl_two_decimals():
    assert format_brl(Decimal("40.9")) == "R$ 40.90"
    assert format_brl(Decimal("81.80")) == "R$ 81.80"
    assert format_brl(Decimal("10.005")) == "R$ 10.01"
    assert format_brl(Decimal("0")) == "R$ 0.00"
