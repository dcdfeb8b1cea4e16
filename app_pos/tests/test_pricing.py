import pytest

from app_pos.models import CartItem, Product
from app_pos.services import pricing


def make_product(price=15000, wholesale_price=0, min_wholesale_qty=0):
    return Product(id='p', name='Producto', price=price, wholesale_price=wholesale_price,
                   min_wholesale_qty=min_wholesale_qty, stock=100)


@pytest.mark.parametrize('qty', [1, 2, 5, 50, 1000])
def test_retail_price_without_wholesale_tier(qty):
    p = make_product()
    assert pricing.unit_price(p, qty) == 15000


def test_tier_needs_both_price_and_minimum():
    # only one half of the tier configured = no tier
    assert not pricing.has_wholesale_tier(make_product(wholesale_price=10000))
    assert not pricing.has_wholesale_tier(make_product(min_wholesale_qty=5))
    assert pricing.unit_price(make_product(wholesale_price=10000), 100) == 15000
    assert pricing.unit_price(make_product(min_wholesale_qty=5), 100) == 15000


def test_wholesale_threshold():
    p = make_product(wholesale_price=10000, min_wholesale_qty=5)
    assert pricing.unit_price(p, 4) == 15000
    assert pricing.unit_price(p, 5) == 10000
    assert pricing.unit_price(p, 100) == 10000


def test_frozen_flag_decides_line_price():
    p = make_product(wholesale_price=10000, min_wholesale_qty=5)
    # flag frozen as wholesale even though quantity is under the minimum
    assert pricing.line_subtotal(CartItem(product=p, quantity=2, is_wholesale=True)) == 20000
    assert pricing.line_subtotal(CartItem(product=p, quantity=6, is_wholesale=False)) == 90000


def test_wholesale_flag_without_wholesale_price_charges_retail():
    p = make_product()
    assert pricing.frozen_unit_price(p, True) == 15000


def test_lines_total():
    a = make_product(price=1000)
    b = make_product(price=2500, wholesale_price=2000, min_wholesale_qty=3)
    items = [CartItem(a, 3, False), CartItem(b, 4, True)]
    assert pricing.lines_total(items) == 3000 + 8000
