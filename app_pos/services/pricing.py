# ==============================================================================
# MOTOR DE PRECIOS
# ==============================================================================
# Funciones puras: (producto, cantidad) → precio unitario.
#
# REGLA:
#   Tarifa mayorista activa  = wholesale_price > 0 Y min_wholesale_qty > 0
#   Precio mayorista aplica  = tarifa activa Y cantidad >= min_wholesale_qty
#
# El carrito guarda la decisión (is_wholesale) en cada línea. Totales,
# recibos y checkout cobran con esa decisión congelada y NO la recalculan.
# ==============================================================================

from typing import Iterable

from app_pos.models import CartItem, Product


def has_wholesale_tier(product: Product) -> bool:
    return product.has_wholesale_tier


def is_wholesale_quantity(product: Product, quantity: int) -> bool:
    """True si la cantidad alcanza el mínimo mayorista del producto."""
    return has_wholesale_tier(product) and quantity >= product.min_wholesale_qty


def unit_price(product: Product, quantity: int) -> float:
    """Precio por unidad para esa cantidad."""
    if is_wholesale_quantity(product, quantity):
        return product.wholesale_price
    return product.price


def frozen_unit_price(product: Product, is_wholesale: bool) -> float:
    """
    Precio por unidad según la decisión de tarifa ya tomada.

    Un flag mayorista sobre un producto sin precio mayorista cobra minorista.
    """
    if is_wholesale and product.wholesale_price > 0:
        return product.wholesale_price
    return product.price


def line_subtotal(item: CartItem) -> float:
    return round(frozen_unit_price(item.product, item.is_wholesale) * item.quantity, 2)


def lines_total(items: Iterable[CartItem]) -> float:
    return round(sum(line_subtotal(item) for item in items), 2)
