# ==============================================================================
# SERVICIO DE CARRITO
# ==============================================================================
# Carrito de la caja: una línea por producto, con su cantidad y la decisión
# de tarifa (is_wholesale) tomada al modificarla.
#
# REGLAS:
# - La cantidad de cada línea está siempre en [1, stock del producto].
#   Una línea que llega a 0 se elimina.
# - Cada cambio exitoso guarda la instantánea completa en la colección "cart".
#   Si el guardado falla, el carrito conserva su estado en memoria y el
#   resultado lleva un 'warning'.
# - El carrito pertenece al empleado autenticado. Si cambia la identidad
#   (otro login, logout) se vacía. Una instantánea de otro empleado o que no
#   se puede leer se descarta y el carrito arranca vacío.
# ==============================================================================

from typing import Any, Dict, List, Optional

from app_pos.exceptions import PersistenceError
from app_pos.models import CartItem, Product
from app_pos.repositories.cart_repository import CartRepository
from app_pos.services import pricing
from app_pos.services.catalog_service import CatalogService
from app_pos.services.session_service import SessionService


class CartService:
    """
    Servicio para gestión del carrito de compras.

    Responsabilidades:
    - Agregar/ajustar/eliminar líneas
    - Validar contra el stock disponible
    - Decidir la tarifa de cada línea (motor de precios)
    - Calcular totales con la tarifa congelada
    """

    def __init__(
        self,
        cart_repo: CartRepository,
        session_service: SessionService,
        catalog_service: CatalogService = None
    ):
        self.cart_repo = cart_repo
        self.session_service = session_service
        self.catalog_service = catalog_service
        self._lines: List[CartItem] = self._load()
        session_service.add_listener(self._on_identity_change)

    # =========================================================================
    # PERSISTENCIA
    # =========================================================================

    def _load(self) -> List[CartItem]:
        """Lee la instantánea; cualquier problema = carrito vacío."""
        try:
            snapshot = self.cart_repo.get_snapshot()
            if not snapshot:
                return []
            if snapshot.get('owner_id') != self.session_service.current_employee_id():
                return []
            lines = [CartItem.from_dict(d) for d in snapshot.get('items', [])]
        except (PersistenceError, KeyError, TypeError, ValueError, AttributeError) as e:
            print(f"[CARRITO] Instantánea ilegible, se descarta: {e}")
            return []
        return [line for line in lines if line.quantity > 0]

    def _save(self) -> Optional[str]:
        """
        Persiste las líneas actuales.

        Returns:
            Mensaje de aviso si el guardado falló, None si todo bien
        """
        try:
            self.cart_repo.save_snapshot(
                self.session_service.current_employee_id(),
                [line.to_dict() for line in self._lines]
            )
        except PersistenceError as e:
            print(f"[CARRITO] No se pudo guardar el carrito: {e}")
            return f'No se pudo guardar el carrito: {e}'
        return None

    def _result(self, **extra) -> Dict[str, Any]:
        result = {'ok': True}
        warning = self._save()
        if warning:
            result['warning'] = warning
        result.update(extra)
        result['cart'] = self.summary()
        return result

    def _on_identity_change(self, old_id: Optional[str], new_id: Optional[str]) -> None:
        self.clear()

    # =========================================================================
    # CONSULTA
    # =========================================================================

    def _find(self, product_id: str) -> Optional[CartItem]:
        for line in self._lines:
            if line.product_id == str(product_id):
                return line
        return None

    def _live_stock(self, line: CartItem) -> int:
        """Stock actual del catálogo; si no hay catálogo, el de la línea."""
        if self.catalog_service:
            product = self.catalog_service.get_product(line.product_id)
            if product is not None:
                return product.stock
        return line.product.stock

    def items(self) -> List[CartItem]:
        return list(self._lines)

    def is_empty(self) -> bool:
        return not self._lines

    def total(self) -> float:
        """Total con la tarifa congelada en cada línea."""
        return pricing.lines_total(self._lines)

    def summary(self) -> Dict[str, Any]:
        """Proyección para la vista: se recalcula en cada lectura."""
        items = []
        for line in self._lines:
            entry = line.to_dict()
            entry['unit_price'] = pricing.frozen_unit_price(line.product, line.is_wholesale)
            entry['subtotal'] = pricing.line_subtotal(line)
            items.append(entry)
        return {
            'items': items,
            'lines': len(self._lines),
            'units': sum(line.quantity for line in self._lines),
            'total': self.total(),
        }

    # =========================================================================
    # MODIFICACIÓN
    # =========================================================================

    def add_one(self, product: Product) -> Dict[str, Any]:
        """
        Suma una unidad del producto (o crea la línea con 1).

        Returns:
            {'ok': True, 'cart': {...}} o {'ok': False, 'error': str}
        """
        if product.stock <= 0:
            return {'ok': False, 'error': f'{product.name} sin stock'}

        line = self._find(product.id)
        if line is None:
            line = CartItem(product=product, quantity=1)
            self._lines.append(line)
        elif line.quantity >= product.stock:
            return {'ok': False, 'error': f'Stock insuficiente para {product.name} (disponible: {product.stock})'}
        else:
            line.quantity += 1

        line.is_wholesale = pricing.is_wholesale_quantity(line.product, line.quantity)
        return self._result()

    def add_quantity(self, product: Product, quantity: int) -> Dict[str, Any]:
        """
        Agrega N unidades con las mismas reglas que add_one.

        Si el stock no alcanza se agrega lo disponible y el resultado lleva
        un 'notice'. La instantánea se guarda una sola vez.
        """
        if quantity is None or int(quantity) <= 0:
            return {'ok': False, 'error': 'Cantidad debe ser mayor a 0'}
        if product.stock <= 0:
            return {'ok': False, 'error': f'{product.name} sin stock'}

        requested = int(quantity)
        line = self._find(product.id)
        current = line.quantity if line else 0
        added = min(requested, product.stock - current)
        if added <= 0:
            return {'ok': False, 'error': f'Stock insuficiente para {product.name} (disponible: {product.stock})'}

        if line is None:
            line = CartItem(product=product, quantity=0)
            self._lines.append(line)
        line.quantity += added
        line.is_wholesale = pricing.is_wholesale_quantity(line.product, line.quantity)

        result = self._result(added=added)
        if added < requested:
            result['notice'] = f'Stock insuficiente para {product.name} (disponible: {product.stock})'
        return result

    def adjust_quantity(
        self,
        product_id: str,
        delta: int,
        wholesale_override: Optional[bool] = None
    ) -> Dict[str, Any]:
        """
        Cambia la cantidad de una línea en delta unidades.

        Cantidad resultante 0 = la línea se elimina. Si supera el stock
        actual, no se cambia nada.

        Args:
            product_id: Producto de la línea
            delta: Unidades a sumar (negativo para restar)
            wholesale_override: Fuerza la tarifa; None = regla de umbral
        """
        line = self._find(product_id)
        if line is None:
            return {'ok': False, 'error': 'Producto no está en el carrito'}

        new_quantity = max(0, line.quantity + int(delta))
        stock = self._live_stock(line)
        if new_quantity > stock:
            return {
                'ok': False,
                'error': f'Stock insuficiente para {line.product.name} (disponible: {stock})'
            }

        if new_quantity == 0:
            self._lines.remove(line)
            return self._result(removed=True)

        line.quantity = new_quantity
        if wholesale_override is not None:
            line.is_wholesale = bool(wholesale_override)
        else:
            line.is_wholesale = pricing.is_wholesale_quantity(line.product, new_quantity)
        return self._result()

    def set_quantity(self, product_id: str, quantity: int) -> Dict[str, Any]:
        """Cantidad escrita a mano en el carrito."""
        line = self._find(product_id)
        if line is None:
            return {'ok': False, 'error': 'Producto no está en el carrito'}
        return self.adjust_quantity(product_id, int(quantity) - line.quantity)

    def remove(self, product_id: str) -> Dict[str, Any]:
        line = self._find(product_id)
        if line is None:
            return {'ok': False, 'error': 'Producto no está en el carrito'}
        return self.adjust_quantity(product_id, -line.quantity)

    def clear(self) -> Dict[str, Any]:
        """Vacía el carrito y elimina la instantánea guardada."""
        self._lines = []
        return self._result()
