# ==============================================================================
# SERVICIO DE CATÁLOGO
# ==============================================================================
# Lectura y gestión de productos: stock y tarifas de precio.
# El stock solo lo descuenta el checkout (decrement_stock).
# ==============================================================================

from typing import Any, Dict, List, Optional

from app_pos.exceptions import ValidationError
from app_pos.models import Product, now_ms
from app_pos.repositories.product_repository import ProductRepository
from app_pos.services.audit_service import AuditService


def _parse_number(value: Any, label: str, integer: bool = False, default=None):
    if value is None or value == '':
        if default is not None:
            return default
        raise ValidationError(f'{label} es requerido')
    try:
        number = int(value) if integer else float(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{label} inválido')
    if integer and isinstance(value, float) and value != int(value):
        raise ValidationError(f'{label} debe ser un número entero')
    if number < 0:
        raise ValidationError(f'{label} no puede ser negativo')
    return number


class CatalogService:
    """
    Servicio de productos.

    Responsabilidades:
    - Consultar productos y categorías
    - Crear / editar / eliminar (pantalla de productos)
    - Descontar stock al confirmar una venta
    """

    def __init__(self, product_repo: ProductRepository, audit_service: AuditService = None):
        self.product_repo = product_repo
        self.audit_service = audit_service

    # =========================================================================
    # CONSULTA
    # =========================================================================

    def list_products(self) -> List[Product]:
        return [Product.from_dict(p) for p in self.product_repo.load()]

    def get_product(self, product_id: str) -> Optional[Product]:
        record = self.product_repo.get_product(str(product_id))
        return Product.from_dict(record) if record else None

    def products_by_category(self) -> Dict[str, List[Product]]:
        """Productos agrupados por categoría, en el orden en que aparecen."""
        grouped: Dict[str, List[Product]] = {}
        for product in self.list_products():
            grouped.setdefault(product.category, []).append(product)
        return grouped

    # =========================================================================
    # GESTIÓN
    # =========================================================================

    def _build_product(self, product_id: str, data: Dict[str, Any]) -> Product:
        """
        Valida el formulario y arma el producto.

        Raises:
            ValidationError: Campo faltante o inválido
        """
        name = str(data.get('name') or '').strip()
        if not name:
            raise ValidationError('Nombre del producto requerido')

        return Product(
            id=product_id,
            name=name,
            price=_parse_number(data.get('price'), 'Precio'),
            wholesale_price=_parse_number(data.get('wholesale_price'), 'Precio mayorista', default=0.0),
            min_wholesale_qty=_parse_number(
                data.get('min_wholesale_qty'), 'Cantidad mínima mayorista', integer=True, default=0
            ),
            category=str(data.get('category') or '').strip(),
            stock=_parse_number(data.get('stock'), 'Stock', integer=True, default=0),
            stock_note=(str(data.get('stock_note')).strip() or None) if data.get('stock_note') else None,
        )

    def _next_product_id(self) -> str:
        existing = set(self.product_repo.get_ids())
        candidate = now_ms()
        while str(candidate) in existing:
            candidate += 1
        return str(candidate)

    def add_product(self, data: Dict[str, Any], user: str = None) -> Dict[str, Any]:
        try:
            product = self._build_product(self._next_product_id(), data)
        except ValidationError as e:
            return {'ok': False, 'error': str(e)}

        self.product_repo.create_product(product.to_dict())
        if self.audit_service:
            self.audit_service.log_product_change(user, 'creado', product.to_dict())
        return {'ok': True, 'product': product.to_dict()}

    def update_product(self, product_id: str, data: Dict[str, Any], user: str = None) -> Dict[str, Any]:
        if not self.product_repo.product_exists(product_id):
            return {'ok': False, 'error': 'Producto no encontrado'}
        try:
            product = self._build_product(product_id, data)
        except ValidationError as e:
            return {'ok': False, 'error': str(e)}

        self.product_repo.update_product(product_id, product.to_dict())
        if self.audit_service:
            self.audit_service.log_product_change(user, 'actualizado', product.to_dict())
        return {'ok': True, 'product': product.to_dict()}

    def delete_product(self, product_id: str, user: str = None) -> Dict[str, Any]:
        removed = self.product_repo.delete_product(product_id)
        if removed is None:
            return {'ok': False, 'error': 'Producto no encontrado'}
        if self.audit_service:
            self.audit_service.log_product_change(user, 'eliminado', removed)
        return {'ok': True, 'id': product_id}

    # =========================================================================
    # STOCK
    # =========================================================================

    def decrement_stock(
        self,
        quantities: Dict[str, int],
        products: List[Dict[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        """
        Descuenta stock y persiste el catálogo completo.

        Args:
            quantities: {product_id: unidades vendidas}
            products: Catálogo ya leído (se vuelve a leer si es None)

        Returns:
            Productos afectados con su nuevo stock
        """
        if products is None:
            products = self.product_repo.load()

        affected = []
        for product in products:
            sold = quantities.get(str(product.get('id')))
            if not sold:
                continue
            product['stock'] = max(0, int(product.get('stock', 0) or 0) - sold)
            affected.append(product)

        self.product_repo.save(products)
        return affected
