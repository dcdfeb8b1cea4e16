# ==============================================================================
# REPOSITORIO DE PRODUCTOS
# ==============================================================================
# Colección "products": [{id, name, price, wholesale_price, ...}, ...]
# ==============================================================================

from typing import Any, Dict, List, Optional

from app_pos.repositories.base import CollectionRepository


class ProductRepository(CollectionRepository):
    """Acceso a la colección de productos."""

    COLLECTION = 'products'

    def get_product(self, product_id: str) -> Optional[Dict[str, Any]]:
        return self.get_by_id(product_id)

    def product_exists(self, product_id: str) -> bool:
        return self.get_product(product_id) is not None

    def create_product(self, data: Dict[str, Any]) -> None:
        products = self.load()
        products.append(data)
        self.save(products)

    def update_product(self, product_id: str, data: Dict[str, Any]) -> bool:
        """Reemplaza el producto completo. False si no existe."""
        products = self.load()
        for i, product in enumerate(products):
            if self._matches(product, 'id', product_id):
                products[i] = data
                self.save(products)
                return True
        return False

    def delete_product(self, product_id: str) -> Optional[Dict[str, Any]]:
        """
        Elimina un producto.

        Returns:
            Datos del producto eliminado o None si no existía
        """
        products = self.load()
        remaining = [p for p in products if not self._matches(p, 'id', product_id)]
        if len(remaining) == len(products):
            return None
        removed = next(p for p in products if self._matches(p, 'id', product_id))
        self.save(remaining)
        return removed

    def get_ids(self) -> List[str]:
        return [str(p.get('id')) for p in self.load()]
