# ==============================================================================
# REPOSITORIO DEL CARRITO
# ==============================================================================
# Colección "cart": como máximo UNA instantánea del carrito:
#   [{"owner_id": "owner1", "items": [{product, quantity, is_wholesale}, ...]}]
# Se elimina cuando el carrito queda vacío.
# ==============================================================================

from typing import Any, Dict, List, Optional

from app_pos.repositories.base import CollectionRepository


class CartRepository(CollectionRepository):
    """Instantánea persistida del carrito."""

    COLLECTION = 'cart'

    def get_snapshot(self) -> Optional[Dict[str, Any]]:
        docs = self.load()
        return docs[0] if docs else None

    def save_snapshot(self, owner_id: Optional[str], items: List[Dict[str, Any]]) -> None:
        """Guarda las líneas; si no hay líneas, elimina la instantánea."""
        if not items:
            self.clear()
            return
        self.save([{'owner_id': owner_id, 'items': items}])
