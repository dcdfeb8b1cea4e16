# ==============================================================================
# INTERFACES DE REPOSITORIOS
# ==============================================================================
#
# Los servicios dependen de estos protocolos, NO de implementaciones concretas.
#
# 1. INDEPENDENCIA DE ALMACENAMIENTO
#    - JsonRecordStore (archivos) y MemoryRecordStore (tests) cumplen el
#      mismo contrato get/put/delete por colección.
#
# 2. TESTING
#    - Los tests del núcleo usan MemoryRecordStore, sin tocar disco.
#
# ==============================================================================

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable


# ==============================================================================
# ALMACÉN DE DOCUMENTOS
# ==============================================================================

@runtime_checkable
class IRecordStore(Protocol):
    """
    Almacén local clave → lista de documentos JSON.

    Colecciones: products, employees, transactions, current-session, cart, audit.
    Cualquier fallo de lectura/escritura se lanza como PersistenceError.
    """

    def get(self, collection: str) -> List[Dict[str, Any]]:
        """Lee todos los documentos de la colección ([] si no existe)."""
        ...

    def put(self, collection: str, docs: List[Dict[str, Any]]) -> None:
        """Reemplaza la colección completa."""
        ...

    def delete(self, collection: str) -> None:
        """Elimina la colección."""
        ...


# ==============================================================================
# INTERFACES ESPECÍFICAS POR DOMINIO
# ==============================================================================

@runtime_checkable
class IProductRepository(Protocol):

    def load(self) -> List[Dict[str, Any]]:
        ...

    def save(self, products: List[Dict[str, Any]]) -> None:
        ...

    def get_product(self, product_id: str) -> Optional[Dict[str, Any]]:
        ...


@runtime_checkable
class IEmployeeRepository(Protocol):

    def load(self) -> List[Dict[str, Any]]:
        ...

    def save(self, employees: List[Dict[str, Any]]) -> None:
        ...

    def get_by_username(self, username: str) -> Optional[Dict[str, Any]]:
        ...


@runtime_checkable
class ITransactionRepository(Protocol):
    """Log de ventas: solo se agrega, nunca se modifica ni elimina."""

    def load(self) -> List[Dict[str, Any]]:
        ...

    def append(self, transaction: Dict[str, Any]) -> None:
        ...
