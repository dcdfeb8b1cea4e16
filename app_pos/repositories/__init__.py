# ==============================================================================
# CAPA DE REPOSITORIOS - Acceso a datos
# ==============================================================================
# Esta capa encapsula todo el acceso a la persistencia (JSON local).
# Las interfaces (métodos públicos) no dependen del almacén concreto.
#
# ESTRUCTURA:
# ├── interfaces.py             → Protocolos (IRecordStore y repos del dominio)
# ├── base.py                   → JsonRecordStore, MemoryRecordStore, CollectionRepository
# ├── product_repository.py     → products
# ├── employee_repository.py    → employees
# ├── transaction_repository.py → transactions (solo se agrega)
# ├── session_repository.py     → current-session
# ├── cart_repository.py        → cart
# └── audit_repository.py       → audit
# ==============================================================================

from .interfaces import (
    IRecordStore,
    IProductRepository,
    IEmployeeRepository,
    ITransactionRepository,
)

from .base import JsonRecordStore, MemoryRecordStore, CollectionRepository
from .product_repository import ProductRepository
from .employee_repository import EmployeeRepository
from .transaction_repository import TransactionRepository
from .session_repository import SessionRepository
from .cart_repository import CartRepository
from .audit_repository import AuditRepository

__all__ = [
    # Interfaces
    'IRecordStore',
    'IProductRepository',
    'IEmployeeRepository',
    'ITransactionRepository',

    # Almacenes y clase base
    'JsonRecordStore',
    'MemoryRecordStore',
    'CollectionRepository',

    # Repositorios
    'ProductRepository',
    'EmployeeRepository',
    'TransactionRepository',
    'SessionRepository',
    'CartRepository',
    'AuditRepository',
]
