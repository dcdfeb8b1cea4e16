# ==============================================================================
# CAPA DE SERVICIOS - Lógica de negocio
# ==============================================================================
# Esta capa contiene TODA la lógica de negocio del punto de venta.
#
# PRINCIPIOS:
# 1. Los servicios orquestan operaciones entre repositorios
# 2. Aplican reglas de negocio y validaciones
# 3. Las rutas (controllers) solo llaman a servicios
# 4. Los servicios NO conocen el tipo de almacenamiento (JSON/memoria)
# 5. No hay estado global: sesión y carrito se reciben por constructor
#
# ESTRUCTURA:
# ├── pricing.py           → Motor de precios (minorista / mayorista)
# ├── catalog_service.py   → Productos y stock
# ├── cart_service.py      → Carrito de la caja
# ├── checkout_service.py  → Cobro: carrito → transacción
# ├── session_service.py   → Login, logout, permisos por rol
# ├── employee_service.py  → Empleados (solo owner)
# ├── stats_service.py     → Métricas y ranking de ventas
# ├── export_service.py    → CSV del log de ventas
# └── audit_service.py     → Logs de actividad
# ==============================================================================

from app_pos.services import pricing
from app_pos.services.audit_service import AuditService
from app_pos.services.catalog_service import CatalogService
from app_pos.services.session_service import SessionService
from app_pos.services.employee_service import EmployeeService
from app_pos.services.cart_service import CartService
from app_pos.services.checkout_service import CheckoutService
from app_pos.services.stats_service import StatsService
from app_pos.services.export_service import transactions_to_csv

__all__ = [
    'pricing',
    'AuditService',
    'CatalogService',
    'SessionService',
    'EmployeeService',
    'CartService',
    'CheckoutService',
    'StatsService',
    'transactions_to_csv',
]
