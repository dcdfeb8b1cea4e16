# ==============================================================================
# CAPA DE MODELOS - Estructuras de datos del sistema
# ==============================================================================
# Entidades del dominio como dataclasses, independientes del almacenamiento.
# ==============================================================================

from .entities import (
    # Productos
    Product,

    # Carrito
    CartItem,

    # Empleados
    Employee,
    EmployeeRole,

    # Ventas
    Transaction,

    # Reportes
    SalesMetrics,
    TopProduct,
    TimeWindow,

    # Utilidades
    now_ms,
    parse_date,
)

__all__ = [
    'Product',
    'CartItem',
    'Employee',
    'EmployeeRole',
    'Transaction',
    'SalesMetrics',
    'TopProduct',
    'TimeWindow',
    'now_ms',
    'parse_date',
]
