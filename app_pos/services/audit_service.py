# ==============================================================================
# SERVICIO DE AUDITORÍA
# ==============================================================================
# Centraliza el registro de eventos del negocio con mensajes humanizados.
# ==============================================================================

from typing import Any, Dict, List

from app_pos.exceptions import PersistenceError
from app_pos.repositories.audit_repository import AuditRepository


class AuditService:
    """
    Registro y consulta de auditoría.

    Categorías: VENTA, STOCK, PRODUCTO, EMPLEADO, SISTEMA.
    La regla de oro: toda venta confirmada deja un evento VENTA.
    """

    TYPE_VENTA = 'VENTA'
    TYPE_STOCK = 'STOCK'
    TYPE_PRODUCTO = 'PRODUCTO'
    TYPE_EMPLEADO = 'EMPLEADO'
    TYPE_SISTEMA = 'SISTEMA'

    def __init__(self, audit_repo: AuditRepository):
        self.audit_repo = audit_repo

    # =========================================================================
    # REGISTRO DE EVENTOS
    # =========================================================================

    def log(
        self,
        log_type: str,
        user: str,
        message: str,
        related_id: str = '',
        details: Dict[str, Any] = None
    ) -> None:
        """
        Registra un evento. Si el almacenamiento rechaza la escritura se avisa
        por consola y se sigue: la operación auditada ya quedó confirmada.
        """
        try:
            self.audit_repo.log(log_type, user, message, related_id, details)
        except PersistenceError as e:
            print(f"[AUDITORIA] No se pudo registrar el evento {log_type}: {e}")

    def log_sale_created(
        self,
        user: str,
        transaction_id: str,
        total: float,
        items_count: int
    ) -> None:
        message = f"Venta {transaction_id} registrada por {user} - Total: {total:,.2f} - {items_count} items"
        self.log(
            self.TYPE_VENTA,
            user,
            message,
            transaction_id,
            {'total': total, 'items_count': items_count}
        )

    def log_stock_sold(self, user: str, product_id: str, name: str, quantity: int, new_stock: int) -> None:
        message = f"Salida de stock: -{quantity} {name} - Nuevo stock: {new_stock} - Por {user}"
        self.log(
            self.TYPE_STOCK,
            user,
            message,
            product_id,
            {'quantity': -quantity, 'new_stock': new_stock}
        )

    def log_product_change(self, user: str, action: str, product: Dict[str, Any]) -> None:
        """
        Args:
            action: 'creado', 'actualizado' o 'eliminado'
        """
        message = f"Producto {product.get('name', '')} {action} por {user}"
        self.log(self.TYPE_PRODUCTO, user, message, product.get('id', ''), {'action': action})

    def log_employee_change(self, user: str, action: str, username: str, employee_id: str) -> None:
        message = f"Empleado {username} {action} por {user}"
        self.log(self.TYPE_EMPLEADO, user, message, employee_id, {'action': action})

    def log_user_login(self, username: str) -> None:
        self.log(self.TYPE_SISTEMA, username, f"Inicio de sesión: {username}")

    def log_user_logout(self, username: str) -> None:
        self.log(self.TYPE_SISTEMA, username, f"Cierre de sesión: {username}")

    # =========================================================================
    # CONSULTA
    # =========================================================================

    def get_logs(self, log_type: str = None, limit: int = None) -> List[Dict[str, Any]]:
        logs = self.audit_repo.get_by_type(log_type) if log_type else self.audit_repo.load()
        return logs[:limit] if limit else logs
