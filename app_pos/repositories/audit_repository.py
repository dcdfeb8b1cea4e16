# ==============================================================================
# REPOSITORIO DE AUDITORÍA
# ==============================================================================
# Colección "audit": lista de eventos, más recientes primero.
# ==============================================================================

from datetime import datetime
from typing import Any, Dict, List

from app_pos.repositories.base import CollectionRepository


class AuditRepository(CollectionRepository):
    """
    Log de auditoría.

    Formato de cada evento:
    {
        "type": "VENTA",
        "user": "owner",
        "message": "Venta TRX1700000000000 registrada por owner",
        "timestamp": "2024-01-01 10:00:00",
        "related_id": "TRX1700000000000",
        "details": {...}
    }
    """

    COLLECTION = 'audit'

    # Límite de registros para evitar archivos muy grandes
    MAX_LOGS = 10000

    def save(self, logs: List[Dict[str, Any]]) -> None:
        # Mantener solo los últimos MAX_LOGS registros
        if len(logs) > self.MAX_LOGS:
            logs = logs[:self.MAX_LOGS]
        super().save(logs)

    def log(
        self,
        log_type: str,
        user: str,
        message: str,
        related_id: str = '',
        details: Dict[str, Any] = None
    ) -> None:
        """
        Registra un nuevo evento de auditoría.

        Args:
            log_type: Tipo de evento (VENTA, STOCK, PRODUCTO, EMPLEADO, SISTEMA)
            user: Usuario que realizó la acción
            message: Mensaje descriptivo humanizado
            related_id: ID relacionado (transacción, producto, empleado)
            details: Detalles adicionales
        """
        log_entry = {
            'type': log_type,
            'user': user or 'sistema',
            'message': message,
            'timestamp': datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            'related_id': related_id,
            'details': details or {}
        }

        logs = self.load()
        logs.insert(0, log_entry)  # Más reciente primero
        self.save(logs)

    def get_by_type(self, log_type: str) -> List[Dict[str, Any]]:
        return [log for log in self.load() if log.get('type') == log_type]
