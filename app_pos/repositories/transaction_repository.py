# ==============================================================================
# REPOSITORIO DE TRANSACCIONES
# ==============================================================================
# Colección "transactions": log de ventas en orden de creación.
# Solo se agrega. Ninguna operación del núcleo modifica ni elimina ventas.
# ==============================================================================

from typing import Any, Dict, Optional

from app_pos.repositories.base import CollectionRepository


class TransactionRepository(CollectionRepository):
    """Acceso al log de transacciones (append-only)."""

    COLLECTION = 'transactions'

    def append(self, transaction: Dict[str, Any]) -> None:
        """Agrega una transacción al final del log y lo persiste."""
        transactions = self.load()
        transactions.append(transaction)
        self.save(transactions)

    def get_transaction(self, transaction_id: str) -> Optional[Dict[str, Any]]:
        return self.get_by_id(transaction_id)

    def next_transaction_id(self, timestamp_ms: int) -> str:
        """
        Genera el ID de la venta: TRX<timestamp>.

        Si ya existe una venta con ese ID (dos cobros en el mismo
        milisegundo), avanza el número hasta encontrar uno libre.
        """
        used = {t.get('id') for t in self.load()}
        candidate = timestamp_ms
        while f"TRX{candidate}" in used:
            candidate += 1
        return f"TRX{candidate}"
