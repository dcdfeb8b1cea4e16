# ==============================================================================
# EXPORTACIÓN DE VENTAS
# ==============================================================================
# CSV del log de ventas: una fila por transacción.
# ==============================================================================

import csv
import io
from datetime import datetime
from typing import Iterable

from app_pos.models import Transaction

CSV_HEADER = ["Fecha", "No. Transaccion", "Items", "Total"]


def format_timestamp(timestamp_ms: int) -> str:
    """Fecha en hora local: 'YYYY-MM-DD HH:MM:SS'."""
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime('%Y-%m-%d %H:%M:%S')


def transactions_to_csv(transactions: Iterable[Transaction]) -> str:
    si = io.StringIO()
    writer = csv.writer(si)
    writer.writerow(CSV_HEADER)
    for t in transactions:
        writer.writerow([format_timestamp(t.timestamp), t.id, t.item_summary(), f"{t.total:.2f}"])
    return si.getvalue()
