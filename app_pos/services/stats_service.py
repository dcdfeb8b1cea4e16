# ==============================================================================
# SERVICIO DE ESTADÍSTICAS DE VENTAS
# ==============================================================================
# Resume el log de transacciones por ventana de tiempo (día, mes, año).
#
# REGLAS:
# - Ventanas semiabiertas [inicio, fin) en hora local: una venta justo en el
#   fin queda fuera, una justo en el inicio entra.
# - Sin ventas → todo en 0 (el promedio no divide por cero).
# - Ranking de productos por ingreso, de mayor a menor. En empate se respeta
#   el orden en que aparecen.
# - El ingreso del ranking usa el precio cobrado (tarifa congelada de cada
#   línea), igual que los recibos. at_retail=True lo calcula a precio
#   minorista.
# ==============================================================================

from typing import Any, Callable, Dict, Iterable, List

from app_pos import config
from app_pos.models import SalesMetrics, TimeWindow, TopProduct, Transaction
from app_pos.performance_logger import profile_function
from app_pos.services import pricing


class StatsService:
    """
    Servicio para cálculo de estadísticas de ventas.

    Las funciones reciben la lista de transacciones; report() la obtiene
    del cargador configurado.
    """

    def __init__(self, sales_loader: Callable[[], List[Transaction]] = None):
        """
        Args:
            sales_loader: Función que retorna la lista de transacciones.
                          Permite inyectar dependencia para testing.
        """
        self._sales_loader = sales_loader

    def _load_sales(self) -> List[Transaction]:
        if self._sales_loader:
            return self._sales_loader()
        return []

    # =========================================================================
    # FILTROS
    # =========================================================================

    @staticmethod
    def filter_window(transactions: Iterable[Transaction], window: TimeWindow = None) -> List[Transaction]:
        """Transacciones dentro de la ventana (todas si window es None)."""
        if window is None:
            return list(transactions)
        return [t for t in transactions if window.contains(t.timestamp)]

    # =========================================================================
    # MÉTRICAS
    # =========================================================================

    def summarize(self, transactions: Iterable[Transaction], window: TimeWindow = None) -> SalesMetrics:
        included = self.filter_window(transactions, window)
        total_sales = round(sum(t.total for t in included), 2)
        count = len(included)
        return SalesMetrics(
            total_sales=total_sales,
            total_transactions=count,
            average_transaction_value=round(total_sales / count, 2) if count else 0.0,
            products_sold=sum(t.units for t in included),
        )

    def top_products(
        self,
        transactions: Iterable[Transaction],
        window: TimeWindow = None,
        limit: int = None,
        at_retail: bool = False
    ) -> List[TopProduct]:
        """
        Productos más vendidos por ingreso.

        Args:
            transactions: Log de ventas
            window: Ventana de tiempo (None = todas)
            limit: Máximo de productos (por defecto config.TOP_PRODUCTS_LIMIT)
            at_retail: True = ingreso a precio minorista ignorando la tarifa
        """
        if limit is None:
            limit = config.TOP_PRODUCTS_LIMIT

        # dict conserva el orden de aparición para los empates
        ranking: Dict[str, TopProduct] = {}
        for transaction in self.filter_window(transactions, window):
            for item in transaction.items:
                entry = ranking.get(item.product_id)
                if entry is None:
                    entry = TopProduct(product_id=item.product_id, name=item.product.name)
                    ranking[item.product_id] = entry
                if at_retail:
                    revenue = item.product.price * item.quantity
                else:
                    revenue = pricing.line_subtotal(item)
                entry.quantity += item.quantity
                entry.revenue = round(entry.revenue + revenue, 2)

        ordered = sorted(ranking.values(), key=lambda p: p.revenue, reverse=True)
        return ordered[:limit]

    def recent_transactions(
        self,
        transactions: Iterable[Transaction],
        window: TimeWindow = None,
        limit: int = None
    ) -> List[Transaction]:
        if limit is None:
            limit = config.RECENT_TRANSACTIONS_LIMIT
        return self.journal(self.filter_window(transactions, window))[:limit]

    @staticmethod
    def journal(transactions: Iterable[Transaction]) -> List[Transaction]:
        """Log de ventas, la más reciente primero."""
        return sorted(transactions, key=lambda t: t.timestamp, reverse=True)

    # =========================================================================
    # REPORTE
    # =========================================================================

    @profile_function(name='Reporte de ventas')
    def report(self, period: str = 'day', day: Any = None) -> Dict[str, Any]:
        """
        Reporte de la pantalla de ventas.

        Args:
            period: 'day', 'month' o 'year'
            day: Fecha de referencia (None = hoy)

        Returns:
            {
                'period': str,
                'window': {'start': iso, 'end': iso},
                'metrics': {...},
                'top_products': [...],
                'recent_transactions': [...]
            }

        Raises:
            ValueError: Período o fecha inválidos
        """
        window = TimeWindow.for_period(period, day)
        transactions = self._load_sales()
        return {
            'period': period,
            'window': {'start': window.start.isoformat(), 'end': window.end.isoformat()},
            'metrics': self.summarize(transactions, window).to_dict(),
            'top_products': [p.to_dict() for p in self.top_products(transactions, window)],
            'recent_transactions': [t.to_dict() for t in self.recent_transactions(transactions, window)],
        }
