# ==============================================================================
# SERVICIO DE COBRO (CHECKOUT)
# ==============================================================================
# Convierte el carrito en una venta confirmada.
# Esta es la ÚNICA función que crea transacciones y descuenta stock.
#
# ORDEN DE OPERACIONES:
#   1. Sesión activa (si no, AuthenticationError)
#   2. Releer productos del almacenamiento (nunca de una copia en memoria)
#   3. Validar existencia y stock de cada línea (NotFoundError / StockError)
#      → ningún fallo hasta aquí escribe nada
#   4. Total con la tarifa congelada de cada línea
#   5. Guardar la transacción
#   6. Descontar stock y guardar productos
#   7. Vaciar el carrito, auditar y devolver la transacción (recibo)
#
# La transacción se escribe ANTES que el stock: si el paso 6 falla, la venta
# queda registrada de más, nunca hay stock descontado sin venta.
# ==============================================================================

from app_pos.exceptions import NotFoundError, StockError, ValidationError
from app_pos.models import CartItem, Product, Transaction, now_ms
from app_pos.performance_logger import profile_function
from app_pos.repositories.transaction_repository import TransactionRepository
from app_pos.services import pricing
from app_pos.services.audit_service import AuditService
from app_pos.services.cart_service import CartService
from app_pos.services.catalog_service import CatalogService
from app_pos.services.session_service import SessionService


class CheckoutService:
    """Orquestador del cobro."""

    def __init__(
        self,
        cart_service: CartService,
        session_service: SessionService,
        catalog_service: CatalogService,
        transaction_repo: TransactionRepository,
        audit_service: AuditService = None
    ):
        self.cart_service = cart_service
        self.session_service = session_service
        self.catalog_service = catalog_service
        self.transaction_repo = transaction_repo
        self.audit_service = audit_service

    @profile_function(name='Cobrar venta')
    def checkout(self) -> Transaction:
        """
        Cobra el carrito actual.

        Returns:
            Transacción registrada

        Raises:
            AuthenticationError: No hay sesión activa
            ValidationError: Carrito vacío
            NotFoundError: Un producto del carrito ya no existe
            StockError: Stock actual menor que la cantidad de una línea
            PersistenceError: El almacenamiento rechazó la escritura
        """
        cashier = self.session_service.require_session()

        lines = self.cart_service.items()
        if not lines:
            raise ValidationError('El carrito está vacío')

        # Releer el catálogo del almacenamiento
        products = self.catalog_service.product_repo.load()
        live = {str(p.get('id')): Product.from_dict(p) for p in products}

        quantities = {}
        for line in lines:
            product = live.get(line.product_id)
            if product is None:
                raise NotFoundError(
                    f'El producto {line.product.name} ya no existe',
                    record_id=line.product_id
                )
            if product.stock < line.quantity:
                raise StockError(
                    f'Stock insuficiente para {product.name}. '
                    f'Solicitado: {line.quantity}, Disponible: {product.stock}',
                    product_id=product.id,
                    available=product.stock
                )
            quantities[line.product_id] = line.quantity

        timestamp = now_ms()
        transaction = Transaction(
            id=self.transaction_repo.next_transaction_id(timestamp),
            items=tuple(CartItem(l.product, l.quantity, l.is_wholesale) for l in lines),
            total=pricing.lines_total(lines),
            timestamp=timestamp,
            cashier=cashier,
        )

        self.transaction_repo.append(transaction.to_dict())
        affected = self.catalog_service.decrement_stock(quantities, products)

        # Venta confirmada; la auditoría ya no puede revertirla
        self.cart_service.clear()

        if self.audit_service:
            self.audit_service.log_sale_created(
                cashier.username, transaction.id, transaction.total, transaction.units
            )
            for product in affected:
                self.audit_service.log_stock_sold(
                    cashier.username,
                    product.get('id'),
                    product.get('name', ''),
                    quantities[str(product.get('id'))],
                    product.get('stock', 0)
                )

        return transaction
