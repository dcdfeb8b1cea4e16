# ==============================================================================
# CONTENEDOR DE DEPENDENCIAS - Inyección de servicios
# ==============================================================================
# Punto único donde se arman repositorios y servicios. Facilita:
#   - Inyección de dependencias
#   - Testing (se puede pasar un MemoryRecordStore)
#   - Cambiar el almacén sin tocar servicios
#
# NO es singleton: cada contenedor tiene su propia sesión y su propio carrito.
# La app Flask crea uno en create_app() y los tests crean uno por caso.
# ==============================================================================

from typing import List, Optional

from app_pos import config
from app_pos.models import Transaction

# ═══════════════════════════════════════════════════════════════════════════════
# REPOSITORIOS - Capa de persistencia
# ═══════════════════════════════════════════════════════════════════════════════
from app_pos.repositories import (
    JsonRecordStore,
    ProductRepository,
    EmployeeRepository,
    TransactionRepository,
    SessionRepository,
    CartRepository,
    AuditRepository,
)

# ═══════════════════════════════════════════════════════════════════════════════
# SERVICIOS - Capa de lógica de negocio
# ═══════════════════════════════════════════════════════════════════════════════
from app_pos.services import (
    AuditService,
    CatalogService,
    SessionService,
    EmployeeService,
    CartService,
    CheckoutService,
    StatsService,
)


class AppContainer:
    """
    Contenedor de dependencias de la aplicación.

    Uso:
        container = AppContainer(base_path='/path/to/data')
        container.bootstrap()
        receipt = container.checkout_service.checkout()
    """

    def __init__(self, base_path: str = None, store=None):
        """
        Args:
            base_path: Carpeta de los JSON (por defecto config.DATA_DIR)
            store: Almacén ya construido (IRecordStore); tiene prioridad
        """
        self._base_path = base_path or config.DATA_DIR
        self._store = store

        # Repositorios (lazy loading)
        self._product_repo: Optional[ProductRepository] = None
        self._employee_repo: Optional[EmployeeRepository] = None
        self._transaction_repo: Optional[TransactionRepository] = None
        self._session_repo: Optional[SessionRepository] = None
        self._cart_repo: Optional[CartRepository] = None
        self._audit_repo: Optional[AuditRepository] = None

        # Servicios (lazy loading)
        self._audit_service: Optional[AuditService] = None
        self._catalog_service: Optional[CatalogService] = None
        self._session_service: Optional[SessionService] = None
        self._employee_service: Optional[EmployeeService] = None
        self._cart_service: Optional[CartService] = None
        self._checkout_service: Optional[CheckoutService] = None
        self._stats_service: Optional[StatsService] = None

    @property
    def store(self):
        if self._store is None:
            self._store = JsonRecordStore(self._base_path)
        return self._store

    # =========================================================================
    # REPOSITORIOS
    # =========================================================================

    @property
    def product_repo(self) -> ProductRepository:
        if self._product_repo is None:
            self._product_repo = ProductRepository(self.store)
        return self._product_repo

    @property
    def employee_repo(self) -> EmployeeRepository:
        if self._employee_repo is None:
            self._employee_repo = EmployeeRepository(self.store)
        return self._employee_repo

    @property
    def transaction_repo(self) -> TransactionRepository:
        if self._transaction_repo is None:
            self._transaction_repo = TransactionRepository(self.store)
        return self._transaction_repo

    @property
    def session_repo(self) -> SessionRepository:
        if self._session_repo is None:
            self._session_repo = SessionRepository(self.store)
        return self._session_repo

    @property
    def cart_repo(self) -> CartRepository:
        if self._cart_repo is None:
            self._cart_repo = CartRepository(self.store)
        return self._cart_repo

    @property
    def audit_repo(self) -> AuditRepository:
        if self._audit_repo is None:
            self._audit_repo = AuditRepository(self.store)
        return self._audit_repo

    # =========================================================================
    # SERVICIOS
    # =========================================================================

    @property
    def audit_service(self) -> AuditService:
        if self._audit_service is None:
            self._audit_service = AuditService(self.audit_repo)
        return self._audit_service

    @property
    def catalog_service(self) -> CatalogService:
        if self._catalog_service is None:
            self._catalog_service = CatalogService(self.product_repo, self.audit_service)
        return self._catalog_service

    @property
    def session_service(self) -> SessionService:
        if self._session_service is None:
            self._session_service = SessionService(
                self.session_repo,
                self.employee_repo,
                self.audit_service
            )
        return self._session_service

    @property
    def employee_service(self) -> EmployeeService:
        if self._employee_service is None:
            self._employee_service = EmployeeService(
                self.employee_repo,
                self.session_service,
                self.audit_service
            )
        return self._employee_service

    @property
    def cart_service(self) -> CartService:
        if self._cart_service is None:
            self._cart_service = CartService(
                self.cart_repo,
                self.session_service,
                self.catalog_service
            )
        return self._cart_service

    @property
    def checkout_service(self) -> CheckoutService:
        if self._checkout_service is None:
            self._checkout_service = CheckoutService(
                self.cart_service,
                self.session_service,
                self.catalog_service,
                self.transaction_repo,
                self.audit_service
            )
        return self._checkout_service

    @property
    def stats_service(self) -> StatsService:
        if self._stats_service is None:
            self._stats_service = StatsService(self.load_transactions)
        return self._stats_service

    # =========================================================================
    # UTILIDADES
    # =========================================================================

    def load_transactions(self) -> List[Transaction]:
        return [Transaction.from_dict(t) for t in self.transaction_repo.load()]

    def bootstrap(self) -> None:
        """Cuenta owner inicial y migración de contraseñas. Se llama al iniciar."""
        self.employee_service.ensure_bootstrap_owner()
        self.employee_service.migrate_passwords_to_hash()
