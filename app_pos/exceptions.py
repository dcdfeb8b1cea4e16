# ==============================================================================
# EXCEPCIONES DEL DOMINIO
# ==============================================================================
# Los servicios "de pantalla" (carrito, productos, empleados) devuelven dicts
# {'ok': False, 'error': ...}. Estas excepciones se lanzan donde la operación
# debe abortar completa: checkout, persistencia y autenticación.
# ==============================================================================


class PosError(Exception):
    """Base de todos los errores del punto de venta."""
    pass


class ValidationError(PosError):
    """Campos de formulario faltantes o con formato inválido."""
    pass


class StockError(PosError):
    """La cantidad solicitada supera el stock disponible."""

    def __init__(self, message: str, product_id: str = None, available: int = None):
        super().__init__(message)
        self.product_id = product_id
        self.available = available


class NotFoundError(PosError):
    """El producto o empleado referenciado ya no existe."""

    def __init__(self, message: str, record_id: str = None):
        super().__init__(message)
        self.record_id = record_id


class AuthenticationError(PosError):
    """No hay sesión activa o las credenciales son inválidas."""
    pass


class PermissionDeniedError(PosError):
    """El rol de la sesión no tiene acceso a la operación."""
    pass


class PersistenceError(PosError):
    """El almacenamiento rechazó una lectura o escritura."""

    def __init__(self, message: str, collection: str = None):
        super().__init__(message)
        self.collection = collection
