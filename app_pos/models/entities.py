# ==============================================================================
# ENTIDADES DEL DOMINIO - Definiciones de dataclasses
# ==============================================================================
# Cada entidad representa un concepto del negocio.
# Diseñadas para ser independientes del mecanismo de persistencia: el
# almacenamiento solo ve diccionarios (to_dict / from_dict).
# ==============================================================================

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional


def now_ms() -> int:
    """Timestamp actual en milisegundos desde epoch."""
    return int(datetime.now().timestamp() * 1000)


def _to_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _to_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


# ==============================================================================
# ENUMERACIONES
# ==============================================================================

class EmployeeRole(str, Enum):
    """Roles de empleado disponibles en el sistema."""
    OWNER = "owner"                  # Acceso total
    STORE_MANAGER = "store_manager"  # Catálogo y ventas, sin empleados
    SHOPKEEPER = "shopkeeper"        # Solo caja

    @classmethod
    def parse(cls, value: Any) -> 'EmployeeRole':
        """Convierte un string a rol. Lanza ValueError si no es válido."""
        if isinstance(value, cls):
            return value
        return cls(str(value or '').strip().lower())


# ==============================================================================
# PRODUCTOS
# ==============================================================================

@dataclass
class Product:
    """
    Producto del catálogo.

    Attributes:
        id: Identificador opaco
        name: Nombre visible
        price: Precio minorista por unidad
        wholesale_price: Precio mayorista por unidad (0 = sin tarifa mayorista)
        min_wholesale_qty: Cantidad mínima para precio mayorista (0 = desactivado)
        category: Categoría libre
        stock: Unidades en inventario (nunca negativo)
        stock_note: Nota libre sobre el stock
    """
    id: str
    name: str
    price: float = 0.0
    wholesale_price: float = 0.0
    min_wholesale_qty: int = 0
    category: str = ''
    stock: int = 0
    stock_note: Optional[str] = None

    @property
    def has_wholesale_tier(self) -> bool:
        """La tarifa mayorista solo existe si precio y cantidad mínima son > 0."""
        return self.wholesale_price > 0 and self.min_wholesale_qty > 0

    def to_dict(self) -> Dict[str, Any]:
        """Convierte a diccionario para persistencia."""
        d = {
            'id': self.id,
            'name': self.name,
            'price': self.price,
            'wholesale_price': self.wholesale_price,
            'min_wholesale_qty': self.min_wholesale_qty,
            'category': self.category,
            'stock': self.stock,
        }
        if self.stock_note:
            d['stock_note'] = self.stock_note
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Product':
        """Crea instancia desde diccionario."""
        return cls(
            id=str(data.get('id', '')),
            name=data.get('name', ''),
            price=_to_float(data.get('price')),
            wholesale_price=_to_float(data.get('wholesale_price')),
            min_wholesale_qty=_to_int(data.get('min_wholesale_qty')),
            category=data.get('category', '') or '',
            stock=max(0, _to_int(data.get('stock'))),
            stock_note=data.get('stock_note') or None,
        )


# ==============================================================================
# CARRITO
# ==============================================================================

@dataclass
class CartItem:
    """
    Línea del carrito: un producto, su cantidad y la decisión de tarifa.

    El producto guardado es una copia tomada al agregar al carrito; el precio
    que se cobra sale de esa copia y del flag is_wholesale.
    """
    product: Product
    quantity: int
    is_wholesale: bool = False

    @property
    def product_id(self) -> str:
        return self.product.id

    def to_dict(self) -> Dict[str, Any]:
        return {
            'product': self.product.to_dict(),
            'quantity': self.quantity,
            'is_wholesale': self.is_wholesale,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CartItem':
        return cls(
            product=Product.from_dict(data['product']),
            quantity=int(data['quantity']),
            is_wholesale=bool(data.get('is_wholesale', False)),
        )


# ==============================================================================
# EMPLEADOS
# ==============================================================================

@dataclass
class Employee:
    """
    Empleado con acceso al sistema.

    Attributes:
        id: Identificador
        username: Nombre de usuario (único en la tienda)
        password: Hash de la contraseña (nunca exponer)
        name: Nombre para mostrar
        role: Rol que define los permisos
        active: False = no puede iniciar sesión
        created_at: Timestamp de creación (ms)
    """
    id: str
    username: str
    password: str
    name: str
    role: EmployeeRole = EmployeeRole.SHOPKEEPER
    active: bool = True
    created_at: int = field(default_factory=now_ms)

    def to_dict(self) -> Dict[str, Any]:
        """Diccionario completo (incluye hash) para persistencia."""
        d = self.to_public_dict()
        d['password'] = self.password
        return d

    def to_public_dict(self) -> Dict[str, Any]:
        """Diccionario sin credenciales, para sesión, recibos y respuestas."""
        return {
            'id': self.id,
            'username': self.username,
            'name': self.name,
            'role': self.role.value,
            'active': self.active,
            'created_at': self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Employee':
        try:
            role = EmployeeRole.parse(data.get('role'))
        except ValueError:
            role = EmployeeRole.SHOPKEEPER
        return cls(
            id=str(data.get('id', '')),
            username=data.get('username', ''),
            password=data.get('password', '') or '',
            name=data.get('name', ''),
            role=role,
            active=bool(data.get('active', True)),
            created_at=_to_int(data.get('created_at'), now_ms()),
        )


# ==============================================================================
# TRANSACCIONES
# ==============================================================================

@dataclass(frozen=True)
class Transaction:
    """
    Venta confirmada. Inmutable una vez creada.

    Attributes:
        id: TRX<timestamp>
        items: Copia de las líneas del carrito al momento de cobrar
        total: Total cobrado (con la tarifa congelada de cada línea)
        timestamp: Momento del cobro (ms)
        cashier: Empleado que cobró (sin credenciales)
    """
    id: str
    items: tuple
    total: float
    timestamp: int
    cashier: Employee

    @property
    def units(self) -> int:
        return sum(item.quantity for item in self.items)

    def item_summary(self) -> str:
        """Resumen legible: 'Arroz (3), Azúcar (1)'."""
        return ', '.join(f"{item.product.name} ({item.quantity})" for item in self.items)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'items': [item.to_dict() for item in self.items],
            'total': self.total,
            'timestamp': self.timestamp,
            'cashier': self.cashier.to_public_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Transaction':
        return cls(
            id=str(data.get('id', '')),
            items=tuple(CartItem.from_dict(i) for i in data.get('items', [])),
            total=_to_float(data.get('total')),
            timestamp=_to_int(data.get('timestamp')),
            cashier=Employee.from_dict(data.get('cashier') or {}),
        )


# ==============================================================================
# REPORTES (derivados, no se persisten)
# ==============================================================================

@dataclass
class SalesMetrics:
    """Resumen de ventas de una ventana de tiempo."""
    total_sales: float = 0.0
    total_transactions: int = 0
    average_transaction_value: float = 0.0
    products_sold: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_sales': self.total_sales,
            'total_transactions': self.total_transactions,
            'average_transaction_value': self.average_transaction_value,
            'products_sold': self.products_sold,
        }


@dataclass
class TopProduct:
    """Producto en el ranking de más vendidos."""
    product_id: str
    name: str
    quantity: int = 0
    revenue: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'product_id': self.product_id,
            'name': self.name,
            'quantity': self.quantity,
            'revenue': self.revenue,
        }


@dataclass(frozen=True)
class TimeWindow:
    """
    Intervalo semiabierto [start, end) en hora local.

    Un timestamp igual a start entra; uno igual a end queda fuera.
    """
    start: datetime
    end: datetime

    PERIODS = ('day', 'month', 'year')

    @property
    def start_ms(self) -> int:
        return int(self.start.timestamp() * 1000)

    @property
    def end_ms(self) -> int:
        return int(self.end.timestamp() * 1000)

    def contains(self, timestamp_ms: int) -> bool:
        return self.start_ms <= timestamp_ms < self.end_ms

    @classmethod
    def for_day(cls, day: date) -> 'TimeWindow':
        start = datetime(day.year, day.month, day.day)
        following = date.fromordinal(start.toordinal() + 1)
        return cls(start, datetime(following.year, following.month, following.day))

    @classmethod
    def for_month(cls, day: date) -> 'TimeWindow':
        last_day = calendar.monthrange(day.year, day.month)[1]
        start = datetime(day.year, day.month, 1)
        following = date.fromordinal(date(day.year, day.month, last_day).toordinal() + 1)
        return cls(start, datetime(following.year, following.month, following.day))

    @classmethod
    def for_year(cls, day: date) -> 'TimeWindow':
        return cls(datetime(day.year, 1, 1), datetime(day.year + 1, 1, 1))

    @classmethod
    def for_period(cls, period: str, day: Any = None) -> 'TimeWindow':
        """
        Construye la ventana para 'day', 'month' o 'year'.

        Args:
            period: Tipo de ventana
            day: date, datetime o string 'YYYY-MM-DD' / 'YYYY-MM' / 'YYYY'.
                 None = hoy.

        Raises:
            ValueError: Si el período o la fecha no son válidos
        """
        if period not in cls.PERIODS:
            raise ValueError(f"Período inválido: {period}")
        day = parse_date(day)
        if period == 'day':
            return cls.for_day(day)
        if period == 'month':
            return cls.for_month(day)
        return cls.for_year(day)


def parse_date(value: Any) -> date:
    """Acepta date/datetime o strings 'YYYY-MM-DD', 'YYYY-MM', 'YYYY'."""
    if value is None or value == '':
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    for fmt in ('%Y-%m-%d', '%Y-%m', '%Y'):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Fecha inválida: {value}")
