# ==============================================================================
# SERVICIO DE SESIÓN
# ==============================================================================
# Autenticación del empleado y autorización por rol.
#
# La sesión vive en la colección "current-session" (un solo empleado, sin
# contraseña). No hay estado global: cada contenedor tiene su SessionService
# y los servicios que dependen de la identidad lo reciben en su constructor.
#
# MATRIZ DE PERMISOS:
#   Caja / cobro      → owner, store_manager, shopkeeper
#   Productos, ventas → owner, store_manager
#   Empleados         → owner
# ==============================================================================

from typing import Callable, Iterable, List, Optional

from werkzeug.security import check_password_hash

from app_pos.exceptions import AuthenticationError, PermissionDeniedError
from app_pos.models import Employee, EmployeeRole
from app_pos.repositories.employee_repository import EmployeeRepository
from app_pos.repositories.session_repository import SessionRepository
from app_pos.services.audit_service import AuditService

ALL_ROLES = frozenset(EmployeeRole)
MANAGEMENT_ROLES = frozenset([EmployeeRole.OWNER, EmployeeRole.STORE_MANAGER])
OWNER_ONLY = frozenset([EmployeeRole.OWNER])


def is_password_hashed(password_value: str) -> bool:
    """True si el valor almacenado es un hash de werkzeug (pbkdf2: o scrypt:)."""
    if not password_value:
        return False
    return password_value.startswith('pbkdf2:') or password_value.startswith('scrypt:')


class SessionService:
    """
    Servicio de sesión del perfil activo.

    Responsabilidades:
    - Login / logout
    - Empleado autenticado actual
    - Verificación de permisos por rol
    - Avisar a los interesados (carrito) cuando cambia la identidad
    """

    def __init__(
        self,
        session_repo: SessionRepository,
        employee_repo: EmployeeRepository,
        audit_service: AuditService = None
    ):
        self.session_repo = session_repo
        self.employee_repo = employee_repo
        self.audit_service = audit_service
        self._listeners: List[Callable[[Optional[str], Optional[str]], None]] = []

    def add_listener(self, callback: Callable[[Optional[str], Optional[str]], None]) -> None:
        """
        Registra una función que se llama con (id_anterior, id_nuevo) cada vez
        que cambia la identidad autenticada.
        """
        self._listeners.append(callback)

    def _notify(self, old_id: Optional[str], new_id: Optional[str]) -> None:
        if old_id == new_id:
            return
        for callback in self._listeners:
            callback(old_id, new_id)

    # =========================================================================
    # AUTENTICACIÓN
    # =========================================================================

    def login(self, username: str, password: str) -> Employee:
        """
        Inicia sesión con un empleado activo.

        Returns:
            Empleado autenticado

        Raises:
            AuthenticationError: Credenciales inválidas o empleado inactivo
        """
        record = self.employee_repo.get_by_username((username or '').strip())
        if not record or not record.get('active', True):
            raise AuthenticationError('Usuario o contraseña incorrectos')

        stored_pwd = record.get('password', '')
        if not is_password_hashed(stored_pwd):
            # Contraseña no hasheada = rechazar login hasta migrar
            print(f"[SEGURIDAD] Empleado '{username}' tiene contraseña sin hash. Ejecutar migración.")
            raise AuthenticationError('Usuario o contraseña incorrectos')
        if not check_password_hash(stored_pwd, password or ''):
            raise AuthenticationError('Usuario o contraseña incorrectos')

        employee = Employee.from_dict(record)
        previous = self.current_employee()
        self.session_repo.set_current(employee.to_public_dict())
        self._notify(previous.id if previous else None, employee.id)

        if self.audit_service:
            self.audit_service.log_user_login(employee.username)
        return employee

    def logout(self) -> None:
        previous = self.current_employee()
        self.session_repo.clear()
        if previous is None:
            return
        self._notify(previous.id, None)
        if self.audit_service:
            self.audit_service.log_user_logout(previous.username)

    def refresh(self, employee: Employee) -> None:
        """Actualiza la instantánea de la sesión si es el mismo empleado."""
        if self.current_employee_id() == employee.id:
            self.session_repo.set_current(employee.to_public_dict())

    def current_employee(self) -> Optional[Employee]:
        record = self.session_repo.get_current()
        return Employee.from_dict(record) if record else None

    def current_employee_id(self) -> Optional[str]:
        employee = self.current_employee()
        return employee.id if employee else None

    def require_session(self) -> Employee:
        """
        Raises:
            AuthenticationError: Si no hay sesión activa
        """
        employee = self.current_employee()
        if employee is None:
            raise AuthenticationError('Empleado no autenticado')
        return employee

    # =========================================================================
    # AUTORIZACIÓN
    # =========================================================================

    def has_permission(self, required_roles: Iterable) -> bool:
        """True si el rol de la sesión está en required_roles."""
        employee = self.current_employee()
        if employee is None:
            return False
        allowed = set()
        for role in required_roles:
            try:
                allowed.add(EmployeeRole.parse(role))
            except ValueError:
                continue
        return employee.role in allowed

    def require_permission(self, required_roles: Iterable) -> Employee:
        """
        Raises:
            AuthenticationError: Sin sesión
            PermissionDeniedError: El rol no alcanza
        """
        roles = list(required_roles)
        employee = self.require_session()
        if not self.has_permission(roles):
            raise PermissionDeniedError('No tienes permiso para esta sección')
        return employee
