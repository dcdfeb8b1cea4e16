# ==============================================================================
# SERVICIO DE EMPLEADOS
# ==============================================================================
# Alta, edición y activación de empleados (pantalla solo para owner).
#
# REGLAS:
# - El nombre de usuario es único en la tienda.
# - Las contraseñas se guardan SIEMPRE como hash (werkzeug).
# - Nadie puede desactivar su propia cuenta mientras está autenticado.
# - Si no hay empleados, se crea la cuenta owner inicial.
# ==============================================================================

from typing import Any, Dict, List, Optional

from werkzeug.security import generate_password_hash

from app_pos import config
from app_pos.exceptions import ValidationError
from app_pos.models import Employee, EmployeeRole, now_ms
from app_pos.repositories.employee_repository import EmployeeRepository
from app_pos.services.audit_service import AuditService
from app_pos.services.session_service import SessionService, is_password_hashed


class EmployeeService:
    """
    Servicio para gestión de empleados.

    Todas las operaciones de pantalla devuelven dicts {'ok': bool, ...}.
    """

    def __init__(
        self,
        employee_repo: EmployeeRepository,
        session_service: SessionService = None,
        audit_service: AuditService = None
    ):
        self.employee_repo = employee_repo
        self.session_service = session_service
        self.audit_service = audit_service

    def _actor(self) -> str:
        if self.session_service:
            employee = self.session_service.current_employee()
            if employee:
                return employee.username
        return 'sistema'

    # =========================================================================
    # INICIALIZACIÓN
    # =========================================================================

    def ensure_bootstrap_owner(self) -> bool:
        """
        Crea la cuenta owner inicial si la colección está vacía.

        Returns:
            True si se creó la cuenta
        """
        if not self.employee_repo.is_empty():
            return False
        seed = config.BOOTSTRAP_OWNER
        owner = Employee(
            id=seed['id'],
            username=seed['username'],
            password=generate_password_hash(seed['password']),
            name=seed['name'],
            role=EmployeeRole.OWNER,
        )
        self.employee_repo.create_employee(owner.to_dict())
        if not config.PRODUCTION_MODE:
            print(f"[INICIO] Creada cuenta inicial '{owner.username}'. Cambia la contraseña.")
        if self.audit_service:
            self.audit_service.log(
                AuditService.TYPE_SISTEMA, 'sistema',
                f"Cuenta inicial {owner.username} creada", owner.id
            )
        return True

    def migrate_passwords_to_hash(self) -> Dict[str, Any]:
        """
        Migra todas las contraseñas en texto plano a hash seguro.
        Se llama al iniciar la aplicación.
        """
        employees = self.employee_repo.load()
        migrated_count = 0

        for employee in employees:
            current_pwd = employee.get('password', '')
            if current_pwd and not is_password_hashed(current_pwd):
                employee['password'] = generate_password_hash(current_pwd)
                migrated_count += 1

        if migrated_count > 0:
            self.employee_repo.save(employees)
            print(f"[SEGURIDAD] {migrated_count} contraseña(s) migrada(s) a hash")
            if self.audit_service:
                self.audit_service.log(
                    AuditService.TYPE_SISTEMA,
                    'sistema',
                    f'Migración de contraseñas: {migrated_count} contraseñas actualizadas a hash seguro'
                )

        return {'ok': True, 'migrated_count': migrated_count}

    # =========================================================================
    # CONSULTA
    # =========================================================================

    def list_employees(self) -> List[Dict[str, Any]]:
        """Empleados sin contraseñas."""
        return [Employee.from_dict(e).to_public_dict() for e in self.employee_repo.load()]

    def get_employee(self, employee_id: str) -> Optional[Employee]:
        record = self.employee_repo.get_by_id(employee_id)
        return Employee.from_dict(record) if record else None

    # =========================================================================
    # ALTA Y EDICIÓN
    # =========================================================================

    def _validate(self, data: Dict[str, Any], require_password: bool, exclude_id: str = None) -> Dict[str, Any]:
        username = str(data.get('username') or '').strip()
        name = str(data.get('name') or '').strip()
        password = data.get('password') or ''

        if not username:
            raise ValidationError('Nombre de usuario requerido')
        if not name:
            raise ValidationError('Nombre completo requerido')
        if require_password and not password:
            raise ValidationError('Contraseña requerida')
        try:
            role = EmployeeRole.parse(data.get('role'))
        except ValueError:
            raise ValidationError(f"Rol inválido: {data.get('role')}")
        if self.employee_repo.username_exists(username, exclude_id=exclude_id):
            raise ValidationError('El nombre de usuario ya existe')

        return {'username': username, 'name': name, 'password': password, 'role': role}

    def add_employee(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Crea un empleado activo.

        Args:
            data: {username, password, name, role}

        Returns:
            {'ok': True, 'employee': {...}} o {'ok': False, 'error': str}
        """
        try:
            fields = self._validate(data, require_password=True)
        except ValidationError as e:
            return {'ok': False, 'error': str(e)}

        employee_id = str(now_ms())
        existing_ids = {e.get('id') for e in self.employee_repo.load()}
        while employee_id in existing_ids:
            employee_id = str(int(employee_id) + 1)

        employee = Employee(
            id=employee_id,
            username=fields['username'],
            password=generate_password_hash(fields['password']),
            name=fields['name'],
            role=fields['role'],
        )
        self.employee_repo.create_employee(employee.to_dict())

        if self.audit_service:
            self.audit_service.log_employee_change(self._actor(), 'creado', employee.username, employee.id)

        return {'ok': True, 'employee': employee.to_public_dict()}

    def update_employee(self, employee_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Edita usuario, nombre, rol y (opcionalmente) contraseña.
        Contraseña vacía = se mantiene la anterior.
        """
        current = self.get_employee(employee_id)
        if current is None:
            return {'ok': False, 'error': 'Empleado no encontrado'}

        try:
            fields = self._validate(data, require_password=False, exclude_id=employee_id)
        except ValidationError as e:
            return {'ok': False, 'error': str(e)}

        updates = {
            'username': fields['username'],
            'name': fields['name'],
            'role': fields['role'].value,
        }
        if fields['password']:
            updates['password'] = generate_password_hash(fields['password'])

        self.employee_repo.update_employee(employee_id, updates)
        updated = self.get_employee(employee_id)

        # Mantener la sesión al día si el empleado editado es el autenticado
        if self.session_service:
            self.session_service.refresh(updated)

        if self.audit_service:
            self.audit_service.log_employee_change(self._actor(), 'actualizado', updated.username, employee_id)

        return {'ok': True, 'employee': updated.to_public_dict()}

    def toggle_active(self, employee_id: str) -> Dict[str, Any]:
        """
        Activa/desactiva un empleado.

        VALIDACIÓN: no se puede cambiar el estado de la propia cuenta.
        """
        current = self.get_employee(employee_id)
        if current is None:
            return {'ok': False, 'error': 'Empleado no encontrado'}

        if self.session_service and self.session_service.current_employee_id() == employee_id:
            return {'ok': False, 'error': 'No puedes desactivar tu propia cuenta'}

        new_state = not current.active
        self.employee_repo.update_employee(employee_id, {'active': new_state})

        if self.audit_service:
            action = 'activado' if new_state else 'desactivado'
            self.audit_service.log_employee_change(self._actor(), action, current.username, employee_id)

        return {'ok': True, 'id': employee_id, 'active': new_state}
