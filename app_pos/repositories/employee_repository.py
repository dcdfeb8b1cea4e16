# ==============================================================================
# REPOSITORIO DE EMPLEADOS
# ==============================================================================
# Colección "employees": [{id, username, password, name, role, active, ...}]
# La contraseña se guarda siempre como hash (ver EmployeeService).
# ==============================================================================

from typing import Any, Dict, List, Optional

from app_pos.repositories.base import CollectionRepository


class EmployeeRepository(CollectionRepository):
    """Acceso a la colección de empleados."""

    COLLECTION = 'employees'

    def get_by_username(self, username: str) -> Optional[Dict[str, Any]]:
        return self.find_by('username', username)

    def username_exists(self, username: str, exclude_id: str = None) -> bool:
        """
        Verifica si un nombre de usuario ya está tomado.

        Args:
            username: Nombre a verificar
            exclude_id: ID a ignorar (al editar un empleado)
        """
        return any(
            e.get('username') == username and str(e.get('id')) != str(exclude_id)
            for e in self.load()
        )

    def create_employee(self, data: Dict[str, Any]) -> None:
        employees = self.load()
        employees.append(data)
        self.save(employees)

    def update_employee(self, employee_id: str, updates: Dict[str, Any]) -> bool:
        """
        Actualiza datos de un empleado.

        Returns:
            True si se actualizó
        """
        return self.update_where('id', employee_id, updates)

    def is_empty(self) -> bool:
        return not self.load()

    def get_all_usernames(self) -> List[str]:
        return [e.get('username') for e in self.load()]

    # NOTA: La validación de credenciales se hace SOLO en SessionService
    # usando check_password_hash. El repositorio solo maneja persistencia.
