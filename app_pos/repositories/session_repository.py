# ==============================================================================
# REPOSITORIO DE SESIÓN
# ==============================================================================
# Colección "current-session": como máximo UN empleado (sin contraseña).
# Colección ausente = nadie ha iniciado sesión.
# ==============================================================================

from typing import Any, Dict, Optional

from app_pos.repositories.base import CollectionRepository


class SessionRepository(CollectionRepository):
    """Identidad autenticada del perfil activo."""

    COLLECTION = 'current-session'

    def get_current(self) -> Optional[Dict[str, Any]]:
        docs = self.load()
        return docs[0] if docs else None

    def set_current(self, employee: Dict[str, Any]) -> None:
        self.save([employee])
