# ==============================================================================
# REPOSITORIO BASE - Almacenes de documentos y acceso por colección
# ==============================================================================

import copy
import json
import os
import threading
from typing import Any, Dict, List, Optional

from app_pos.exceptions import PersistenceError


class JsonRecordStore:
    """
    Almacén de colecciones en archivos JSON: <base_path>/<colección>.json

    Cada escritura va primero a un archivo temporal y luego se reemplaza el
    original, para no dejar archivos a medio escribir.
    """

    # Lock global para evitar escrituras concurrentes a archivos
    _file_lock = threading.RLock()

    def __init__(self, base_path: str):
        """
        Args:
            base_path: Carpeta donde se guardan los JSON (se crea si no existe)
        """
        self.base_path = base_path
        os.makedirs(base_path, exist_ok=True)

    def _path(self, collection: str) -> str:
        return os.path.join(self.base_path, f"{collection}.json")

    def get(self, collection: str) -> List[Dict[str, Any]]:
        """
        Lee la colección.

        Raises:
            PersistenceError: Si el archivo no se puede leer o tiene JSON inválido
        """
        path = self._path(collection)
        with self._file_lock:
            if not os.path.exists(path):
                return []
            try:
                with open(path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                raise PersistenceError(
                    f"No se pudo leer '{collection}': {e}", collection
                ) from e
        if not isinstance(data, list):
            raise PersistenceError(f"Formato inválido en '{collection}'", collection)
        return data

    def put(self, collection: str, docs: List[Dict[str, Any]]) -> None:
        """
        Reemplaza la colección completa.

        Raises:
            PersistenceError: Si no se pudo escribir
        """
        path = self._path(collection)
        temp_path = path + '.tmp'
        with self._file_lock:
            try:
                with open(temp_path, 'w', encoding='utf-8') as f:
                    json.dump(docs, f, indent=2, ensure_ascii=False)
                os.replace(temp_path, path)
            except (OSError, TypeError, ValueError) as e:
                # Limpiar archivo temporal si algo falla
                if os.path.exists(temp_path):
                    os.remove(temp_path)
                raise PersistenceError(
                    f"No se pudo guardar '{collection}': {e}", collection
                ) from e

    def delete(self, collection: str) -> None:
        path = self._path(collection)
        with self._file_lock:
            try:
                if os.path.exists(path):
                    os.remove(path)
            except OSError as e:
                raise PersistenceError(
                    f"No se pudo eliminar '{collection}': {e}", collection
                ) from e


class MemoryRecordStore:
    """
    Almacén en memoria con el mismo contrato que JsonRecordStore.

    Guarda copias profundas para que nadie comparta estado mutable con el
    almacén. `fail_writes` permite simular un almacenamiento que rechaza
    escrituras en ciertas colecciones.
    """

    def __init__(self, initial: Dict[str, List[Dict[str, Any]]] = None):
        self._data: Dict[str, List[Dict[str, Any]]] = copy.deepcopy(initial or {})
        self.fail_writes = set()

    def get(self, collection: str) -> List[Dict[str, Any]]:
        return copy.deepcopy(self._data.get(collection, []))

    def put(self, collection: str, docs: List[Dict[str, Any]]) -> None:
        if collection in self.fail_writes:
            raise PersistenceError(f"Escritura rechazada en '{collection}'", collection)
        self._data[collection] = copy.deepcopy(docs)

    def delete(self, collection: str) -> None:
        if collection in self.fail_writes:
            raise PersistenceError(f"Escritura rechazada en '{collection}'", collection)
        self._data.pop(collection, None)


class CollectionRepository:
    """
    Repositorio base para una colección del almacén.

    Las subclases definen COLLECTION y agregan consultas del dominio.
    """

    COLLECTION: str = ''

    def __init__(self, store):
        """
        Args:
            store: Cualquier implementación de IRecordStore
        """
        self.store = store

    def load(self) -> List[Dict[str, Any]]:
        """Obtiene todos los registros."""
        return self.store.get(self.COLLECTION)

    def save(self, records: List[Dict[str, Any]]) -> None:
        """Guarda todos los registros (reemplazo completo)."""
        self.store.put(self.COLLECTION, records)

    def clear(self) -> None:
        """Elimina la colección del almacén."""
        self.store.delete(self.COLLECTION)

    @staticmethod
    def _matches(record: Dict[str, Any], field: str, value: Any) -> bool:
        # Los IDs se comparan como texto: un JSON editado a mano puede traer 7 o "7"
        if field == 'id':
            return str(record.get('id')) == str(value)
        return record.get(field) == value

    def find_by(self, field: str, value: Any) -> Optional[Dict[str, Any]]:
        """
        Busca un registro por un campo específico.

        Returns:
            Primer registro que coincide o None
        """
        for record in self.load():
            if self._matches(record, field, value):
                return record
        return None

    def get_by_id(self, record_id: Any) -> Optional[Dict[str, Any]]:
        return self.find_by('id', str(record_id))

    def update_where(self, field: str, value: Any, updates: Dict[str, Any]) -> bool:
        """
        Actualiza registros que coinciden con un campo.

        Returns:
            True si se actualizó al menos un registro
        """
        data = self.load()
        updated = False
        for record in data:
            if self._matches(record, field, value):
                record.update(updates)
                updated = True
        if updated:
            self.save(data)
        return updated
