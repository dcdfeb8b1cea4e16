# ==============================================================================
# CONFIGURACIÓN DE LA APLICACIÓN
# ==============================================================================
# Constantes del sistema. Cada una puede sobrescribirse con una variable de
# entorno para no tocar el código al desplegar.
#
#   POS_DATA_DIR          → Carpeta donde viven los JSON (products.json, ...)
#   POS_SECRET_KEY        → Clave secreta de Flask
#   POS_PRODUCTION_MODE   → "1" para modo producción
#   POS_ENABLE_PROFILING  → "0" para desactivar el profiling
#   POS_LOGS_DIR          → Carpeta de logs de rendimiento
#   POS_TOP_PRODUCTS_LIMIT→ Cantidad de productos en el ranking
# ==============================================================================

import os

BASE = os.path.dirname(os.path.abspath(__file__))


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'si', 'on')


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


# ═══════════════════════════════════════════════════════════════════════════════
# MODO PRODUCCIÓN
# ═══════════════════════════════════════════════════════════════════════════════
# True = sin mensajes de depuración en consola
PRODUCTION_MODE = _env_flag('POS_PRODUCTION_MODE', False)

_DEFAULT_SECRET = "app_pos_dev_secret_key_change_in_production"
SECRET_KEY = os.environ.get('POS_SECRET_KEY') or _DEFAULT_SECRET

# Datos
DATA_DIR = os.environ.get('POS_DATA_DIR') or os.path.join(BASE, 'data')

# Profiling
ENABLE_PROFILING = _env_flag('POS_ENABLE_PROFILING', True)
LOGS_DIR = os.environ.get('POS_LOGS_DIR') or os.path.join(BASE, 'logs')

# Reportes
TOP_PRODUCTS_LIMIT = _env_int('POS_TOP_PRODUCTS_LIMIT', 5)
RECENT_TRANSACTIONS_LIMIT = 5

# Cuenta inicial (solo se crea si no hay empleados)
BOOTSTRAP_OWNER = {
    'id': 'owner1',
    'username': 'owner',
    'password': 'owner123',
    'name': 'John Doe',
    'role': 'owner',
}
