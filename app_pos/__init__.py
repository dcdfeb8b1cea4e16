# ==============================================================================
# APP_POS - Núcleo del punto de venta
# ==============================================================================
# ESTRUCTURA:
# ├── config.py             → Constantes y variables de entorno
# ├── exceptions.py         → Errores del dominio
# ├── models/               → Entidades (dataclasses)
# ├── repositories/         → Persistencia (colecciones JSON)
# ├── services/             → Lógica de negocio
# ├── app_container.py      → Inyección de dependencias
# ├── performance_logger.py → Profiling de rutas y funciones
# └── main.py               → Rutas Flask (create_app)
# ==============================================================================

__version__ = '1.0.0'
