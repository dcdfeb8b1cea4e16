# ==============================================================================
# SISTEMA DE PROFILING INTERNO
# ==============================================================================
# Mide rendimiento de rutas y de operaciones clave (checkout, reportes) sin
# afectar al cajero. Guarda logs legibles en config.LOGS_DIR.
#
# ACTIVAR/DESACTIVAR: POS_ENABLE_PROFILING=0
# ==============================================================================

import os
import threading
import time
from collections import defaultdict
from datetime import datetime
from functools import wraps

from app_pos import config

# Umbrales de tiempo (en milisegundos)
THRESHOLD_WARNING = 300
THRESHOLD_CRITICAL = 700

PERFORMANCE_LOG = 'performance.log'
SLOW_FUNCTIONS_LOG = 'slow_functions.log'

# Nombres legibles para los logs de rutas
ROUTE_NAMES = {
    'POST /login': 'Iniciar sesión',
    'POST /logout': 'Cerrar sesión',
    'GET /products': 'Ver catálogo',
    'POST /products': 'Crear producto',
    'POST /cart/add': 'Agregar al carrito',
    'POST /cart/adjust': 'Cambiar cantidad',
    'POST /cart/clear': 'Vaciar carrito',
    'POST /checkout': 'Cobrar venta',
    'GET /sales': 'Ver reporte de ventas',
    'GET /sales/export': 'Exportar ventas CSV',
    'GET /employees': 'Ver empleados',
}


# ═══════════════════════════════════════════════════════════════════════════
# ESTADÍSTICAS DE FUNCIONES (en memoria)
# ═══════════════════════════════════════════════════════════════════════════

# Estructura: {nombre_funcion: {calls: int, total_time: float, max_time: float}}
_function_stats = defaultdict(lambda: {'calls': 0, 'total_time': 0.0, 'max_time': 0.0})
_stats_lock = threading.Lock()
_write_lock = threading.Lock()


def _get_timestamp():
    return datetime.now().strftime('%Y-%m-%d %H:%M:%S')


def _write_log(filename, content):
    """Escribe al archivo de log. Un fallo de escritura nunca afecta la venta."""
    try:
        with _write_lock:
            os.makedirs(config.LOGS_DIR, exist_ok=True)
            with open(os.path.join(config.LOGS_DIR, filename), 'a', encoding='utf-8') as f:
                f.write(content)
    except OSError:
        pass


# ═══════════════════════════════════════════════════════════════════════════
# 1️⃣ PROFILING DE RUTAS (hooks Flask)
# ═══════════════════════════════════════════════════════════════════════════

def log_route_performance(method, path, time_ms, user=None):
    action_name = ROUTE_NAMES.get(f"{method} {path}", f"{method} {path}")
    log_entry = f"""
════════════════════════════════════════
[PERFORMANCE] {_get_timestamp()}
Acción: {action_name}
Usuario: {user or 'anónimo'}
Tiempo: {time_ms:.0f} ms
"""
    _write_log(PERFORMANCE_LOG, log_entry)


def init_profiling(app, user_getter=None):
    """
    Registra hooks before_request/after_request en una app Flask.

    Args:
        app: Aplicación Flask
        user_getter: Función sin argumentos que devuelve el usuario actual
    """
    if not config.ENABLE_PROFILING:
        return

    @app.before_request
    def _start_timer():
        from flask import g
        g.start_time = time.perf_counter()

    @app.after_request
    def _log_request(response):
        from flask import g, request

        if not hasattr(g, 'start_time'):
            return response

        elapsed = (time.perf_counter() - g.start_time) * 1000  # ms
        user = user_getter() if user_getter else None
        log_route_performance(request.method, request.path, elapsed, user)
        return response


# ═══════════════════════════════════════════════════════════════════════════
# 2️⃣ DECORADOR PARA FUNCIONES CLAVE
# ═══════════════════════════════════════════════════════════════════════════

def profile_function(func=None, name=None):
    """
    Decorador para medir rendimiento de funciones críticas.

    Uso:
        @profile_function(name="Cobrar venta")
        def checkout(self):
            ...
    """
    def decorator(fn):
        func_name = name or fn.__name__

        @wraps(fn)
        def wrapper(*args, **kwargs):
            if not config.ENABLE_PROFILING:
                return fn(*args, **kwargs)
            start = time.perf_counter()
            try:
                return fn(*args, **kwargs)
            finally:
                elapsed_ms = (time.perf_counter() - start) * 1000

                with _stats_lock:
                    stats = _function_stats[func_name]
                    stats['calls'] += 1
                    stats['total_time'] += elapsed_ms
                    if elapsed_ms > stats['max_time']:
                        stats['max_time'] = elapsed_ms

                if elapsed_ms >= THRESHOLD_WARNING:
                    _log_slow_function_call(func_name, elapsed_ms)

        return wrapper

    # Permitir uso sin paréntesis: @profile_function
    if func is not None:
        return decorator(func)
    return decorator


def _log_slow_function_call(func_name, time_ms):
    severity = 'CRÍTICO' if time_ms >= THRESHOLD_CRITICAL else 'LENTO'
    log_entry = f"""
[{severity}] {_get_timestamp()}
Función: {func_name}
Tiempo: {time_ms:.0f} ms
────────────────────────────────────────
"""
    _write_log(SLOW_FUNCTIONS_LOG, log_entry)


# ═══════════════════════════════════════════════════════════════════════════
# 3️⃣ REPORTE DE ESTADÍSTICAS
# ═══════════════════════════════════════════════════════════════════════════

def get_function_stats():
    """
    Returns:
        dict: {nombre: {calls, avg_time, max_time}}
    """
    with _stats_lock:
        result = {}
        for func_name, stats in _function_stats.items():
            calls = stats['calls']
            avg = stats['total_time'] / calls if calls > 0 else 0
            result[func_name] = {
                'calls': calls,
                'avg_time': round(avg, 2),
                'max_time': round(stats['max_time'], 2)
            }
        return result


def reset_stats():
    """Reinicia todas las estadísticas (útil para testing)"""
    with _stats_lock:
        _function_stats.clear()


__all__ = [
    'init_profiling',
    'profile_function',
    'get_function_stats',
    'reset_stats',
]
