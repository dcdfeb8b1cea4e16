# ═══════════════════════════════════════════════════════════════════════════
# APLICACIÓN FLASK - Rutas JSON del punto de venta
# ═══════════════════════════════════════════════════════════════════════════
# Las rutas solo traducen HTTP ↔ servicios. Toda la lógica de negocio vive
# en services/. Los errores del dominio se convierten en códigos HTTP:
#
#   ValidationError       → 400
#   AuthenticationError   → 401
#   PermissionDeniedError → 403
#   NotFoundError         → 404
#   StockError            → 409
#   PersistenceError      → 500
# ═══════════════════════════════════════════════════════════════════════════

from functools import wraps

from flask import Flask, Response, current_app, request

from app_pos import config
from app_pos.app_container import AppContainer
from app_pos.exceptions import (
    AuthenticationError,
    NotFoundError,
    PermissionDeniedError,
    PersistenceError,
    PosError,
    StockError,
    ValidationError,
)
from app_pos.models import TimeWindow
from app_pos.performance_logger import init_profiling
from app_pos.services.export_service import transactions_to_csv
from app_pos.services.session_service import ALL_ROLES, MANAGEMENT_ROLES, OWNER_ONLY

ERROR_STATUS = {
    ValidationError: 400,
    AuthenticationError: 401,
    PermissionDeniedError: 403,
    NotFoundError: 404,
    StockError: 409,
    PersistenceError: 500,
}


def to_int(value, default=None):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def get_container() -> AppContainer:
    return current_app.config['CONTAINER']


# ═══════════════════════════════════════════════════════════════════════════
# DECORADORES DE ACCESO
# ═══════════════════════════════════════════════════════════════════════════

def login_required(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        if get_container().session_service.current_employee() is None:
            return {"ok": False, "error": "Debes iniciar sesión."}, 401
        return f(*args, **kwargs)
    return wrapper


def role_required(roles):
    def deco(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            if not get_container().session_service.has_permission(roles):
                return {"ok": False, "error": "Permiso denegado."}, 403
            return f(*args, **kwargs)
        return wrapper
    return deco


def _result_response(result, error_status=400, ok_status=200):
    """Convierte un dict {'ok': ...} de servicio en respuesta."""
    return result, (ok_status if result.get('ok') else error_status)


def _current_username():
    employee = get_container().session_service.current_employee()
    return employee.username if employee else None


def create_app(data_dir: str = None, store=None) -> Flask:
    """
    Crea la aplicación.

    Args:
        data_dir: Carpeta de los JSON (por defecto config.DATA_DIR)
        store: Almacén alternativo (tests: MemoryRecordStore)
    """
    app = Flask(__name__)
    app.secret_key = config.SECRET_KEY

    container = AppContainer(base_path=data_dir, store=store)
    container.bootstrap()
    app.config['CONTAINER'] = container

    # ═══════════════════════════════════════════════════════════════════════
    # PROFILING
    # ═══════════════════════════════════════════════════════════════════════
    init_profiling(app, user_getter=lambda: _current_username())

    @app.errorhandler(PosError)
    def handle_pos_error(error):
        status = ERROR_STATUS.get(type(error), 400)
        body = {"ok": False, "error": str(error)}
        if isinstance(error, StockError):
            body["product_id"] = error.product_id
            body["available"] = error.available
        return body, status

    # ═══════════════════════════════════════════════════════════════════════
    # SESIÓN
    # ═══════════════════════════════════════════════════════════════════════

    @app.route("/login", methods=["POST"])
    def login():
        data = request.get_json(silent=True) or {}
        employee = get_container().session_service.login(data.get("username"), data.get("password"))
        return {"ok": True, "employee": employee.to_public_dict()}

    @app.route("/logout", methods=["POST"])
    def logout():
        get_container().session_service.logout()
        return {"ok": True}

    @app.route("/me")
    @login_required
    def me():
        employee = get_container().session_service.current_employee()
        return {"ok": True, "employee": employee.to_public_dict()}

    # ═══════════════════════════════════════════════════════════════════════
    # PRODUCTOS
    # ═══════════════════════════════════════════════════════════════════════

    @app.route("/products")
    @login_required
    def products_list():
        catalog = get_container().catalog_service
        grouped = catalog.products_by_category()
        return {
            "ok": True,
            "products": [p.to_dict() for p in catalog.list_products()],
            "categories": {cat: [p.id for p in items] for cat, items in grouped.items()},
        }

    @app.route("/products", methods=["POST"])
    @login_required
    @role_required(MANAGEMENT_ROLES)
    def products_add():
        data = request.get_json(silent=True) or {}
        result = get_container().catalog_service.add_product(data, _current_username())
        return _result_response(result, ok_status=201)

    @app.route("/products/<product_id>", methods=["PUT"])
    @login_required
    @role_required(MANAGEMENT_ROLES)
    def products_update(product_id):
        data = request.get_json(silent=True) or {}
        catalog = get_container().catalog_service
        if catalog.get_product(product_id) is None:
            raise NotFoundError("Producto no encontrado", record_id=product_id)
        return _result_response(catalog.update_product(product_id, data, _current_username()))

    @app.route("/products/<product_id>", methods=["DELETE"])
    @login_required
    @role_required(MANAGEMENT_ROLES)
    def products_delete(product_id):
        result = get_container().catalog_service.delete_product(product_id, _current_username())
        return _result_response(result, error_status=404)

    # ═══════════════════════════════════════════════════════════════════════
    # CARRITO
    # ═══════════════════════════════════════════════════════════════════════

    def _cart_response(result, product_id):
        if result.get('ok'):
            return result
        in_cart = any(i.product_id == str(product_id) for i in get_container().cart_service.items())
        return result, (409 if in_cart else 404)

    @app.route("/cart")
    @login_required
    @role_required(ALL_ROLES)
    def cart_view():
        return {"ok": True, "cart": get_container().cart_service.summary()}

    @app.route("/cart/add", methods=["POST"])
    @login_required
    @role_required(ALL_ROLES)
    def cart_add():
        data = request.get_json(silent=True) or {}
        quantity = to_int(data["quantity"]) if "quantity" in data else 1
        if quantity is None or quantity <= 0:
            raise ValidationError("Cantidad debe ser mayor a 0")

        container = get_container()
        product = container.catalog_service.get_product(data.get("product_id"))
        if product is None:
            raise NotFoundError("Producto no encontrado", record_id=data.get("product_id"))

        if quantity == 1:
            result = container.cart_service.add_one(product)
        else:
            result = container.cart_service.add_quantity(product, quantity)
        if result.get('ok'):
            return result
        return result, 409

    @app.route("/cart/adjust", methods=["POST"])
    @login_required
    @role_required(ALL_ROLES)
    def cart_adjust():
        data = request.get_json(silent=True) or {}
        product_id = data.get("product_id")
        cart = get_container().cart_service

        if "quantity" in data:
            quantity = to_int(data.get("quantity"))
            if quantity is None or quantity < 0:
                raise ValidationError("Cantidad inválida")
            return _cart_response(cart.set_quantity(product_id, quantity), product_id)

        delta = to_int(data.get("delta"))
        if delta is None:
            raise ValidationError("delta o quantity requerido")
        wholesale = data.get("wholesale")
        override = None if wholesale is None else bool(wholesale)
        return _cart_response(cart.adjust_quantity(product_id, delta, override), product_id)

    @app.route("/cart/clear", methods=["POST"])
    @login_required
    @role_required(ALL_ROLES)
    def cart_clear():
        return get_container().cart_service.clear()

    @app.route("/checkout", methods=["POST"])
    @login_required
    @role_required(ALL_ROLES)
    def checkout():
        transaction = get_container().checkout_service.checkout()
        return {"ok": True, "transaction": transaction.to_dict()}, 201

    # ═══════════════════════════════════════════════════════════════════════
    # VENTAS
    # ═══════════════════════════════════════════════════════════════════════

    def _requested_window():
        period = request.args.get("period")
        if not period:
            return None
        try:
            return TimeWindow.for_period(period, request.args.get("date"))
        except ValueError as e:
            raise ValidationError(str(e))

    @app.route("/sales")
    @login_required
    @role_required(MANAGEMENT_ROLES)
    def sales_report():
        try:
            report = get_container().stats_service.report(
                request.args.get("period") or "day",
                request.args.get("date")
            )
        except ValueError as e:
            raise ValidationError(str(e))
        report["ok"] = True
        return report

    @app.route("/sales/journal")
    @login_required
    @role_required(MANAGEMENT_ROLES)
    def sales_journal():
        container = get_container()
        stats = container.stats_service
        transactions = stats.filter_window(container.load_transactions(), _requested_window())
        return {"ok": True, "transactions": [t.to_dict() for t in stats.journal(transactions)]}

    @app.route("/sales/export")
    @login_required
    @role_required(MANAGEMENT_ROLES)
    def sales_export():
        container = get_container()
        stats = container.stats_service
        transactions = stats.filter_window(container.load_transactions(), _requested_window())
        output = transactions_to_csv(stats.journal(transactions))
        return Response(output, mimetype="text/csv", headers={"Content-Disposition": "attachment;filename=ventas.csv"})

    # ═══════════════════════════════════════════════════════════════════════
    # EMPLEADOS (solo owner)
    # ═══════════════════════════════════════════════════════════════════════

    @app.route("/employees")
    @login_required
    @role_required(OWNER_ONLY)
    def employees_list():
        return {"ok": True, "employees": get_container().employee_service.list_employees()}

    @app.route("/employees", methods=["POST"])
    @login_required
    @role_required(OWNER_ONLY)
    def employees_add():
        data = request.get_json(silent=True) or {}
        return _result_response(get_container().employee_service.add_employee(data), ok_status=201)

    @app.route("/employees/<employee_id>", methods=["PUT"])
    @login_required
    @role_required(OWNER_ONLY)
    def employees_update(employee_id):
        data = request.get_json(silent=True) or {}
        service = get_container().employee_service
        if service.get_employee(employee_id) is None:
            raise NotFoundError("Empleado no encontrado", record_id=employee_id)
        return _result_response(service.update_employee(employee_id, data))

    @app.route("/employees/<employee_id>/toggle", methods=["POST"])
    @login_required
    @role_required(OWNER_ONLY)
    def employees_toggle(employee_id):
        service = get_container().employee_service
        if service.get_employee(employee_id) is None:
            raise NotFoundError("Empleado no encontrado", record_id=employee_id)
        return _result_response(service.toggle_active(employee_id))

    return app
