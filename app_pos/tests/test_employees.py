import pytest

from app_pos.app_container import AppContainer
from app_pos.exceptions import AuthenticationError, PermissionDeniedError
from app_pos.repositories import MemoryRecordStore
from app_pos.services.session_service import MANAGEMENT_ROLES, OWNER_ONLY, is_password_hashed


def add(container, username, role, password='secret1'):
    r = container.employee_service.add_employee(
        {'username': username, 'password': password, 'name': username.title(), 'role': role}
    )
    assert r['ok'], r
    return r['employee']


def test_bootstrap_owner_created_once_and_hashed(container, store):
    employees = store.get('employees')
    assert len(employees) == 1
    owner = employees[0]
    assert owner['username'] == 'owner'
    assert owner['name'] == 'John Doe'
    assert owner['role'] == 'owner'
    assert is_password_hashed(owner['password'])

    # second start does not seed again
    assert container.employee_service.ensure_bootstrap_owner() is False
    assert len(store.get('employees')) == 1


def test_plaintext_passwords_migrated():
    store = MemoryRecordStore({'employees': [
        {'id': 'e1', 'username': 'lama', 'password': 'plain', 'name': 'Lama', 'role': 'shopkeeper', 'active': True},
    ]})
    c = AppContainer(store=store)

    # login refused until migrated
    with pytest.raises(AuthenticationError):
        c.session_service.login('lama', 'plain')

    c.bootstrap()
    assert is_password_hashed(store.get('employees')[0]['password'])
    assert c.session_service.login('lama', 'plain').id == 'e1'


def test_login_and_logout(container):
    employee = container.session_service.login('owner', 'owner123')
    assert employee.username == 'owner'
    assert container.session_service.current_employee().id == 'owner1'

    container.session_service.logout()
    assert container.session_service.current_employee() is None


def test_login_wrong_password(container):
    with pytest.raises(AuthenticationError):
        container.session_service.login('owner', 'nope')
    assert container.session_service.current_employee() is None


def test_session_snapshot_has_no_password(logged_in, store):
    assert 'password' not in store.get('current-session')[0]


def test_inactive_employee_cannot_login(logged_in):
    kasir = add(logged_in, 'kasir', 'shopkeeper')
    assert logged_in.employee_service.toggle_active(kasir['id'])['active'] is False

    with pytest.raises(AuthenticationError):
        logged_in.session_service.login('kasir', 'secret1')


def test_permissions_by_role(logged_in):
    add(logged_in, 'manager', 'store_manager')
    add(logged_in, 'kasir', 'shopkeeper')
    session = logged_in.session_service

    assert session.has_permission(OWNER_ONLY)

    session.login('manager', 'secret1')
    assert session.has_permission(MANAGEMENT_ROLES)
    assert not session.has_permission(OWNER_ONLY)

    session.login('kasir', 'secret1')
    assert not session.has_permission(MANAGEMENT_ROLES)
    assert session.has_permission(['shopkeeper'])
    with pytest.raises(PermissionDeniedError):
        session.require_permission(MANAGEMENT_ROLES)

    session.logout()
    assert not session.has_permission(MANAGEMENT_ROLES)
    with pytest.raises(AuthenticationError):
        session.require_session()


def test_add_employee_validation(logged_in):
    service = logged_in.employee_service
    assert not service.add_employee({'username': '', 'password': 'x', 'name': 'X', 'role': 'owner'})['ok']
    assert not service.add_employee({'username': 'x', 'password': '', 'name': 'X', 'role': 'owner'})['ok']
    assert not service.add_employee({'username': 'x', 'password': 'x', 'name': 'X', 'role': 'boss'})['ok']
    assert not service.add_employee({'username': 'owner', 'password': 'x', 'name': 'X', 'role': 'owner'})['ok']


def test_list_employees_hides_passwords(logged_in):
    add(logged_in, 'kasir', 'shopkeeper')
    employees = logged_in.employee_service.list_employees()
    assert {e['username'] for e in employees} == {'owner', 'kasir'}
    assert all('password' not in e for e in employees)


def test_update_employee_keeps_password_when_empty(logged_in):
    kasir = add(logged_in, 'kasir', 'shopkeeper')
    service = logged_in.employee_service

    r = service.update_employee(kasir['id'], {'username': 'kasir', 'name': 'Kasir Dua', 'role': 'store_manager', 'password': ''})
    assert r['ok']
    assert r['employee']['role'] == 'store_manager'
    assert logged_in.session_service.login('kasir', 'secret1').name == 'Kasir Dua'


def test_update_employee_username_unique(logged_in):
    kasir = add(logged_in, 'kasir', 'shopkeeper')
    r = logged_in.employee_service.update_employee(
        kasir['id'], {'username': 'owner', 'name': 'Kasir', 'role': 'shopkeeper'}
    )
    assert not r['ok']


def test_cannot_deactivate_own_account(logged_in, store):
    before = store.get('employees')

    r = logged_in.employee_service.toggle_active('owner1')
    assert not r['ok']
    assert store.get('employees') == before


def test_toggle_other_employee(logged_in):
    kasir = add(logged_in, 'kasir', 'shopkeeper')
    service = logged_in.employee_service
    assert service.toggle_active(kasir['id'])['active'] is False
    assert service.toggle_active(kasir['id'])['active'] is True


def test_employee_changes_audited(logged_in):
    add(logged_in, 'kasir', 'shopkeeper')
    logs = logged_in.audit_service.get_logs('EMPLEADO')
    assert logs[0]['user'] == 'owner'
    assert 'kasir' in logs[0]['message']


def test_login_switches_cart_even_if_audit_fails(logged_in, store):
    add(logged_in, 'kasir', 'shopkeeper')
    cart = logged_in.cart_service
    cart.add_one(logged_in.catalog_service.get_product('p1'))
    store.fail_writes.add('audit')

    logged_in.session_service.login('kasir', 'secret1')

    assert logged_in.session_service.current_employee().username == 'kasir'
    assert cart.is_empty()


def test_editing_own_account_refreshes_session(logged_in, store):
    r = logged_in.employee_service.update_employee(
        'owner1', {'username': 'owner', 'name': 'Jane Doe', 'role': 'owner'}
    )
    assert r['ok']
    assert logged_in.session_service.current_employee().name == 'Jane Doe'
    assert store.get('current-session')[0]['name'] == 'Jane Doe'


def test_editing_other_account_keeps_session(logged_in):
    kasir = add(logged_in, 'kasir', 'shopkeeper')
    logged_in.employee_service.update_employee(
        kasir['id'], {'username': 'kasir', 'name': 'Kasir Baru', 'role': 'shopkeeper'}
    )
    assert logged_in.session_service.current_employee().username == 'owner'
