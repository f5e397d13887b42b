"""
Page load and form post tests for every blueprint
"""
from datetime import date

import pytest

from checklist.buisness.core.permissions import PermissionSet
from checklist.buisness.equipment.equipment_context import EquipmentContext
from checklist.buisness.stock.stock_manager import StockManager
from checklist.data.core.user_info.user import User
from checklist.data.equipment.cleaning_history import CleaningHistory
from checklist.data.equipment.equipment import Equipment
from checklist.data.stock.stock_item import StockItem
from checklist.test.conftest import TEST_PASSWORD, login_user


@pytest.fixture
def equipment(admin_user):
    return EquipmentContext.create(admin_user, name='Hood', sector='Lab', responsible='Ana',
                                   periodicity=7, last_cleaning='2024-01-01').equipment


@pytest.fixture
def stock(admin_user):
    manager = StockManager()
    parent = manager.create_item(admin_user, name='Gloves', category='PPE')
    child = manager.create_item(admin_user, name='Gloves S', category='PPE', current_quantity=5,
                                minimum_stock=1, parent_item_id=parent.id)
    return parent, child


def test_login_required(client):
    response = client.get('/')
    assert response.status_code == 302
    assert '/login' in response.headers['Location']


def test_login_and_logout(client, admin_user):
    response = login_user(client, 'admin')
    assert response.status_code == 200
    assert b'Cleaning checklist' in response.data

    response = client.get('/logout', follow_redirects=True)
    assert b'Log in' in response.data


def test_failed_login(client, admin_user):
    response = login_user(client, 'admin', 'WrongPass1')
    assert b'Invalid username or password' in response.data


def test_register_creates_view_only_user(client):
    response = client.post('/register', data={
        'username': 'newbie',
        'email': 'newbie@example.com',
        'full_name': 'New Bie',
        'password': 'ValidPass1',
        'confirm_password': 'ValidPass1',
    }, follow_redirects=True)

    assert response.status_code == 200
    user = User.query.filter_by(username='newbie').first()
    assert user is not None
    assert user.permissions == PermissionSet.default()


def test_register_rejects_mismatched_passwords(client):
    response = client.post('/register', data={
        'username': 'newbie', 'email': 'newbie@example.com',
        'password': 'ValidPass1', 'confirm_password': 'ValidPass2',
    })
    assert b'Passwords do not match' in response.data
    assert User.query.filter_by(username='newbie').first() is None


@pytest.mark.parametrize('url', [
    '/',
    '/?status=overdue&sector=Lab&search=ho&min_days=-400&max_days=5&page=1',
    '/dashboard',
    '/equipment/create',
    '/stock',
    '/stock?category=PPE&search=glo',
    '/stock/create',
    '/users',
    '/users?role=superuser',
])
def test_pages_load(authenticated_client, equipment, stock, url):
    response = authenticated_client.get(url)
    assert response.status_code == 200, f"{url} returned {response.status_code}"


def test_record_pages_load(authenticated_client, equipment, stock):
    parent, child = stock
    for url in (
        f'/equipment/{equipment.id}/edit',
        f'/equipment/{equipment.id}/history',
        f'/stock/{parent.id}/edit',
        f'/stock/{child.id}/withdraw',
        f'/stock/{child.id}/history',
    ):
        response = authenticated_client.get(url)
        assert response.status_code == 200, f"{url} returned {response.status_code}"


def test_unknown_records_404(authenticated_client):
    assert authenticated_client.get('/equipment/999/history').status_code == 404
    assert authenticated_client.get('/stock/999/edit').status_code == 404


def test_checklist_shows_aggregated_stock(authenticated_client, stock):
    response = authenticated_client.get('/stock')
    assert b'Gloves S' in response.data
    assert b'(1 item(s))' in response.data


def test_create_equipment_via_form(authenticated_client):
    response = authenticated_client.post('/equipment/create', data={
        'name': 'Autoclave', 'sector': 'Lab', 'responsible': 'Carlos',
        'periodicity': '14', 'last_cleaning': '2024-03-01',
    }, follow_redirects=True)

    assert response.status_code == 200
    equipment = Equipment.query.filter_by(name='Autoclave').first()
    assert equipment.periodicity == 14
    assert equipment.last_cleaning == date(2024, 3, 1)


def test_create_equipment_invalid_form_flashes(authenticated_client):
    response = authenticated_client.post('/equipment/create', data={
        'name': '', 'sector': 'Lab', 'responsible': 'Carlos', 'periodicity': '7', 'last_cleaning': '2024-03-01',
    })
    assert response.status_code == 200
    assert b'Name is required' in response.data
    assert Equipment.query.count() == 0


def test_mark_cleaned_and_delete(authenticated_client, equipment):
    response = authenticated_client.post(f'/equipment/{equipment.id}/clean', data={'next': '/?page=1'})
    assert response.status_code == 302
    assert response.headers['Location'].endswith('/?page=1')
    assert CleaningHistory.query.count() == 1

    authenticated_client.post(f'/equipment/{equipment.id}/delete')
    assert Equipment.query.count() == 0
    assert CleaningHistory.query.count() == 0


def test_external_next_is_ignored(authenticated_client, equipment):
    response = authenticated_client.post(f'/equipment/{equipment.id}/clean', data={'next': '//evil.example.com/'})
    assert 'evil.example.com' not in response.headers['Location']


def test_withdraw_via_form(authenticated_client, stock):
    _, child = stock
    response = authenticated_client.post(f'/stock/{child.id}/withdraw', data={
        'quantity': '10', 'reason': 'cleaning', 'responsible_by': 'Ana',
    })
    assert response.status_code == 200
    assert b'only 5 in stock' in response.data

    response = authenticated_client.post(f'/stock/{child.id}/withdraw', data={
        'quantity': '2', 'reason': 'cleaning', 'responsible_by': 'Ana',
    })
    assert response.status_code == 302
    assert StockItem.query.filter_by(name='Gloves S').first().current_quantity == 3


def test_viewer_is_forbidden_from_mutations(client, viewer_user, admin_user, equipment, stock):
    login_user(client, 'viewer')
    parent, child = stock

    assert client.get('/').status_code == 200
    assert client.get('/equipment/create').status_code == 403
    assert client.post(f'/equipment/{equipment.id}/clean').status_code == 403
    assert client.post(f'/equipment/{equipment.id}/delete').status_code == 403
    assert client.get('/stock/create').status_code == 403
    assert client.post(f'/stock/{child.id}/withdraw', data={'quantity': '1'}).status_code == 403
    assert client.get('/users').status_code == 403
    assert client.post(f'/users/{admin_user.id}/role', data={'role': 'user'}).status_code == 403
    assert Equipment.query.count() == 1


def test_user_without_view_is_forbidden(client, app):
    from checklist.test.conftest import make_user
    make_user('blind', PermissionSet(can_view=False))
    login_user(client, 'blind')
    assert client.get('/').status_code == 403


def test_permission_toggle_route(client, manager_user, viewer_user):
    login_user(client, 'manager')
    response = client.post(f'/users/{viewer_user.id}/permissions', data={'field': 'can_delete', 'value': 'true'})
    assert response.status_code == 302

    user = User.query.filter_by(username='viewer').first()
    assert user.can_delete is True
    assert user.can_view is True


def test_role_route(authenticated_client, viewer_user):
    response = authenticated_client.post(f'/users/{viewer_user.id}/role', data={'role': 'superuser'})
    assert response.status_code == 302
    assert User.query.filter_by(username='viewer').first().role == 'superuser'


def test_role_route_is_superuser_only(client, manager_user, viewer_user):
    login_user(client, 'manager')
    response = client.post(f'/users/{viewer_user.id}/role', data={'role': 'superuser'})
    assert response.status_code == 403
    assert User.query.filter_by(username='viewer').first().role == 'user'


def test_security_headers(authenticated_client):
    response = authenticated_client.get('/')
    assert response.headers['X-Frame-Options'] == 'SAMEORIGIN'
    assert response.headers['X-Content-Type-Options'] == 'nosniff'
