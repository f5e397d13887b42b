"""
Pytest configuration and fixtures

Every test gets a fresh in-memory database. Users are seeded with explicit
permission sets so route tests can check both the allowed and the 403 paths.
"""
import os
import tempfile

import pytest

# Must be set before the application package is imported
os.environ.setdefault('SECRET_KEY', 'test_secret_key_for_checklist_tests')
os.environ.setdefault('CHECKLIST_LOG_DIR', tempfile.mkdtemp(prefix='checklist-logs-'))

from checklist import create_app
from checklist import db as _db
from checklist.buisness.core.permissions import PermissionSet
from checklist.data.core.user_info.user import ROLE_SUPERUSER, User

TEST_PASSWORD = 'Password123'

TEST_CONFIG = {
    'TESTING': True,
    'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
    'WTF_CSRF_ENABLED': False,
    'ENABLE_HTTPS': False,
    'FORCE_HTTPS_REDIRECT': False,
    'SESSION_COOKIE_SECURE': False,
    'REMEMBER_COOKIE_SECURE': False,
    'RATELIMIT_ENABLED': False,
    'ITEMS_PER_PAGE': 10,
}


@pytest.fixture(scope='function')
def app():
    """Create Flask application for testing"""
    app = create_app(TEST_CONFIG)

    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope='function')
def db(app):
    return _db


@pytest.fixture(scope='function')
def client(app):
    """Create Flask test client"""
    return app.test_client()


def make_user(username, permissions=None, role='user'):
    user = User(
        username=username,
        email=f'{username}@example.com',
        full_name=username.capitalize(),
        role=role,
    )
    user.set_password(TEST_PASSWORD)
    user.set_permissions(permissions or PermissionSet.default())
    _db.session.add(user)
    _db.session.commit()
    return user


@pytest.fixture(scope='function')
def admin_user(app):
    return make_user('admin', PermissionSet.full(), role=ROLE_SUPERUSER)


@pytest.fixture(scope='function')
def viewer_user(app):
    """View only, as for a freshly registered account"""
    return make_user('viewer')


@pytest.fixture(scope='function')
def cleaner_user(app):
    return make_user('cleaner', PermissionSet(can_view=True, can_mark_cleaned=True))


@pytest.fixture(scope='function')
def stock_user(app):
    return make_user('stockkeeper', PermissionSet(can_view=True, can_manage_stock=True))


@pytest.fixture(scope='function')
def manager_user(app):
    return make_user('manager', PermissionSet(can_view=True, can_manage_users=True))


def login_user(client, username='admin', password=TEST_PASSWORD):
    """Helper function to login a user"""
    return client.post('/login', data={
        'username': username,
        'password': password
    }, follow_redirects=True)


@pytest.fixture(scope='function')
def authenticated_client(client, admin_user):
    """Test client logged in as the superuser"""
    login_user(client, 'admin')
    return client
