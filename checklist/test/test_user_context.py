"""
Tests for account creation, permission edits and role changes
"""
import pytest

from checklist.buisness.core.errors import PermissionDenied, ValidationError
from checklist.buisness.core.permissions import PermissionSet
from checklist.buisness.core.user_context import UserContext
from checklist.data.core.user_info.password_validator import PasswordValidator
from checklist.data.core.user_info.user import User


@pytest.mark.parametrize('password, valid', [
    ('short1A', False),
    ('nouppercase1', False),
    ('NOLOWERCASE1', False),
    ('NoDigitsHere', False),
    ('ValidPass1', True),
])
def test_password_policy(password, valid):
    is_valid, message = PasswordValidator.validate(password)
    assert is_valid is valid
    assert bool(message) is not valid


def test_create_gives_view_only(app):
    user = UserContext.create('newbie', 'newbie@example.com', 'ValidPass1', full_name='New Bie').user

    assert user.permissions == PermissionSet.default()
    assert user.role == 'user'
    assert user.check_password('ValidPass1')
    assert user.display_name == 'New Bie'
    assert user.has_permission('can_view') is True
    assert user.has_permission('can_add') is False


def test_create_rejects_duplicates_and_weak_passwords(viewer_user):
    with pytest.raises(ValidationError):
        UserContext.create('viewer', 'other@example.com', 'ValidPass1')
    with pytest.raises(ValidationError):
        UserContext.create('other', 'viewer@example.com', 'ValidPass1')
    with pytest.raises(ValidationError):
        UserContext.create('other', 'other@example.com', 'weak')
    assert User.query.count() == 1


def test_change_permission_applies_view_rule(manager_user, viewer_user):
    context = UserContext(viewer_user)

    updated = context.change_permission(manager_user, 'can_view', False)
    assert updated.can_view is False

    updated = context.change_permission(manager_user, 'can_edit', True)
    assert updated.can_edit is True
    assert updated.can_view is True
    assert viewer_user.can_view is True


def test_change_permission_guards(manager_user, viewer_user, admin_user, cleaner_user):
    with pytest.raises(PermissionDenied):
        UserContext(cleaner_user).change_permission(viewer_user, 'can_add', True)
    with pytest.raises(PermissionDenied):
        UserContext(admin_user).change_permission(manager_user, 'can_add', False)
    with pytest.raises(ValidationError):
        UserContext(viewer_user).change_permission(manager_user, 'can_fly', True)


def test_superuser_bypasses_flags_but_inactive_users_hold_nothing(admin_user):
    admin_user.set_permissions(PermissionSet(can_view=False))
    assert admin_user.has_permission('can_delete') is True
    admin_user.is_active = False
    assert admin_user.has_permission('can_view') is False


def test_set_role(admin_user, manager_user):
    UserContext(manager_user).set_role(admin_user, 'superuser')
    assert manager_user.is_superuser

    with pytest.raises(ValidationError):
        UserContext(admin_user).set_role(admin_user, 'user')
    with pytest.raises(ValidationError):
        UserContext(manager_user).set_role(admin_user, 'overlord')


def test_set_role_requires_superuser(manager_user, viewer_user):
    with pytest.raises(PermissionDenied):
        UserContext(viewer_user).set_role(manager_user, 'superuser')
    assert viewer_user.role == 'user'
