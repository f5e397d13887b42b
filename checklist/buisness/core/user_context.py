"""
User Context (Core)
Provides a clean interface for user account operations.

Handles:
- Sign-up with the default (view only) permission set
- Single-flag permission edits through apply_permission_change
- Role changes between user and superuser
"""

from typing import Optional

from checklist import db
from checklist.buisness.core.access import ensure_permission
from checklist.buisness.core.errors import NotFoundError, PermissionDenied, ValidationError
from checklist.buisness.core.permissions import PermissionSet, apply_permission_change
from checklist.data.core.user_info.password_validator import PasswordValidator
from checklist.data.core.user_info.user import ROLES, User
from checklist.logger import get_logger

logger = get_logger("checklist.buisness.core.user_context")


class UserContext:
    """
    Core context manager for user operations.

    Provides a clean interface for:
    - Creating users
    - Changing one permission flag at a time
    - Promoting/demoting superusers
    """

    def __init__(self, user):
        """
        Initialize UserContext with a User instance or id.

        Args:
            user: User instance or user id
        """
        if isinstance(user, int):
            found = db.session.get(User, user)
            if found is None:
                raise NotFoundError(f"User {user} not found")
            user = found
        self._user = user
        self._user_id = user.id

    @property
    def user(self) -> User:
        return self._user

    @property
    def user_id(self) -> int:
        return self._user_id

    @classmethod
    def create(
        cls,
        username: str,
        email: str,
        password: str,
        full_name: Optional[str] = None,
        role: str = 'user',
        permissions: Optional[PermissionSet] = None,
        commit: bool = True,
    ) -> 'UserContext':
        """
        Create a user account.

        Args:
            username: Username (must be unique)
            email: Email address (must be unique)
            password: Plain text password, checked by PasswordValidator
            full_name: Optional display name
            role: 'user' or 'superuser'
            permissions: Capability flags, view only when omitted
            commit: Whether to commit the transaction (default: True)

        Raises:
            ValidationError: missing fields, weak password or duplicate username/email
        """
        username = (username or '').strip()
        email = (email or '').strip()
        if not username or not email:
            raise ValidationError("Username and email are required")
        if role not in ROLES:
            raise ValidationError(f"Unknown role '{role}'")

        is_valid, message = PasswordValidator.validate(password)
        if not is_valid:
            raise ValidationError(message)

        if User.query.filter_by(username=username).first():
            raise ValidationError(f"Username '{username}' already exists")
        if User.query.filter_by(email=email).first():
            raise ValidationError(f"Email '{email}' already exists")

        user = User(username=username, email=email, full_name=(full_name or '').strip() or None, role=role)
        user.set_password(password)
        user.set_permissions(permissions or PermissionSet.default())

        try:
            db.session.add(user)
            if commit:
                db.session.commit()
            else:
                db.session.flush()
        except Exception:
            db.session.rollback()
            raise

        logger.info(f"Created user: {username} (ID: {user.id}, role {role})")
        return cls(user)

    def change_permission(self, actor, field: str, value: bool, commit: bool = True) -> PermissionSet:
        """
        Toggle one capability flag with the view rule applied.

        Only holders of can_manage_users may edit, and only superusers may
        edit another superuser.

        Returns:
            The permission set now stored on the user
        """
        ensure_permission(actor, 'can_manage_users')
        if self._user.is_superuser and not actor.is_superuser:
            raise PermissionDenied('can_manage_users', actor.username)

        try:
            updated = apply_permission_change(self._user.permissions, field, value)
        except KeyError:
            raise ValidationError(f"Unknown permission '{field}'")

        self._user.set_permissions(updated)
        try:
            if commit:
                db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        logger.info(f"User {actor.username} set {field}={bool(value)} on {self._user.username}: {updated.to_dict()}")
        return updated

    def set_role(self, actor, role: str, commit: bool = True) -> User:
        """Change the role. Superusers only, and never on their own account."""
        if not actor.is_authenticated or not actor.is_superuser:
            logger.warning(f"Role change on {self._user.username} denied for {actor.username}")
            raise PermissionDenied('superuser', getattr(actor, 'username', None))
        if role not in ROLES:
            raise ValidationError(f"Unknown role '{role}'")
        if actor.id == self._user_id:
            raise ValidationError("You cannot change your own role")

        previous = self._user.role
        self._user.role = role
        try:
            if commit:
                db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        logger.info(f"User {actor.username} changed role of {self._user.username}: {previous} -> {role}")
        return self._user

    def __repr__(self):
        return f'<UserContext {self._user.username}>'
