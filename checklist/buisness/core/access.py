"""
Permission enforcement shared by the business managers and the route decorator.
"""

from functools import wraps

from flask import abort
from flask_login import current_user

from checklist.buisness.core.errors import PermissionDenied
from checklist.logger import get_logger

logger = get_logger("checklist.buisness.core.access")


def ensure_permission(user, capability):
    """Raise PermissionDenied unless the user holds the capability."""
    if user is None or not getattr(user, 'is_authenticated', False) or not user.has_permission(capability):
        username = getattr(user, 'username', None)
        logger.warning(f"Permission '{capability}' denied for user {username}")
        raise PermissionDenied(capability, username)


def permission_required(capability):
    """Route decorator: 403 when the logged-in user lacks the capability."""
    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            try:
                ensure_permission(current_user, capability)
            except PermissionDenied:
                abort(403)
            return view(*args, **kwargs)
        return wrapped
    return decorator


def superuser_required(view):
    """Route decorator for role administration."""
    @wraps(view)
    def wrapped(*args, **kwargs):
        if not current_user.is_authenticated or not current_user.is_superuser:
            logger.warning(f"Superuser access denied for {getattr(current_user, 'username', None)}")
            abort(403)
        return view(*args, **kwargs)
    return wrapped
