"""
User management routes
Permission flags and roles
"""

from flask import Blueprint, render_template, redirect, url_for, flash, request, abort
from flask_login import login_required, current_user

from checklist import db
from checklist.buisness.core.access import permission_required, superuser_required
from checklist.buisness.core.errors import NotFoundError, PermissionDenied
from checklist.buisness.core.permissions import PERMISSION_FIELDS, PERMISSION_LABELS
from checklist.buisness.core.user_context import UserContext
from checklist.data.core.user_info.user import ROLES
from checklist.logger import get_logger
from checklist.services.core.user_service import UserService

logger = get_logger("checklist.routes.users")
bp = Blueprint('users', __name__)


def _context_or_404(user_id):
    try:
        return UserContext(user_id)
    except NotFoundError:
        abort(404)


@bp.route('')
@login_required
@permission_required('can_manage_users')
def list():
    """List users with their permission flags"""
    page = request.args.get('page', 1, type=int)
    users = UserService.get_list_data(request=request, page=page, per_page=20)
    return render_template(
        'users/list.html',
        users=users,
        permission_fields=PERMISSION_FIELDS,
        permission_labels=PERMISSION_LABELS,
        roles=ROLES,
    )


@bp.route('/<int:user_id>/permissions', methods=['POST'])
@login_required
@permission_required('can_manage_users')
def update_permission(user_id):
    """Toggle one permission flag"""
    context = _context_or_404(user_id)
    field = request.form.get('field', '')
    value = request.form.get('value', '').lower() in ('true', '1', 'on', 'yes')
    try:
        context.change_permission(current_user, field, value)
        flash(f'Permissions of {context.user.username} updated', 'success')
    except PermissionDenied:
        abort(403)
    except ValueError as e:
        flash(str(e), 'error')
        logger.warning(f"Permission change on user {user_id} rejected: {e}")
    except Exception as e:
        flash(f'Error updating permissions: {str(e)}', 'error')
        logger.error(f"Unexpected error updating permissions of user {user_id}: {e}")
        db.session.rollback()
    return redirect(url_for('users.list'))


@bp.route('/<int:user_id>/role', methods=['POST'])
@login_required
@superuser_required
def update_role(user_id):
    """Change role (superusers only)"""
    context = _context_or_404(user_id)
    try:
        context.set_role(current_user, request.form.get('role', ''))
        flash(f'{context.user.username} is now {context.user.role}', 'success')
    except PermissionDenied:
        abort(403)
    except ValueError as e:
        flash(str(e), 'error')
        logger.warning(f"Role change on user {user_id} rejected: {e}")
    except Exception as e:
        flash(f'Error changing role: {str(e)}', 'error')
        logger.error(f"Unexpected error changing role of user {user_id}: {e}")
        db.session.rollback()
    return redirect(url_for('users.list'))
