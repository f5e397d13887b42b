"""
Stock routes
Hierarchy table, item CRUD, withdrawals and movement history
"""

from flask import Blueprint, render_template, redirect, url_for, flash, request, abort
from flask_login import login_required, current_user

from checklist import db
from checklist.buisness.core.access import permission_required
from checklist.buisness.core.errors import NotFoundError
from checklist.buisness.stock.stock_manager import StockManager
from checklist.buisness.stock.stock_status import MANUAL_OVERRIDES, MaintenanceStatus
from checklist.logger import get_logger
from checklist.services.stock.stock_service import StockService
from checklist.utils.logging_sanitizer import sanitize_form_data

logger = get_logger("checklist.routes.stock")
bp = Blueprint('stock', __name__)

manager = StockManager()


def _item_or_404(item_id):
    try:
        return manager.get_item(item_id)
    except NotFoundError:
        abort(404)


def _form_options(exclude_id=None):
    return {
        'categories': StockService.unique_categories(),
        'locations': StockService.unique_locations(),
        'parents': StockService.parent_candidates(exclude_id),
        'overrides': [status for status in MaintenanceStatus if status in MANUAL_OVERRIDES],
    }


@bp.route('')
@login_required
@permission_required('can_view')
def index():
    """Stock table with parents aggregated over their children"""
    filters = StockService.extract_filters(request)
    hierarchy = StockService.get_hierarchy(**filters)
    logger.debug(f"User {current_user.username} viewing stock: {len(hierarchy)} row(s), {len(hierarchy.orphans)} orphan(s)")
    return render_template(
        'stock/list.html',
        hierarchy=hierarchy,
        filters=filters,
        categories=StockService.unique_categories(),
        locations=StockService.unique_locations(),
    )


@bp.route('/create', methods=['GET', 'POST'])
@login_required
@permission_required('can_manage_stock')
def create():
    """Create a stock item"""
    form = {'parent_item_id': request.args.get('parent', '')}

    if request.method == 'POST':
        form = request.form.to_dict()
        logger.debug(f"Create stock item request: {sanitize_form_data(request.form)}")
        try:
            item = manager.create_item(current_user, **form)
            flash(f'Stock item {item.name} created', 'success')
            return redirect(url_for('stock.index'))
        except ValueError as e:
            flash(str(e), 'error')
            logger.warning(f"Stock item creation failed: {e}")
        except Exception as e:
            flash(f'Error creating stock item: {str(e)}', 'error')
            logger.error(f"Unexpected error creating stock item: {e}")
            db.session.rollback()

    return render_template('stock/form.html', item=None, form=form, **_form_options())


@bp.route('/<int:item_id>/edit', methods=['GET', 'POST'])
@login_required
@permission_required('can_manage_stock')
def edit(item_id):
    """Edit a stock item"""
    item = _item_or_404(item_id)
    form = {
        'name': item.name,
        'category': item.category,
        'location': item.location,
        'current_quantity': item.current_quantity,
        'minimum_stock': item.minimum_stock,
        'asset_number': item.asset_number or '',
        'maintenance_status': item.maintenance_status if MaintenanceStatus.parse(item.maintenance_status) in MANUAL_OVERRIDES else '',
        'parent_item_id': item.parent_item_id or '',
    }

    if request.method == 'POST':
        form = request.form.to_dict()
        try:
            manager.update_item(current_user, item_id, **form)
            flash(f'Stock item {item.name} updated', 'success')
            return redirect(url_for('stock.index'))
        except ValueError as e:
            flash(str(e), 'error')
            logger.warning(f"Stock item update failed for ID {item_id}: {e}")
        except Exception as e:
            flash(f'Error updating stock item: {str(e)}', 'error')
            logger.error(f"Unexpected error updating stock item {item_id}: {e}")
            db.session.rollback()

    return render_template('stock/form.html', item=item, form=form, **_form_options(exclude_id=item_id))


@bp.route('/<int:item_id>/delete', methods=['POST'])
@login_required
@permission_required('can_manage_stock')
def delete(item_id):
    """Delete an item, its children and their history"""
    item = _item_or_404(item_id)
    name = item.name
    try:
        removed = manager.delete_item(current_user, item_id)
        flash(f'Stock item {name} deleted ({removed} item(s) removed)', 'success')
    except Exception as e:
        flash(f'Error deleting stock item: {str(e)}', 'error')
        logger.error(f"Unexpected error deleting stock item {item_id}: {e}")
        db.session.rollback()
    return redirect(url_for('stock.index'))


@bp.route('/<int:item_id>/withdraw', methods=['GET', 'POST'])
@login_required
@permission_required('can_manage_stock')
def withdraw(item_id):
    """Withdraw units from an item"""
    item = _item_or_404(item_id)
    form = {'quantity': 1, 'responsible_by': current_user.display_name}

    if request.method == 'POST':
        form = request.form.to_dict()
        try:
            withdrawal = manager.withdraw(
                current_user,
                item_id,
                quantity=form.get('quantity'),
                reason=form.get('reason'),
                responsible_by=form.get('responsible_by'),
            )
            flash(f'Withdrew {withdrawal.quantity} of {item.name}; {item.current_quantity} left', 'success')
            return redirect(url_for('stock.index'))
        except ValueError as e:
            flash(str(e), 'error')
            logger.warning(f"Withdrawal from stock item {item_id} rejected: {e}")
        except Exception as e:
            flash(f'Error recording withdrawal: {str(e)}', 'error')
            logger.error(f"Unexpected error withdrawing from stock item {item_id}: {e}")
            db.session.rollback()

    return render_template('stock/withdraw.html', item=item, form=form)


@bp.route('/<int:item_id>/history')
@login_required
@permission_required('can_view')
def history(item_id):
    """Withdrawals of an item, newest first"""
    item = _item_or_404(item_id)
    return render_template('stock/history.html', item=item, withdrawals=StockService.withdrawal_history(item_id))
