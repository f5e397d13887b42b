"""
Equipment routes
Create, edit, delete, mark cleaned and cleaning history
"""

from flask import Blueprint, render_template, redirect, url_for, flash, request, abort
from flask_login import login_required, current_user

from checklist import db
from checklist.buisness.core.access import permission_required
from checklist.buisness.core.errors import NotFoundError
from checklist.buisness.equipment.equipment_context import DEFAULT_PERIODICITY, EquipmentContext
from checklist.logger import get_logger
from checklist.services.equipment.equipment_service import EquipmentService
from checklist.utils.dates import local_today
from checklist.utils.logging_sanitizer import sanitize_form_data

logger = get_logger("checklist.routes.equipment")
bp = Blueprint('equipment', __name__)


def _context_or_404(equipment_id):
    try:
        return EquipmentContext(equipment_id)
    except NotFoundError:
        abort(404)


def _back_to_checklist():
    """Return to the checklist page the form was posted from."""
    next_page = request.form.get('next') or ''
    if next_page.startswith('/') and not next_page.startswith('//'):
        return redirect(next_page)
    return redirect(url_for('main.index'))


def _form_options():
    return {
        'sectors': EquipmentService.unique_sectors(),
        'responsibles': EquipmentService.unique_responsibles(),
    }


@bp.route('/create', methods=['GET', 'POST'])
@login_required
@permission_required('can_add')
def create():
    """Create equipment"""
    form = {'periodicity': DEFAULT_PERIODICITY, 'last_cleaning': local_today().isoformat()}

    if request.method == 'POST':
        form = request.form.to_dict()
        logger.debug(f"Create equipment request: {sanitize_form_data(request.form)}")
        try:
            context = EquipmentContext.create(current_user, **form)
            flash(f'Equipment {context.equipment.name} created', 'success')
            return redirect(url_for('main.index'))
        except ValueError as e:
            flash(str(e), 'error')
            logger.warning(f"Equipment creation failed: {e}")
        except Exception as e:
            flash(f'Error creating equipment: {str(e)}', 'error')
            logger.error(f"Unexpected error creating equipment: {e}")
            db.session.rollback()

    return render_template('equipment/form.html', equipment=None, form=form, **_form_options())


@bp.route('/<int:equipment_id>/edit', methods=['GET', 'POST'])
@login_required
@permission_required('can_edit')
def edit(equipment_id):
    """Edit equipment"""
    context = _context_or_404(equipment_id)
    equipment = context.equipment
    form = {
        'name': equipment.name,
        'sector': equipment.sector,
        'responsible': equipment.responsible,
        'periodicity': equipment.periodicity,
        'last_cleaning': equipment.last_cleaning.isoformat() if equipment.last_cleaning else '',
    }

    if request.method == 'POST':
        form = request.form.to_dict()
        try:
            context.edit(current_user, **form)
            flash(f'Equipment {equipment.name} updated', 'success')
            return redirect(url_for('main.index'))
        except ValueError as e:
            flash(str(e), 'error')
            logger.warning(f"Equipment update failed for ID {equipment_id}: {e}")
        except Exception as e:
            flash(f'Error updating equipment: {str(e)}', 'error')
            logger.error(f"Unexpected error updating equipment {equipment_id}: {e}")
            db.session.rollback()

    return render_template('equipment/form.html', equipment=equipment, form=form, **_form_options())


@bp.route('/<int:equipment_id>/delete', methods=['POST'])
@login_required
@permission_required('can_delete')
def delete(equipment_id):
    """Delete equipment and its cleaning history"""
    context = _context_or_404(equipment_id)
    name = context.equipment.name
    try:
        context.delete(current_user)
        flash(f'Equipment {name} deleted', 'success')
    except Exception as e:
        flash(f'Error deleting equipment: {str(e)}', 'error')
        logger.error(f"Unexpected error deleting equipment {equipment_id}: {e}")
        db.session.rollback()
    return _back_to_checklist()


@bp.route('/<int:equipment_id>/clean', methods=['POST'])
@login_required
@permission_required('can_mark_cleaned')
def mark_cleaned(equipment_id):
    """Record a cleaning dated today"""
    context = _context_or_404(equipment_id)
    try:
        entry = context.mark_cleaned(current_user)
        flash(f'{context.equipment.name} marked as cleaned on {entry.cleaning_date.strftime("%d/%m/%Y")}', 'success')
    except ValueError as e:
        flash(str(e), 'error')
        logger.warning(f"Mark cleaned failed for equipment {equipment_id}: {e}")
    except Exception as e:
        flash(f'Error recording cleaning: {str(e)}', 'error')
        logger.error(f"Unexpected error recording cleaning for equipment {equipment_id}: {e}")
        db.session.rollback()
    return _back_to_checklist()


@bp.route('/<int:equipment_id>/history')
@login_required
@permission_required('can_view')
def history(equipment_id):
    """Cleaning history, newest first"""
    context = _context_or_404(equipment_id)
    return render_template(
        'equipment/history.html',
        equipment=context.equipment,
        history=context.history(),
        status=context.status(),
        days=context.days_until_next_cleaning(),
        next_cleaning=context.next_cleaning,
    )
