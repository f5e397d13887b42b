"""
Checklist and dashboard pages
"""

from flask import Blueprint, render_template, request
from flask_login import login_required, current_user

from checklist.buisness.core.access import permission_required
from checklist.buisness.equipment.dashboard_stats import compute_dashboard_stats
from checklist.logger import get_logger
from checklist.services.equipment.equipment_service import EquipmentService
from checklist.utils.dates import local_today

logger = get_logger("checklist.routes.main")
bp = Blueprint('main', __name__)


@bp.route('/')
@login_required
@permission_required('can_view')
def index():
    """Equipment checklist with filters and pagination"""
    today = local_today()
    page, filters = EquipmentService.get_list_data(request, today=today)
    logger.debug(f"User {current_user.username} viewing checklist page {page.page} with {filters.active_count} filter(s)")

    return render_template(
        'index.html',
        page=page,
        filters=filters,
        today=today,
        sectors=EquipmentService.unique_sectors(),
        responsibles=EquipmentService.unique_responsibles(),
    )


@bp.route('/dashboard')
@login_required
@permission_required('can_view')
def dashboard():
    """Status, sector and responsible counts"""
    logger.debug(f"User {current_user.username} accessing dashboard")
    stats = compute_dashboard_stats(EquipmentService.all_equipment())
    return render_template('dashboard.html', stats=stats)
