"""
Jinja filters and globals shared by every page.
"""

from flask_login import current_user

from checklist.buisness.equipment.status_engine import (
    EquipmentStatus,
    days_until_next_cleaning,
    equipment_status,
    next_cleaning_date,
)
from checklist.buisness.stock.stock_status import MaintenanceStatus
from checklist.utils.dates import format_date

# Bootstrap contextual classes per status value
STATUS_CSS = {
    EquipmentStatus.OK.value: 'success',
    EquipmentStatus.WARNING.value: 'warning',
    EquipmentStatus.OVERDUE.value: 'danger',
    MaintenanceStatus.IN_STOCK.value: 'success',
    MaintenanceStatus.LOW_STOCK.value: 'warning',
    MaintenanceStatus.OUT_OF_STOCK.value: 'danger',
    MaintenanceStatus.IN_MAINTENANCE.value: 'info',
    MaintenanceStatus.DEFECTIVE.value: 'dark',
}


def status_css(status):
    value = getattr(status, 'value', status)
    return STATUS_CSS.get(value, 'secondary')


def status_label(status):
    """Label for an EquipmentStatus/MaintenanceStatus member or its stored value."""
    if isinstance(status, (EquipmentStatus, MaintenanceStatus)):
        return status.label
    parsed = MaintenanceStatus.parse(status)
    if parsed is not None:
        return parsed.label
    try:
        return EquipmentStatus(status).label
    except ValueError:
        return status or ''


def can(capability):
    return current_user.is_authenticated and current_user.has_permission(capability)


def register_template_helpers(app):
    app.add_template_filter(format_date, 'format_date')
    app.add_template_filter(status_css, 'status_css')
    app.add_template_filter(status_label, 'status_label')
    app.add_template_global(can, 'can')
    app.add_template_global(equipment_status, 'equipment_status')
    app.add_template_global(days_until_next_cleaning, 'days_until_next_cleaning')
    app.add_template_global(next_cleaning_date, 'next_cleaning_date')
