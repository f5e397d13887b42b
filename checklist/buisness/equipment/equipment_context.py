"""
Equipment Context
Provides a clean interface for equipment operations.

Handles:
- Creating, editing and deleting equipment (delete cascades to history)
- Recording cleanings (updates last_cleaning and appends a CleaningHistory row)
- Derived status and days until next cleaning for the wrapped record
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional, Union

from checklist import db
from checklist.buisness.core.access import ensure_permission
from checklist.buisness.core.errors import NotFoundError, ValidationError
from checklist.buisness.equipment.status_engine import (
    EquipmentStatus,
    coerce_periodicity,
    days_until_next_cleaning,
    equipment_status,
    next_cleaning_date,
)
from checklist.data.equipment.cleaning_history import CleaningHistory
from checklist.data.equipment.equipment import Equipment
from checklist.logger import get_logger
from checklist.utils.dates import local_today, parse_local_date

logger = get_logger("checklist.buisness.equipment.context")

EDITABLE_FIELDS = ('name', 'sector', 'responsible', 'periodicity', 'last_cleaning')
DEFAULT_PERIODICITY = 7


def clean_equipment_data(data: Dict[str, Any], partial: bool = False) -> Dict[str, Any]:
    """
    Validate and normalise submitted equipment fields.

    Text fields are stripped and must not be empty. periodicity is coerced to
    an integer of at least 1. last_cleaning must be a readable calendar date.
    With partial=True only the keys present are checked.
    """
    cleaned: Dict[str, Any] = {}

    for key in ('name', 'sector', 'responsible'):
        if key not in data and partial:
            continue
        value = (data.get(key) or '').strip()
        if not value:
            raise ValidationError(f"{key.capitalize()} is required")
        cleaned[key] = value

    if 'periodicity' in data or not partial:
        cleaned['periodicity'] = coerce_periodicity(data.get('periodicity', DEFAULT_PERIODICITY))

    if 'last_cleaning' in data or not partial:
        last_cleaning = parse_local_date(data.get('last_cleaning'))
        if last_cleaning is None:
            raise ValidationError("Last cleaning must be a valid date (YYYY-MM-DD)")
        cleaned['last_cleaning'] = last_cleaning

    return cleaned


class EquipmentContext:
    """
    Context manager for a single equipment record.

    Every mutating method takes the acting user and checks the matching
    capability before touching the session.
    """

    def __init__(self, equipment: Union[Equipment, int]):
        if isinstance(equipment, int):
            self._equipment = db.session.get(Equipment, equipment)
            if self._equipment is None:
                raise NotFoundError(f"Equipment {equipment} not found")
            self._equipment_id = equipment
        else:
            self._equipment = equipment
            self._equipment_id = equipment.id

    @property
    def equipment(self) -> Equipment:
        return self._equipment

    @property
    def equipment_id(self) -> int:
        return self._equipment_id

    @property
    def next_cleaning(self) -> Optional[date]:
        return next_cleaning_date(self._equipment)

    def days_until_next_cleaning(self, today: Optional[date] = None) -> Optional[int]:
        return days_until_next_cleaning(self._equipment, today)

    def status(self, today: Optional[date] = None) -> EquipmentStatus:
        return equipment_status(self._equipment, today)

    def history(self) -> List[CleaningHistory]:
        """Cleanings of this equipment, newest first."""
        return (CleaningHistory.query
                .filter_by(equipment_id=self._equipment_id)
                .order_by(CleaningHistory.cleaning_date.desc(), CleaningHistory.id.desc())
                .all())

    @classmethod
    def create(cls, user, commit: bool = True, **data) -> 'EquipmentContext':
        """Create an equipment record after checking can_add."""
        ensure_permission(user, 'can_add')
        cleaned = clean_equipment_data(data)

        equipment = Equipment(
            created_by_id=user.id,
            updated_by_id=user.id,
            **cleaned,
        )
        try:
            db.session.add(equipment)
            if commit:
                db.session.commit()
            else:
                db.session.flush()
        except Exception:
            db.session.rollback()
            raise

        logger.info(f"User {user.username} created equipment {equipment.name} (ID: {equipment.id})")
        return cls(equipment)

    def edit(self, user, commit: bool = True, **data) -> Equipment:
        """Update the editable fields that were submitted."""
        ensure_permission(user, 'can_edit')
        submitted = {key: value for key, value in data.items() if key in EDITABLE_FIELDS}
        cleaned = clean_equipment_data(submitted, partial=True)

        for key, value in cleaned.items():
            setattr(self._equipment, key, value)
        self._equipment.updated_by_id = user.id

        try:
            if commit:
                db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        logger.info(f"User {user.username} updated equipment {self._equipment.name} (ID: {self._equipment_id}): {sorted(cleaned)}")
        return self._equipment

    def delete(self, user, commit: bool = True) -> None:
        """Delete the equipment and its cleaning history."""
        ensure_permission(user, 'can_delete')
        name = self._equipment.name
        try:
            db.session.delete(self._equipment)
            if commit:
                db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        logger.info(f"User {user.username} deleted equipment {name} (ID: {self._equipment_id})")

    def mark_cleaned(self, user, cleaning_date: Optional[date] = None, commit: bool = True) -> CleaningHistory:
        """
        Record a cleaning.

        last_cleaning moves to the cleaning date (today by default) and a
        history row is appended, credited to the equipment's responsible.
        """
        ensure_permission(user, 'can_mark_cleaned')
        cleaning_date = parse_local_date(cleaning_date) or local_today()

        self._equipment.last_cleaning = cleaning_date
        self._equipment.updated_by_id = user.id
        entry = CleaningHistory(
            equipment_id=self._equipment_id,
            cleaning_date=cleaning_date,
            responsible_by=self._equipment.responsible,
            created_by_id=user.id,
        )
        try:
            db.session.add(entry)
            if commit:
                db.session.commit()
            else:
                db.session.flush()
        except Exception:
            db.session.rollback()
            raise

        logger.info(f"User {user.username} marked equipment {self._equipment.name} (ID: {self._equipment_id}) cleaned on {cleaning_date}")
        return entry
