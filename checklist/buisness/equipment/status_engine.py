"""
Equipment Status Engine

Pure functions deriving the cleaning status of an equipment record from its
last cleaning date and periodicity. The checklist table, the row colouring,
the dashboard counts and the notifier all classify through this module so
they always agree.

Records can be Equipment models, plain dicts or any object exposing
``last_cleaning`` and ``periodicity``.
"""

from __future__ import annotations

from datetime import date, timedelta
from enum import Enum
from typing import Any, Optional

from checklist.utils.dates import days_between, local_today, parse_local_date


class EquipmentStatus(str, Enum):
    OK = 'ok'
    WARNING = 'warning'
    OVERDUE = 'overdue'

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]


STATUS_LABELS = {
    EquipmentStatus.OK: 'Up to date',
    EquipmentStatus.WARNING: 'Due tomorrow',
    EquipmentStatus.OVERDUE: 'Overdue',
}

MIN_PERIODICITY = 1


def _field(record: Any, name: str) -> Any:
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def coerce_periodicity(value: Any) -> int:
    """
    Periodicity in days, never below 1.

    Non-numeric, fractional-string or non-positive values fall back to 1.
    """
    if isinstance(value, bool):
        return MIN_PERIODICITY
    try:
        days = int(value)
    except (TypeError, ValueError):
        return MIN_PERIODICITY
    return days if days >= MIN_PERIODICITY else MIN_PERIODICITY


def next_cleaning_date(record: Any) -> Optional[date]:
    """Last cleaning plus periodicity, as calendar addition. None if undated."""
    last_cleaning = parse_local_date(_field(record, 'last_cleaning'))
    if last_cleaning is None:
        return None
    return last_cleaning + timedelta(days=coerce_periodicity(_field(record, 'periodicity')))


def days_until_next_cleaning(record: Any, today: Optional[date] = None) -> Optional[int]:
    """
    Signed number of calendar days until the next cleaning is due.

    0 means due today, negative means overdue. Returns None when the last
    cleaning date cannot be read.
    """
    due = next_cleaning_date(record)
    if due is None:
        return None
    reference = parse_local_date(today) if today is not None else local_today()
    if reference is None:
        reference = local_today()
    return days_between(reference, due)


def status_from_days(days: Optional[int]) -> EquipmentStatus:
    # Due today counts as overdue; an unreadable date needs a cleaning too
    if days is None or days <= 0:
        return EquipmentStatus.OVERDUE
    if days == 1:
        return EquipmentStatus.WARNING
    return EquipmentStatus.OK


def equipment_status(record: Any, today: Optional[date] = None) -> EquipmentStatus:
    """Classify an equipment record as OK, WARNING or OVERDUE."""
    return status_from_days(days_until_next_cleaning(record, today))
