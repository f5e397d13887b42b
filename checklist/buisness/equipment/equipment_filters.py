from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional

from checklist.buisness.equipment.status_engine import (
    EquipmentStatus,
    days_until_next_cleaning,
    equipment_status,
)

ALL = 'all'


def _text(value: Any) -> str:
    return (value or '').strip() if isinstance(value, str) else ''


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == '':
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class EquipmentFilters:
    """
    Advanced filters of the checklist page.

    sector, responsible and search_term map to SQL; status and the days
    range depend on today's date and are applied to the fetched rows.
    """
    status: str = ALL
    sector: str = ALL
    responsible: str = ALL
    search_term: str = ''
    min_days: Optional[int] = None
    max_days: Optional[int] = None

    @classmethod
    def from_args(cls, args) -> 'EquipmentFilters':
        status = _text(args.get('status')) or ALL
        if status != ALL and status not in {s.value for s in EquipmentStatus}:
            status = ALL
        return cls(
            status=status,
            sector=_text(args.get('sector')) or ALL,
            responsible=_text(args.get('responsible')) or ALL,
            search_term=_text(args.get('search')),
            min_days=_optional_int(args.get('min_days')),
            max_days=_optional_int(args.get('max_days')),
        )

    @property
    def has_derived_filters(self) -> bool:
        return self.status != ALL or self.min_days is not None or self.max_days is not None

    @property
    def active_count(self) -> int:
        count = sum(1 for value in (self.status, self.sector, self.responsible) if value != ALL)
        if self.search_term:
            count += 1
        if self.min_days is not None or self.max_days is not None:
            count += 1
        return count

    def matches_stored_fields(self, record: Any) -> bool:
        if self.sector != ALL and record.sector != self.sector:
            return False
        if self.responsible != ALL and record.responsible != self.responsible:
            return False
        if self.search_term:
            needle = self.search_term.lower()
            haystack = (record.name, record.sector, record.responsible)
            if not any(needle in (value or '').lower() for value in haystack):
                return False
        return True

    def matches_derived_fields(self, record: Any, today: Optional[date] = None) -> bool:
        if self.status != ALL and equipment_status(record, today).value != self.status:
            return False
        if self.min_days is not None or self.max_days is not None:
            days = days_until_next_cleaning(record, today)
            if days is None:
                return False
            if self.min_days is not None and days < self.min_days:
                return False
            if self.max_days is not None and days > self.max_days:
                return False
        return True

    def matches(self, record: Any, today: Optional[date] = None) -> bool:
        return self.matches_stored_fields(record) and self.matches_derived_fields(record, today)

    def to_query_args(self) -> Dict[str, Any]:
        """Non-default values, for pagination links."""
        args: Dict[str, Any] = {}
        if self.status != ALL:
            args['status'] = self.status
        if self.sector != ALL:
            args['sector'] = self.sector
        if self.responsible != ALL:
            args['responsible'] = self.responsible
        if self.search_term:
            args['search'] = self.search_term
        if self.min_days is not None:
            args['min_days'] = self.min_days
        if self.max_days is not None:
            args['max_days'] = self.max_days
        return args
