"""
Aggregates for the dashboard page.

Counts are keyed by EquipmentStatus value so templates can look up
'ok', 'warning' and 'overdue' directly. Every status bucket is present even
when its count is zero.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, Optional

from checklist.buisness.equipment.status_engine import EquipmentStatus, equipment_status
from checklist.utils.dates import local_today


def _empty_status_counts() -> Dict[str, int]:
    return OrderedDict((status.value, 0) for status in EquipmentStatus)


@dataclass
class DashboardStats:
    total: int = 0
    status_counts: Dict[str, int] = field(default_factory=_empty_status_counts)
    sector_counts: Dict[str, int] = field(default_factory=dict)
    responsible_status_counts: Dict[str, Dict[str, int]] = field(default_factory=dict)

    @property
    def attention_count(self) -> int:
        return self.status_counts[EquipmentStatus.WARNING.value] + self.status_counts[EquipmentStatus.OVERDUE.value]


def compute_dashboard_stats(records: Iterable[Any], today: Optional[date] = None) -> DashboardStats:
    """Status, sector and per-responsible counts over the given equipment."""
    today = today or local_today()
    stats = DashboardStats()
    sectors: Dict[str, int] = {}
    responsibles: Dict[str, Dict[str, int]] = {}

    for record in records:
        status = equipment_status(record, today).value
        stats.total += 1
        stats.status_counts[status] += 1

        sector = getattr(record, 'sector', None) or ''
        sectors[sector] = sectors.get(sector, 0) + 1

        responsible = getattr(record, 'responsible', None) or ''
        responsibles.setdefault(responsible, _empty_status_counts())[status] += 1

    stats.sector_counts = OrderedDict(sorted(sectors.items()))
    stats.responsible_status_counts = OrderedDict(sorted(responsibles.items()))
    return stats
