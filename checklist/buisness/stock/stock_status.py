from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class MaintenanceStatus(str, Enum):
    IN_STOCK = 'in_stock'
    LOW_STOCK = 'low_stock'
    OUT_OF_STOCK = 'out_of_stock'
    IN_MAINTENANCE = 'in_maintenance'
    DEFECTIVE = 'defective'

    @property
    def label(self) -> str:
        return MAINTENANCE_LABELS[self]

    @classmethod
    def parse(cls, value: Any) -> Optional['MaintenanceStatus']:
        """Return the matching member, or None for empty/unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


MAINTENANCE_LABELS = {
    MaintenanceStatus.IN_STOCK: 'In stock',
    MaintenanceStatus.LOW_STOCK: 'Low stock',
    MaintenanceStatus.OUT_OF_STOCK: 'Out of stock',
    MaintenanceStatus.IN_MAINTENANCE: 'In maintenance',
    MaintenanceStatus.DEFECTIVE: 'Defective',
}

# Operator-set statuses that win over the quantity-derived ones
MANUAL_OVERRIDES = frozenset({MaintenanceStatus.IN_MAINTENANCE, MaintenanceStatus.DEFECTIVE})


def _quantity(item: Any, name: str) -> int:
    value = item.get(name) if isinstance(item, dict) else getattr(item, name, None)
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def status_for(item: Any, manual_override: Any = None) -> MaintenanceStatus:
    """
    Stock status of an item.

    A manual override of in_maintenance or defective always wins. Otherwise
    zero quantity is out of stock, a quantity at or below the minimum is low
    stock and anything above is in stock. Any other override value is ignored.
    """
    override = MaintenanceStatus.parse(manual_override)
    if override in MANUAL_OVERRIDES:
        return override

    quantity = _quantity(item, 'current_quantity')
    if quantity <= 0:
        return MaintenanceStatus.OUT_OF_STOCK
    if quantity <= _quantity(item, 'minimum_stock'):
        return MaintenanceStatus.LOW_STOCK
    return MaintenanceStatus.IN_STOCK
