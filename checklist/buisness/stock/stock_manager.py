from __future__ import annotations

from typing import Any, Dict, Optional

from checklist import db
from checklist.buisness.core.access import ensure_permission
from checklist.buisness.core.errors import (
    InsufficientStockError,
    NotFoundError,
    StockHierarchyError,
    ValidationError,
)
from checklist.buisness.stock.stock_status import MANUAL_OVERRIDES, MaintenanceStatus, status_for
from checklist.data.stock.stock_item import StockItem
from checklist.data.stock.stock_withdrawal import StockWithdrawal
from checklist.logger import get_logger

logger = get_logger("checklist.buisness.stock.manager")

TEXT_FIELDS = ('name', 'category', 'location')
EDITABLE_FIELDS = TEXT_FIELDS + (
    'current_quantity', 'minimum_stock', 'asset_number', 'maintenance_status', 'parent_item_id',
)


def _non_negative_int(value: Any, label: str) -> int:
    if value is None or value == '':
        return 0
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{label} must be a whole number")
    if number < 0:
        raise ValidationError(f"{label} cannot be negative")
    return number


def _manual_override(value: Any) -> Optional[MaintenanceStatus]:
    status = MaintenanceStatus.parse(value)
    return status if status in MANUAL_OVERRIDES else None


def clean_stock_data(data: Dict[str, Any], partial: bool = False) -> Dict[str, Any]:
    """
    Validate and normalise submitted stock item fields.

    maintenance_status is reduced to a manual override (in_maintenance,
    defective) or None; quantity-derived statuses are never taken from input.
    """
    cleaned: Dict[str, Any] = {}

    if 'name' in data or not partial:
        name = (data.get('name') or '').strip()
        if not name:
            raise ValidationError("Name is required")
        cleaned['name'] = name

    for key in ('category', 'location'):
        if key in data or not partial:
            cleaned[key] = (data.get(key) or '').strip()

    if 'current_quantity' in data or not partial:
        cleaned['current_quantity'] = _non_negative_int(data.get('current_quantity'), 'Current quantity')
    if 'minimum_stock' in data or not partial:
        cleaned['minimum_stock'] = _non_negative_int(data.get('minimum_stock'), 'Minimum stock')

    if 'asset_number' in data or not partial:
        cleaned['asset_number'] = (data.get('asset_number') or '').strip() or None

    if 'maintenance_status' in data or not partial:
        cleaned['maintenance_status'] = _manual_override(data.get('maintenance_status'))

    if 'parent_item_id' in data or not partial:
        parent_id = data.get('parent_item_id')
        if parent_id in (None, '', 'none'):
            cleaned['parent_item_id'] = None
        else:
            try:
                cleaned['parent_item_id'] = int(parent_id)
            except (TypeError, ValueError):
                raise ValidationError("Parent item is invalid")

    return cleaned


class StockManager:
    """
    Stock item operations.

    Responsibilities:
    - Keep the one-level parent/child structure valid on every write
    - Keep the stored maintenance_status in line with quantity and overrides
    - Record a StockWithdrawal row for every withdrawal
    """

    def get_item(self, item_id: int) -> StockItem:
        item = db.session.get(StockItem, item_id)
        if item is None:
            raise NotFoundError(f"Stock item {item_id} not found")
        return item

    def _check_parent(self, item: Optional[StockItem], parent_id: Optional[int]) -> None:
        if parent_id is None:
            return
        if item is not None and item.id == parent_id:
            raise StockHierarchyError("An item cannot be its own parent")
        parent = db.session.get(StockItem, parent_id)
        if parent is None:
            raise StockHierarchyError(f"Parent item {parent_id} does not exist")
        if parent.parent_item_id is not None:
            raise StockHierarchyError(f"'{parent.name}' is itself a child and cannot be a parent")
        if item is not None and item.children:
            raise StockHierarchyError(f"'{item.name}' has child items and cannot be moved under a parent")

    @staticmethod
    def _refresh_status(item: StockItem, override: Optional[MaintenanceStatus]) -> None:
        item.maintenance_status = status_for(item, override).value

    def create_item(self, user, commit: bool = True, **data) -> StockItem:
        ensure_permission(user, 'can_manage_stock')
        cleaned = clean_stock_data(data)
        override = cleaned.pop('maintenance_status')
        self._check_parent(None, cleaned.get('parent_item_id'))

        item = StockItem(created_by_id=user.id, updated_by_id=user.id, **cleaned)
        self._refresh_status(item, override)
        try:
            db.session.add(item)
            if commit:
                db.session.commit()
            else:
                db.session.flush()
        except Exception:
            db.session.rollback()
            raise

        logger.info(f"User {user.username} created stock item {item.name} (ID: {item.id}, status {item.maintenance_status})")
        return item

    def update_item(self, user, item_id: int, commit: bool = True, **data) -> StockItem:
        ensure_permission(user, 'can_manage_stock')
        item = self.get_item(item_id)
        submitted = {key: value for key, value in data.items() if key in EDITABLE_FIELDS}
        cleaned = clean_stock_data(submitted, partial=True)

        if 'maintenance_status' in cleaned:
            override = cleaned.pop('maintenance_status')
        else:
            override = _manual_override(item.maintenance_status)

        if 'parent_item_id' in cleaned and cleaned['parent_item_id'] != item.parent_item_id:
            self._check_parent(item, cleaned['parent_item_id'])

        for key, value in cleaned.items():
            setattr(item, key, value)
        item.updated_by_id = user.id
        self._refresh_status(item, override)

        try:
            if commit:
                db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        logger.info(f"User {user.username} updated stock item {item.name} (ID: {item.id}): {sorted(cleaned)}")
        return item

    def delete_item(self, user, item_id: int, commit: bool = True) -> int:
        """
        Delete an item together with its children and their withdrawal history.

        Returns:
            int: number of stock items removed
        """
        ensure_permission(user, 'can_manage_stock')
        item = self.get_item(item_id)
        removed = 1 + len(item.children)
        name = item.name
        try:
            db.session.delete(item)
            if commit:
                db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        logger.info(f"User {user.username} deleted stock item {name} (ID: {item_id}) and {removed - 1} child item(s)")
        return removed

    def withdraw(self, user, item_id: int, quantity: Any, reason: str, responsible_by: str,
                 commit: bool = True) -> StockWithdrawal:
        """
        Take `quantity` units out of stock.

        Rejected without any state change when the quantity is not positive,
        exceeds the current quantity, when reason or responsible are missing,
        or when the item is a parent with children.
        """
        ensure_permission(user, 'can_manage_stock')
        item = self.get_item(item_id)

        try:
            quantity = int(quantity)
        except (TypeError, ValueError):
            raise ValidationError("Quantity must be a whole number")
        if quantity <= 0:
            raise ValidationError("Quantity must be greater than zero")

        reason = (reason or '').strip()
        responsible_by = (responsible_by or '').strip()
        if not reason or not responsible_by:
            raise ValidationError("Reason and responsible are required")

        if item.children:
            raise StockHierarchyError(f"'{item.name}' groups other items; withdraw from one of its children")

        available = item.current_quantity or 0
        if quantity > available:
            logger.warning(f"Withdrawal of {quantity} from {item.name} (ID: {item.id}) rejected: {available} available")
            raise InsufficientStockError(item.name, quantity, available)

        override = _manual_override(item.maintenance_status)
        item.current_quantity = available - quantity
        item.updated_by_id = user.id
        self._refresh_status(item, override)

        withdrawal = StockWithdrawal(
            stock_item_id=item.id,
            quantity_delta=-quantity,
            reason=reason,
            responsible_by=responsible_by,
            created_by_id=user.id,
        )
        try:
            db.session.add(withdrawal)
            if commit:
                db.session.commit()
            else:
                db.session.flush()
        except Exception:
            db.session.rollback()
            raise

        logger.info(f"User {user.username} withdrew {quantity} of {item.name} (ID: {item.id}); {item.current_quantity} left")
        return withdrawal
