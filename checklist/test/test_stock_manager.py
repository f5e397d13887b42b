"""
Tests for stock item operations and the stock service
"""
import pytest

from checklist.buisness.core.errors import (
    InsufficientStockError,
    PermissionDenied,
    StockHierarchyError,
    ValidationError,
)
from checklist.buisness.stock.hierarchy import ParentItem
from checklist.buisness.stock.stock_manager import StockManager
from checklist.data.stock.stock_item import StockItem
from checklist.data.stock.stock_withdrawal import StockWithdrawal
from checklist.services.stock.stock_service import StockService


@pytest.fixture
def manager():
    return StockManager()


def test_create_computes_status(manager, stock_user):
    empty = manager.create_item(stock_user, name='Spray bottles', current_quantity=0, minimum_stock=4)
    low = manager.create_item(stock_user, name='Bleach', current_quantity='2', minimum_stock='2')
    plenty = manager.create_item(stock_user, name='Towels', current_quantity=40, minimum_stock=10)
    broken = manager.create_item(stock_user, name='Scrubber', current_quantity=1, maintenance_status='defective')

    assert empty.maintenance_status == 'out_of_stock'
    assert low.maintenance_status == 'low_stock'
    assert plenty.maintenance_status == 'in_stock'
    assert broken.maintenance_status == 'defective'


def test_quantity_derived_status_is_not_taken_from_input(manager, stock_user):
    item = manager.create_item(stock_user, name='Towels', current_quantity=0, maintenance_status='in_stock')
    assert item.maintenance_status == 'out_of_stock'


@pytest.mark.parametrize('data', [
    {'name': ''},
    {'name': 'Gloves', 'current_quantity': -1},
    {'name': 'Gloves', 'minimum_stock': 'many'},
    {'name': 'Gloves', 'parent_item_id': 'abc'},
])
def test_create_rejects_invalid_data(manager, stock_user, data):
    with pytest.raises(ValidationError):
        manager.create_item(stock_user, **data)
    assert StockItem.query.count() == 0


def test_stock_requires_manage_stock(manager, viewer_user):
    with pytest.raises(PermissionDenied):
        manager.create_item(viewer_user, name='Gloves')


def test_update_keeps_manual_override_unless_cleared(manager, stock_user):
    item = manager.create_item(stock_user, name='Scrubber', current_quantity=1, maintenance_status='in_maintenance')

    manager.update_item(stock_user, item.id, current_quantity=5)
    assert item.maintenance_status == 'in_maintenance'

    manager.update_item(stock_user, item.id, maintenance_status='')
    assert item.maintenance_status == 'in_stock'


def test_hierarchy_is_validated_on_write(manager, stock_user):
    parent = manager.create_item(stock_user, name='Gloves')
    child = manager.create_item(stock_user, name='Gloves S', current_quantity=3, parent_item_id=parent.id)

    with pytest.raises(StockHierarchyError):
        manager.create_item(stock_user, name='Gloves XS', parent_item_id=child.id)
    with pytest.raises(StockHierarchyError):
        manager.create_item(stock_user, name='Orphan', parent_item_id=999)
    with pytest.raises(StockHierarchyError):
        manager.update_item(stock_user, parent.id, parent_item_id=parent.id)

    other = manager.create_item(stock_user, name='Masks')
    with pytest.raises(StockHierarchyError):
        manager.update_item(stock_user, parent.id, parent_item_id=other.id)


def test_withdraw_more_than_available_is_rejected(db, manager, stock_user):
    item = manager.create_item(stock_user, name='Bleach', current_quantity=5, minimum_stock=1)

    with pytest.raises(InsufficientStockError):
        manager.withdraw(stock_user, item.id, 10, reason='cleaning', responsible_by='Ana')

    db.session.expire_all()
    assert db.session.get(StockItem, item.id).current_quantity == 5
    assert StockWithdrawal.query.count() == 0


@pytest.mark.parametrize('quantity, reason, responsible', [
    (0, 'cleaning', 'Ana'),
    (-2, 'cleaning', 'Ana'),
    ('two', 'cleaning', 'Ana'),
    (1, '', 'Ana'),
    (1, 'cleaning', '  '),
])
def test_withdraw_validation(manager, stock_user, quantity, reason, responsible):
    item = manager.create_item(stock_user, name='Bleach', current_quantity=5)
    with pytest.raises(ValidationError):
        manager.withdraw(stock_user, item.id, quantity, reason=reason, responsible_by=responsible)
    assert item.current_quantity == 5


def test_withdraw_records_movement_and_updates_status(manager, stock_user):
    item = manager.create_item(stock_user, name='Bleach', current_quantity=5, minimum_stock=2)

    withdrawal = manager.withdraw(stock_user, item.id, '3', reason='Weekly cleaning', responsible_by='Ana')
    assert withdrawal.quantity_delta == -3
    assert withdrawal.quantity == 3
    assert item.current_quantity == 2
    assert item.maintenance_status == 'low_stock'

    manager.withdraw(stock_user, item.id, 2, reason='Spill', responsible_by='Carlos')
    assert item.current_quantity == 0
    assert item.maintenance_status == 'out_of_stock'
    assert [w.reason for w in StockService.withdrawal_history(item.id)] == ['Spill', 'Weekly cleaning']


def test_withdraw_from_parent_group_is_refused(manager, stock_user):
    parent = manager.create_item(stock_user, name='Gloves', current_quantity=10)
    manager.create_item(stock_user, name='Gloves S', current_quantity=3, parent_item_id=parent.id)

    with pytest.raises(StockHierarchyError):
        manager.withdraw(stock_user, parent.id, 1, reason='x', responsible_by='Ana')


def test_delete_parent_cascades(manager, stock_user):
    parent = manager.create_item(stock_user, name='Gloves')
    child = manager.create_item(stock_user, name='Gloves S', current_quantity=3, parent_item_id=parent.id)
    manager.withdraw(stock_user, child.id, 1, reason='x', responsible_by='Ana')

    assert manager.delete_item(stock_user, parent.id) == 2
    assert StockItem.query.count() == 0
    assert StockWithdrawal.query.count() == 0


def test_service_hierarchy_and_filters(manager, stock_user):
    parent = manager.create_item(stock_user, name='Gloves', category='PPE', location='Cabinet 1')
    manager.create_item(stock_user, name='Gloves S', category='PPE', location='Cabinet 1',
                        current_quantity=3, parent_item_id=parent.id)
    manager.create_item(stock_user, name='Gloves M', category='PPE', location='Cabinet 1',
                        current_quantity=5, parent_item_id=parent.id)
    manager.create_item(stock_user, name='Bleach', category='Disinfectants', location='Cabinet 2',
                        current_quantity=4, asset_number='PAT-1')

    hierarchy = StockService.get_hierarchy()
    gloves = hierarchy.find(parent.id)
    assert isinstance(gloves, ParentItem)
    assert gloves.display_quantity == 8

    assert [i.name for i in StockService.list_items(category='Disinfectants')] == ['Bleach']
    assert [i.name for i in StockService.list_items(search_term='pat-')] == ['Bleach']
    assert StockService.unique_categories() == ['Disinfectants', 'PPE']
    assert StockService.unique_locations() == ['Cabinet 1', 'Cabinet 2']
    assert [i.name for i in StockService.parent_candidates(exclude_id=parent.id)] == ['Bleach']

    # Children matching the search bring their parent row along
    filtered = StockService.get_hierarchy(search_term='Gloves ')
    assert [row.id for row in filtered.rows] == [parent.id]
    assert filtered.orphans == []
    assert filtered.rows[0].display_quantity == 8


def test_filtered_hierarchy_sums_every_child(manager, stock_user):
    parent = manager.create_item(stock_user, name='Gloves', category='PPE')
    manager.create_item(stock_user, name='Gloves S', category='PPE', current_quantity=3, parent_item_id=parent.id)
    manager.create_item(stock_user, name='Gloves M', category='Spare', current_quantity=5, parent_item_id=parent.id)
    manager.create_item(stock_user, name='Mop', category='Tools', current_quantity=2)

    # Parent and one child match
    gloves = StockService.get_hierarchy(category='PPE').find(parent.id)
    assert isinstance(gloves, ParentItem)
    assert gloves.display_quantity == 8
    assert len(gloves.children) == 2

    # Only the parent matches; it must not fall back to its stored quantity
    manager.update_item(stock_user, parent.id, category='Groups', current_quantity=0)
    hierarchy = StockService.get_hierarchy(category='Groups')
    gloves = hierarchy.find(parent.id)
    assert isinstance(gloves, ParentItem)
    assert gloves.display_quantity == 8
    assert gloves.display_status is None
    assert [row.id for row in hierarchy.rows] == [parent.id]

    # Only one child matches
    hierarchy = StockService.get_hierarchy(category='Spare')
    assert [row.id for row in hierarchy.rows] == [parent.id]
    assert hierarchy.rows[0].display_quantity == 8

    assert StockService.get_hierarchy(category='Nothing').rows == []
