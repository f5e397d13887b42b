"""
Tests for stock status and the parent/child hierarchy projections
"""
import pytest

from checklist.buisness.stock.hierarchy import (
    ChildItem,
    ParentItem,
    StandaloneItem,
    build_hierarchy,
    partition,
)
from checklist.buisness.stock.stock_status import MaintenanceStatus, status_for


def item(id, quantity=0, minimum=0, parent=None, status=None, name=None):
    return {
        'id': id,
        'name': name or f'item-{id}',
        'current_quantity': quantity,
        'minimum_stock': minimum,
        'parent_item_id': parent,
        'maintenance_status': status,
    }


def test_parent_quantity_is_sum_of_children():
    items = [item(1, quantity=99), item(2, quantity=3, parent=1), item(3, quantity=5, parent=1)]
    result = partition(items)

    assert [p.id for p in result.parents] == [1]
    assert result.parents[0].current_quantity == 8
    assert sorted(c.id for c in result.children) == [2, 3]


def test_parent_without_children_keeps_stored_quantity():
    result = partition([item(1, quantity=4), item(2, quantity=7)])
    assert [p.current_quantity for p in result.parents] == [4, 7]
    assert result.children == []


def test_projection_does_not_mutate_input():
    items = [item(1, quantity=99), item(2, quantity=3, parent=1)]
    snapshot = [dict(i) for i in items]
    partition(items)
    build_hierarchy(items)
    assert items == snapshot


def test_build_hierarchy_tags_rows():
    items = [
        item(1, quantity=10, minimum=2),
        item(2, name='gloves'),
        item(3, quantity=3, minimum=5, parent=2),
        item(4, quantity=5, minimum=5, parent=2),
    ]
    hierarchy = build_hierarchy(items)

    assert [type(row) for row in hierarchy.rows] == [StandaloneItem, ParentItem]
    parent = hierarchy.rows[1]
    assert parent.display_quantity == 8
    assert parent.display_status is None
    assert [child.id for child in parent.children] == [3, 4]
    assert all(isinstance(child, ChildItem) and child.parent_id == 2 for child in parent.children)
    assert parent.attention_count == 2
    assert hierarchy.find(4).display_status is MaintenanceStatus.LOW_STOCK
    assert hierarchy.orphans == []
    assert len(hierarchy) == 2


def test_dangling_parent_reference_becomes_orphan():
    hierarchy = build_hierarchy([item(1, quantity=1), item(2, quantity=6, parent=42)])

    assert [row.id for row in hierarchy.rows] == [1]
    assert isinstance(hierarchy.rows[0], StandaloneItem)
    assert len(hierarchy.orphans) == 1
    orphan = hierarchy.orphans[0]
    assert orphan.parent_found is False
    assert orphan.display_quantity == 6
    assert hierarchy.find(2) is orphan


def test_restricted_hierarchy_keeps_whole_groups():
    items = [item(1), item(2, quantity=3, parent=1), item(3, quantity=5, parent=1), item(4, quantity=7), item(5, parent=42)]
    hierarchy = build_hierarchy(items)

    by_child = hierarchy.restricted_to([3])
    assert [row.id for row in by_child.rows] == [1]
    assert by_child.rows[0].display_quantity == 8
    assert len(by_child.rows[0].children) == 2

    by_parent = hierarchy.restricted_to([1, 4])
    assert [row.id for row in by_parent.rows] == [1, 4]
    assert by_parent.orphans == []

    assert [o.id for o in hierarchy.restricted_to([5]).orphans] == [5]


def test_child_of_a_child_is_not_nested():
    hierarchy = build_hierarchy([item(1), item(2, quantity=1, parent=1), item(3, quantity=1, parent=2)])
    assert [c.id for c in hierarchy.parents[0].children] == [2]
    assert [o.id for o in hierarchy.orphans] == [3]


def test_models_and_objects_are_accepted():
    class Row:
        def __init__(self, **kwargs):
            self.__dict__.update(kwargs)

    rows = [Row(**item(1)), Row(**item(2, quantity=2, parent=1))]
    assert build_hierarchy(rows).parents[0].display_quantity == 2


@pytest.mark.parametrize('quantity, minimum, override, expected', [
    (0, 0, None, MaintenanceStatus.OUT_OF_STOCK),
    (0, 5, None, MaintenanceStatus.OUT_OF_STOCK),
    (5, 5, None, MaintenanceStatus.LOW_STOCK),
    (3, 5, None, MaintenanceStatus.LOW_STOCK),
    (6, 5, None, MaintenanceStatus.IN_STOCK),
    (0, 5, 'in_maintenance', MaintenanceStatus.IN_MAINTENANCE),
    (10, 5, 'defective', MaintenanceStatus.DEFECTIVE),
    (10, 5, 'low_stock', MaintenanceStatus.IN_STOCK),
    (10, 5, 'bogus', MaintenanceStatus.IN_STOCK),
])
def test_status_for(quantity, minimum, override, expected):
    assert status_for({'current_quantity': quantity, 'minimum_stock': minimum}, override) is expected


def test_maintenance_status_parse():
    assert MaintenanceStatus.parse('defective') is MaintenanceStatus.DEFECTIVE
    assert MaintenanceStatus.parse('') is None
    assert MaintenanceStatus.parse(None) is None
    assert MaintenanceStatus.IN_STOCK.label == 'In stock'
