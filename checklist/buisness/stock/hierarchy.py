"""
Stock Hierarchy
Groups flat stock item rows into the one-level parent/child structure shown
on the stock page.

Two projections are provided:
- partition(): the flat parents/children split, with each parent's quantity
  rolled up from its children
- build_hierarchy(): tagged views (StandaloneItem, ParentItem, ChildItem)
  computed once per fetch so templates never re-derive the relationship

Stored rows are never modified. Both projections work on StockItemSnapshot
copies taken from models or dicts.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Optional, Union

from checklist.buisness.stock.stock_status import MaintenanceStatus, status_for


SNAPSHOT_FIELDS = (
    'id', 'name', 'category', 'current_quantity', 'minimum_stock', 'location',
    'asset_number', 'maintenance_status', 'parent_item_id',
)


@dataclass(frozen=True)
class StockItemSnapshot:
    """Read-only copy of a stock item row."""
    id: Any
    name: str = ''
    category: str = ''
    current_quantity: int = 0
    minimum_stock: int = 0
    location: str = ''
    asset_number: Optional[str] = None
    maintenance_status: Optional[str] = None
    parent_item_id: Any = None

    @classmethod
    def from_item(cls, item: Any) -> 'StockItemSnapshot':
        if isinstance(item, cls):
            return item
        if isinstance(item, dict):
            values = {name: item.get(name) for name in SNAPSHOT_FIELDS}
        else:
            values = {name: getattr(item, name, None) for name in SNAPSHOT_FIELDS}
        for name in ('current_quantity', 'minimum_stock'):
            try:
                values[name] = int(values[name] or 0)
            except (TypeError, ValueError):
                values[name] = 0
        return cls(**values)

    @property
    def has_parent(self) -> bool:
        return self.parent_item_id is not None

    @property
    def status(self) -> MaintenanceStatus:
        return status_for(self, self.maintenance_status)


@dataclass(frozen=True)
class StockPartition:
    parents: List[StockItemSnapshot]
    children: List[StockItemSnapshot]


def _children_by_parent(snapshots: Iterable[StockItemSnapshot]) -> Dict[Any, List[StockItemSnapshot]]:
    grouped: Dict[Any, List[StockItemSnapshot]] = defaultdict(list)
    for snapshot in snapshots:
        if snapshot.has_parent:
            grouped[snapshot.parent_item_id].append(snapshot)
    return grouped


def partition(items: Iterable[Any]) -> StockPartition:
    """
    Split items into parent-eligible rows and child rows.

    A parent with at least one child reports the sum of its children's
    quantities; a parent without children keeps its stored quantity. A child
    pointing at a missing parent is still a child and is summed nowhere.
    """
    snapshots = [StockItemSnapshot.from_item(item) for item in items]
    grouped = _children_by_parent(snapshots)

    parents = []
    for snapshot in snapshots:
        if snapshot.has_parent:
            continue
        children = grouped.get(snapshot.id)
        if children:
            snapshot = replace(snapshot, current_quantity=sum(c.current_quantity for c in children))
        parents.append(snapshot)

    children = [snapshot for snapshot in snapshots if snapshot.has_parent]
    return StockPartition(parents=parents, children=children)


@dataclass(frozen=True)
class StandaloneItem:
    """Item with no parent and no children; every detail field is meaningful."""
    item: StockItemSnapshot
    kind = 'standalone'

    @property
    def id(self):
        return self.item.id

    @property
    def display_quantity(self) -> int:
        return self.item.current_quantity

    @property
    def display_status(self) -> Optional[MaintenanceStatus]:
        return self.item.status


@dataclass(frozen=True)
class ChildItem:
    """Item grouped under a parent. parent_found is False for a dangling reference."""
    item: StockItemSnapshot
    parent_id: Any
    parent_found: bool = True
    kind = 'child'

    @property
    def id(self):
        return self.item.id

    @property
    def display_quantity(self) -> int:
        return self.item.current_quantity

    @property
    def display_status(self) -> Optional[MaintenanceStatus]:
        return self.item.status


@dataclass(frozen=True)
class ParentItem:
    """Virtual aggregate: its own stored quantity and status are not displayed."""
    item: StockItemSnapshot
    children: List[ChildItem] = field(default_factory=list)
    kind = 'parent'

    @property
    def id(self):
        return self.item.id

    @property
    def display_quantity(self) -> int:
        return sum(child.item.current_quantity for child in self.children)

    @property
    def display_status(self) -> Optional[MaintenanceStatus]:
        return None

    @property
    def attention_count(self) -> int:
        """Children that are not plainly in stock."""
        return sum(1 for child in self.children if child.display_status != MaintenanceStatus.IN_STOCK)


StockView = Union[StandaloneItem, ParentItem, ChildItem]


@dataclass(frozen=True)
class StockHierarchy:
    rows: List[Union[StandaloneItem, ParentItem]]
    orphans: List[ChildItem]

    def find(self, item_id: Any) -> Optional[StockView]:
        for row in self.rows:
            if row.id == item_id:
                return row
            if isinstance(row, ParentItem):
                for child in row.children:
                    if child.id == item_id:
                        return child
        for orphan in self.orphans:
            if orphan.id == item_id:
                return orphan
        return None

    def restricted_to(self, item_ids: Iterable[Any]) -> 'StockHierarchy':
        """
        Rows that involve any of item_ids.

        A parent is kept with all of its children when the parent or one of
        its children is listed, so its quantity is still the full sum.
        """
        wanted = set(item_ids)
        rows = [
            row for row in self.rows
            if row.id in wanted
            or (isinstance(row, ParentItem) and any(child.id in wanted for child in row.children))
        ]
        orphans = [orphan for orphan in self.orphans if orphan.id in wanted]
        return StockHierarchy(rows=rows, orphans=orphans)

    @property
    def parents(self) -> List[ParentItem]:
        return [row for row in self.rows if isinstance(row, ParentItem)]

    def __len__(self) -> int:
        return len(self.rows)


def build_hierarchy(items: Iterable[Any]) -> StockHierarchy:
    """Tag every item as standalone, parent or child, preserving input order."""
    snapshots = [StockItemSnapshot.from_item(item) for item in items]
    grouped = _children_by_parent(snapshots)
    top_level_ids = {snapshot.id for snapshot in snapshots if not snapshot.has_parent}

    rows: List[Union[StandaloneItem, ParentItem]] = []
    for snapshot in snapshots:
        if snapshot.has_parent:
            continue
        children = grouped.get(snapshot.id)
        if children:
            rows.append(ParentItem(
                item=snapshot,
                children=[ChildItem(item=child, parent_id=snapshot.id) for child in children],
            ))
        else:
            rows.append(StandaloneItem(item=snapshot))

    orphans = [
        ChildItem(item=snapshot, parent_id=snapshot.parent_item_id, parent_found=False)
        for snapshot in snapshots
        if snapshot.has_parent and snapshot.parent_item_id not in top_level_ids
    ]
    return StockHierarchy(rows=rows, orphans=orphans)
