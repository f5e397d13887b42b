"""
User permissions
Capability set attached to each user plus the implication rule applied when
an administrator toggles a single flag.

View is the prerequisite capability: enabling any mutating equipment
capability turns view on, and turning view off clears them all. The rule is
a pure reducer so the user management route and the tests share it.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict


PERMISSION_FIELDS = (
    'can_add',
    'can_edit',
    'can_delete',
    'can_view',
    'can_mark_cleaned',
    'can_manage_users',
    'can_manage_stock',
)

# Capabilities that require view
VIEW_DEPENDENT = ('can_add', 'can_edit', 'can_delete', 'can_mark_cleaned')

PERMISSION_LABELS = {
    'can_add': 'Add equipment',
    'can_edit': 'Edit equipment',
    'can_delete': 'Delete equipment',
    'can_view': 'View',
    'can_mark_cleaned': 'Mark as cleaned',
    'can_manage_users': 'Manage users',
    'can_manage_stock': 'Manage stock',
}


@dataclass(frozen=True)
class PermissionSet:
    can_add: bool = False
    can_edit: bool = False
    can_delete: bool = False
    can_view: bool = True
    can_mark_cleaned: bool = False
    can_manage_users: bool = False
    can_manage_stock: bool = False

    @classmethod
    def default(cls) -> 'PermissionSet':
        """Read-only access for newly registered users."""
        return cls()

    @classmethod
    def full(cls) -> 'PermissionSet':
        return cls(**{name: True for name in PERMISSION_FIELDS})

    @classmethod
    def from_source(cls, source: Any) -> 'PermissionSet':
        """Build from a dict or from an object carrying can_* attributes."""
        if source is None:
            return cls.default()
        if isinstance(source, cls):
            return source
        if isinstance(source, dict):
            values = {name: bool(source.get(name, getattr(cls, name))) for name in PERMISSION_FIELDS}
        else:
            values = {name: bool(getattr(source, name, False)) for name in PERMISSION_FIELDS}
        return cls(**values)

    def to_dict(self) -> Dict[str, bool]:
        return asdict(self)

    def allows(self, capability: str) -> bool:
        if capability not in PERMISSION_FIELDS:
            raise KeyError(f"Unknown permission: {capability}")
        return getattr(self, capability)


def apply_permission_change(current: PermissionSet, field: str, value: bool) -> PermissionSet:
    """
    Return a new permission set with one flag changed and the view rule applied.

    - setting add/edit/delete/mark_cleaned to True also sets view to True
    - setting view to False also clears add/edit/delete/mark_cleaned
    """
    if field not in {f.name for f in fields(PermissionSet)}:
        raise KeyError(f"Unknown permission: {field}")

    value = bool(value)
    changes = {field: value}
    if value and field in VIEW_DEPENDENT:
        changes['can_view'] = True
    if field == 'can_view' and not value:
        changes.update({name: False for name in VIEW_DEPENDENT})
    return replace(current, **changes)
