"""
Page result shared by the list services.

Mirrors the attributes templates use on flask_sqlalchemy pagination objects,
so a page sliced in Python renders the same way as query.paginate().
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional, Sequence


@dataclass
class PageResult:
    items: List[Any] = field(default_factory=list)
    page: int = 1
    per_page: int = 10
    total: int = 0

    @classmethod
    def from_pagination(cls, pagination) -> 'PageResult':
        return cls(
            items=list(pagination.items),
            page=pagination.page,
            per_page=pagination.per_page,
            total=pagination.total or 0,
        )

    @classmethod
    def from_sequence(cls, rows: Sequence[Any], page: int, per_page: int) -> 'PageResult':
        """Slice an already filtered sequence. Pages past the end are empty."""
        page = max(page, 1)
        start = (page - 1) * per_page
        return cls(items=list(rows[start:start + per_page]), page=page, per_page=per_page, total=len(rows))

    @property
    def pages(self) -> int:
        if not self.per_page or not self.total:
            return 0
        return int(math.ceil(self.total / self.per_page))

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.pages

    @property
    def prev_num(self) -> Optional[int]:
        return self.page - 1 if self.has_prev else None

    @property
    def next_num(self) -> Optional[int]:
        return self.page + 1 if self.has_next else None

    def iter_pages(self) -> Iterator[int]:
        return iter(range(1, self.pages + 1))

    def __iter__(self):
        return iter(self.items)

    def __len__(self):
        return len(self.items)
