"""
Stock Service
Presentation service for the stock page.

Handles:
- Query building for the category/location/search filters
- Projection of the fetched rows into the parent/child hierarchy
- Withdrawal history lookups
"""

from typing import Dict, List, Optional

from flask import Request
from sqlalchemy import or_

from checklist import db
from checklist.buisness.stock.hierarchy import StockHierarchy, build_hierarchy
from checklist.data.stock.stock_item import StockItem
from checklist.data.stock.stock_withdrawal import StockWithdrawal


class StockService:
    """
    Service for stock presentation data.

    Provides methods for:
    - Building filtered stock queries
    - Building the hierarchy shown in the stock table
    - Listing filter options and parent candidates
    """

    @staticmethod
    def build_filtered_query(
        category: Optional[str] = None,
        location: Optional[str] = None,
        search_term: Optional[str] = None,
    ):
        """
        Build a filtered stock query.

        Args:
            category: Exact category
            location: Exact location
            search_term: Case-insensitive match on name, category, location or asset number

        Returns:
            SQLAlchemy query ordered by name
        """
        query = StockItem.query

        if category:
            query = query.filter(StockItem.category == category)

        if location:
            query = query.filter(StockItem.location == location)

        if search_term:
            pattern = f"%{search_term}%"
            query = query.filter(or_(
                StockItem.name.ilike(pattern),
                StockItem.category.ilike(pattern),
                StockItem.location.ilike(pattern),
                StockItem.asset_number.ilike(pattern),
            ))

        return query.order_by(StockItem.name, StockItem.id)

    @staticmethod
    def list_items(category: Optional[str] = None, location: Optional[str] = None,
                   search_term: Optional[str] = None) -> List[StockItem]:
        return StockService.build_filtered_query(category, location, search_term).all()

    @staticmethod
    def get_hierarchy(category: Optional[str] = None, location: Optional[str] = None,
                      search_term: Optional[str] = None) -> StockHierarchy:
        """
        Stock rows grouped into standalone items, parents and children.

        The hierarchy is always built from every item so parent totals cover
        all children. Filters then select the rows to show: a parent stays
        (with all its children) when it or any of its children matches.
        """
        hierarchy = build_hierarchy(StockService.list_items())
        if not (category or location or search_term):
            return hierarchy

        matched = StockService.build_filtered_query(category, location, search_term).with_entities(StockItem.id)
        return hierarchy.restricted_to(row[0] for row in matched.all())

    @staticmethod
    def extract_filters(request: Request) -> Dict[str, str]:
        return {
            'category': (request.args.get('category') or '').strip(),
            'location': (request.args.get('location') or '').strip(),
            'search_term': (request.args.get('search') or '').strip(),
        }

    @staticmethod
    def unique_categories() -> List[str]:
        rows = db.session.query(StockItem.category).distinct().order_by(StockItem.category).all()
        return [row[0] for row in rows if row[0]]

    @staticmethod
    def unique_locations() -> List[str]:
        rows = db.session.query(StockItem.location).distinct().order_by(StockItem.location).all()
        return [row[0] for row in rows if row[0]]

    @staticmethod
    def parent_candidates(exclude_id: Optional[int] = None) -> List[StockItem]:
        """Top-level items an item may be placed under."""
        query = StockItem.query.filter(StockItem.parent_item_id.is_(None))
        if exclude_id is not None:
            query = query.filter(StockItem.id != exclude_id)
        return query.order_by(StockItem.name).all()

    @staticmethod
    def withdrawal_history(item_id: int) -> List[StockWithdrawal]:
        """Movements of one item, newest first."""
        return (StockWithdrawal.query
                .filter_by(stock_item_id=item_id)
                .order_by(StockWithdrawal.created_at.desc(), StockWithdrawal.id.desc())
                .all())
