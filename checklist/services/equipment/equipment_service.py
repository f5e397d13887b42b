"""
Equipment Service
Presentation service for the checklist page.

Handles:
- Query building for the stored-field filters (sector, responsible, search)
- Date-derived filters (status, days range) applied to the fetched rows
- Distinct sector/responsible values for the filter dropdowns
"""

from datetime import date
from typing import List, Optional

from flask import Request, current_app
from sqlalchemy import or_

from checklist import db
from checklist.buisness.equipment.equipment_filters import ALL, EquipmentFilters
from checklist.data.equipment.equipment import Equipment
from checklist.services.core.pagination import PageResult
from checklist.utils.dates import local_today


class EquipmentService:
    """
    Service for equipment presentation data.

    Provides methods for:
    - Building filtered equipment queries
    - Paginating the checklist
    - Listing filter options
    """

    @staticmethod
    def build_filtered_query(filters: EquipmentFilters):
        """
        Build the SQL part of the checklist query.

        Args:
            filters: Parsed checklist filters

        Returns:
            SQLAlchemy query ordered by name
        """
        query = Equipment.query

        if filters.sector != ALL:
            query = query.filter(Equipment.sector == filters.sector)

        if filters.responsible != ALL:
            query = query.filter(Equipment.responsible == filters.responsible)

        if filters.search_term:
            pattern = f"%{filters.search_term}%"
            query = query.filter(or_(
                Equipment.name.ilike(pattern),
                Equipment.sector.ilike(pattern),
                Equipment.responsible.ilike(pattern),
            ))

        return query.order_by(Equipment.name, Equipment.id)

    @staticmethod
    def get_page(filters: EquipmentFilters, page: int = 1, per_page: Optional[int] = None,
                 today: Optional[date] = None) -> PageResult:
        """
        Get one page of the checklist with all filters applied.

        Status and the days range depend on today's date, so when either is
        set the stored-field query is fetched in full and sliced afterwards.
        """
        per_page = per_page or current_app.config.get('ITEMS_PER_PAGE', 10)
        query = EquipmentService.build_filtered_query(filters)

        if not filters.has_derived_filters:
            return PageResult.from_pagination(query.paginate(page=page, per_page=per_page, error_out=False))

        today = today or local_today()
        rows = [record for record in query.all() if filters.matches_derived_fields(record, today)]
        return PageResult.from_sequence(rows, page, per_page)

    @staticmethod
    def get_list_data(request: Request, per_page: Optional[int] = None, today: Optional[date] = None):
        """
        Get the checklist page requested by the query string.

        Returns:
            Tuple of (PageResult, EquipmentFilters)
        """
        filters = EquipmentFilters.from_args(request.args)
        page = request.args.get('page', 1, type=int) or 1
        return EquipmentService.get_page(filters, page=page, per_page=per_page, today=today), filters

    @staticmethod
    def all_equipment() -> List[Equipment]:
        return Equipment.query.order_by(Equipment.name, Equipment.id).all()

    @staticmethod
    def unique_sectors() -> List[str]:
        rows = db.session.query(Equipment.sector).distinct().order_by(Equipment.sector).all()
        return [row[0] for row in rows if row[0]]

    @staticmethod
    def unique_responsibles() -> List[str]:
        rows = db.session.query(Equipment.responsible).distinct().order_by(Equipment.responsible).all()
        return [row[0] for row in rows if row[0]]

