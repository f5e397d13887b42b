"""
User Service
Presentation service for the user management page.
"""

from typing import Optional

from flask import Request
from flask_sqlalchemy.pagination import Pagination
from sqlalchemy import or_

from checklist.data.core.user_info.user import ROLES, User


class UserService:
    """
    Service for user presentation data.

    Provides methods for:
    - Building filtered user queries
    - Paginating user lists
    """

    @staticmethod
    def build_filtered_query(role: Optional[str] = None, search_term: Optional[str] = None):
        """
        Build a filtered user query.

        Args:
            role: 'user' or 'superuser'
            search_term: Case-insensitive match on username, full name or email

        Returns:
            SQLAlchemy query object
        """
        query = User.query

        if role in ROLES:
            query = query.filter(User.role == role)

        if search_term:
            pattern = f"%{search_term}%"
            query = query.filter(or_(
                User.username.ilike(pattern),
                User.full_name.ilike(pattern),
                User.email.ilike(pattern),
            ))

        return query.order_by(User.username)

    @staticmethod
    def get_list_data(request: Request, page: int = 1, per_page: int = 20) -> Pagination:
        role = request.args.get('role')
        search_term = (request.args.get('search') or '').strip()
        query = UserService.build_filtered_query(role=role, search_term=search_term)
        return query.paginate(page=page, per_page=per_page, error_out=False)
