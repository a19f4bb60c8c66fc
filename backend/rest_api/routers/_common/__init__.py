"""
Common utilities shared across routers.
"""

from .base import current_user, get_user_email, get_user_id, require_roles
from .pagination import Pagination, get_pagination, paginated

__all__ = [
    # Base utilities
    "current_user",
    "require_roles",
    "get_user_id",
    "get_user_email",
    # Pagination
    "Pagination",
    "get_pagination",
    "paginated",
]
