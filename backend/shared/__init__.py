"""
Shared building blocks for the FoodHub REST API.

- shared.config: settings (pydantic-settings), structured logging, constants
  (roles, order statuses, transition table, limits)
- shared.infrastructure: SQLAlchemy engine/sessions, correlation IDs,
  Redis pub/sub order notifications (events/)
- shared.security: JWT issue/verify, bcrypt passwords, login rate limiting
- shared.utils: exceptions, validators, request/response schemas, health checks

IMPORT EXAMPLES:
    from shared.config.settings import settings
    from shared.config.constants import Roles, OrderStatus
    from shared.infrastructure.db import get_db, safe_commit
    from shared.security.auth import current_user_context
    from shared.utils.exceptions import NotFoundError, BusinessRuleError
"""
