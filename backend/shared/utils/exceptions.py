"""
Centralized HTTP exceptions for consistent error handling.

Every exception logs itself on construction and is rendered at the request
boundary as {"success": false, "message": ..., "errors"?: [...]}.

Usage:
    from shared.utils.exceptions import NotFoundError, NotAuthorizedError, BusinessRuleError

    raise NotFoundError("Order", order_id)
    raise NotAuthorizedError("update this order")
    raise BusinessRuleError("Shop is currently not accepting orders")
"""

from typing import Any

from fastapi import HTTPException, status

from shared.config.logging import get_logger

logger = get_logger(__name__)


class AppException(HTTPException):
    """
    Base exception with automatic logging.

    All custom exceptions inherit from this class so that logging and the
    response envelope stay consistent.
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        log_level: str = "warning",
        headers: dict[str, str] | None = None,
        errors: list[dict[str, Any]] | None = None,
        **log_context: Any,
    ):
        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(detail, status_code=status_code, **log_context)

        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.errors = errors


# =============================================================================
# 404 Not Found Errors
# =============================================================================


class NotFoundError(AppException):
    """
    Entity not found error (404).

    Usage:
        raise NotFoundError("Shop", 123)
        raise NotFoundError("Order")
    """

    def __init__(self, entity: str, entity_id: int | str | None = None, **log_context: Any):
        if entity_id is not None:
            detail = f"{entity} {entity_id} not found"
        else:
            detail = f"{entity} not found"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            log_level="warning",
            entity=entity,
            entity_id=entity_id,
            **log_context,
        )


# =============================================================================
# 401 Authorization Errors
# =============================================================================


class NotAuthorizedError(AppException):
    """
    Authentication or ownership/role failure (401).

    The API reports both "who are you" and "you may not do this" as 401.

    Usage:
        raise NotAuthorizedError("update this shop")
        raise NotAuthorizedError()
    """

    def __init__(self, action: str | None = None, **log_context: Any):
        if action:
            detail = f"Not authorized to {action}"
        else:
            detail = "Not authorized to access this route"

        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            log_level="warning",
            action=action,
            **log_context,
        )


class InsufficientRoleError(NotAuthorizedError):
    """User doesn't have any of the required roles."""

    def __init__(self, role: str, required_roles: list[str] | frozenset[str], **log_context: Any):
        AppException.__init__(
            self,
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"User role {role} is not authorized to access this route",
            log_level="warning",
            required_roles=sorted(required_roles),
            **log_context,
        )


class AuthenticationError(AppException):
    """
    Credential check failed (401) with an explicit message.

    Usage:
        raise AuthenticationError("Invalid credentials")
    """

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            log_level="warning",
            **log_context,
        )


# =============================================================================
# 400 Bad Request Errors
# =============================================================================


class ValidationError(AppException):
    """
    Malformed or missing input (400), optionally with field-level detail.

    Usage:
        raise ValidationError("Invalid signature")
        raise ValidationError("Validation failed", errors=[{"field": "quantity", "message": "..."}])
    """

    def __init__(self, detail: str, errors: list[dict[str, Any]] | None = None, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            log_level="warning",
            errors=errors,
            **log_context,
        )


class BusinessRuleError(AppException):
    """
    A well-formed request that breaks a domain rule (400).

    Usage:
        raise BusinessRuleError("Order cannot be cancelled at this stage", order_id=5)
    """

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            log_level="warning",
            **log_context,
        )


class InvalidTransitionError(BusinessRuleError):
    """Order status change not present in the transition table."""

    def __init__(self, from_status: str, to_status: str, **log_context: Any):
        super().__init__(
            f"Cannot change status from {from_status} to {to_status}",
            from_status=from_status,
            to_status=to_status,
            **log_context,
        )


class InvalidStateError(BusinessRuleError):
    """Entity is in a state that does not allow the operation."""

    def __init__(self, detail: str, current_state: str, **log_context: Any):
        super().__init__(detail, current_state=current_state, **log_context)


class MinimumOrderError(BusinessRuleError):
    """Cart subtotal is below the shop's minimum order amount."""

    def __init__(self, minimum_cents: int, subtotal_cents: int, **log_context: Any):
        super().__init__(
            f"Minimum order amount is ${minimum_cents / 100:.2f}",
            minimum_cents=minimum_cents,
            subtotal_cents=subtotal_cents,
            **log_context,
        )


class DuplicateEntityError(BusinessRuleError):
    """Entity already exists."""

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(detail, **log_context)


# =============================================================================
# 500 Internal Server Errors
# =============================================================================


class InternalError(AppException):
    """
    Internal server error (500). The client only ever sees a generic message.

    Usage:
        raise InternalError(operation="create order", error=str(e))
    """

    def __init__(self, detail: str = "Server Error", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            log_level="error",
            **log_context,
        )


class PaymentGatewayError(InternalError):
    """The payment processor could not be reached or rejected the call."""

    def __init__(self, operation: str, **log_context: Any):
        super().__init__(
            "Payment processing failed",
            operation=operation,
            **log_context,
        )
