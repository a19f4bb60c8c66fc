"""
Reviews router.
Shop reviews written by customers for their delivered orders.
Listing lives under /api/shops/{shop_id}/reviews.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from shared.config.constants import Roles
from shared.infrastructure.db import get_db
from shared.utils.schemas import ApiResponse, ReviewCreate, ReviewOutput
from rest_api.models import User
from rest_api.routers._common import current_user, require_roles
from rest_api.services.domain import ReviewService
from rest_api.services.views import review_view


router = APIRouter(prefix="/api/reviews", tags=["reviews"])


@router.post("", response_model=ApiResponse[ReviewOutput], status_code=status.HTTP_201_CREATED)
def create_review(
    body: ReviewCreate,
    user: User = Depends(require_roles(Roles.CUSTOMER)),
    db: Session = Depends(get_db),
) -> ApiResponse[ReviewOutput]:
    """
    Review a delivered order. One review per order.

    The shop's rating aggregate is updated in the same transaction.
    """
    review = ReviewService(db).create_review(user, body)
    return ApiResponse(data=review_view(review))


@router.delete("/{review_id}", response_model=ApiResponse[None])
def delete_review(
    review_id: int,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> ApiResponse[None]:
    ReviewService(db).delete_review(review_id, user)
    return ApiResponse(message="Review deleted successfully")
