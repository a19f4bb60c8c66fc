"""
Review Domain Service.

Shop rating aggregates are running sums plus a count, adjusted by a single
UPDATE on each review insert or removal instead of re-scanning all reviews.
"""

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from shared.config.constants import OrderStatus
from shared.config.logging import get_logger
from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import DuplicateEntityError, InvalidStateError, NotFoundError
from shared.utils.schemas import ReviewCreate
from rest_api.models import Order, Review, Shop, User
from rest_api.services.permissions import PermissionContext

logger = get_logger(__name__)


class ReviewService:
    """Domain service for Review operations."""

    def __init__(self, db: Session):
        self._db = db

    def _adjust_shop_rating(self, review: Review, sign: int) -> None:
        """Add (sign=1) or remove (sign=-1) one review from the shop aggregate."""
        self._db.execute(
            update(Shop)
            .where(Shop.id == review.shop_id)
            .values(
                rating_count=Shop.rating_count + sign,
                rating_overall_sum=Shop.rating_overall_sum + sign * review.overall_rating,
                rating_food_sum=Shop.rating_food_sum + sign * review.food_rating,
                rating_delivery_sum=Shop.rating_delivery_sum + sign * review.delivery_rating,
            )
        )

    def create_review(self, user: User, request: ReviewCreate) -> Review:
        """
        Review a delivered order of the caller's.

        One review per (user, order).
        """
        order = self._db.scalar(select(Order).where(Order.id == request.order))
        if order is None:
            raise NotFoundError("Order", request.order)
        PermissionContext(user).require_order_customer(order, "review this order")
        if order.status != OrderStatus.DELIVERED:
            raise InvalidStateError(
                "Can only review delivered orders",
                current_state=order.status,
                order_id=order.id,
            )

        existing = self._db.scalar(
            select(Review.id).where(Review.user_id == user.id, Review.order_id == order.id)
        )
        if existing is not None:
            raise DuplicateEntityError("You have already reviewed this order", order_id=order.id)

        review = Review(
            user_id=user.id,
            shop_id=order.shop_id,
            order_id=order.id,
            food_rating=request.food_rating,
            delivery_rating=request.delivery_rating,
            overall_rating=request.overall_rating,
            title=request.title,
            comment=request.review,
        )
        self._db.add(review)
        try:
            self._db.flush()
        except IntegrityError:
            self._db.rollback()
            raise DuplicateEntityError("You have already reviewed this order", order_id=order.id)

        self._adjust_shop_rating(review, 1)
        safe_commit(self._db)
        logger.info("Review created", review_id=review.id, shop_id=review.shop_id, user_id=user.id)
        return self.get_review(review.id)

    def get_review(self, review_id: int) -> Review:
        review = self._db.scalar(
            select(Review).options(selectinload(Review.user)).where(Review.id == review_id)
        )
        if review is None:
            raise NotFoundError("Review", review_id)
        return review

    def delete_review(self, review_id: int, user: User) -> None:
        review = self.get_review(review_id)
        PermissionContext(user).require_review_deletion(review.user_id)

        self._adjust_shop_rating(review, -1)
        self._db.delete(review)
        safe_commit(self._db)
        logger.info("Review deleted", review_id=review_id, shop_id=review.shop_id, actor_id=user.id)

    def list_shop_reviews(self, shop_id: int, offset: int, limit: int) -> tuple[list[Review], int]:
        if self._db.scalar(select(Shop.id).where(Shop.id == shop_id)) is None:
            raise NotFoundError("Shop", shop_id)

        where = (Review.shop_id == shop_id, Review.is_visible.is_(True))
        total = self._db.scalar(select(func.count(Review.id)).where(*where)) or 0
        reviews = self._db.scalars(
            select(Review)
            .options(selectinload(Review.user))
            .where(*where)
            .order_by(Review.created_at.desc(), Review.id.desc())
            .offset(offset)
            .limit(limit)
        ).all()
        return list(reviews), total
