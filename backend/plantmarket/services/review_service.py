# Overview: Service-layer operations for seller reviews and rating aggregation.

"""
Review Service

One review per (seller, reviewer) pair, rating 1..5, written by customers
only. The average is computed with Decimal and rounded half-to-even to one
decimal place, so [5, 4, 4] gives 4.3 and [5, 4, 4, 4] gives 4.2.
"""

from __future__ import annotations

from decimal import ROUND_HALF_EVEN, Decimal

from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from ..errors import (
    AlreadyReviewed,
    Forbidden,
    RatingOutOfRange,
    SelfReview,
    SellerNotFound,
    UserNotFound,
    ValidationFailed,
)
from ..extensions import db
from ..models import Review, Role, User
from ..time_utils import utcnow
from ..validation import coerce_int, optional_text
from . import user_service
from .concurrency import run_in_transaction


MIN_RATING = 1
MAX_RATING = 5
RATING_QUANTUM = Decimal("0.1")


def parse_review_request(payload: dict | None) -> tuple[int, int, str | None]:
    """Returns (seller_id, rating, comment)."""
    if not isinstance(payload, dict):
        raise ValidationFailed("Invalid JSON payload")
    if payload.get("sellerId") is None:
        raise ValidationFailed("sellerId is required")
    if payload.get("rating") is None:
        raise ValidationFailed("rating is required")
    seller_id = coerce_int("sellerId", payload["sellerId"])
    rating = coerce_int("rating", payload["rating"])
    comment = optional_text(payload, "comment")
    return seller_id, rating, comment


def _require_seller(seller_id: int) -> User:
    seller = db.session.get(User, seller_id)
    if seller is None or seller.role != Role.SELLER:
        raise SellerNotFound("Seller not found")
    return seller


def create_review(seller_id: int, reviewer_email: str, rating: int, comment: str | None) -> Review:
    """
    Record a customer's review of a seller.

    Checks run in this order: seller exists, reviewer exists, not a
    self-review, reviewer is a customer, no earlier review, rating in range.
    """
    def _op():
        seller = _require_seller(seller_id)
        reviewer = user_service.find_by_email(reviewer_email)
        if reviewer is None:
            raise UserNotFound("Reviewer not found")

        if seller.id == reviewer.id:
            raise SelfReview("Cannot review yourself")
        if reviewer.role != Role.CUSTOMER:
            raise Forbidden("Only customers can review sellers")

        exists = db.session.query(Review.id).filter_by(
            seller_id=seller.id, reviewer_id=reviewer.id
        ).first()
        if exists:
            raise AlreadyReviewed("You have already reviewed this seller")

        if isinstance(rating, bool) or not isinstance(rating, int) or not MIN_RATING <= rating <= MAX_RATING:
            raise RatingOutOfRange(f"Rating must be between {MIN_RATING} and {MAX_RATING}")

        review = Review(
            seller_id=seller.id,
            reviewer_id=reviewer.id,
            rating=rating,
            comment=comment,
            created_at=utcnow(),
        )
        db.session.add(review)
        db.session.flush()
        return review

    try:
        review = run_in_transaction(_op)
    except IntegrityError:
        # A concurrent review for the same pair won the unique index
        raise AlreadyReviewed("You have already reviewed this seller")

    current_app.logger.info(
        "Review %s: user %s rated seller %s with %s", review.id, review.reviewer_id, seller_id, rating
    )
    return review


def list_by_seller(seller_id: int) -> list[Review]:
    _require_seller(seller_id)
    return db.session.query(Review).filter(
        Review.seller_id == seller_id
    ).order_by(Review.created_at.desc(), Review.id.desc()).all()


def average_rating(seller_id: int) -> float:
    """Mean rating to one decimal place; 0.0 when the seller has no reviews."""
    _require_seller(seller_id)
    total, count = db.session.query(
        func.coalesce(func.sum(Review.rating), 0), func.count(Review.id)
    ).filter(Review.seller_id == seller_id).one()
    if not count:
        return 0.0
    mean = Decimal(int(total)) / Decimal(count)
    return float(mean.quantize(RATING_QUANTUM, rounding=ROUND_HALF_EVEN))


def total_reviews(seller_id: int) -> int:
    _require_seller(seller_id)
    return db.session.query(func.count(Review.id)).filter(
        Review.seller_id == seller_id
    ).scalar() or 0
