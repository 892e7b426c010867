# Overview: Customer reviews of sellers, one per (seller, reviewer) pair.

from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z


class Review(db.Model):
    """Customer review of a seller. One per (seller, reviewer)."""
    __tablename__ = "reviews"
    __table_args__ = (
        db.UniqueConstraint("seller_id", "reviewer_id", name="uq_reviews_seller_reviewer"),
        db.CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
        db.CheckConstraint("seller_id <> reviewer_id", name="ck_reviews_not_self"),
        db.Index("ix_reviews_seller_id", "seller_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    seller_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    reviewer_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)

    rating = db.Column(db.Integer, nullable=False)
    comment = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    reviewer = db.relationship("User", foreign_keys=[reviewer_id])

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sellerId": self.seller_id,
            "reviewerId": self.reviewer_id,
            "reviewerName": self.reviewer.name,
            "rating": self.rating,
            "comment": self.comment,
            "createdAt": to_utc_z(self.created_at),
        }
