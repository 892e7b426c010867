# Overview: Flask API routes for seller reviews and ratings.

from flask import Blueprint, request, jsonify, g

from ..decorators import require_auth, require_roles
from ..models import Role
from ..services import review_service


reviews_bp = Blueprint("reviews", __name__, url_prefix="/api/reviews")


@reviews_bp.post("")
@require_auth
@require_roles(Role.CUSTOMER)
def create_review_route():
    seller_id, rating, comment = review_service.parse_review_request(request.get_json(silent=True))
    review = review_service.create_review(seller_id, g.current_user.email, rating, comment)
    return jsonify(review.to_dict()), 201


@reviews_bp.get("/seller/<id:seller_id>")
def list_reviews_route(seller_id: int):
    reviews = review_service.list_by_seller(seller_id)
    return jsonify([r.to_dict() for r in reviews])


@reviews_bp.get("/seller/<id:seller_id>/rating")
def seller_rating_route(seller_id: int):
    return jsonify({
        "averageRating": review_service.average_rating(seller_id),
        "totalReviews": review_service.total_reviews(seller_id),
    })
