# Overview: Flask API routes for user profiles and the public seller directory.

from flask import Blueprint, request, jsonify, g

from ..decorators import require_active, require_auth
from ..services import user_service


users_bp = Blueprint("users", __name__, url_prefix="/api/users")


@users_bp.get("/sellers")
def list_active_sellers_route():
    """APPROVED, active sellers; what customers can shop from."""
    sellers = user_service.list_active_approved_sellers()
    return jsonify([s.to_dict() for s in sellers])


@users_bp.get("/profile")
@require_auth
def get_profile_route():
    return jsonify(g.current_user.to_dict())


@users_bp.put("/profile")
@require_auth
@require_active
def update_profile_route():
    """Partial update of name, phoneNumber, address and shopName."""
    user = user_service.update_profile(g.current_user, request.get_json(silent=True))
    return jsonify(user.to_dict())
