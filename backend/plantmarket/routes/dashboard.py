# Overview: Flask API routes for dashboard statistics.

from flask import Blueprint, jsonify, g

from ..decorators import require_auth, require_roles
from ..models import Role
from ..services import dashboard_service


dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")


@dashboard_bp.get("/admin-stats")
@require_auth
@require_roles(Role.ADMIN)
def admin_stats_route():
    return jsonify(dashboard_service.admin_stats())


@dashboard_bp.get("/seller-stats")
@require_auth
@require_roles(Role.SELLER)
def seller_stats_route():
    return jsonify(dashboard_service.seller_stats(g.current_user))


@dashboard_bp.get("/public-stats")
def public_stats_route():
    return jsonify(dashboard_service.public_stats())
