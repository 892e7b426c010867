# Overview: Flask API routes for admin operations; seller applications and platform-wide order views.

"""
Admin routes.

SECURITY: Every route requires an authenticated, active ADMIN.
"""

from flask import Blueprint, request, jsonify

from ..decorators import require_auth, require_roles
from ..errors import ValidationFailed
from ..models import Role
from ..services import order_service, seller_service


admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")

_TRUE = {"true", "1", "yes"}
_FALSE = {"false", "0", "no"}


def _parse_active_flag():
    """
    Read the requested active flag.

    Accepts ?isActive=true|false or a JSON body {"isActive": bool} / {"active": bool}.
    """
    raw = request.args.get("isActive")
    if raw is not None:
        value = raw.strip().lower()
        if value in _TRUE:
            return True
        if value in _FALSE:
            return False
        raise ValidationFailed("isActive must be true or false")

    payload = request.get_json(silent=True) or {}
    for key in ("isActive", "active"):
        if key in payload:
            if not isinstance(payload[key], bool):
                raise ValidationFailed(f"{key} must be true or false")
            return payload[key]
    raise ValidationFailed("isActive is required")


@admin_bp.get("/sellers/pending")
@require_auth
@require_roles(Role.ADMIN)
def list_pending_sellers_route():
    sellers = seller_service.list_pending_sellers()
    return jsonify([s.to_dict() for s in sellers])


@admin_bp.get("/sellers")
@require_auth
@require_roles(Role.ADMIN)
def list_sellers_route():
    sellers = seller_service.list_all_sellers()
    return jsonify([s.to_dict() for s in sellers])


@admin_bp.put("/sellers/<id:seller_id>/approve")
@require_auth
@require_roles(Role.ADMIN)
def approve_seller_route(seller_id: int):
    """Approve a PENDING seller. Approving an APPROVED seller is a no-op."""
    seller = seller_service.approve_seller(seller_id)
    return jsonify(seller.to_dict())


@admin_bp.put("/sellers/<id:seller_id>/reject")
@require_auth
@require_roles(Role.ADMIN)
def reject_seller_route(seller_id: int):
    seller = seller_service.reject_seller(seller_id)
    return jsonify(seller.to_dict())


@admin_bp.put("/sellers/<id:seller_id>/status")
@require_auth
@require_roles(Role.ADMIN)
def set_seller_status_route(seller_id: int):
    seller = seller_service.set_seller_active(seller_id, _parse_active_flag())
    return jsonify(seller.to_dict())


@admin_bp.get("/orders")
@require_auth
@require_roles(Role.ADMIN)
def list_orders_route():
    orders = order_service.list_all()
    return jsonify([o.to_admin_dict() for o in orders])
