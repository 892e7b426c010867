# Overview: Flask API routes for inventory operations; parses input and returns JSON responses.

"""
Inventory routes.

SECURITY:
- Own-inventory list and all mutations require an APPROVED, active SELLER
- Browsing a seller's shop is public
"""

from flask import Blueprint, request, jsonify, g

from ..decorators import require_auth, require_roles
from ..models import Role
from ..services import inventory_service


inventory_bp = Blueprint("inventory", __name__, url_prefix="/api/inventory")


@inventory_bp.get("")
@require_auth
@require_roles(Role.SELLER)
def list_own_inventory_route():
    items = inventory_service.list_by_seller(g.current_user)
    return jsonify([i.to_dict() for i in items])


@inventory_bp.get("/seller/<id:seller_id>")
def list_seller_inventory_route(seller_id: int):
    """Public shop view."""
    items = inventory_service.list_by_seller_id(seller_id)
    return jsonify([i.to_dict() for i in items])


@inventory_bp.post("")
@require_auth
@require_roles(Role.SELLER)
def add_item_route():
    """
    Add an inventory row owned by the caller.

    Body: name, type, price, quantity (required); description, lowStockThreshold.
    """
    payload = request.get_json(silent=True)
    item = inventory_service.add_item(g.current_user, payload)
    return jsonify(item.to_dict()), 201


@inventory_bp.put("/<id:item_id>")
@require_auth
@require_roles(Role.SELLER)
def update_item_route(item_id: int):
    payload = request.get_json(silent=True)
    item = inventory_service.update_item(g.current_user, item_id, payload)
    return jsonify(item.to_dict())


@inventory_bp.delete("/<id:item_id>")
@require_auth
@require_roles(Role.SELLER)
def delete_item_route(item_id: int):
    inventory_service.delete_item(g.current_user, item_id)
    return "", 204
