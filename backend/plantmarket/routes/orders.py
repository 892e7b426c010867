# Overview: Flask API routes for orders; placement, role-scoped listings and status changes.

"""
Order routes.

SECURITY:
- Placing, paying for and listing own orders requires a CUSTOMER
- Seller listings and status changes require an APPROVED SELLER or an ADMIN
- A single order is visible to its customer, its seller, or an admin
"""

from flask import Blueprint, request, jsonify, g

from ..decorators import require_auth, require_roles
from ..models import Role
from ..services import order_service, payment_service
from ..validation import coerce_int


orders_bp = Blueprint("orders", __name__, url_prefix="/api/orders")


@orders_bp.post("")
@require_auth
@require_roles(Role.CUSTOMER)
def create_order_route():
    """
    Place an order with one seller.

    Body:
        {"sellerId": 11,
         "items": [{"inventoryItemId": 7, "quantity": 2}, ...],
         "shippingAddress": {"street": ..., "city": ..., "state": ..., "zipCode": ..., "country": ...}}
    """
    seller_id, lines, shipping = order_service.parse_order_request(request.get_json(silent=True))
    order = order_service.create_order(g.current_user, seller_id, lines, shipping)
    return jsonify(order.to_dict()), 201


@orders_bp.get("/customer")
@require_auth
@require_roles(Role.CUSTOMER)
def list_customer_orders_route():
    orders = order_service.list_by_customer(g.current_user.id)
    return jsonify([o.to_dict() for o in orders])


@orders_bp.get("/seller")
@require_auth
@require_roles(Role.SELLER, Role.ADMIN)
def list_seller_orders_route():
    """
    Orders received by the calling seller.

    Admins may pass ?sellerId= to view one seller's orders; without it they
    see their own (normally empty) list.
    """
    seller_id = g.current_user.id
    raw = request.args.get("sellerId")
    if raw is not None and g.current_user.role == Role.ADMIN:
        seller_id = coerce_int("sellerId", raw)
    orders = order_service.list_by_seller(seller_id)
    return jsonify([o.to_dict() for o in orders])


@orders_bp.get("/<id:order_id>")
@require_auth
@require_roles(Role.CUSTOMER, Role.SELLER, Role.ADMIN)
def get_order_route(order_id: int):
    order = order_service.get_order_for(g.current_user, order_id)
    return jsonify(order.to_dict())


@orders_bp.post("/<id:order_id>/pay")
@require_auth
@require_roles(Role.CUSTOMER)
def pay_order_route(order_id: int):
    """Pay and return the updated order view."""
    method, transaction_id = payment_service.parse_payment_request(request.get_json(silent=True))
    payment_service.process_payment(g.current_user, order_id, method, transaction_id)
    return jsonify(order_service.get_order(order_id).to_dict())


@orders_bp.put("/<id:order_id>/status")
@require_auth
@require_roles(Role.SELLER, Role.ADMIN)
def update_status_route(order_id: int):
    """
    Seller/admin status change.

    Status comes from ?status= or a JSON body {"status": "SHIPPED"}.
    """
    raw = request.args.get("status")
    if raw is None:
        raw = (request.get_json(silent=True) or {}).get("status")
    new_status = order_service.parse_status(raw)
    order = order_service.update_order_status(g.current_user, order_id, new_status)
    return jsonify(order.to_dict())
