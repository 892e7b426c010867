# Overview: Flask API routes for payment operations; parses input and returns JSON responses.

"""
Payment routes.

Payments are simulated: the request names a method (e.g. "Card", "bKash")
and an optional external transaction id.
"""

from flask import Blueprint, request, jsonify, g

from ..decorators import require_auth, require_roles
from ..models import Role
from ..services import payment_service


payments_bp = Blueprint("payments", __name__, url_prefix="/api/payment")


@payments_bp.post("/order/<id:order_id>")
@require_auth
@require_roles(Role.CUSTOMER)
def make_payment_route(order_id: int):
    """
    Pay for a PENDING_PAYMENT order owned by the caller.

    Body: {"paymentMethod": "Card", "transactionId": "tx-xyz"}
    """
    method, transaction_id = payment_service.parse_payment_request(request.get_json(silent=True))
    payment = payment_service.process_payment(g.current_user, order_id, method, transaction_id)
    return jsonify(payment.to_dict()), 200
