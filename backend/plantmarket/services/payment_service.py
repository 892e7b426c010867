# Overview: Service-layer operations for payment; encapsulates business logic and database work.

"""
Payment Processing Service

Payments are simulated: there is no gateway call. A payment row is written
COMPLETED for the order's full total and the order moves
PENDING_PAYMENT -> PROCESSING in the same transaction, so a COMPLETED
payment never exists next to an unpaid order.
"""

from __future__ import annotations

import uuid

from flask import current_app
from sqlalchemy import func

from ..errors import Forbidden, NotPayable, OrderNotFound, ValidationFailed
from ..extensions import db
from ..models import Order, OrderStatus, Payment, PaymentStatus, User
from ..time_utils import utcnow
from ..validation import optional_text
from .concurrency import lock_for_update, run_in_transaction


def parse_payment_request(payload: dict | None) -> tuple[str, str | None]:
    """Returns (payment_method, transaction_id)."""
    if not isinstance(payload, dict):
        raise ValidationFailed("Invalid JSON payload")
    method_field = "paymentMethod" if "paymentMethod" in payload else "method"
    method = optional_text(payload, method_field, max_length=32)
    if not method:
        raise ValidationFailed("paymentMethod is required")
    transaction_id = optional_text(payload, "transactionId", max_length=128)
    return method, transaction_id


def process_payment(
    customer: User,
    order_id: int,
    payment_method: str,
    transaction_id: str | None = None,
) -> Payment:
    """
    Pay for an order.

    Raises:
        OrderNotFound: no such order
        Forbidden: caller is not the order's customer
        NotPayable: order is not PENDING_PAYMENT (already paid, shipped, cancelled...)
    """
    if not payment_method:
        raise ValidationFailed("paymentMethod is required")
    reference = transaction_id or uuid.uuid4().hex
    customer_id = customer.id

    def _op():
        order = lock_for_update(db.session.query(Order).filter(Order.id == order_id)).first()
        if order is None:
            raise OrderNotFound("Order not found")

        # Security check: ensure the user paying is the one who created the order
        if order.customer_id != customer_id:
            raise Forbidden("You are not authorized to pay for this order.")

        if order.status != OrderStatus.PENDING_PAYMENT:
            raise NotPayable(
                "This order is not pending payment.",
                details={"status": order.status.value},
            )

        payment = Payment(
            order_id=order.id,
            amount_cents=order.total_amount_cents,
            payment_method=payment_method,
            transaction_id=reference,
            payment_date=utcnow(),
            status=PaymentStatus.COMPLETED,
        )
        db.session.add(payment)
        order.status = OrderStatus.PROCESSING
        db.session.flush()
        return payment

    payment = run_in_transaction(_op)
    current_app.logger.info(
        "Payment %s completed for order %s (%s cents, %s)",
        payment.id, order_id, payment.amount_cents, payment_method,
    )
    return payment


def total_revenue_cents_for_seller(seller_id: int) -> int:
    """Sum of COMPLETED payments on the seller's orders; 0 when none."""
    total = db.session.query(func.sum(Payment.amount_cents)).join(
        Order, Payment.order_id == Order.id
    ).filter(
        Order.seller_id == seller_id,
        Payment.status == PaymentStatus.COMPLETED,
    ).scalar()
    return int(total or 0)
