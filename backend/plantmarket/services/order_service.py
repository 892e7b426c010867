# Overview: Service-layer operations for orders; stock reservation, status machine and listings.

"""
Order Service

An order binds one customer to one seller. Creating it decrements stock on
every referenced inventory row and freezes each line's unit price, all in
one transaction: if any line fails, no stock moves.

STATUS MACHINE:
    PENDING_PAYMENT --pay (customer)--------> PROCESSING   (payment_service)
    PROCESSING      --seller/admin---------> SHIPPED
    SHIPPED         --seller/admin---------> DELIVERED
    PENDING_PAYMENT --seller/admin---------> CANCELLED
    PROCESSING      --seller/admin---------> CANCELLED

Cancelling does not restock inventory.
"""

from __future__ import annotations

from dataclasses import dataclass

from flask import current_app
from sqlalchemy import func

from ..errors import (
    Forbidden,
    InsufficientStock,
    InvalidTransition,
    ItemNotFound,
    OrderNotFound,
    SellerNotFound,
    SellerUnavailable,
    ValidationFailed,
    WrongSeller,
)
from ..extensions import db
from ..models import (
    ApplicationStatus,
    InventoryItem,
    Order,
    OrderItem,
    OrderStatus,
    Role,
    ShippingAddress,
    User,
)
from ..time_utils import utcnow
from ..validation import coerce_int, optional_text
from .concurrency import lock_for_update, run_in_transaction


# Transitions a seller or admin may request. Payment owns PENDING_PAYMENT -> PROCESSING.
STAFF_TRANSITIONS: dict[OrderStatus, set[OrderStatus]] = {
    OrderStatus.PENDING_PAYMENT: {OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
}

# Statuses that count as a placed (paid, not cancelled) order in stats
PLACED_ORDER_EXCLUDED = (OrderStatus.PENDING_PAYMENT, OrderStatus.CANCELLED)
ACTIVE_ORDER_STATUSES = (OrderStatus.PROCESSING, OrderStatus.SHIPPED)

RECENT_ORDER_LIMIT = 5

SHIPPING_FIELDS = {"street": "street", "city": "city", "state": "state", "zipCode": "zip_code", "country": "country"}


@dataclass(frozen=True)
class OrderLine:
    inventory_item_id: int
    quantity: int


def parse_order_request(payload: dict) -> tuple[int, list[OrderLine], dict | None]:
    """
    Validate a createOrder body.

    Returns (seller_id, lines, shipping_address_fields).
    """
    if not isinstance(payload, dict):
        raise ValidationFailed("Invalid JSON payload")

    if payload.get("sellerId") is None:
        raise ValidationFailed("sellerId is required")
    seller_id = coerce_int("sellerId", payload["sellerId"])

    raw_items = payload.get("items")
    if not isinstance(raw_items, list) or not raw_items:
        raise ValidationFailed("items must be a non-empty list")

    lines = []
    for index, raw in enumerate(raw_items):
        if not isinstance(raw, dict):
            raise ValidationFailed(f"items[{index}] must be an object")
        if raw.get("inventoryItemId") is None or raw.get("quantity") is None:
            raise ValidationFailed(f"items[{index}] requires inventoryItemId and quantity")
        item_id = coerce_int(f"items[{index}].inventoryItemId", raw["inventoryItemId"])
        quantity = coerce_int(f"items[{index}].quantity", raw["quantity"])
        if quantity < 1:
            raise ValidationFailed(f"items[{index}].quantity must be at least 1")
        lines.append(OrderLine(inventory_item_id=item_id, quantity=quantity))

    shipping = None
    raw_shipping = payload.get("shippingAddress")
    if raw_shipping is not None:
        if not isinstance(raw_shipping, dict):
            raise ValidationFailed("shippingAddress must be an object")
        unknown = sorted(set(raw_shipping) - set(SHIPPING_FIELDS))
        if unknown:
            raise ValidationFailed(f"Field not allowed: shippingAddress.{unknown[0]}")
        shipping = {
            column: optional_text(raw_shipping, field, max_length=255)
            for field, column in SHIPPING_FIELDS.items()
        }

    return seller_id, lines, shipping


def _require_transacting_seller(seller_id: int) -> User:
    seller = lock_for_update(db.session.query(User).filter(User.id == seller_id)).first()
    if seller is None:
        raise SellerNotFound("Seller not found")
    if seller.role != Role.SELLER:
        raise SellerUnavailable("User is not a seller")
    if not seller.is_active:
        raise SellerUnavailable("Seller is not currently accepting orders")
    if seller.application_status != ApplicationStatus.APPROVED:
        raise SellerUnavailable("Seller is not approved for selling")
    return seller


def create_order(
    customer: User,
    seller_id: int,
    lines: list[OrderLine],
    shipping_address: dict | None = None,
) -> Order:
    """
    Place an order and reserve stock.

    Lines are processed in request order. Each inventory row is locked,
    checked for ownership and stock, decremented, and its current price
    copied onto the line. The total is summed in integer cents.

    Raises:
        ValidationFailed: empty order or quantity < 1
        SellerNotFound / SellerUnavailable: seller missing or not APPROVED+active
        ItemNotFound: unknown inventory id
        WrongSeller: line item belongs to another seller
        InsufficientStock: requested more than on hand
    """
    if not lines:
        raise ValidationFailed("An order needs at least one item")
    for line in lines:
        if line.quantity < 1:
            raise ValidationFailed("Item quantity must be at least 1")

    customer_id = customer.id

    def _op():
        _require_transacting_seller(seller_id)

        order_items = []
        total_cents = 0
        for line in lines:
            item = lock_for_update(
                db.session.query(InventoryItem).filter(InventoryItem.id == line.inventory_item_id)
            ).first()
            if item is None:
                raise ItemNotFound(
                    f"Inventory item not found: {line.inventory_item_id}",
                    details={"inventoryItemId": line.inventory_item_id},
                )
            if item.seller_id != seller_id:
                raise WrongSeller(
                    f"Item {item.id} is not sold by seller {seller_id}",
                    details={"inventoryItemId": item.id, "sellerId": seller_id},
                )
            if item.quantity < line.quantity:
                raise InsufficientStock(
                    f"Not enough stock for item: {item.name}",
                    details={
                        "inventoryItemId": item.id,
                        "requested_quantity": line.quantity,
                        "on_hand": item.quantity,
                    },
                )

            item.quantity -= line.quantity
            order_item = OrderItem(
                inventory_item_id=item.id,
                quantity=line.quantity,
                price_cents=item.price_cents,
            )
            order_items.append(order_item)
            total_cents += order_item.line_total_cents

        order = Order(
            customer_id=customer_id,
            seller_id=seller_id,
            total_amount_cents=total_cents,
            status=OrderStatus.PENDING_PAYMENT,
            order_date=utcnow(),
            items=order_items,
        )
        if shipping_address is not None:
            order.shipping_address = ShippingAddress(user_id=customer_id, **shipping_address)

        db.session.add(order)
        db.session.flush()
        return order

    order = run_in_transaction(_op)
    current_app.logger.info(
        "Order %s created by customer %s for seller %s (%s lines, %s cents)",
        order.id, customer_id, seller_id, len(lines), order.total_amount_cents,
    )
    return order


def get_order(order_id: int) -> Order:
    order = db.session.get(Order, order_id)
    if order is None:
        raise OrderNotFound("Order not found")
    return order


def get_order_for(user: User, order_id: int) -> Order:
    """One order, visible to its customer, its seller, or an admin."""
    order = get_order(order_id)
    if user.role != Role.ADMIN and user.id not in (order.customer_id, order.seller_id):
        raise Forbidden("You are not authorized to view this order.")
    return order


def parse_status(value) -> OrderStatus:
    if not isinstance(value, str) or not value.strip():
        raise ValidationFailed("status is required")
    try:
        return OrderStatus(value.strip().upper())
    except ValueError:
        raise ValidationFailed(
            f"Invalid status: {value}. Must be one of {[s.value for s in OrderStatus]}"
        )


def update_order_status(actor: User, order_id: int, new_status: OrderStatus) -> Order:
    """
    Seller/admin status change.

    Only the order's seller or an admin may act, and only along
    STAFF_TRANSITIONS. Repeating a transition (e.g. SHIPPED twice) fails
    because the current status has moved on.
    """
    def _op():
        order = lock_for_update(db.session.query(Order).filter(Order.id == order_id)).first()
        if order is None:
            raise OrderNotFound("Order not found")

        if order.seller_id != actor.id and actor.role != Role.ADMIN:
            raise Forbidden("You are not authorized to update this order.")

        current = order.status
        if new_status not in STAFF_TRANSITIONS.get(current, set()):
            raise InvalidTransition(
                f"Cannot change order status from {current.value} to {new_status.value}",
                details={"from": current.value, "to": new_status.value},
            )

        order.status = new_status
        return order

    order = run_in_transaction(_op)
    current_app.logger.info(
        "Order %s moved to %s by user %s", order.id, new_status.value, actor.id
    )
    return order


def _newest_first(query):
    return query.order_by(Order.order_date.desc(), Order.id.desc())


def list_by_customer(customer_id: int) -> list[Order]:
    return _newest_first(db.session.query(Order).filter(Order.customer_id == customer_id)).all()


def list_by_seller(seller_id: int) -> list[Order]:
    return _newest_first(db.session.query(Order).filter(Order.seller_id == seller_id)).all()


def list_all() -> list[Order]:
    return _newest_first(db.session.query(Order)).all()


def recent_orders_for_seller(seller_id: int, limit: int = RECENT_ORDER_LIMIT) -> list[Order]:
    return _newest_first(
        db.session.query(Order).filter(Order.seller_id == seller_id)
    ).limit(limit).all()


def count_placed_orders() -> int:
    """Orders past payment and not cancelled."""
    return db.session.query(func.count(Order.id)).filter(
        Order.status.notin_(PLACED_ORDER_EXCLUDED)
    ).scalar() or 0


def count_active_orders_for_seller(seller_id: int) -> int:
    return db.session.query(func.count(Order.id)).filter(
        Order.seller_id == seller_id,
        Order.status.in_(ACTIVE_ORDER_STATUSES),
    ).scalar() or 0
