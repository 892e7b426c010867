# Overview: Orders, order lines, shipping addresses and payments.

from __future__ import annotations

import enum

from ..extensions import db
from ..money import cents_to_decimal
from ..time_utils import to_utc_z


class OrderStatus(str, enum.Enum):
    PENDING_PAYMENT = "PENDING_PAYMENT"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class ShippingAddress(db.Model):
    """Delivery address captured with an order (0..1 per order)."""
    __tablename__ = "shipping_addresses"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    street = db.Column(db.String(255), nullable=True)
    city = db.Column(db.String(120), nullable=True)
    state = db.Column(db.String(120), nullable=True)
    zip_code = db.Column(db.String(32), nullable=True)
    country = db.Column(db.String(120), nullable=True)

    def to_dict(self) -> dict:
        return {
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "zipCode": self.zip_code,
            "country": self.country,
        }


class Order(db.Model):
    """
    Single-seller order.

    ``total_amount_cents`` is fixed when the order is created and equals
    the sum of its lines' frozen prices times quantities. Orders are never
    deleted.
    """
    __tablename__ = "orders"
    __table_args__ = (
        db.Index("ix_orders_customer_date", "customer_id", "order_date"),
        db.Index("ix_orders_seller_date", "seller_id", "order_date"),
        db.Index("ix_orders_status", "status"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    customer_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    seller_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    shipping_address_id = db.Column(db.Integer, db.ForeignKey("shipping_addresses.id"), nullable=True)

    total_amount_cents = db.Column(db.Integer, nullable=False)
    status = db.Column(
        db.Enum(OrderStatus, native_enum=False, length=32),
        nullable=False,
        default=OrderStatus.PENDING_PAYMENT,
    )
    order_date = db.Column(db.DateTime(timezone=True), nullable=False)

    customer = db.relationship("User", foreign_keys=[customer_id])
    seller = db.relationship("User", foreign_keys=[seller_id])
    shipping_address = db.relationship("ShippingAddress")
    items = db.relationship(
        "OrderItem",
        back_populates="order",
        order_by="OrderItem.id",
        cascade="all, delete-orphan",
    )

    @property
    def total_amount(self):
        return cents_to_decimal(self.total_amount_cents)

    def _items_dict(self) -> list[dict]:
        return [item.to_dict() for item in self.items]

    def to_dict(self) -> dict:
        customer = self.customer
        return {
            "id": self.id,
            "customerId": self.customer_id,
            "customerName": customer.name,
            "customerEmail": customer.email,
            "customerPhoneNumber": customer.phone_number,
            "shippingAddress": self.shipping_address.to_dict() if self.shipping_address else None,
            "sellerId": self.seller_id,
            "sellerShopName": self.seller.shop_name,
            "totalAmount": self.total_amount,
            "status": self.status.value,
            "orderDate": to_utc_z(self.order_date),
            "items": self._items_dict(),
        }

    def to_admin_dict(self) -> dict:
        return {
            "id": self.id,
            "customerName": self.customer.name,
            "sellerName": self.seller.name,
            "sellerShopName": self.seller.shop_name,
            "totalAmount": self.total_amount,
            "status": self.status.value,
            "orderDate": to_utc_z(self.order_date),
            "items": self._items_dict(),
        }


class OrderItem(db.Model):
    """Order line. ``price_cents`` is the unit price at purchase time and never changes."""
    __tablename__ = "order_items"
    __table_args__ = (
        db.CheckConstraint("quantity >= 1", name="ck_order_items_quantity_positive"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders.id"), nullable=False, index=True)
    inventory_item_id = db.Column(
        db.Integer,
        db.ForeignKey("inventory.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    quantity = db.Column(db.Integer, nullable=False)
    price_cents = db.Column(db.Integer, nullable=False)

    order = db.relationship("Order", back_populates="items")
    inventory_item = db.relationship("InventoryItem")

    @property
    def line_total_cents(self) -> int:
        return self.price_cents * self.quantity

    def to_dict(self) -> dict:
        return {
            "inventoryItemId": self.inventory_item_id,
            "productName": self.inventory_item.name,
            "quantity": self.quantity,
            "price": cents_to_decimal(self.price_cents),
        }


class Payment(db.Model):
    """
    Simulated payment for an order (1:1).

    Inserted together with the order's PENDING_PAYMENT -> PROCESSING
    transition, in the same transaction.
    """
    __tablename__ = "payments"
    __table_args__ = (
        db.UniqueConstraint("order_id", name="uq_payments_order_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders.id"), nullable=False)

    amount_cents = db.Column(db.Integer, nullable=False)
    payment_method = db.Column(db.String(32), nullable=False)
    transaction_id = db.Column(db.String(128), nullable=False)
    payment_date = db.Column(db.DateTime(timezone=True), nullable=False)
    status = db.Column(
        db.Enum(PaymentStatus, native_enum=False, length=16),
        nullable=False,
        default=PaymentStatus.PENDING,
    )

    order = db.relationship("Order", backref=db.backref("payment", uselist=False))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "orderId": self.order_id,
            "amount": cents_to_decimal(self.amount_cents),
            "paymentMethod": self.payment_method,
            "transactionId": self.transaction_id,
            "paymentDate": to_utc_z(self.payment_date),
            "status": self.status.value,
        }
