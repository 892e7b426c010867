# Overview: Seller inventory rows with integer-cent prices and low-stock thresholds.

from __future__ import annotations

from ..extensions import db
from ..money import cents_to_decimal
from ..time_utils import to_utc_z


class InventoryItem(db.Model):
    """
    A seller's stock row.

    Prices are stored in integer cents. ``quantity`` is decremented in
    place when an order is placed and never goes negative.
    """
    __tablename__ = "inventory"
    __table_args__ = (
        db.CheckConstraint("quantity >= 0", name="ck_inventory_quantity_nonnegative"),
        db.CheckConstraint("price_cents >= 0", name="ck_inventory_price_nonnegative"),
        db.CheckConstraint("low_stock_threshold >= 0", name="ck_inventory_threshold_nonnegative"),
        db.Index("ix_inventory_seller_id", "seller_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    seller_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)

    name = db.Column(db.String(255), nullable=False)
    type = db.Column(db.String(64), nullable=False)
    price_cents = db.Column(db.Integer, nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=0)
    low_stock_threshold = db.Column(db.Integer, nullable=False, default=0)
    description = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    seller = db.relationship("User", backref=db.backref("inventory_items", lazy=True))

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.low_stock_threshold

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sellerId": self.seller_id,
            "name": self.name,
            "type": self.type,
            "price": cents_to_decimal(self.price_cents),
            "quantity": self.quantity,
            "lowStockThreshold": self.low_stock_threshold,
            "lowStock": self.is_low_stock,
            "description": self.description,
            "createdAt": to_utc_z(self.created_at),
        }
