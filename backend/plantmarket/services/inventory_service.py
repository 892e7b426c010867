# Overview: Service-layer operations for inventory; encapsulates business logic and database work.

"""
Inventory Service

Each seller owns its inventory rows. Only the owner may change or delete a
row; anyone may browse a seller's rows. Stock on hand is decremented by
order_service inside the order transaction, never here.
"""

from __future__ import annotations

from flask import current_app
from sqlalchemy import func

from ..errors import Forbidden, ItemInUse, ItemNotFound
from ..extensions import db
from ..models import InventoryItem, OrderItem, User
from ..validation import ModelValidationPolicy, enforce_rules_inventory, validate_payload
from .concurrency import lock_for_update, run_in_transaction


INVENTORY_POLICY = ModelValidationPolicy(
    writable_fields={"name", "type", "price", "quantity", "description", "lowStockThreshold"},
    required_on_create={"name", "type", "price", "quantity"},
    field_map={"price": "price_cents", "lowStockThreshold": "low_stock_threshold"},
    money_fields={"price"},
)


def list_by_seller(seller: User) -> list[InventoryItem]:
    """The caller's own inventory."""
    return list_by_seller_id(seller.id)


def list_by_seller_id(seller_id: int) -> list[InventoryItem]:
    return db.session.query(InventoryItem).filter(
        InventoryItem.seller_id == seller_id
    ).order_by(InventoryItem.id).all()


def get_item(item_id: int) -> InventoryItem:
    item = db.session.get(InventoryItem, item_id)
    if item is None:
        raise ItemNotFound("Inventory item not found")
    return item


def add_item(seller: User, payload: dict) -> InventoryItem:
    """Create an inventory row owned by ``seller``."""
    patch = validate_payload(model=InventoryItem, payload=payload, policy=INVENTORY_POLICY, partial=False)
    enforce_rules_inventory(patch)
    patch.setdefault("low_stock_threshold", 0)

    def _op():
        item = InventoryItem(seller_id=seller.id, **patch)
        db.session.add(item)
        db.session.flush()
        return item

    item = run_in_transaction(_op)
    current_app.logger.info("Seller %s added inventory item %s", seller.id, item.id)
    return item


def _load_owned_locked(seller: User, item_id: int) -> InventoryItem:
    item = lock_for_update(
        db.session.query(InventoryItem).filter(InventoryItem.id == item_id)
    ).first()
    if item is None:
        raise ItemNotFound("Inventory item not found")
    if item.seller_id != seller.id:
        raise Forbidden("You do not have permission to update this item.")
    return item


def update_item(seller: User, item_id: int, payload: dict) -> InventoryItem:
    """
    Patch an owned row.

    Prices already frozen on order lines are unaffected by a price change.
    """
    patch = validate_payload(model=InventoryItem, payload=payload, policy=INVENTORY_POLICY, partial=True)
    enforce_rules_inventory(patch)

    def _op():
        item = _load_owned_locked(seller, item_id)
        for key, value in patch.items():
            setattr(item, key, value)
        return item

    return run_in_transaction(_op)


def delete_item(seller: User, item_id: int) -> None:
    """Remove an owned row that no order line references."""
    def _op():
        item = _load_owned_locked(seller, item_id)
        referenced = db.session.query(OrderItem.id).filter(
            OrderItem.inventory_item_id == item.id
        ).first()
        if referenced:
            raise ItemInUse("Inventory item is referenced by existing orders and cannot be deleted")
        db.session.delete(item)

    run_in_transaction(_op)
    current_app.logger.info("Seller %s deleted inventory item %s", seller.id, item_id)


def count_by_seller(seller_id: int) -> int:
    return db.session.query(func.count(InventoryItem.id)).filter(
        InventoryItem.seller_id == seller_id
    ).scalar() or 0


def count_low_stock_by_seller(seller_id: int) -> int:
    """Rows at or below their low-stock threshold."""
    return db.session.query(func.count(InventoryItem.id)).filter(
        InventoryItem.seller_id == seller_id,
        InventoryItem.quantity <= InventoryItem.low_stock_threshold,
    ).scalar() or 0


def count_all() -> int:
    return db.session.query(func.count(InventoryItem.id)).scalar() or 0
