# Overview: Read-only dashboard aggregates for admins, sellers and the public landing page.

from __future__ import annotations

from ..models import ApplicationStatus, Role, User
from ..money import cents_to_decimal
from . import inventory_service, order_service, payment_service, user_service


def admin_stats() -> dict:
    return {
        "totalCustomers": user_service.count_by_role(Role.CUSTOMER),
        "totalSellers": user_service.count_by_role(Role.SELLER),
        "totalOrders": order_service.count_placed_orders(),
        "pendingSellers": user_service.count_sellers_by_application_status(ApplicationStatus.PENDING),
    }


def seller_stats(seller: User) -> dict:
    """
    Seller dashboard.

    totalRevenue sums COMPLETED payments only; activeOrders counts
    PROCESSING and SHIPPED; recentOrders holds the five newest orders.
    """
    revenue_cents = payment_service.total_revenue_cents_for_seller(seller.id)
    recent = order_service.recent_orders_for_seller(seller.id)
    return {
        "totalRevenue": cents_to_decimal(revenue_cents),
        "activeOrders": order_service.count_active_orders_for_seller(seller.id),
        "lowStockItems": inventory_service.count_low_stock_by_seller(seller.id),
        "totalProducts": inventory_service.count_by_seller(seller.id),
        "recentOrders": [order.to_dict() for order in recent],
    }


def public_stats() -> dict:
    return {
        "totalCustomers": user_service.count_by_role(Role.CUSTOMER),
        "totalSellers": user_service.count_by_role(Role.SELLER),
        "totalOrders": order_service.count_placed_orders(),
        "totalProducts": inventory_service.count_all(),
    }
