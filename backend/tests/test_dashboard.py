"""
Dashboard aggregate tests.

totalOrders excludes PENDING_PAYMENT and CANCELLED orders; seller revenue
counts COMPLETED payments only.
"""

from decimal import Decimal

import pytest

from conftest import make_item
from plantmarket.models import OrderStatus
from plantmarket.services import dashboard_service, order_service, payment_service
from plantmarket.services.order_service import OrderLine


@pytest.fixture
def marketplace(app, db_session, customer, seller, other_seller, pending_seller, item, other_item):
    """
    Four orders for ``seller``:
    unpaid, paid (PROCESSING), paid+shipped (SHIPPED), paid+cancelled.
    One paid order for ``other_seller``.
    """
    def order(owner, target_item, qty=1):
        return order_service.create_order(customer, owner.id, [OrderLine(target_item.id, qty)])

    order(seller, item)  # unpaid

    processing = order(seller, item, 2)
    payment_service.process_payment(customer, processing.id, "Card")

    shipped = order(seller, item)
    payment_service.process_payment(customer, shipped.id, "Card")
    order_service.update_order_status(seller, shipped.id, OrderStatus.SHIPPED)

    cancelled = order(seller, item)
    payment_service.process_payment(customer, cancelled.id, "Card")
    order_service.update_order_status(seller, cancelled.id, OrderStatus.CANCELLED)

    elsewhere = order(other_seller, other_item)
    payment_service.process_payment(customer, elsewhere.id, "Card")

    make_item(db_session, seller, name="Cactus", quantity=1, threshold=1)


class TestAdminStats:
    def test_counts(self, marketplace, admin):
        stats = dashboard_service.admin_stats()
        assert stats == {
            "totalCustomers": 1,
            "totalSellers": 3,
            "totalOrders": 3,
            "pendingSellers": 1,
        }

    def test_route(self, client, marketplace, admin_headers):
        resp = client.get("/api/dashboard/admin-stats", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json["totalOrders"] == 3


class TestSellerStats:
    def test_values(self, marketplace, seller):
        stats = dashboard_service.seller_stats(seller)
        # processing 2 x 12.50 + shipped 12.50 + cancelled 12.50 (payment stays COMPLETED)
        assert stats["totalRevenue"] == Decimal("50.00")
        assert stats["activeOrders"] == 2
        assert stats["lowStockItems"] == 1
        assert stats["totalProducts"] == 2
        assert len(stats["recentOrders"]) == 4

    def test_no_sales(self, app, seller):
        stats = dashboard_service.seller_stats(seller)
        assert stats["totalRevenue"] == Decimal("0.00")
        assert stats["recentOrders"] == []

    def test_route(self, client, marketplace, seller_headers):
        resp = client.get("/api/dashboard/seller-stats", headers=seller_headers)
        assert resp.status_code == 200
        assert resp.json["totalRevenue"] == "50.00"
        assert resp.json["recentOrders"][0]["status"] == "CANCELLED"


class TestPublicStats:
    def test_counts(self, client, marketplace):
        resp = client.get("/api/dashboard/public-stats")
        assert resp.status_code == 200
        assert resp.json == {
            "totalCustomers": 1,
            "totalSellers": 3,
            "totalOrders": 3,
            "totalProducts": 3,
        }
