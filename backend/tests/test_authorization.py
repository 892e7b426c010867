"""
Authorization tests.

Verifies:
- Unauthenticated requests return 401
- Wrong-role requests return 403
- Unapproved or deactivated sellers are refused seller operations
- Public routes need no token
"""

import pytest

from conftest import headers_for, make_user
from plantmarket.models import ApplicationStatus, Role


# =============================================================================
# UNAUTHENTICATED ACCESS: 401
# =============================================================================


class TestUnauthenticatedAccess:
    """All protected endpoints return 401 without a token."""

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/auth/me"),
            ("GET", "/api/admin/sellers"),
            ("GET", "/api/admin/sellers/pending"),
            ("PUT", "/api/admin/sellers/1/approve"),
            ("PUT", "/api/admin/sellers/1/reject"),
            ("PUT", "/api/admin/sellers/1/status?isActive=false"),
            ("GET", "/api/admin/orders"),
            ("GET", "/api/inventory"),
            ("POST", "/api/inventory"),
            ("PUT", "/api/inventory/1"),
            ("DELETE", "/api/inventory/1"),
            ("POST", "/api/orders"),
            ("GET", "/api/orders/customer"),
            ("GET", "/api/orders/seller"),
            ("GET", "/api/orders/1"),
            ("PUT", "/api/orders/1/status?status=SHIPPED"),
            ("POST", "/api/payment/order/1"),
            ("POST", "/api/reviews"),
            ("GET", "/api/users/profile"),
            ("PUT", "/api/users/profile"),
            ("GET", "/api/dashboard/admin-stats"),
            ("GET", "/api/dashboard/seller-stats"),
        ],
    )
    def test_requires_auth(self, client, db_session, method, path):
        resp = getattr(client, method.lower())(path)
        assert resp.status_code == 401, f"{method} {path} returned {resp.status_code}"


# =============================================================================
# WRONG ROLE: 403
# =============================================================================


class TestRoleGates:
    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/admin/sellers"),
            ("GET", "/api/admin/orders"),
            ("GET", "/api/inventory"),
            ("POST", "/api/inventory"),
            ("GET", "/api/orders/seller"),
            ("PUT", "/api/orders/1/status?status=SHIPPED"),
            ("GET", "/api/dashboard/admin-stats"),
            ("GET", "/api/dashboard/seller-stats"),
        ],
    )
    def test_customer_denied(self, client, customer_headers, method, path):
        resp = getattr(client, method.lower())(path, headers=customer_headers)
        assert resp.status_code == 403
        assert resp.json["kind"] == "forbidden"

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/admin/sellers/pending"),
            ("POST", "/api/orders"),
            ("GET", "/api/orders/customer"),
            ("POST", "/api/payment/order/1"),
            ("POST", "/api/reviews"),
            ("GET", "/api/dashboard/admin-stats"),
        ],
    )
    def test_seller_denied(self, client, seller_headers, method, path):
        resp = getattr(client, method.lower())(path, headers=seller_headers, json={})
        assert resp.status_code == 403

    def test_admin_cannot_place_orders(self, client, admin_headers):
        resp = client.post("/api/orders", headers=admin_headers, json={})
        assert resp.status_code == 403

    def test_admin_may_list_seller_orders(self, client, admin_headers):
        resp = client.get("/api/orders/seller", headers=admin_headers)
        assert resp.status_code == 200


# =============================================================================
# SELLER APPLICATION GATE
# =============================================================================


class TestSellerGate:
    def test_pending_seller_gets_status_message(self, client, pending_seller):
        resp = client.get("/api/inventory", headers=headers_for(pending_seller))
        assert resp.status_code == 403
        assert resp.json["error"] == "Your seller application is still pending approval."

    def test_rejected_seller_gets_status_message(self, client, rejected_seller):
        resp = client.get("/api/dashboard/seller-stats", headers=headers_for(rejected_seller))
        assert resp.status_code == 403
        assert resp.json["error"] == "Your seller application was rejected. Please contact support."

    def test_deactivated_seller_refused(self, client, db_session):
        inactive = make_user(
            db_session, email="sleepy@example.com", role=Role.SELLER,
            shop_name="Closed", application_status=ApplicationStatus.APPROVED, is_active=False,
        )
        resp = client.get("/api/inventory", headers=headers_for(inactive))
        assert resp.status_code == 403

    def test_pending_seller_can_read_own_profile(self, client, pending_seller):
        resp = client.get("/api/users/profile", headers=headers_for(pending_seller))
        assert resp.status_code == 200
        assert resp.json["applicationStatus"] == "pending"

    def test_token_rejected_after_email_change(self, client, db_session, customer):
        headers = headers_for(customer)
        customer.email = "renamed@example.com"
        db_session.commit()
        resp = client.get("/api/auth/me", headers=headers)
        assert resp.status_code == 401


# =============================================================================
# PUBLIC ROUTES
# =============================================================================


class TestPublicRoutes:
    @pytest.mark.parametrize(
        "path",
        [
            "/health",
            "/api/users/sellers",
            "/api/dashboard/public-stats",
        ],
    )
    def test_no_token_needed(self, client, db_session, path):
        resp = client.get(path)
        assert resp.status_code == 200

    def test_shop_inventory_is_public(self, client, item, seller):
        resp = client.get(f"/api/inventory/seller/{seller.id}")
        assert resp.status_code == 200
        assert [row["id"] for row in resp.json] == [item.id]

    def test_active_sellers_directory(self, client, seller, pending_seller, rejected_seller):
        resp = client.get("/api/users/sellers")
        assert resp.status_code == 200
        assert [row["email"] for row in resp.json] == [seller.email]

    def test_cors_allowed_origin(self, client, db_session):
        resp = client.get("/health", headers={"Origin": "http://localhost:8081"})
        assert resp.headers["Access-Control-Allow-Origin"] == "http://localhost:8081"

    def test_cors_unknown_origin(self, client, db_session):
        resp = client.get("/health", headers={"Origin": "http://evil.example"})
        assert "Access-Control-Allow-Origin" not in resp.headers
