"""
Seller application lifecycle tests.

PENDING -> APPROVED and PENDING -> REJECTED, both terminal. Repeating the
current state is a no-op; crossing between terminal states is refused.
"""

import pytest

from plantmarket.errors import InvalidTransition, SellerNotFound, ValidationFailed
from plantmarket.models import ApplicationStatus
from plantmarket.services import seller_service


class TestApplicationLifecycle:
    def test_approve_pending(self, app, pending_seller):
        seller = seller_service.approve_seller(pending_seller.id)
        assert seller.application_status == ApplicationStatus.APPROVED

    def test_reject_pending(self, app, pending_seller):
        seller = seller_service.reject_seller(pending_seller.id)
        assert seller.application_status == ApplicationStatus.REJECTED

    def test_approve_is_idempotent(self, app, pending_seller):
        seller_service.approve_seller(pending_seller.id)
        seller = seller_service.approve_seller(pending_seller.id)
        assert seller.application_status == ApplicationStatus.APPROVED

    def test_reject_is_idempotent(self, app, rejected_seller):
        seller = seller_service.reject_seller(rejected_seller.id)
        assert seller.application_status == ApplicationStatus.REJECTED

    def test_cannot_reject_approved(self, app, seller):
        with pytest.raises(InvalidTransition):
            seller_service.reject_seller(seller.id)

    def test_cannot_approve_rejected(self, app, rejected_seller):
        with pytest.raises(InvalidTransition):
            seller_service.approve_seller(rejected_seller.id)

    def test_unknown_seller(self, app, db_session):
        with pytest.raises(SellerNotFound):
            seller_service.approve_seller(9999)

    def test_customer_is_not_a_seller(self, app, customer):
        with pytest.raises(ValidationFailed):
            seller_service.approve_seller(customer.id)


class TestSellerAdminRoutes:
    def test_pending_list(self, client, admin_headers, seller, pending_seller):
        resp = client.get("/api/admin/sellers/pending", headers=admin_headers)
        assert resp.status_code == 200
        assert [row["email"] for row in resp.json] == [pending_seller.email]

    def test_all_sellers(self, client, admin_headers, seller, pending_seller, rejected_seller):
        resp = client.get("/api/admin/sellers", headers=admin_headers)
        assert resp.status_code == 200
        assert len(resp.json) == 3

    def test_approve_twice_over_http(self, client, admin_headers, pending_seller):
        for _ in range(2):
            resp = client.put(f"/api/admin/sellers/{pending_seller.id}/approve", headers=admin_headers)
            assert resp.status_code == 200
            assert resp.json["applicationStatus"] == "approved"

    def test_reject_approved_over_http(self, client, admin_headers, seller):
        resp = client.put(f"/api/admin/sellers/{seller.id}/reject", headers=admin_headers)
        assert resp.status_code == 400
        assert resp.json["kind"] == "invalid_transition"

    def test_approve_missing_seller(self, client, admin_headers):
        resp = client.put("/api/admin/sellers/424242/approve", headers=admin_headers)
        assert resp.status_code == 404
        assert resp.json["kind"] == "seller_not_found"

    def test_deactivate_with_query_param(self, client, admin_headers, seller):
        resp = client.put(f"/api/admin/sellers/{seller.id}/status?isActive=false", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json["isActive"] is False
        assert resp.json["applicationStatus"] == "approved"

    def test_reactivate_with_json(self, client, admin_headers, seller):
        client.put(f"/api/admin/sellers/{seller.id}/status?isActive=false", headers=admin_headers)
        resp = client.put(f"/api/admin/sellers/{seller.id}/status", headers=admin_headers, json={"active": True})
        assert resp.status_code == 200
        assert resp.json["isActive"] is True

    @pytest.mark.parametrize("query", ["", "?isActive=maybe"])
    def test_status_flag_required(self, client, admin_headers, seller, query):
        resp = client.put(f"/api/admin/sellers/{seller.id}/status{query}", headers=admin_headers)
        assert resp.status_code == 400

    def test_deactivated_seller_leaves_directory(self, client, admin_headers, seller):
        client.put(f"/api/admin/sellers/{seller.id}/status?isActive=false", headers=admin_headers)
        resp = client.get("/api/users/sellers")
        assert resp.json == []
