# Overview: Seller application lifecycle; admin approval, rejection and activation.

"""
Seller Application Lifecycle

    PENDING --approve--> APPROVED   (terminal)
    PENDING --reject---> REJECTED   (terminal)

Repeating the transition a seller is already in (approve an APPROVED
seller, reject a REJECTED one) is a no-op success. Moving between the two
terminal states is an InvalidTransition.
"""

from __future__ import annotations

from flask import current_app

from ..errors import InvalidTransition, SellerNotFound, ValidationFailed
from ..extensions import db
from ..models import ApplicationStatus, Role, User
from .concurrency import lock_for_update, run_in_transaction
from . import user_service


def _load_seller_locked(seller_id: int) -> User:
    user = lock_for_update(db.session.query(User).filter(User.id == seller_id)).first()
    if user is None:
        raise SellerNotFound("Seller not found")
    if user.role != Role.SELLER:
        raise ValidationFailed("User is not a seller")
    return user


def _transition(seller_id: int, target: ApplicationStatus) -> User:
    def _op():
        seller = _load_seller_locked(seller_id)
        current = seller.application_status

        if current == target:
            return seller
        if current != ApplicationStatus.PENDING:
            raise InvalidTransition(
                f"Seller application is already {current.value.lower()}",
                details={"from": current.value, "to": target.value},
            )

        seller.application_status = target
        return seller

    seller = run_in_transaction(_op)
    current_app.logger.info("Seller %s application is now %s", seller.id, target.value)
    return seller


def approve_seller(seller_id: int) -> User:
    return _transition(seller_id, ApplicationStatus.APPROVED)


def reject_seller(seller_id: int) -> User:
    return _transition(seller_id, ApplicationStatus.REJECTED)


def set_seller_active(seller_id: int, active: bool) -> User:
    """Activate or deactivate a seller account. Application status is untouched."""
    if not isinstance(active, bool):
        raise ValidationFailed("active must be true or false")

    def _op():
        seller = _load_seller_locked(seller_id)
        seller.is_active = active
        return seller

    seller = run_in_transaction(_op)
    current_app.logger.info("Seller %s active=%s", seller.id, active)
    return seller


def list_all_sellers() -> list[User]:
    return user_service.list_by_role(Role.SELLER)


def list_pending_sellers() -> list[User]:
    return user_service.list_pending_sellers()
