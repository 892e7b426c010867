# Overview: Service error kinds and their HTTP mapping.

"""
Service error hierarchy.

Every domain precondition failure raises a ServiceError subclass. The
subclass fixes the machine-readable ``kind`` and the HTTP status; routes
never pick status codes for these themselves. The single handler that
turns them into responses is registered in ``create_app``.
"""

from __future__ import annotations


class ServiceError(Exception):
    """Base class for expected, client-visible failures."""

    kind = "error"
    status_code = 400

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict:
        body = {"error": self.message, "kind": self.kind}
        if self.details:
            body["details"] = self.details
        return body


class ValidationFailed(ServiceError):
    kind = "validation_failed"


class EmailTaken(ServiceError):
    kind = "email_taken"


class InvalidCredentials(ServiceError):
    kind = "invalid_credentials"


class AccountUnavailable(ServiceError):
    """Account exists but may not sign in or transact (deactivated)."""
    kind = "account_unavailable"


class SellerUnavailable(AccountUnavailable):
    """Seller is inactive or its application is not APPROVED."""
    kind = "seller_unavailable"


class Unauthenticated(ServiceError):
    kind = "unauthenticated"
    status_code = 401


class InvalidToken(Unauthenticated):
    """
    Token could not be accepted.

    Deliberately carries no reason: malformed, expired, revoked and bad
    signature all look the same to the caller.
    """
    kind = "invalid_token"

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


class Forbidden(ServiceError):
    kind = "forbidden"
    status_code = 403


class NotFound(ServiceError):
    kind = "not_found"
    status_code = 404


class UserNotFound(NotFound):
    kind = "user_not_found"


class SellerNotFound(NotFound):
    kind = "seller_not_found"


class ItemNotFound(NotFound):
    kind = "item_not_found"


class OrderNotFound(NotFound):
    kind = "order_not_found"


class InsufficientStock(ServiceError):
    kind = "insufficient_stock"


class WrongSeller(ServiceError):
    kind = "wrong_seller"


class InvalidTransition(ServiceError):
    kind = "invalid_transition"


class NotPayable(InvalidTransition):
    kind = "not_payable"


class AlreadyReviewed(ServiceError):
    kind = "already_reviewed"


class SelfReview(ServiceError):
    kind = "self_review"


class RatingOutOfRange(ServiceError):
    kind = "rating_out_of_range"


class ItemInUse(ServiceError):
    """Inventory row is referenced by an order line and cannot be removed."""
    kind = "item_in_use"
    status_code = 409
