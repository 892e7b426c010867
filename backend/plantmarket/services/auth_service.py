# Overview: Service-layer operations for auth; encapsulates business logic and database work.

"""
Authentication Service

WHY: Every action must be attributable. Uses bcrypt for secure password
hashing; sessions are stateless bearer tokens (see token_service.py).

SECURITY NOTES:
- Passwords hashed with bcrypt (cost factor BCRYPT_ROUNDS, default 12)
- Minimum 6 characters required
- Unknown email and wrong password produce the same message
- Sellers may only sign in once their application is APPROVED
"""

from __future__ import annotations

import bcrypt
from flask import current_app

from ..errors import AccountUnavailable, InvalidCredentials, SellerUnavailable, ValidationFailed
from ..models import ApplicationStatus, Role, User
from . import token_service, user_service
from ..validation import optional_text, require_text, validate_email


MIN_PASSWORD_LENGTH = 6

SIGNUP_ROLES = {Role.CUSTOMER, Role.SELLER}

SELLER_STATUS_MESSAGES = {
    ApplicationStatus.PENDING: "Your seller application is still pending approval.",
    ApplicationStatus.REJECTED: "Your seller application was rejected. Please contact support.",
}

DEACTIVATED_MESSAGE = "Account is deactivated. Please contact support."
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


def validate_password_strength(password: str) -> None:
    """Raises ValidationFailed if password doesn't meet requirements."""
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailed(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")


def hash_password(password: str) -> str:
    """
    Hash password using bcrypt.

    Password is validated for strength before hashing.
    """
    validate_password_strength(password)
    salt = bcrypt.gensalt(rounds=current_app.config["BCRYPT_ROUNDS"])
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    WHY timing-safe: bcrypt.checkpw() prevents timing attacks automatically.
    """
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except (ValueError, TypeError):
        # Malformed stored hash
        return False


def seller_block_message(user: User) -> str | None:
    """Status-specific reason a seller may not act, or None if it may."""
    if user.role != Role.SELLER or user.application_status == ApplicationStatus.APPROVED:
        return None
    return SELLER_STATUS_MESSAGES.get(
        user.application_status, "Your account is not approved for selling."
    )


def signup(payload: dict) -> User:
    """
    Self-registration for customers and sellers.

    Customers start APPROVED; sellers start PENDING and must be approved by
    an admin before they can sign in. Admin accounts are created from the
    CLI only.
    """
    if not isinstance(payload, dict):
        raise ValidationFailed("Invalid JSON payload")

    name = require_text(payload, "name", min_length=2, max_length=100, message="Name is required")
    email = validate_email(require_text(payload, "email", max_length=255, message="Email is required"))
    password = payload.get("password")
    if not password:
        raise ValidationFailed("Password is required")
    validate_password_strength(password)

    user_type = payload.get("userType")
    if not user_type or not isinstance(user_type, str):
        raise ValidationFailed("User type is required")
    try:
        role = Role(user_type.strip().upper())
    except ValueError:
        role = None
    if role not in SIGNUP_ROLES:
        raise ValidationFailed("Invalid role. Must be CUSTOMER or SELLER")

    phone_number = require_text(payload, "phoneNumber", max_length=32, message="Phone number is required")
    address = require_text(payload, "address", message="Address is required")

    shop_name = None
    if role == Role.SELLER:
        shop_name = optional_text(payload, "shopName", max_length=120)
        if not shop_name:
            raise ValidationFailed("Shop name is required for sellers")
        application_status = ApplicationStatus.PENDING
    else:
        application_status = ApplicationStatus.APPROVED

    user = user_service.create_user(
        name=name,
        email=email,
        password_hash=hash_password(password),
        role=role,
        application_status=application_status,
        phone_number=phone_number,
        address=address,
        shop_name=shop_name,
    )
    current_app.logger.info("User registered successfully: %s (%s)", user.email, user.role.value)
    return user


def authenticate(email: str, password: str) -> User:
    """
    Check credentials and whether the account may sign in.

    Raises:
        InvalidCredentials: unknown email or wrong password (same message)
        AccountUnavailable: account deactivated
        SellerUnavailable: seller application PENDING or REJECTED
    """
    user = user_service.find_by_email(email)
    if user is None or not verify_password(password, user.password_hash):
        current_app.logger.warning("Failed login for email: %s", email)
        raise InvalidCredentials(INVALID_CREDENTIALS_MESSAGE)

    if not user.is_active:
        current_app.logger.warning("Login refused, account inactive: %s", email)
        raise AccountUnavailable(DEACTIVATED_MESSAGE)

    blocked = seller_block_message(user)
    if blocked:
        current_app.logger.warning("Login refused, seller not approved: %s", email)
        raise SellerUnavailable(blocked)

    return user


def login(email: str, password: str) -> tuple[str, User]:
    """Authenticate and mint a bearer token. Returns (token, user)."""
    user = authenticate(email, password)
    token = token_service.mint(user.email, user.id, user.role)
    current_app.logger.info("Login successful for email: %s", user.email)
    return token, user


def logout(token: str) -> None:
    """Revoke the token. Safe to call repeatedly."""
    if token_service.revoke(token):
        current_app.logger.info("Token revoked")
