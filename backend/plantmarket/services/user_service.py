# Overview: Service-layer operations for the identity store; user lookups, counts and profile updates.

from __future__ import annotations

from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from ..errors import EmailTaken, ValidationFailed
from ..extensions import db
from ..models import ApplicationStatus, Role, User
from ..validation import optional_text, require_text


def create_user(
    *,
    name: str,
    email: str,
    password_hash: str,
    role: Role,
    application_status: ApplicationStatus | None,
    phone_number: str | None = None,
    address: str | None = None,
    shop_name: str | None = None,
    is_active: bool = True,
) -> User:
    """
    Insert a user row.

    Raises EmailTaken when the email is already registered, including when
    a concurrent signup wins the unique index.
    """
    if find_by_email(email) is not None:
        raise EmailTaken("Email already exists")

    user = User(
        name=name,
        email=email,
        password_hash=password_hash,
        role=role,
        application_status=application_status,
        phone_number=phone_number,
        address=address,
        shop_name=shop_name,
        is_active=is_active,
    )
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise EmailTaken("Email already exists")
    return user


def find_by_email(email: str) -> User | None:
    return db.session.query(User).filter(User.email == email).first()


def find_by_id(user_id: int) -> User | None:
    return db.session.get(User, user_id)


def list_by_role(role: Role) -> list[User]:
    return db.session.query(User).filter(User.role == role).order_by(User.id).all()


def list_pending_sellers() -> list[User]:
    return db.session.query(User).filter(
        User.role == Role.SELLER,
        User.application_status == ApplicationStatus.PENDING,
    ).order_by(User.id).all()


def list_active_approved_sellers() -> list[User]:
    return db.session.query(User).filter(
        User.role == Role.SELLER,
        User.application_status == ApplicationStatus.APPROVED,
        User.is_active.is_(True),
    ).order_by(User.id).all()


def count_by_role(role: Role) -> int:
    return db.session.query(func.count(User.id)).filter(User.role == role).scalar() or 0


def count_sellers_by_application_status(status: ApplicationStatus) -> int:
    return db.session.query(func.count(User.id)).filter(
        User.role == Role.SELLER,
        User.application_status == status,
    ).scalar() or 0


def update_profile(user: User, payload: dict) -> User:
    """
    Apply a partial profile update.

    Only name, phoneNumber, address and shopName can change here; email,
    role and status are not self-service.
    """
    if not isinstance(payload, dict):
        raise ValidationFailed("Invalid JSON payload")

    allowed = {"name", "phoneNumber", "address", "shopName"}
    unknown = sorted(set(payload) - allowed)
    if unknown:
        raise ValidationFailed(f"Field not allowed: {', '.join(unknown)}")

    if payload.get("name") is not None:
        user.name = require_text(payload, "name", min_length=2, max_length=100)
    if payload.get("phoneNumber") is not None:
        user.phone_number = require_text(payload, "phoneNumber", max_length=32)
    if payload.get("address") is not None:
        user.address = require_text(payload, "address")
    if payload.get("shopName") is not None:
        shop_name = optional_text(payload, "shopName", max_length=120)
        if user.role == Role.SELLER and not shop_name:
            raise ValidationFailed("Shop name is required for sellers")
        user.shop_name = shop_name or None

    db.session.commit()
    current_app.logger.info("Profile updated for user %s", user.id)
    return user
