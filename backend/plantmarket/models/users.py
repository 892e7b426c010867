# Overview: Marketplace accounts: roles, seller application status and shop fields.

from __future__ import annotations

import enum

from ..extensions import db
from ..time_utils import to_utc_z


class Role(str, enum.Enum):
    CUSTOMER = "CUSTOMER"
    SELLER = "SELLER"
    ADMIN = "ADMIN"


class ApplicationStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class User(db.Model):
    """
    Marketplace account: customer, seller or administrator.

    Email is globally unique (case-sensitive). Users are never deleted;
    ``is_active`` is the only off switch. ``application_status`` only
    matters for sellers; customers are created APPROVED.
    """
    __tablename__ = "users"
    __table_args__ = (
        db.UniqueConstraint("email", name="uq_users_email"),
        db.Index("ix_users_role_status", "role", "application_status"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), nullable=False)

    # Bcrypt hashed password
    password_hash = db.Column(db.String(255), nullable=False)

    role = db.Column(db.Enum(Role, native_enum=False, length=16), nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    shop_name = db.Column(db.String(120), nullable=True)
    phone_number = db.Column(db.String(32), nullable=True)
    address = db.Column(db.Text, nullable=True)

    application_status = db.Column(
        db.Enum(ApplicationStatus, native_enum=False, length=16),
        nullable=True,
    )

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def to_dict(self) -> dict:
        role = self.role.value.lower()
        return {
            "id": str(self.id),
            "name": self.name,
            "email": self.email,
            "role": role,
            "userType": role,
            "isActive": self.is_active,
            "shopName": self.shop_name,
            "phoneNumber": self.phone_number,
            "address": self.address,
            "applicationStatus": (
                self.application_status.value.lower() if self.application_status else None
            ),
            "createdAt": to_utc_z(self.created_at),
        }

    def __repr__(self) -> str:
        return f"<User {self.id} {self.email} {self.role.value}>"
