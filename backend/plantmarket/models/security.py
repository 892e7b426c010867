# Overview: Revoked bearer tokens, kept until their natural expiry.

from __future__ import annotations

from ..extensions import db


class RevokedToken(db.Model):
    """
    Revoked bearer tokens.

    Keyed by the SHA-256 of the token so the plaintext is never stored.
    Rows are only needed until ``expires_at``; after that the token fails
    signature-time expiry checks anyway and the row can be purged.
    """
    __tablename__ = "revoked_tokens"
    __table_args__ = (
        db.UniqueConstraint("token_hash", name="uq_revoked_tokens_hash"),
        db.Index("ix_revoked_tokens_expires_at", "expires_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    token_hash = db.Column(db.String(64), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    expires_at = db.Column(db.DateTime(timezone=True), nullable=False)
    revoked_at = db.Column(db.DateTime(timezone=True), nullable=False)
