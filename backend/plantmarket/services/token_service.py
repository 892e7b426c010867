# Overview: Service-layer operations for bearer tokens; minting, validation and revocation.

"""
Bearer Token Service

Tokens are self-contained HS256 JWTs carrying the subject email, user id,
role and expiry. Validation needs no database read except the revocation
check.

SECURITY FEATURES:
- Signed with JWT_SECRET_KEY; algorithm pinned on decode
- Fixed expiry window (TOKEN_EXPIRE_HOURS)
- Unique jti per token, so two logins in the same second get distinct tokens
- Revocation persisted in revoked_tokens, keyed by SHA-256 of the token
- Every failure surfaces as the same InvalidToken; callers cannot tell
  malformed, expired, revoked and forged tokens apart
"""

from __future__ import annotations

import hashlib
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from flask import current_app
from jose import JWTError, jwt
from sqlalchemy.exc import IntegrityError

from ..errors import InvalidToken
from ..extensions import db
from ..models import RevokedToken, Role
from ..time_utils import utcnow


@dataclass(frozen=True)
class TokenClaims:
    """Decoded, verified token contents."""
    email: str
    user_id: int
    role: Role
    expires_at: datetime


def hash_token(token: str) -> str:
    """
    Hash token for revocation storage using SHA-256.

    WHY SHA-256 not bcrypt: Tokens are already high-entropy (unlike passwords).
    """
    return hashlib.sha256(token.encode('utf-8')).hexdigest()


def _signing_key() -> str:
    return current_app.config["JWT_SECRET_KEY"]


def _algorithm() -> str:
    return current_app.config["JWT_ALGORITHM"]


def mint(email: str, user_id: int, role: Role) -> str:
    """Issue a signed token for the given identity."""
    now = utcnow()
    expires_at = now + timedelta(hours=current_app.config["TOKEN_EXPIRE_HOURS"])
    claims = {
        "sub": email,
        "uid": str(user_id),
        "role": role.value,
        "iat": now,
        "exp": expires_at,
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(claims, _signing_key(), algorithm=_algorithm())


def _decode(token: str, *, verify_exp: bool = True) -> dict:
    return jwt.decode(
        token,
        _signing_key(),
        algorithms=[_algorithm()],
        options={"verify_exp": verify_exp},
    )


def _claims_from_payload(payload: dict) -> TokenClaims:
    try:
        return TokenClaims(
            email=payload["sub"],
            user_id=int(payload["uid"]),
            role=Role(payload["role"]),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), timezone.utc).replace(tzinfo=None),
        )
    except (KeyError, TypeError, ValueError):
        raise InvalidToken()


def is_revoked(token: str) -> bool:
    return db.session.query(RevokedToken.id).filter_by(token_hash=hash_token(token)).first() is not None


def validate(token: str) -> TokenClaims:
    """
    Verify signature, expiry and revocation.

    Raises InvalidToken on any failure.
    """
    if not token:
        raise InvalidToken()
    try:
        payload = _decode(token)
    except JWTError:
        raise InvalidToken()

    claims = _claims_from_payload(payload)

    if is_revoked(token):
        raise InvalidToken()

    return claims


def revoke(token: str) -> bool:
    """
    Revoke a token (logout).

    Idempotent: revoking an already revoked token, or a token that does not
    decode at all, is not an error. Returns True only when a new revocation
    row was written.
    """
    try:
        payload = _decode(token, verify_exp=False)
        claims = _claims_from_payload(payload)
    except (JWTError, InvalidToken):
        return False

    token_hash = hash_token(token)
    if db.session.query(RevokedToken.id).filter_by(token_hash=token_hash).first():
        return False

    db.session.add(RevokedToken(
        token_hash=token_hash,
        user_id=claims.user_id,
        expires_at=claims.expires_at,
        revoked_at=utcnow(),
    ))
    try:
        db.session.commit()
    except IntegrityError:
        # Concurrent logout with the same token already stored it
        db.session.rollback()
        return False
    return True


def cleanup_expired_revocations() -> int:
    """
    Delete revocation rows whose tokens have expired.

    Returns count of rows deleted. Run periodically (see `flask tokens cleanup`).
    """
    deleted = db.session.query(RevokedToken).filter(
        RevokedToken.expires_at < utcnow()
    ).delete()
    db.session.commit()
    return deleted
