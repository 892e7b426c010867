# Overview: Request authentication and role decorators for API routes.

from functools import wraps
from flask import request, jsonify, g, current_app

from .errors import InvalidToken
from .models import ApplicationStatus, Role
from .services import token_service, user_service
from .services.auth_service import DEACTIVATED_MESSAGE, seller_block_message


def _is_authenticated() -> bool:
    return hasattr(g, 'current_user') and hasattr(g, 'token_claims')


def bearer_token() -> str | None:
    """Token from `Authorization: Bearer <token>`, or None if the header is missing or malformed."""
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    token = auth_header.split(" ", 1)[1].strip()
    return token or None


def require_auth(f):
    """
    Require a valid bearer token.

    Sets the following Flask g attributes:
    - g.current_user: The authenticated User object
    - g.token_claims: The verified TokenClaims
    - g.token: The raw bearer token

    SECURITY: Returns 401 if:
    - No Authorization header
    - Invalid, expired or revoked token
    - Token subject no longer exists
    The response never says which of these happened.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = bearer_token()
        if not token:
            return jsonify({"error": "Authentication required", "kind": "unauthenticated"}), 401

        try:
            claims = token_service.validate(token)
        except InvalidToken as e:
            current_app.logger.warning("Rejected bearer token on %s %s", request.method, request.path)
            return jsonify(e.to_dict()), 401

        user = user_service.find_by_id(claims.user_id)
        if user is None or user.email != claims.email:
            return jsonify(InvalidToken().to_dict()), 401

        g.current_user = user
        g.token_claims = claims
        g.token = token

        return f(*args, **kwargs)

    return decorated_function


def require_roles(*roles: Role):
    """
    Require the authenticated user to hold one of ``roles``.

    Also refuses deactivated accounts, and sellers whose application is not
    APPROVED (with the status-specific message).
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            # Ensure @require_auth was called first
            if not _is_authenticated():
                return jsonify({"error": "Authentication required", "kind": "unauthenticated"}), 401

            user = g.current_user

            if user.role not in roles:
                current_app.logger.warning(
                    "Permission denied: user %s (%s) on %s", user.id, user.role.value, request.path
                )
                return jsonify({
                    "error": "Permission denied",
                    "kind": "forbidden",
                }), 403

            if not user.is_active:
                return jsonify({"error": DEACTIVATED_MESSAGE, "kind": "forbidden"}), 403

            if user.role == Role.SELLER and user.application_status != ApplicationStatus.APPROVED:
                return jsonify({"error": seller_block_message(user), "kind": "forbidden"}), 403

            return f(*args, **kwargs)

        return decorated_function
    return decorator


def require_active(f):
    """Require an active account of any role (profile and session routes)."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not _is_authenticated():
            return jsonify({"error": "Authentication required", "kind": "unauthenticated"}), 401
        if not g.current_user.is_active:
            return jsonify({"error": DEACTIVATED_MESSAGE, "kind": "forbidden"}), 403
        return f(*args, **kwargs)
    return decorated_function
