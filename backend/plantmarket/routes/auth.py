# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

"""
Authentication API routes

SECURITY FEATURES:
- Password strength validation on signup
- Same message for unknown email and wrong password
- Sellers sign in only once their application is APPROVED
- Logout persists the revocation; a revoked token is rejected everywhere
"""

from flask import Blueprint, request, jsonify, g

from ..decorators import bearer_token, require_auth
from ..errors import Unauthenticated, ValidationFailed
from ..services import auth_service


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/signup")
def signup_route():
    """
    Self-registration for customers and sellers.

    Sellers are created PENDING and cannot sign in until an admin approves
    them.
    """
    payload = request.get_json(silent=True)
    user = auth_service.signup(payload)
    return jsonify(user.to_dict()), 201


@auth_bp.post("/login")
def login_route():
    """
    Authenticate user and issue a bearer token.

    Token must be included in Authorization header for protected routes.
    """
    data = request.get_json(silent=True) or {}
    email = data.get("email")
    password = data.get("password")

    if not isinstance(email, str) or not isinstance(password, str) or not email or not password:
        raise ValidationFailed("email and password required")

    token, user = auth_service.login(email.strip(), password)

    return jsonify({
        "token": token,
        "tokenType": "Bearer",
        "user": user.to_dict(),
        "message": "Login successful",
    }), 200


@auth_bp.post("/logout")
def logout_route():
    """
    Revoke the presented token.

    Idempotent: an already revoked or expired token still gets an
    acknowledgement. Only a missing header is an error.
    """
    token = bearer_token()
    if not token:
        raise Unauthenticated("No valid token provided")

    auth_service.logout(token)
    return jsonify({"status": "success", "message": "Logged out successfully"}), 200


@auth_bp.get("/me")
@require_auth
def me_route():
    return jsonify(g.current_user.to_dict())
