# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/plantmarket/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap:
# - python -m flask system init
#   Idempotent bootstrap: creates tables and the default admin account.
#
# User inspection/bootstrap:
# - python -m flask users list [--role seller]
#   List users with role, application status and active flag.
# - python -m flask users create-admin --name "Ops" --email ops@plantmarket.local --password "secret1"
#   Create an ADMIN account (prompts if options are omitted).
#
# Maintenance:
# - python -m flask tokens cleanup
#   Delete revocation rows whose tokens have already expired.

import click
from flask.cli import with_appcontext

from .errors import ServiceError
from .extensions import db
from .models import ApplicationStatus, Role, User
from .services import token_service, user_service
from .services.auth_service import hash_password


DEFAULT_ADMIN_NAME = "Administrator"
DEFAULT_ADMIN_EMAIL = "admin@plantmarket.local"
DEFAULT_ADMIN_PASSWORD = "Password123!"


def _create_admin(name: str, email: str, password: str) -> User:
    return user_service.create_user(
        name=name,
        email=email,
        password_hash=hash_password(password),
        role=Role.ADMIN,
        application_status=ApplicationStatus.APPROVED,
    )


@click.group('system')
def system_group():
    """System bootstrap commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """
    Initialize the marketplace: schema and a default admin.

    Creates:
    - All tables (no-op for existing ones)
    - Admin: admin@plantmarket.local / Password123! (only if no admin exists)

    SECURITY: Change the admin password immediately in production!
    """
    click.echo("START Initializing plant marketplace...")

    db.create_all()
    click.echo("PASS Database tables ready")

    if user_service.count_by_role(Role.ADMIN):
        click.echo("WARN  An admin account already exists, skipping...")
    else:
        admin = _create_admin(DEFAULT_ADMIN_NAME, DEFAULT_ADMIN_EMAIL, DEFAULT_ADMIN_PASSWORD)
        click.echo(f"PASS Created admin: {admin.email} (ID: {admin.id})")
        click.echo("\nDefault Credentials (CHANGE IN PRODUCTION!):")
        click.echo(f"   admin -> {DEFAULT_ADMIN_EMAIL} / {DEFAULT_ADMIN_PASSWORD}")

    click.echo("DONE Plant marketplace initialized")


@click.group('users')
def users_group():
    """User inspection and bootstrap commands."""


@users_group.command('create-admin')
@click.option('--name', prompt=True, help='Display name')
@click.option('--email', prompt=True, help='Email address')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@with_appcontext
def create_admin_cli(name, email, password):
    """
    Create an ADMIN account.

    Admins cannot self-register through the API; this is the only way in.
    """
    try:
        admin = _create_admin(name.strip(), email.strip(), password)
    except ServiceError as e:
        click.echo(f"FAIL Failed to create admin: {e.message}")
        return

    click.echo(f"PASS Created admin: {admin.email} (ID: {admin.id})")
    click.echo("SECURITY Password securely hashed with bcrypt")


@users_group.command('list')
@click.option('--role', type=click.Choice(['customer', 'seller', 'admin']), help='Only this role')
@with_appcontext
def list_users(role):
    """List users with role, application status and active flag."""
    query = db.session.query(User).order_by(User.id)
    if role:
        query = query.filter(User.role == Role(role.upper()))
    users = query.all()

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*90)
    click.echo(f"{'ID':<5} {'Email':<35} {'Role':<10} {'Application':<12} {'Active':<8} {'Shop'}")
    click.echo("="*90)
    for user in users:
        status = user.application_status.value if user.application_status else '-'
        active_str = "yes" if user.is_active else "no"
        click.echo(
            f"{user.id:<5} {user.email:<35} {user.role.value:<10} {status:<12} {active_str:<8} {user.shop_name or '-'}"
        )
    click.echo("="*90 + "\n")


@click.group('tokens')
def tokens_group():
    """Bearer token maintenance commands."""


@tokens_group.command('cleanup')
@with_appcontext
def cleanup_tokens_cli():
    """Delete revocation rows for tokens that have already expired."""
    deleted = token_service.cleanup_expired_revocations()
    click.echo(f"PASS Deleted {deleted} expired token revocations")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(tokens_group)
