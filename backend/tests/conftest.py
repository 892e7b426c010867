"""
Pytest fixtures for plant marketplace backend tests.

Provides test database setup, users of every role and application status,
inventory rows, and token/header helpers.
"""

import pytest

from plantmarket import create_app
from plantmarket.extensions import db
from plantmarket.models import ApplicationStatus, InventoryItem, Role, User
from plantmarket.services import token_service
from plantmarket.services.auth_service import hash_password


PASSWORD = "secret123"

TEST_CONFIG = {
    'TESTING': True,
    'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
    'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    'JWT_SECRET_KEY': 'test-jwt-secret',
    'BCRYPT_ROUNDS': 4,
}


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app(TEST_CONFIG)

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


def make_user(
    session,
    *,
    email: str,
    role: Role,
    name: str = "Test User",
    application_status: ApplicationStatus | None = ApplicationStatus.APPROVED,
    is_active: bool = True,
    shop_name: str | None = None,
) -> User:
    user = User(
        name=name,
        email=email,
        password_hash=hash_password(PASSWORD),
        role=role,
        application_status=application_status,
        is_active=is_active,
        shop_name=shop_name,
        phone_number="555-0100",
        address="1 Garden Lane",
    )
    session.add(user)
    session.commit()
    return user


def make_item(session, seller: User, *, name="Monstera", price_cents=1250, quantity=10, threshold=2) -> InventoryItem:
    item = InventoryItem(
        seller_id=seller.id,
        name=name,
        type="PLANT",
        price_cents=price_cents,
        quantity=quantity,
        low_stock_threshold=threshold,
        description="Test item",
    )
    session.add(item)
    session.commit()
    return item


@pytest.fixture(scope='function')
def admin(db_session):
    return make_user(db_session, email="admin@example.com", role=Role.ADMIN, name="Admin")


@pytest.fixture(scope='function')
def customer(db_session):
    return make_user(db_session, email="customer@example.com", role=Role.CUSTOMER, name="Casey Customer")


@pytest.fixture(scope='function')
def other_customer(db_session):
    return make_user(db_session, email="other@example.com", role=Role.CUSTOMER, name="Olive Other")


@pytest.fixture(scope='function')
def seller(db_session):
    """APPROVED, active seller."""
    return make_user(
        db_session, email="seller@example.com", role=Role.SELLER,
        name="Sam Seller", shop_name="Green Corner",
    )


@pytest.fixture(scope='function')
def other_seller(db_session):
    return make_user(
        db_session, email="seller2@example.com", role=Role.SELLER,
        name="Sasha Seller", shop_name="Fern Hut",
    )


@pytest.fixture(scope='function')
def pending_seller(db_session):
    return make_user(
        db_session, email="pending@example.com", role=Role.SELLER,
        name="Pat Pending", shop_name="Not Yet",
        application_status=ApplicationStatus.PENDING,
    )


@pytest.fixture(scope='function')
def rejected_seller(db_session):
    return make_user(
        db_session, email="rejected@example.com", role=Role.SELLER,
        name="Rory Rejected", shop_name="Never",
        application_status=ApplicationStatus.REJECTED,
    )


@pytest.fixture(scope='function')
def item(db_session, seller):
    """Seller's item: 12.50 each, 10 on hand, low stock at 2."""
    return make_item(db_session, seller)


@pytest.fixture(scope='function')
def other_item(db_session, other_seller):
    return make_item(db_session, other_seller, name="Fern", price_cents=800, quantity=5)


def token_for(user: User) -> str:
    """Mint a bearer token for ``user`` (needs an app context)."""
    return token_service.mint(user.email, user.id, user.role)


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


def headers_for(user: User) -> dict:
    return auth_headers(token_for(user))


def get_auth_token(client, email: str, password: str = PASSWORD) -> str:
    """Helper to get auth token for a user through the login route."""
    response = client.post('/api/auth/login', json={
        'email': email,
        'password': password
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


@pytest.fixture(scope='function')
def admin_headers(admin):
    return headers_for(admin)


@pytest.fixture(scope='function')
def customer_headers(customer):
    return headers_for(customer)


@pytest.fixture(scope='function')
def seller_headers(seller):
    return headers_for(seller)
