"""
Concurrency tests.

Runs competing writers on real threads against a file-backed SQLite
database (an in-memory database is per-connection and cannot be shared).
Verifies:
- Two orders racing for the same stock never oversell
- Two status changes racing on one order never both apply
"""

import threading

import pytest

from conftest import TEST_CONFIG, make_item, make_user
from plantmarket import create_app
from plantmarket.errors import InsufficientStock, InvalidTransition
from plantmarket.extensions import db
from plantmarket.models import InventoryItem, Order, OrderStatus, Role, User
from plantmarket.services import order_service, payment_service
from plantmarket.services.order_service import OrderLine


@pytest.fixture
def file_app(tmp_path):
    app = create_app({
        **TEST_CONFIG,
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'concurrency.db'}",
    })
    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def seeded(file_app):
    """Customer, seller and a 10-unit item; returns their ids."""
    with file_app.app_context():
        customer = make_user(db.session, email="racer@example.com", role=Role.CUSTOMER)
        seller = make_user(db.session, email="shop@example.com", role=Role.SELLER, shop_name="Race Shop")
        item = make_item(db.session, seller, quantity=10)
        ids = {"customer": customer.id, "seller": seller.id, "item": item.id}
        db.session.remove()
    return ids


def run_concurrently(app, *targets):
    """Start one thread per target inside its own app context; collect results or exceptions."""
    results = []
    lock = threading.Lock()
    barrier = threading.Barrier(len(targets))

    def worker(target):
        with app.app_context():
            try:
                barrier.wait()
                outcome = target()
            except Exception as exc:
                outcome = exc
            finally:
                db.session.remove()
            with lock:
                results.append(outcome)

    threads = [threading.Thread(target=worker, args=(target,)) for target in targets]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return results


class TestConcurrentOrders:
    def test_no_oversell(self, file_app, seeded):
        def place_six():
            customer = db.session.get(User, seeded["customer"])
            order = order_service.create_order(customer, seeded["seller"], [OrderLine(seeded["item"], 6)])
            return order.id

        results = run_concurrently(file_app, place_six, place_six)

        placed = [r for r in results if isinstance(r, int)]
        refused = [r for r in results if isinstance(r, InsufficientStock)]
        assert len(placed) == 1
        assert len(refused) == 1

        with file_app.app_context():
            assert db.session.get(InventoryItem, seeded["item"]).quantity == 4
            assert db.session.query(Order).count() == 1

    def test_many_small_orders_sum_to_stock(self, file_app, seeded):
        def place_one():
            customer = db.session.get(User, seeded["customer"])
            return order_service.create_order(customer, seeded["seller"], [OrderLine(seeded["item"], 1)]).id

        results = run_concurrently(file_app, *([place_one] * 12))

        placed = [r for r in results if isinstance(r, int)]
        assert len(placed) == 10
        assert all(isinstance(r, InsufficientStock) for r in results if not isinstance(r, int))

        with file_app.app_context():
            assert db.session.get(InventoryItem, seeded["item"]).quantity == 0


class TestConcurrentStatusChanges:
    def test_single_transition_wins(self, file_app, seeded):
        with file_app.app_context():
            customer = db.session.get(User, seeded["customer"])
            order = order_service.create_order(customer, seeded["seller"], [OrderLine(seeded["item"], 1)])
            payment_service.process_payment(customer, order.id, "Card")
            order_id = order.id
            db.session.remove()

        def ship():
            seller = db.session.get(User, seeded["seller"])
            return order_service.update_order_status(seller, order_id, OrderStatus.SHIPPED).status

        def cancel():
            seller = db.session.get(User, seeded["seller"])
            return order_service.update_order_status(seller, order_id, OrderStatus.CANCELLED).status

        results = run_concurrently(file_app, ship, cancel)

        applied = [r for r in results if isinstance(r, OrderStatus)]
        rejected = [r for r in results if isinstance(r, InvalidTransition)]
        assert len(applied) == 1
        assert len(rejected) == 1

        with file_app.app_context():
            assert db.session.get(Order, order_id).status == applied[0]

    def test_double_payment_single_winner(self, file_app, seeded):
        with file_app.app_context():
            customer = db.session.get(User, seeded["customer"])
            order_id = order_service.create_order(customer, seeded["seller"], [OrderLine(seeded["item"], 2)]).id
            db.session.remove()

        def pay():
            customer = db.session.get(User, seeded["customer"])
            return payment_service.process_payment(customer, order_id, "Card").id

        results = run_concurrently(file_app, pay, pay)

        assert sum(isinstance(r, int) for r in results) == 1
        assert sum(isinstance(r, InvalidTransition) for r in results) == 1
