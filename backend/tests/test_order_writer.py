import logging
import re
from datetime import datetime
from decimal import Decimal

import pytest

from tests.factories import db_failure, setup_db

import app.core.orders as orders_module
from app.core.errors import OrderItemsWriteError, OrderPlacementError
from app.core.orders import generate_order_number, write_order
from app.crud.orders import get_order, get_order_by_number, get_shipment_for_order
from app.models.orders import Order, OrderItem


def _header(order_number="ORD-20240501-ABC123"):
    return {
        "order_number": order_number,
        "user_id": None,
        "customer_name": "Asha Rao",
        "customer_phone": "+919800000000",
        "shipping_address_line1": "12 MG Road",
        "shipping_city": "Bengaluru",
        "shipping_state": "Karnataka",
        "shipping_zip": "560001",
        "subtotal": Decimal("800.00"),
        "total_amount": Decimal("800.00"),
        "payment_method": "cod",
    }


def _items():
    return [
        {
            "product_id": "prod-a",
            "product_name": "Cotton Kurta",
            "quantity": 1,
            "unit_price": Decimal("500.00"),
            "total_price": Decimal("500.00"),
        },
        {
            "product_id": "prod-b",
            "product_name": "Linen Dupatta",
            "quantity": 2,
            "unit_price": Decimal("150.00"),
            "total_price": Decimal("300.00"),
        },
    ]


@pytest.fixture
def checkout_logs(caplog):
    logger = logging.getLogger("checkout")
    logger.addHandler(caplog.handler)
    caplog.set_level(logging.INFO, logger="checkout")
    yield caplog
    logger.removeHandler(caplog.handler)


def test_order_number_format():
    number = generate_order_number(datetime(2024, 5, 1, 10, 30))
    assert re.fullmatch(r"ORD-20240501-[0-9A-F]{6}", number)


def test_order_numbers_are_unique_per_call():
    now = datetime(2024, 5, 1)
    assert len({generate_order_number(now) for _ in range(50)}) == 50


def test_write_order_creates_header_items_and_pending_shipment(tmp_path):
    SessionLocal = setup_db(tmp_path)
    with SessionLocal() as db:
        written = write_order(db, header=_header(), items=_items())

        order = get_order_by_number(db, order_number="ORD-20240501-ABC123")
        assert order.id == written.order.id
        assert order.status == "pending"
        assert order.payment_status == "pending"
        assert order.shipping_country == "India"
        assert sorted(i.product_id for i in order.items) == ["prod-a", "prod-b"]

        shipment = get_shipment_for_order(db, order_id=order.id)
        assert shipment is not None
        assert shipment.status == "pending"
        assert written.shipment.id == shipment.id


def test_header_failure_writes_nothing(tmp_path, monkeypatch, checkout_logs):
    SessionLocal = setup_db(tmp_path)
    monkeypatch.setattr(orders_module, "create_order", db_failure)
    with SessionLocal() as db:
        with pytest.raises(OrderPlacementError) as excinfo:
            write_order(db, header=_header(), items=_items())
        assert excinfo.value.code == "order_not_placed"
        assert db.query(Order).count() == 0
        assert db.query(OrderItem).count() == 0
    assert "checkout.order_failed" in [r.getMessage() for r in checkout_logs.records]


def test_items_failure_leaves_header_and_flags_reconciliation(tmp_path, monkeypatch, checkout_logs):
    SessionLocal = setup_db(tmp_path)
    monkeypatch.setattr(orders_module, "create_order_items", db_failure)
    with SessionLocal() as db:
        with pytest.raises(OrderItemsWriteError) as excinfo:
            write_order(db, header=_header(), items=_items())

        err = excinfo.value
        assert err.order_number == "ORD-20240501-ABC123"
        assert err.to_payload()["order_number"] == "ORD-20240501-ABC123"
        order = get_order(db, order_id=err.order_id)
        assert order is not None
        assert order.items == []
        # No shipment is created for an order without items.
        assert get_shipment_for_order(db, order_id=order.id) is None

    records = [r for r in checkout_logs.records if r.getMessage() == "checkout.order_items_failed"]
    assert len(records) == 1
    assert records[0].needs_reconciliation is True
    assert records[0].levelno == logging.ERROR


def test_shipment_failure_is_logged_not_raised(tmp_path, monkeypatch, checkout_logs):
    SessionLocal = setup_db(tmp_path)
    monkeypatch.setattr(orders_module, "create_shipment", db_failure)
    with SessionLocal() as db:
        written = write_order(db, header=_header(), items=_items())
        assert written.shipment is None
        order = get_order(db, order_id=written.order.id)
        assert len(order.items) == 2

    messages = [r.getMessage() for r in checkout_logs.records]
    assert "checkout.shipment_failed" in messages
    assert "checkout.order_created" in messages


def test_order_number_collision_retries_with_a_fresh_number(tmp_path, monkeypatch, checkout_logs):
    SessionLocal = setup_db(tmp_path)
    monkeypatch.setattr(orders_module, "generate_order_number", lambda now=None: "ORD-20240501-FFFFFF")
    with SessionLocal() as db:
        first = write_order(db, header=_header(), items=_items())
        second = write_order(db, header=_header(), items=_items())

        assert first.order.order_number == "ORD-20240501-ABC123"
        assert second.order.order_number == "ORD-20240501-FFFFFF"
        assert db.query(Order).count() == 2
        assert len(get_order(db, order_id=second.order.id).items) == 2

    records = [r for r in checkout_logs.records if r.getMessage() == "checkout.order_number_collision"]
    assert len(records) == 1
    assert records[0].retry_order_number == "ORD-20240501-FFFFFF"


def test_repeated_order_number_collision_rejects_checkout(tmp_path, monkeypatch, checkout_logs):
    SessionLocal = setup_db(tmp_path)
    monkeypatch.setattr(orders_module, "generate_order_number", lambda now=None: "ORD-20240501-ABC123")
    with SessionLocal() as db:
        write_order(db, header=_header(), items=_items())
        with pytest.raises(OrderPlacementError):
            write_order(db, header=_header(), items=_items())
        assert db.query(Order).count() == 1

    assert "checkout.order_failed" in [r.getMessage() for r in checkout_logs.records]
