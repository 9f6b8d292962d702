from __future__ import annotations

from sqlalchemy.orm import Session

from app.models.orders import Order, OrderItem, Shipment


def create_order(db: Session, *, payload: dict) -> Order:
    order = Order(**payload)
    db.add(order)
    db.commit()
    db.refresh(order)
    return order


def create_order_items(db: Session, *, order_id: int, items: list[dict]) -> list[OrderItem]:
    # One batch insert; either every line lands or none do.
    rows = [OrderItem(order_id=order_id, **item) for item in items]
    db.add_all(rows)
    db.commit()
    for row in rows:
        db.refresh(row)
    return rows


def create_shipment(db: Session, *, order_id: int, status: str = "pending") -> Shipment:
    shipment = Shipment(order_id=order_id, status=status)
    db.add(shipment)
    db.commit()
    db.refresh(shipment)
    return shipment


def get_order(db: Session, *, order_id: int) -> Order | None:
    return db.query(Order).filter(Order.id == order_id).first()


def get_order_by_number(db: Session, *, order_number: str) -> Order | None:
    return db.query(Order).filter(Order.order_number == order_number).first()


def get_shipment_for_order(db: Session, *, order_id: int) -> Shipment | None:
    return db.query(Shipment).filter(Shipment.order_id == order_id).first()
