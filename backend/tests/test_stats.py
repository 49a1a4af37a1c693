"""Daily and per-product movement statistics."""

import datetime as dt

from schemas.movement import MovementRecord
from schemas.product import ProductRecord
from services.stats import daily_movements, movements_per_product, previous_month


def _movement(kind, quantity, day, product_id=1):
    return MovementRecord(product_id=product_id, kind=kind, quantity=quantity, date=day)


def test_previous_month():
    assert previous_month(dt.date(2024, 3, 15)) == (2024, 2, 29)
    assert previous_month(dt.date(2023, 3, 1)) == (2023, 2, 28)
    assert previous_month(dt.date(2024, 1, 31)) == (2023, 12, 31)


def test_daily_buckets_previous_month():
    movements = [
        _movement("INBOUND", 5, dt.date(2024, 2, 1)),
        _movement("INBOUND", 2, dt.date(2024, 2, 1)),
        _movement("OUTBOUND", 3, dt.date(2024, 2, 29)),
        _movement("CARICO", 4, dt.date(2024, 2, 10)),
        # outside the reported month
        _movement("INBOUND", 100, dt.date(2024, 3, 1)),
        _movement("INBOUND", 100, dt.date(2023, 2, 1)),
    ]

    stats = daily_movements(movements, dt.date(2024, 3, 15))

    assert (stats.year, stats.month) == (2024, 2)
    assert stats.labels == [str(d) for d in range(1, 30)]
    assert stats.inbound[0] == 7
    assert stats.inbound[9] == 4
    assert stats.outbound[28] == 3
    assert sum(stats.inbound) == 11
    assert sum(stats.outbound) == 3


def test_daily_ignores_unknown_kinds():
    stats = daily_movements([_movement("TRANSFER", 9, dt.date(2024, 2, 3))], dt.date(2024, 3, 1))
    assert sum(stats.inbound) == sum(stats.outbound) == 0


def test_daily_empty():
    stats = daily_movements([], dt.date(2024, 1, 10))
    assert (stats.year, stats.month) == (2023, 12)
    assert stats.inbound == [0] * 31
    assert stats.outbound == [0] * 31


def test_per_product_totals_follow_product_order():
    products = [ProductRecord(id=2, name="Sand"), ProductRecord(id=1, name="Brick"), ProductRecord(id=3, name="Lime")]
    movements = [
        _movement("INBOUND", 10, dt.date(2024, 1, 1), product_id=1),
        _movement("OUTBOUND", 4, dt.date(2024, 1, 2), product_id=1),
        _movement("SCARICO", 1, dt.date(2024, 1, 3), product_id=2),
        # no such product
        _movement("INBOUND", 50, dt.date(2024, 1, 3), product_id=9),
    ]

    stats = movements_per_product(products, movements)

    assert stats.labels == ["Sand", "Brick", "Lime"]
    assert stats.inbound == [0, 10, 0]
    assert stats.outbound == [1, 4, 0]


def test_per_product_without_products():
    stats = movements_per_product([], [_movement("INBOUND", 1, dt.date(2024, 1, 1))])
    assert stats.labels == stats.inbound == stats.outbound == []
