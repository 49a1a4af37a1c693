# backend/services/stats.py
"""Movement statistics over already-loaded lists. No storage access here."""
from datetime import date, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple

from schemas.movement import MovementKind, MovementRecord
from schemas.product import ProductRecord
from schemas.stats import DailyMovementStats, ProductMovementStats


def previous_month(reference: date) -> Tuple[int, int, int]:
    """(year, month, number of days) of the month before ``reference``."""
    last_day = reference.replace(day=1) - timedelta(days=1)
    return last_day.year, last_day.month, last_day.day


def daily_movements(
    movements: Iterable[MovementRecord],
    reference: Optional[date] = None,
) -> DailyMovementStats:
    """Inbound/outbound quantities per day of the month preceding ``reference``."""
    reference = reference or date.today()
    year, month, days = previous_month(reference)

    inbound = [0] * days
    outbound = [0] * days

    for m in movements:
        if m.date is None or m.date.year != year or m.date.month != month:
            continue
        kind = MovementKind.from_token(m.kind)
        day = m.date.day - 1
        if kind is MovementKind.INBOUND:
            inbound[day] += m.quantity
        elif kind is MovementKind.OUTBOUND:
            outbound[day] += m.quantity

    return DailyMovementStats(
        labels=[str(d) for d in range(1, days + 1)],
        inbound=inbound,
        outbound=outbound,
        year=year,
        month=month,
    )


def movements_per_product(
    products: Sequence[ProductRecord],
    movements: Iterable[MovementRecord],
) -> ProductMovementStats:
    """Total inbound/outbound quantities per product, in the order of ``products``."""
    position = {}
    for index, p in enumerate(products):
        position.setdefault(p.id, []).append(index)

    inbound: List[int] = [0] * len(products)
    outbound: List[int] = [0] * len(products)

    for m in movements:
        kind = MovementKind.from_token(m.kind)
        for index in position.get(m.product_id, ()):
            if kind is MovementKind.INBOUND:
                inbound[index] += m.quantity
            elif kind is MovementKind.OUTBOUND:
                outbound[index] += m.quantity

    return ProductMovementStats(
        labels=[p.name or "" for p in products],
        inbound=inbound,
        outbound=outbound,
    )
