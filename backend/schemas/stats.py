# backend/schemas/stats.py
from typing import List

from pydantic import BaseModel


# Two aligned series (inbound/outbound) over the same labels
class MovementSeries(BaseModel):
    labels: List[str]
    inbound: List[int]
    outbound: List[int]


# One bucket per day of the month: labels "1".."N"
class DailyMovementStats(MovementSeries):
    year: int
    month: int


# One bucket per product, labels are product names in input order
class ProductMovementStats(MovementSeries):
    pass
