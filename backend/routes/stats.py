# backend/routes/stats.py

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from database import Database, get_database
from repositories.movements import MovementRepository
from repositories.products import ProductRepository
from schemas.stats import DailyMovementStats, ProductMovementStats
from services.stats import daily_movements, movements_per_product

router = APIRouter(
    prefix="/stats",
    tags=["Stats"]
)


# === Inbound/outbound per day of the previous month ===

@router.get("/daily", response_model=DailyMovementStats)
def get_daily_stats(
    reference: Optional[date] = Query(None, description="Reference date, the month before it is reported"),
    database: Database = Depends(get_database),
):
    movements = MovementRepository(database).select()
    return daily_movements(movements, reference)


# === Inbound/outbound totals per product ===

@router.get("/products", response_model=ProductMovementStats)
def get_product_stats(database: Database = Depends(get_database)):
    products = ProductRepository(database).select()
    movements = MovementRepository(database).select()
    return movements_per_product(products, movements)
