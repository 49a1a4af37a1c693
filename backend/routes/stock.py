# backend/routes/stock.py
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from database import Database, get_database
from repositories.movements import MovementRepository
from repositories.products import ProductRepository
from schemas.movement import MovementCreate, MovementOut, MovementPage, MovementRecord
from schemas.product import ProductOut
from services.stock import StockService
from utils.audit import write_log

router = APIRouter(tags=["Stock"])


class MovementResult(BaseModel):
    movement: MovementOut
    product: ProductOut


@router.get("/", response_model=MovementPage)
def list_movements(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    database: Database = Depends(get_database),
):
    movements = MovementRepository(database).select()
    names = {p.id: p.name for p in ProductRepository(database).select()}

    total = len(movements)
    start = (page - 1) * page_size
    items = [
        MovementOut(**m.model_dump(), product_name=names.get(m.product_id))
        for m in movements[start:start + page_size]
    ]
    return {"items": items, "total": total, "page": page, "page_size": page_size}


@router.post("/movements", response_model=MovementResult, status_code=201)
def record_movement(payload: MovementCreate, database: Database = Depends(get_database)):
    product = ProductRepository(database).get(payload.product_id)

    movement = MovementRecord(
        product_id=payload.product_id,
        kind=payload.kind.value,
        quantity=payload.quantity,
        note=payload.note,
    )
    if payload.date is not None:
        movement.date = payload.date

    StockService(database).record_movement(product, movement)

    write_log(
        database, action="STOCK_MOVEMENT", resource="stock", status="SUCCESS",
        meta={"id": movement.id, "product_id": product.id, "kind": movement.kind, "quantity": movement.quantity},
    )
    return {
        "movement": MovementOut(**movement.model_dump(), product_name=product.name),
        "product": ProductOut.from_record(product),
    }
