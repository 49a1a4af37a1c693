# backend/routes/export.py
from datetime import date

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from database import Database, get_database
from repositories.movements import MovementRepository
from repositories.products import ProductRepository
from utils.export import movements_to_csv, products_to_csv

router = APIRouter(prefix="/export", tags=["Export"])


def _csv_response(content: str, prefix: str) -> Response:
    filename = f"{prefix}_{date.today().strftime('%Y-%m-%d')}.csv"
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/products")
def export_products(database: Database = Depends(get_database)):
    products = ProductRepository(database).select()
    return _csv_response(products_to_csv(products), "inventory")


@router.get("/movements")
def export_movements(database: Database = Depends(get_database)):
    products = ProductRepository(database).select()
    movements = MovementRepository(database).select()
    return _csv_response(movements_to_csv(movements, products), "movements")
