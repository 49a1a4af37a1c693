# backend/routes/products.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from database import Database, get_database
from errors import DuplicateError
from repositories.products import ProductRepository
from schemas.product import ProductCreate, ProductList, ProductOut, ProductRecord, ProductUpdate
from services.stock import StockService
from utils.audit import write_log

router = APIRouter(tags=["Products"])
logger = logging.getLogger(__name__)


# =========================
# PRODUCT LIST / SEARCH
# =========================
@router.get("/products", response_model=ProductList)
def list_products(
    name: Optional[str] = Query(None, description="Name prefix"),
    description: Optional[str] = Query(None, description="Description prefix"),
    quantity: int = Query(-1, ge=-1),
    min_stock: int = Query(-1, ge=-1),
    purchase_price: float = Query(0.0, ge=0),
    sale_price: float = Query(0.0, ge=0),
    critical: bool = Query(False, description="Only products at or below minimum stock"),
    database: Database = Depends(get_database),
):
    prototype = ProductRecord.prototype(
        name=name or "", description=description or "",
        quantity=quantity, min_stock=min_stock,
        purchase_price=purchase_price, sale_price=sale_price,
    )
    items = ProductRepository(database).select(prototype, critical)
    return {"items": [ProductOut.from_record(p) for p in items], "total": len(items)}


# =========================
# SINGLE PRODUCT
# =========================
@router.get("/products/{product_id}", response_model=ProductOut)
def get_product(product_id: int, database: Database = Depends(get_database)):
    return ProductOut.from_record(ProductRepository(database).get(product_id))


# =========================
# NEW PRODUCT (+ initial stock movement)
# =========================
@router.post("/products", response_model=ProductOut, status_code=201)
def add_product(payload: ProductCreate, database: Database = Depends(get_database)):
    product = ProductRecord(**payload.model_dump())
    try:
        StockService(database).create_product(product)
    except DuplicateError:
        raise HTTPException(status_code=409, detail=f"The name '{product.name}' is already in the catalogue")

    write_log(
        database, action="PRODUCT_CREATE", resource="products",
        status="SUCCESS", meta={"id": product.id, "name": product.name},
    )
    return ProductOut.from_record(product)


# =========================
# UPDATE
# =========================
@router.put("/products/{product_id}", response_model=ProductOut)
def update_product(product_id: int, payload: ProductUpdate, database: Database = Depends(get_database)):
    product = ProductRecord(id=product_id, **payload.model_dump())
    try:
        ProductRepository(database).update(product)
    except DuplicateError:
        raise HTTPException(status_code=409, detail=f"The name '{product.name}' is already in the catalogue")

    write_log(database, action="PRODUCT_UPDATE", resource="products", status="SUCCESS", meta={"id": product_id})
    return ProductOut.from_record(product)


# =========================
# DELETE (movements first)
# =========================
@router.delete("/products/{product_id}")
def delete_product(product_id: int, database: Database = Depends(get_database)):
    # An absent product is already deleted
    ProductRepository(database).delete(ProductRecord(id=product_id))
    write_log(database, action="PRODUCT_DELETE", resource="products", status="SUCCESS", meta={"id": product_id})
    return {"detail": f"Product {product_id} deleted"}
