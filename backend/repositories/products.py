# ==============================================================================
# PRODUCT REPOSITORY
# ==============================================================================
# Filter prototypes are compiled into a parameterised SELECT on ``products``.
# Clause order is fixed: name, description, quantity, critical-only,
# min_stock, purchase_price, sale_price.
# ==============================================================================

import logging
from typing import List, Optional, Union

from sqlalchemy import delete as sql_delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from errors import DuplicateError, NotFoundError, StorageError, ValidationError
from models.movement import Movement
from models.product import Product
from repositories.base import Repository
from schemas.product import ProductFilter, ProductRecord

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "/"


def _prefix_pattern(value: str) -> str:
    escaped = (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return escaped + "%"


def compile_product_filter(criteria: Optional[ProductFilter] = None, critical: bool = False) -> Select:
    """Build the SELECT for a product search, starting from "match everything"."""
    criteria = criteria or ProductFilter()
    stmt = select(Product)

    if criteria.name is not None:
        stmt = stmt.where(Product.name.like(_prefix_pattern(criteria.name), escape=LIKE_ESCAPE))
    if criteria.description is not None:
        stmt = stmt.where(Product.description.like(_prefix_pattern(criteria.description), escape=LIKE_ESCAPE))
    if criteria.quantity is not None:
        stmt = stmt.where(Product.quantity == criteria.quantity)
    if critical:
        stmt = stmt.where(Product.is_critical)
    if criteria.min_stock is not None:
        stmt = stmt.where(Product.min_stock == criteria.min_stock)
    if criteria.purchase_price is not None:
        stmt = stmt.where(Product.purchase_price == criteria.purchase_price)
    if criteria.sale_price is not None:
        stmt = stmt.where(Product.sale_price == criteria.sale_price)

    return stmt


class ProductRepository(Repository[ProductRecord]):

    def select(
        self,
        prototype: Union[ProductRecord, ProductFilter, None] = None,
        flag: bool = False,
    ) -> List[ProductRecord]:
        """Products matching the prototype, ordered by id. ``flag`` keeps only critical ones."""
        if isinstance(prototype, ProductFilter):
            criteria = prototype
        else:
            criteria = ProductFilter.from_prototype(prototype)

        stmt = compile_product_filter(criteria, critical=flag).order_by(Product.id)
        logger.info("SQL: %s | params=%s", stmt, stmt.compile().params)

        with self._session("select products") as db:
            rows = db.scalars(stmt).all()
            return [ProductRecord.model_validate(row) for row in rows]

    def get(self, product_id: int) -> ProductRecord:
        with self._session("get product") as db:
            row = db.get(Product, product_id)
            if row is None:
                raise NotFoundError(f"Product {product_id} not found")
            return ProductRecord.model_validate(row)

    @staticmethod
    def verify(product: Optional[ProductRecord]) -> None:
        """Domain rules checked before any write."""
        if product is None:
            raise ValidationError("Product is missing")
        if (
            product.quantity < 0
            or product.min_stock < 0
            or product.purchase_price < 0
            or product.sale_price < 0
        ):
            raise ValidationError("Numeric fields (quantity, minimum stock, prices) cannot be negative")
        if product.name is None or product.description is None:
            raise ValidationError("Product name and description cannot be null")

    def insert(self, product: ProductRecord, db: Optional[Session] = None) -> int:
        self.verify(product)

        with self._session("insert product", db) as session:
            self._ensure_unique_name(session, product.name)
            row = Product(
                name=product.name,
                description=product.description,
                quantity=product.quantity,
                min_stock=product.min_stock,
                purchase_price=product.purchase_price,
                sale_price=product.sale_price,
            )
            session.add(row)
            self._flush(session, product.name)
            new_id = row.id if row.id is not None else -1

        product.id = new_id
        logger.info("Product '%s' inserted with id %s", product.name, new_id)
        return new_id

    def update(self, product: ProductRecord, db: Optional[Session] = None) -> None:
        self.verify(product)
        if product.id is None or product.id <= 0:
            raise ValidationError("In update: the product id is missing")

        with self._session("update product", db) as session:
            row = session.get(Product, product.id)
            if row is None:
                raise NotFoundError(f"Product {product.id} not found")
            self._ensure_unique_name(session, product.name, exclude_id=product.id)

            row.name = product.name
            row.description = product.description
            row.quantity = product.quantity
            row.min_stock = product.min_stock
            row.purchase_price = product.purchase_price
            row.sale_price = product.sale_price
            self._flush(session, product.name)

        logger.info("Product %s updated (quantity=%s)", product.id, product.quantity)

    def delete(self, product: ProductRecord, db: Optional[Session] = None) -> None:
        """Remove the product's movements, then the product. Missing rows are fine."""
        if product is None or product.id is None or product.id <= 0:
            raise ValidationError("In delete: the product id is missing")

        with self._session("delete product", db) as session:
            moved = session.execute(
                sql_delete(Movement).where(Movement.product_id == product.id)
            ).rowcount
            removed = session.execute(
                sql_delete(Product).where(Product.id == product.id)
            ).rowcount

        logger.info("Product %s deleted (%s rows) with %s movements", product.id, removed, moved)

    @staticmethod
    def _ensure_unique_name(session: Session, name: str, exclude_id: Optional[int] = None) -> None:
        query = select(Product.id).where(Product.name == name)
        if exclude_id is not None:
            query = query.where(Product.id != exclude_id)
        if session.scalar(query) is not None:
            raise DuplicateError(f"The name '{name}' is already in use")

    @staticmethod
    def _flush(session: Session, name: str) -> None:
        try:
            session.flush()
        except IntegrityError as exc:
            reason = str(exc.orig).lower()
            if "unique" in reason or "duplicate" in reason:
                raise DuplicateError(f"The name '{name}' is already in use") from exc
            raise StorageError(f"In flush: {exc.orig}") from exc
