# backend/services/stock.py
"""Stock-adjustment protocol.

A movement never lives without the matching change to its product's
quantity, so both writes run in one transaction:

* ``record_movement``: movement insert, then product update
* ``create_product``: product insert, then the synthetic "initial stock"
  movement carrying the starting quantity

When a step fails the transaction is rolled back. A failure of the first
step is raised as is; a failure of the second one is wrapped in a
``StockAdjustmentError`` naming that step. The in-memory product is only
touched after the commit, so retrying a failed call never applies the delta
twice.
"""
import datetime as dt
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from database import Database
from errors import RepositoryError, StockAdjustmentError, StorageError, ValidationError
from repositories.movements import MovementRepository
from repositories.products import ProductRepository
from schemas.movement import INITIAL_STOCK_NOTE, MovementKind, MovementRecord
from schemas.product import ProductRecord

logger = logging.getLogger(__name__)


def movement_delta(kind, quantity: int) -> int:
    """Signed stock change of a movement: +quantity inbound, -quantity outbound."""
    resolved = MovementKind.from_token(kind)
    if resolved is None:
        raise ValidationError(f"Unknown movement kind '{kind}'")
    return quantity if resolved is MovementKind.INBOUND else -quantity


def apply_movement(product: ProductRecord, movement: MovementRecord) -> ProductRecord:
    """Copy of ``product`` with the movement's delta applied."""
    new_quantity = product.quantity + movement_delta(movement.kind, movement.quantity)
    return product.model_copy(update={"quantity": new_quantity})


class StockService:

    def __init__(
        self,
        database: Database,
        products: Optional[ProductRepository] = None,
        movements: Optional[MovementRepository] = None,
    ):
        self.database = database
        self.products = products or ProductRepository(database)
        self.movements = movements or MovementRepository(database)

    def record_movement(self, product: ProductRecord, movement: MovementRecord) -> MovementRecord:
        if product is None or product.id <= 0:
            raise ValidationError("The movement needs a stored product")
        if movement is None:
            raise ValidationError("Movement is missing")
        if movement.product_id is None or movement.product_id <= 0:
            movement.product_id = product.id
        elif movement.product_id != product.id:
            raise ValidationError(
                f"Movement refers to product {movement.product_id}, not {product.id}"
            )

        # Everything that can be checked without storage is checked up front
        self.movements.verify(movement)
        updated = apply_movement(product, movement)
        if updated.quantity < 0:
            raise ValidationError(
                f"Stock of '{product.name}' cannot go below zero "
                f"(available {product.quantity}, requested {movement.quantity})"
            )
        self.products.verify(updated)

        step = "movement_insert"
        try:
            with self.database.transaction() as db:
                self.movements.insert(movement, db=db)
                step = "product_update"
                self.products.update(updated, db=db)
        except RepositoryError as exc:
            movement.id = -1
            logger.error("Stock movement for product %s failed at %s: %s", product.id, step, exc)
            if step == "movement_insert":
                raise
            raise StockAdjustmentError(step, exc) from exc
        except SQLAlchemyError as exc:
            movement.id = -1
            raise StockAdjustmentError("commit", StorageError(f"In commit: {exc}")) from exc

        product.quantity = updated.quantity
        logger.info(
            "Product %s stock now %s after %s of %s",
            product.id, product.quantity, movement.kind, movement.quantity,
        )
        return movement

    def create_product(self, product: ProductRecord) -> int:
        """Insert a new product together with its initial-stock movement."""
        self.products.verify(product)

        step = "product_insert"
        try:
            with self.database.transaction() as db:
                product_id = self.products.insert(product, db=db)
                step = "initial_movement_insert"
                initial = MovementRecord(
                    product_id=product_id,
                    kind=MovementKind.INBOUND.value,
                    quantity=product.quantity,
                    date=dt.date.today(),
                    note=INITIAL_STOCK_NOTE,
                )
                self.movements.insert(initial, db=db)
        except RepositoryError as exc:
            # The id written back by the insert belongs to a rolled-back row
            product.id = -1
            logger.error("Creating product '%s' failed at %s: %s", product.name, step, exc)
            if step == "product_insert":
                raise
            raise StockAdjustmentError(step, exc) from exc
        except SQLAlchemyError as exc:
            product.id = -1
            raise StockAdjustmentError("commit", StorageError(f"In commit: {exc}")) from exc

        logger.info("Product '%s' created with id %s", product.name, product_id)
        return product_id
