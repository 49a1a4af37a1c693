# ==============================================================================
# MOVEMENT REPOSITORY
# ==============================================================================
# Append-only ledger: insert and read. Updates and deletes are not part of
# the ledger's life cycle; movements disappear only with their product.
# ==============================================================================

import datetime as dt
import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from errors import NotFoundError, ValidationError
from models.movement import Movement
from models.product import Product
from repositories.base import Repository
from schemas.movement import MovementKind, MovementRecord, is_initial_stock_note

logger = logging.getLogger(__name__)


class MovementRepository(Repository[MovementRecord]):

    def select(self, prototype: Optional[MovementRecord] = None, flag: bool = False) -> List[MovementRecord]:
        """All movements, newest first. The prototype is not used for filtering."""
        stmt = select(Movement).order_by(Movement.date.desc(), Movement.id.desc())
        logger.info("SQL: %s", stmt)

        with self._session("select movements") as db:
            rows = db.scalars(stmt).all()
            return [MovementRecord.model_validate(row) for row in rows]

    def get(self, movement_id: int) -> MovementRecord:
        with self._session("get movement") as db:
            row = db.get(Movement, movement_id)
            if row is None:
                raise NotFoundError(f"Movement {movement_id} not found")
            return MovementRecord.model_validate(row)

    @staticmethod
    def verify(movement: Optional[MovementRecord]) -> None:
        if movement is None:
            raise ValidationError("Movement is missing")
        if movement.product_id is None or movement.product_id <= 0:
            raise ValidationError("Invalid product id")
        if not movement.kind:
            raise ValidationError("Movement kind cannot be empty")
        if MovementKind.from_token(movement.kind) is None:
            raise ValidationError(f"Unknown movement kind '{movement.kind}'")
        if movement.quantity < 0 or (
            movement.quantity == 0 and not is_initial_stock_note(movement.note)
        ):
            raise ValidationError("Movement quantity must be greater than zero")

    def insert(self, movement: MovementRecord, db: Optional[Session] = None) -> int:
        self.verify(movement)
        kind = MovementKind.from_token(movement.kind)

        with self._session("insert movement", db) as session:
            if session.get(Product, movement.product_id) is None:
                raise NotFoundError(f"Product {movement.product_id} not found")

            row = Movement(
                product_id=movement.product_id,
                kind=kind.value,
                quantity=movement.quantity,
                date=movement.date or dt.date.today(),
                note=movement.note or "",
            )
            session.add(row)
            session.flush()
            new_id = row.id if row.id is not None else -1

        movement.id = new_id
        movement.kind = kind.value
        logger.info(
            "Movement %s inserted: %s %s for product %s",
            new_id, kind.value, movement.quantity, movement.product_id,
        )
        return new_id

    def update(self, movement: MovementRecord, db: Optional[Session] = None) -> None:
        raise NotImplementedError("Movements are append-only and cannot be updated")

    def delete(self, movement: MovementRecord, db: Optional[Session] = None) -> None:
        raise NotImplementedError("Movements are append-only and cannot be deleted")
