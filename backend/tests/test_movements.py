"""Movement ledger and the stock-adjustment protocol."""

import datetime as dt

import pytest

from errors import (
    NotFoundError,
    StockAdjustmentError,
    StorageError,
    ValidationError,
)
from repositories.movements import MovementRepository
from repositories.products import ProductRepository
from schemas.movement import INITIAL_STOCK_NOTE, MovementKind, MovementRecord
from schemas.product import ProductRecord
from services.stock import StockService, apply_movement, movement_delta


# ============================================================================
# Kinds and deltas
# ============================================================================


class TestKinds:
    @pytest.mark.parametrize("token, kind", [
        ("INBOUND", MovementKind.INBOUND),
        ("carico", MovementKind.INBOUND),
        (" in ", MovementKind.INBOUND),
        ("OUTBOUND", MovementKind.OUTBOUND),
        ("SCARICO", MovementKind.OUTBOUND),
        (MovementKind.OUTBOUND, MovementKind.OUTBOUND),
    ])
    def test_tokens(self, token, kind):
        assert MovementKind.from_token(token) is kind

    def test_unknown_token(self):
        assert MovementKind.from_token("RETURN") is None
        assert MovementKind.from_token(None) is None

    def test_delta_sign(self):
        assert movement_delta("INBOUND", 7) == 7
        assert movement_delta("OUTBOUND", 7) == -7

    def test_delta_unknown_kind(self):
        with pytest.raises(ValidationError):
            movement_delta("TRANSFER", 7)

    def test_apply_movement_returns_copy(self):
        product = ProductRecord(id=1, name="Sand", quantity=10)
        updated = apply_movement(product, MovementRecord(kind="OUTBOUND", quantity=4))
        assert updated.quantity == 6
        assert product.quantity == 10


# ============================================================================
# Movement repository
# ============================================================================


class TestMovementRepository:
    def test_insert_and_get(self, movements, make_product):
        product = make_product()
        movement = MovementRecord(product_id=product.id, kind="carico", quantity=3,
                                  date=dt.date(2024, 5, 2), note="delivery")
        new_id = movements.insert(movement)

        assert movement.id == new_id
        assert movement.kind == "INBOUND"
        stored = movements.get(new_id)
        assert stored.kind == "INBOUND"
        assert stored.date == dt.date(2024, 5, 2)
        assert stored.note == "delivery"

    def test_select_newest_first(self, movements, make_product):
        product = make_product()
        for day in (3, 1, 2):
            movements.insert(MovementRecord(product_id=product.id, kind="INBOUND",
                                            quantity=day, date=dt.date(2030, 1, day)))
        dates = [m.date for m in movements.select()]
        assert dates[:3] == [dt.date(2030, 1, 3), dt.date(2030, 1, 2), dt.date(2030, 1, 1)]

    @pytest.mark.parametrize("fields", [
        dict(product_id=0, kind="INBOUND", quantity=1),
        dict(product_id=1, kind="", quantity=1),
        dict(product_id=1, kind="TRANSFER", quantity=1),
        dict(product_id=1, kind="INBOUND", quantity=0),
        dict(product_id=1, kind="OUTBOUND", quantity=-2),
    ])
    def test_verify_rejects(self, fields):
        with pytest.raises(ValidationError):
            MovementRepository.verify(MovementRecord(**fields))

    def test_zero_quantity_allowed_for_initial_stock(self):
        MovementRepository.verify(MovementRecord(product_id=1, kind="INBOUND", quantity=0, note=INITIAL_STOCK_NOTE))
        MovementRepository.verify(MovementRecord(product_id=1, kind="CARICO", quantity=0, note="Carico iniziale"))

    def test_unknown_product(self, movements):
        with pytest.raises(NotFoundError):
            movements.insert(MovementRecord(product_id=77, kind="INBOUND", quantity=1))
        assert movements.select() == []

    def test_ledger_is_append_only(self, movements, make_product):
        product = make_product()
        movement = movements.select()[0]
        with pytest.raises(NotImplementedError):
            movements.update(movement)
        with pytest.raises(NotImplementedError):
            movements.delete(movement)
        assert movements.get(movement.id).product_id == product.id


# ============================================================================
# Stock service
# ============================================================================


class FailingProductRepository(ProductRepository):
    def update(self, product, db=None):
        raise StorageError("In update product: disk full")


class FailingMovementRepository(MovementRepository):
    def insert(self, movement, db=None):
        raise StorageError("In insert movement: disk full")


class TestCreateProduct:
    def test_writes_initial_movement(self, products, movements, make_product):
        product = make_product(quantity=12)

        assert products.get(product.id).quantity == 12
        [initial] = movements.select()
        assert initial.product_id == product.id
        assert initial.kind == "INBOUND"
        assert initial.quantity == 12
        assert initial.note == INITIAL_STOCK_NOTE
        assert initial.date == dt.date.today()

    def test_zero_starting_stock(self, movements, make_product):
        make_product(quantity=0)
        assert movements.select()[0].quantity == 0

    def test_rolls_back_product_when_movement_fails(self, database, products):
        service = StockService(database, movements=FailingMovementRepository(database))
        product = ProductRecord(name="Sand", description="River sand", quantity=5)

        with pytest.raises(StockAdjustmentError) as info:
            service.create_product(product)

        assert info.value.step == "initial_movement_insert"
        assert info.value.http_status == 500
        assert product.id == -1
        assert products.select() == []

    def test_invalid_product(self, service, products):
        with pytest.raises(ValidationError):
            service.create_product(ProductRecord(name="Sand", quantity=-1))
        assert products.select() == []


class TestRecordMovement:
    def test_inbound_then_outbound(self, service, products, make_product):
        product = make_product(quantity=5)
        service.record_movement(product, MovementRecord(kind="INBOUND", quantity=10))
        assert product.quantity == 15
        service.record_movement(product, MovementRecord(kind="OUTBOUND", quantity=3))
        assert product.quantity == 12
        assert products.get(product.id).quantity == 12

    def test_outbound_lowers_stock(self, service, products, movements, make_product):
        product = make_product(quantity=10)
        movement = MovementRecord(kind="OUTBOUND", quantity=4, note="order 17")

        service.record_movement(product, movement)

        assert movement.id > 0
        assert movement.product_id == product.id
        assert product.quantity == 6
        assert products.get(product.id).quantity == 6
        assert len(movements.select()) == 2

    def test_inbound_raises_stock(self, service, products, make_product):
        product = make_product(quantity=10)
        service.record_movement(product, MovementRecord(kind="SCARICO", quantity=10))
        service.record_movement(product, MovementRecord(kind="INBOUND", quantity=25))
        assert products.get(product.id).quantity == 25

    def test_stock_cannot_go_negative(self, service, products, movements, make_product):
        product = make_product(quantity=3)
        with pytest.raises(ValidationError):
            service.record_movement(product, MovementRecord(kind="OUTBOUND", quantity=4))
        assert product.quantity == 3
        assert products.get(product.id).quantity == 3
        assert len(movements.select()) == 1

    def test_unstored_product(self, service):
        with pytest.raises(ValidationError):
            service.record_movement(ProductRecord(name="Sand"), MovementRecord(kind="INBOUND", quantity=1))

    def test_movement_for_another_product(self, service, make_product):
        product = make_product()
        other = make_product(name="Sand")
        with pytest.raises(ValidationError):
            service.record_movement(product, MovementRecord(product_id=other.id, kind="INBOUND", quantity=1))

    def test_deleted_product_fails_first_step(self, service, products, movements, make_product):
        product = make_product()
        products.delete(product)
        movement = MovementRecord(kind="INBOUND", quantity=1)

        with pytest.raises(NotFoundError):
            service.record_movement(product, movement)
        assert movement.id == -1
        assert movements.select() == []

    def test_failed_update_rolls_back_movement(self, database, products, movements, make_product):
        product = make_product(quantity=10)
        service = StockService(database, products=FailingProductRepository(database))
        movement = MovementRecord(kind="OUTBOUND", quantity=4)

        with pytest.raises(StockAdjustmentError) as info:
            service.record_movement(product, movement)

        assert info.value.step == "product_update"
        assert isinstance(info.value.cause, StorageError)
        assert movement.id == -1
        assert product.quantity == 10
        assert products.get(product.id).quantity == 10
        assert len(movements.select()) == 1

    def test_retry_after_failure_applies_once(self, database, products, make_product):
        product = make_product(quantity=10)
        movement = MovementRecord(kind="OUTBOUND", quantity=4)
        with pytest.raises(StockAdjustmentError):
            StockService(database, products=FailingProductRepository(database)).record_movement(product, movement)

        StockService(database).record_movement(product, movement)
        assert product.quantity == 6
        assert products.get(product.id).quantity == 6
