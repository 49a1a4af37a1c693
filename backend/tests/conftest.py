"""Shared pytest fixtures: a throwaway SQLite database per test."""

import pytest
from fastapi.testclient import TestClient

from config import Settings
from database import Database
from repositories.movements import MovementRepository
from repositories.products import ProductRepository
from schemas.product import ProductRecord
from services.stock import StockService


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(_env_file=None, DATABASE_URL=f"sqlite:///{tmp_path / 'inventory.db'}", LOG_LEVEL="DEBUG")


@pytest.fixture
def database(settings) -> Database:
    db = Database(settings)
    db.create_all()
    yield db
    db.drop_all()
    db.engine.dispose()


@pytest.fixture
def products(database) -> ProductRepository:
    return ProductRepository(database)


@pytest.fixture
def movements(database) -> MovementRepository:
    return MovementRepository(database)


@pytest.fixture
def service(database) -> StockService:
    return StockService(database)


@pytest.fixture
def make_product(service):
    """Creates a product (with its initial-stock movement) and returns the record."""

    def _make(name="Cement 25kg", description="Portland cement bag", quantity=10,
              min_stock=5, purchase_price=4.2, sale_price=6.9):
        product = ProductRecord(
            name=name, description=description, quantity=quantity,
            min_stock=min_stock, purchase_price=purchase_price, sale_price=sale_price,
        )
        service.create_product(product)
        return product

    return _make


@pytest.fixture
def client(settings) -> TestClient:
    """TestClient bound to an app built on the temporary database."""
    from main import create_app

    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client
    app.state.database.engine.dispose()
