import argparse
import os
import random
import sys
from datetime import date, timedelta

import pandas as pd

# Add 'backend' folder to Python path
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from database import Database
from errors import DuplicateError, RepositoryError
from repositories.products import ProductRepository
from schemas.movement import MovementKind, MovementRecord
from schemas.product import ProductRecord
from services.stock import StockService

# Configuration
DATA_DIR = os.path.join(os.path.dirname(__file__), "data_source")
DEFAULT_CSV = os.path.join(DATA_DIR, "products.csv")
HISTORY_DAYS = 60  # How far back the random history goes
# End Configuration

REQUIRED_COLUMNS = ["name", "description", "quantity", "min_stock", "purchase_price", "sale_price"]


def load_products(csv_path):
    """Reads the products CSV (same header as the inventory export)."""
    df = pd.read_csv(csv_path, sep=";")
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Missing columns in {csv_path}: {', '.join(missing)}")

    df["description"] = df["description"].fillna("")
    df = df.dropna(subset=["name"])
    for column in ("quantity", "min_stock"):
        df[column] = df[column].fillna(0).astype(int)
    for column in ("purchase_price", "sale_price"):
        df[column] = df[column].fillna(0.0).astype(float)

    return [
        ProductRecord(
            name=str(row["name"]).strip(),
            description=str(row["description"]),
            quantity=int(row["quantity"]),
            min_stock=int(row["min_stock"]),
            purchase_price=float(row["purchase_price"]),
            sale_price=float(row["sale_price"]),
        )
        for row in df[REQUIRED_COLUMNS].to_dict("records")
    ]


def random_history(service, product, movements):
    """Random inbound/outbound movements over the last HISTORY_DAYS days."""
    today = date.today()
    for _ in range(movements):
        kind = random.choice([MovementKind.INBOUND, MovementKind.OUTBOUND])
        if kind is MovementKind.OUTBOUND and product.quantity == 0:
            kind = MovementKind.INBOUND
        upper = product.quantity if kind is MovementKind.OUTBOUND else 50
        movement = MovementRecord(
            product_id=product.id,
            kind=kind.value,
            quantity=random.randint(1, max(upper, 1)),
            date=today - timedelta(days=random.randint(1, HISTORY_DAYS)),
            note="seed",
        )
        service.record_movement(product, movement)


def populate_database(csv_path=DEFAULT_CSV, movements_per_product=0, database=None):
    """Main execution function to populate database."""
    database = database or Database()
    database.create_all()
    service = StockService(database)

    try:
        products = load_products(csv_path)
    except FileNotFoundError:
        print(f"Error: {csv_path} not found.")
        return 0

    print(f"Inserting {len(products)} products...")
    created = 0
    for product in products:
        try:
            service.create_product(product)
        except DuplicateError:
            print(f"  skipped '{product.name}': already in the catalogue")
            continue
        except RepositoryError as exc:
            print(f"  skipped '{product.name}': {exc.message}")
            continue
        created += 1
        if movements_per_product:
            random_history(service, product, movements_per_product)

    total = len(ProductRepository(database).select())
    print(f"Inserted {created} products, {total} in the catalogue.")
    return created


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the inventory database from a CSV file")
    parser.add_argument("csv", nargs="?", default=DEFAULT_CSV)
    parser.add_argument("--movements", type=int, default=0, help="Random movements per product")
    args = parser.parse_args()
    populate_database(args.csv, args.movements)
