# utils/export.py
import logging
from typing import Iterable, Optional, Sequence

import pandas as pd

from schemas.movement import MovementRecord
from schemas.product import ProductRecord

logger = logging.getLogger(__name__)

CSV_SEPARATOR = ";"

PRODUCT_COLUMNS = [
    "product_id", "name", "description", "quantity",
    "min_stock", "purchase_price", "sale_price",
]
MOVEMENT_COLUMNS = ["movement_id", "product_name", "kind", "quantity", "date", "note"]


def products_to_csv(products: Iterable[ProductRecord], path_or_buf=None) -> Optional[str]:
    """Inventory table, one row per product. Returns the text when no target is given."""
    rows = [
        [p.id, p.name, p.description, p.quantity, p.min_stock, p.purchase_price, p.sale_price]
        for p in products
    ]
    df = pd.DataFrame(rows, columns=PRODUCT_COLUMNS)
    logger.info("Exporting %s products", len(df))
    return df.to_csv(path_or_buf, sep=CSV_SEPARATOR, index=False)


def movements_to_csv(
    movements: Iterable[MovementRecord],
    products: Sequence[ProductRecord],
    path_or_buf=None,
) -> Optional[str]:
    """Movement history with product names resolved from ``products``."""
    names = {p.id: p.name for p in products}
    rows = [
        [
            m.id,
            names.get(m.product_id, ""),
            m.kind,
            m.quantity,
            m.date.strftime("%Y-%m-%d") if m.date else "",
            # The separator would break the row
            (m.note or "").replace(CSV_SEPARATOR, ""),
        ]
        for m in movements
    ]
    df = pd.DataFrame(rows, columns=MOVEMENT_COLUMNS)
    logger.info("Exporting %s movements", len(df))
    return df.to_csv(path_or_buf, sep=CSV_SEPARATOR, index=False)
