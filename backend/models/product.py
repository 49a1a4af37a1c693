# backend/models/product.py
from sqlalchemy import Column, Integer, String, Text, Numeric, CheckConstraint
from sqlalchemy.ext.hybrid import hybrid_property
from database import Base

# Model Product
# A stock-keeping item: catalogue data, current stock, the reorder threshold
# and the two prices. The name is the natural key, duplicates are rejected.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=False)

    # Stock level and reorder threshold, both guarded by constraints.
    quantity = Column(Integer, CheckConstraint("quantity >= 0"), nullable=False, default=0)
    min_stock = Column(Integer, CheckConstraint("min_stock >= 0"), nullable=False, default=0)

    # Two decimals, exact on every backend so equality filters match
    purchase_price = Column(Numeric(10, 2, asdecimal=False), CheckConstraint("purchase_price >= 0"), nullable=False, default=0.0)
    sale_price = Column(Numeric(10, 2, asdecimal=False), CheckConstraint("sale_price >= 0"), nullable=False, default=0.0)

    # Critical when stock is at or below the threshold; usable in queries too.
    @hybrid_property
    def is_critical(self):
        return self.quantity <= self.min_stock
