# backend/models/movement.py
from sqlalchemy import Column, Integer, String, Text, ForeignKey, Date
from sqlalchemy.orm import relationship
from database import Base

# Append-only ledger entry: one inbound or outbound change of a product's stock
class Movement(Base):
    __tablename__ = "movements"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)

    # Movement classification (INBOUND, OUTBOUND)
    kind = Column(String(20), nullable=False)

    # Quantity involved in the movement, never negative; the kind gives the sign
    quantity = Column(Integer, nullable=False)

    date = Column(Date, nullable=False, index=True)
    note = Column(Text, nullable=False, default="")

    product = relationship("Product")
