# backend/schemas/product.py
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class ProductRecord(ORMBase):
    """A product as it crosses the repository boundary.

    The record carries no constraints of its own: a negative quantity or a
    missing name is accepted here and rejected by the repository on write.
    ``id == -1`` marks a product that has not been stored yet.
    """

    id: int = -1
    name: Optional[str] = ""
    description: Optional[str] = ""
    quantity: int = 0
    min_stock: int = 0
    purchase_price: float = 0.0
    sale_price: float = 0.0

    @property
    def is_critical(self) -> bool:
        return self.quantity <= self.min_stock

    @classmethod
    def prototype(cls, **fields) -> "ProductRecord":
        """Search prototype with every field unconstrained unless given."""
        values = dict(name="", description="", quantity=-1, min_stock=-1,
                      purchase_price=0.0, sale_price=0.0)
        values.update(fields)
        return cls(**values)


class ProductFilter(BaseModel):
    """Explicit product search criteria, ``None`` meaning unconstrained."""

    name: Optional[str] = None
    description: Optional[str] = None
    quantity: Optional[int] = None
    min_stock: Optional[int] = None
    purchase_price: Optional[float] = None
    sale_price: Optional[float] = None

    @classmethod
    def from_prototype(cls, prototype: Optional[ProductRecord]) -> "ProductFilter":
        # Sentinels: blank text, -1 for counters, 0 or less for prices
        if prototype is None:
            return cls()
        p = prototype
        return cls(
            name=p.name if p.name and p.name.strip() else None,
            description=p.description if p.description and p.description.strip() else None,
            quantity=p.quantity if p.quantity > -1 else None,
            min_stock=p.min_stock if p.min_stock > -1 else None,
            purchase_price=p.purchase_price if p.purchase_price > 0 else None,
            sale_price=p.sale_price if p.sale_price > 0 else None,
        )


# Schema for creating or fully replacing a product through the API
class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, description="Product name")
    description: str = ""
    quantity: int = Field(0, ge=0)
    min_stock: int = Field(0, ge=0)
    purchase_price: float = Field(0.0, ge=0)
    sale_price: float = Field(0.0, ge=0)


class ProductUpdate(ProductCreate):
    pass


# Full product representation including ID and the critical flag
class ProductOut(ORMBase):
    id: int
    name: str
    description: str
    quantity: int
    min_stock: int
    purchase_price: float
    sale_price: float
    is_critical: bool

    @classmethod
    def from_record(cls, record: ProductRecord) -> "ProductOut":
        return cls(**record.model_dump(), is_critical=record.is_critical)


class ProductList(BaseModel):
    items: List[ProductOut]
    total: int
