# backend/schemas/movement.py
import datetime as dt
import enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Allowed directions of a stock movement
class MovementKind(str, enum.Enum):
    INBOUND = "INBOUND"
    OUTBOUND = "OUTBOUND"

    @classmethod
    def from_token(cls, token) -> Optional["MovementKind"]:
        """Map a kind token, canonical or legacy, to the enum; None when unknown."""
        if isinstance(token, MovementKind):
            return token
        if token is None:
            return None
        return _KIND_TOKENS.get(str(token).strip().upper())


_KIND_TOKENS = {
    "INBOUND": MovementKind.INBOUND,
    "IN": MovementKind.INBOUND,
    "CARICO": MovementKind.INBOUND,
    "OUTBOUND": MovementKind.OUTBOUND,
    "OUT": MovementKind.OUTBOUND,
    "SCARICO": MovementKind.OUTBOUND,
}

# Note of the synthetic movement written when a product is created
INITIAL_STOCK_NOTE = "initial stock"
INITIAL_STOCK_NOTES = frozenset({INITIAL_STOCK_NOTE, "carico iniziale"})


def is_initial_stock_note(note: Optional[str]) -> bool:
    return (note or "").strip().lower() in INITIAL_STOCK_NOTES


class MovementRecord(BaseModel):
    """A ledger entry as it crosses the repository boundary (unvalidated)."""

    model_config = ConfigDict(from_attributes=True)

    id: int = -1
    product_id: int = -1
    kind: Optional[str] = ""
    quantity: int = 0
    date: dt.date = Field(default_factory=dt.date.today)
    note: Optional[str] = ""


# Schema for registering a movement through the API
class MovementCreate(BaseModel):
    product_id: int
    kind: MovementKind
    quantity: int = Field(..., ge=0)
    date: Optional[dt.date] = None
    note: str = ""

    @field_validator("kind", mode="before")
    @classmethod
    def _accept_legacy_tokens(cls, value):
        return MovementKind.from_token(value) or value


class MovementOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    product_name: Optional[str] = None
    kind: str
    quantity: int
    date: dt.date
    note: str = ""


# Paginated response for the movement history
class MovementPage(BaseModel):
    items: List[MovementOut]
    total: int
    page: int
    page_size: int
