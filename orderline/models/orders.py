"""
Order Data Models

Parsed commands, inventory rows and committed orders.
"""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from orderline.models.common import FailureKind, OrderStatus

# Sentinels substituted when the command omits an optional field
DEFAULT_CUSTOMER = "ลูกค้าไม่ระบุ"
DEFAULT_UNIT = "ชิ้น"
DEFAULT_DELIVERY_TARGET = "ไม่ระบุ"


# ============================================================================
# Parser Output
# ============================================================================

class OrderRequest(BaseModel):
    """A successfully parsed order command."""

    model_config = ConfigDict(frozen=True)

    customer: str = DEFAULT_CUSTOMER
    item: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0)
    unit: str = DEFAULT_UNIT
    delivery_target: str = DEFAULT_DELIVERY_TARGET


class ParseFailure(BaseModel):
    """The command did not match the grammar. Carries no partial data."""

    model_config = ConfigDict(frozen=True)

    reason: str


ParseResult = Union[OrderRequest, ParseFailure]


# ============================================================================
# Inventory
# ============================================================================

class StockRecord(BaseModel):
    """Inventory view of one (item, unit) pair."""

    item: str
    unit: str
    quantity: int = Field(..., ge=0)
    unit_price: int = Field(default=0, ge=0)


class StockRow(StockRecord):
    """A stock record as held by the backing store."""

    row_id: int
    version: int = 0


class StockReservation(BaseModel):
    """Result of a committed decrement."""

    item: str
    unit: str
    quantity_taken: int
    new_quantity: int = Field(..., ge=0)
    unit_price: int = Field(..., ge=0)


# ============================================================================
# Orders
# ============================================================================

class Order(BaseModel):
    """A committed order. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    sequence_number: int = Field(..., ge=1)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    customer: str
    item: str
    quantity: int = Field(..., gt=0)
    unit: str
    delivery_target: str
    status: OrderStatus = OrderStatus.PENDING
    total: int = Field(..., ge=0)


class OrderOutcome(BaseModel):
    """What the order pipeline did with one command."""

    reply: str
    failure: Optional[FailureKind] = None
    order: Optional[Order] = None

    @property
    def succeeded(self) -> bool:
        return self.failure is None


# ============================================================================
# Admin API Requests
# ============================================================================

class StockUpdate(BaseModel):
    """Set quantity and price for one (item, unit) row."""

    item: str = Field(..., min_length=1)
    unit: str = Field(default=DEFAULT_UNIT, min_length=1)
    quantity: int = Field(..., ge=0)
    unit_price: int = Field(default=0, ge=0)


class RestockRequest(BaseModel):
    """Add quantity to an existing row."""

    item: str = Field(..., min_length=1)
    unit: str = Field(default=DEFAULT_UNIT, min_length=1)
    quantity: int = Field(..., gt=0)


class ParseRequest(BaseModel):
    """Dry-run a command through the parser."""

    text: str
