"""Common types used across the order-intake system."""

from enum import Enum

# ============================================================================
# Status Enums (these are system states, not business data)
# ============================================================================

class FailureKind(str, Enum):
    """Terminal failure states of an inbound event."""
    PARSE_FAILURE = "parse_failure"
    ITEM_NOT_FOUND = "item_not_found"
    INSUFFICIENT_STOCK = "insufficient_stock"
    STORE_UNAVAILABLE = "store_unavailable"
    TRANSIENT_CONFLICT = "transient_conflict"
    UPSTREAM_FETCH = "upstream_fetch"
    TRANSCODE = "transcode"
    RECOGNITION = "recognition"
    DELIVERY = "delivery"
    TIMEOUT = "timeout"
    INTERNAL = "internal"


class OrderStatus(str, Enum):
    """Order status as written to the orders table."""
    PENDING = "รอดำเนินการ"


class MessageKind(str, Enum):
    """Classification of an inbound webhook event."""
    TEXT = "text"
    AUDIO = "audio"
    OTHER = "other"
