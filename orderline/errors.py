"""
OrderLine Errors

Every failure that can end the processing of an inbound event. Each error
carries the FailureKind the event processor maps to a fixed reply.
"""

from typing import Any, Dict, Optional

from orderline.models.common import FailureKind


class OrderLineError(Exception):
    """Base class for order-intake errors."""

    kind: FailureKind = FailureKind.INTERNAL

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


# Inventory / order store

class ItemNotFound(OrderLineError):
    """No inventory row matches the (item, unit) pair."""

    kind = FailureKind.ITEM_NOT_FOUND

    def __init__(self, item: str, unit: str):
        self.item = item
        self.unit = unit
        super().__init__(
            f"No stock row for item={item!r} unit={unit!r}",
            details={"item": item, "unit": unit},
        )


class InsufficientStock(OrderLineError):
    """Requested quantity exceeds quantity on hand."""

    kind = FailureKind.INSUFFICIENT_STOCK

    def __init__(self, item: str, unit: str, requested: int, available: int):
        self.item = item
        self.unit = unit
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for {item} ({unit}): requested {requested}, available {available}",
            details={"item": item, "unit": unit, "requested": requested, "available": available},
        )


class StoreUnavailable(OrderLineError):
    """The backing store could not be reached or rejected the operation."""

    kind = FailureKind.STORE_UNAVAILABLE


class TransientConflict(OrderLineError):
    """Optimistic update lost the race on every attempt."""

    kind = FailureKind.TRANSIENT_CONFLICT


# Voice pipeline

class UpstreamFetchError(OrderLineError):
    """Audio content could not be downloaded from the messaging platform."""

    kind = FailureKind.UPSTREAM_FETCH


class TranscodeError(OrderLineError):
    """Audio container could not be converted to linear PCM."""

    kind = FailureKind.TRANSCODE


class RecognitionError(OrderLineError):
    """The speech recognizer rejected the request."""

    kind = FailureKind.RECOGNITION


# Outbound

class DeliveryFailure(OrderLineError):
    """A reply could not be delivered. Logged only."""

    kind = FailureKind.DELIVERY
