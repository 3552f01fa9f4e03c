"""Data models for OrderLine."""

from orderline.models.common import FailureKind, MessageKind, OrderStatus
from orderline.models.events import EventMessage, WebhookEvent, WebhookPayload
from orderline.models.orders import (
    Order,
    OrderOutcome,
    OrderRequest,
    ParseFailure,
    ParseRequest,
    ParseResult,
    RestockRequest,
    StockRecord,
    StockReservation,
    StockRow,
    StockUpdate,
)
from orderline.models.voice import VoiceClip

__all__ = [
    # Common
    "FailureKind",
    "MessageKind",
    "OrderStatus",
    # Orders
    "OrderRequest",
    "ParseFailure",
    "ParseResult",
    "Order",
    "OrderOutcome",
    "StockRecord",
    "StockRow",
    "StockReservation",
    "StockUpdate",
    "RestockRequest",
    "ParseRequest",
    # Voice
    "VoiceClip",
    # Webhook
    "WebhookPayload",
    "WebhookEvent",
    "EventMessage",
]
