"""
OrderLine Core Package

Pure business logic for chat-based order intake: command parsing, inventory
transactions, order recording and voice ingestion.
No framework dependencies (FastAPI) in this package.
"""

__version__ = "1.0.0"

from orderline.models.orders import Order, OrderRequest, ParseFailure, StockRecord
from orderline.models.voice import VoiceClip

__all__ = [
    "Order",
    "OrderRequest",
    "ParseFailure",
    "StockRecord",
    "VoiceClip",
]
