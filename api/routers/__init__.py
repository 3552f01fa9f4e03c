"""API Routers"""

from api.routers import health, inventory, orders, webhook

__all__ = ["health", "inventory", "orders", "webhook"]
