"""
Order Recorder

Appends committed orders to the orders table. Sequence numbers come from the
store's auto-increment inside the insert, so concurrent appends never share one.
"""

import logging
from datetime import datetime
from typing import List, Optional

from orderline.models.common import OrderStatus
from orderline.models.orders import Order, OrderRequest

logger = logging.getLogger(__name__)


class OrderRecorder:
    """Append-only writer for orders."""

    def __init__(self, store):
        self.store = store

    async def append(self, request: OrderRequest, unit_price: int) -> Order:
        """
        Record an order for request at unit_price.

        Returns:
            The committed Order with its sequence number

        Raises:
            StoreUnavailable: the row could not be written
        """
        created_at = datetime.utcnow()
        total = request.quantity * unit_price

        sequence_number = await self.store.insert(
            created_at=created_at,
            customer=request.customer,
            item=request.item,
            quantity=request.quantity,
            unit=request.unit,
            delivery_target=request.delivery_target,
            status=OrderStatus.PENDING.value,
            total=total,
        )

        order = Order(
            sequence_number=sequence_number,
            created_at=created_at,
            customer=request.customer,
            item=request.item,
            quantity=request.quantity,
            unit=request.unit,
            delivery_target=request.delivery_target,
            status=OrderStatus.PENDING,
            total=total,
        )
        logger.info(f"Recorded order #{sequence_number}: {order.item} x{order.quantity} = {total}")
        return order

    async def list_orders(self, limit: int = 50, offset: int = 0) -> List[Order]:
        """Most recent orders first."""
        return await self.store.list_orders(limit=limit, offset=offset)

    async def get_order(self, sequence_number: int) -> Optional[Order]:
        return await self.store.get_order(sequence_number)
