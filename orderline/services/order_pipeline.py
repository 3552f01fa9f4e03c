"""
Order Pipeline

parse -> decrement stock -> record order -> reply text.
Used identically for typed messages and voice transcripts.
"""

import asyncio
import logging
from typing import Optional

from orderline import messages
from orderline.errors import InsufficientStock, ItemNotFound, OrderLineError, StoreUnavailable
from orderline.models.common import FailureKind
from orderline.models.orders import OrderOutcome, OrderRequest, ParseFailure
from orderline.services.command_parser import parse_command
from orderline.services.dispatcher import EventDispatcher
from orderline.services.inventory_ledger import InventoryLedger
from orderline.services.order_recorder import OrderRecorder

logger = logging.getLogger(__name__)


class OrderPipeline:
    """Turns one command into a committed order or a failure reply."""

    def __init__(
        self,
        ledger: InventoryLedger,
        recorder: OrderRecorder,
        parser=parse_command,
        dispatcher: Optional[EventDispatcher] = None,
    ):
        self.ledger = ledger
        self.recorder = recorder
        self.parser = parser
        self.dispatcher = dispatcher or EventDispatcher()

    async def place_order(self, text: str) -> OrderOutcome:
        """
        Run one command through the pipeline.

        Never raises for business failures; every failure kind becomes an
        OrderOutcome carrying its fixed reply.
        """
        request = self.parser(text)
        if isinstance(request, ParseFailure):
            return OrderOutcome(
                reply=messages.failure_reply(FailureKind.PARSE_FAILURE),
                failure=FailureKind.PARSE_FAILURE,
            )

        logger.info(
            f"Order request: customer={request.customer} item={request.item} "
            f"quantity={request.quantity} unit={request.unit}"
        )

        # Shielded so a caller timeout cannot split the decrement from its order row;
        # the dispatcher keeps the commit tracked for drain() if the caller gives up
        commit = self.dispatcher.spawn(self._commit(request), name=f"commit-{request.item}")
        return await asyncio.shield(commit)

    async def _commit(self, request: OrderRequest) -> OrderOutcome:
        try:
            reservation = await self.ledger.try_decrement(request.item, request.unit, request.quantity)
        except (ItemNotFound, InsufficientStock) as e:
            logger.info(f"Order rejected: {e.message}")
            return OrderOutcome(
                reply=messages.failure_reply(e.kind, item=request.item, unit=request.unit),
                failure=e.kind,
            )
        except OrderLineError as e:
            logger.warning(f"Stock update failed: {e.message}")
            return OrderOutcome(reply=messages.failure_reply(e.kind), failure=e.kind)

        try:
            order = await self.recorder.append(request, reservation.unit_price)
        except StoreUnavailable as e:
            logger.error(f"Order not recorded, returning stock: {e.message}")
            await self._compensate(request.item, request.unit, request.quantity)
            return OrderOutcome(
                reply=messages.failure_reply(FailureKind.STORE_UNAVAILABLE),
                failure=FailureKind.STORE_UNAVAILABLE,
            )

        return OrderOutcome(reply=messages.order_confirmation(order), order=order)

    async def _compensate(self, item: str, unit: str, quantity: int):
        try:
            await self.ledger.restock(item, unit, quantity)
        except OrderLineError as e:
            # Stock stays short by quantity until corrected by hand
            logger.critical(
                f"Failed to return {quantity} {unit} of {item} to stock: {e.message}"
            )
