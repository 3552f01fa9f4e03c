"""
Inventory Ledger

Transactional view over the inventory table.

Every quantity change goes through one read-modify-write path that is
serialized per (item, unit) inside this process and validated against the
row version in the store, so concurrent orders can neither lose an update
nor drive stock below zero.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Optional, Tuple

from orderline.errors import InsufficientStock, ItemNotFound, TransientConflict
from orderline.models.orders import StockRecord, StockReservation, StockRow

logger = logging.getLogger(__name__)

# Optimistic update attempts before giving up with TransientConflict
DEFAULT_MAX_ATTEMPTS = 3


class _KeyLock:
    """A lock plus the number of tasks holding or waiting on it."""

    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = asyncio.Lock()
        self.users = 0


class InventoryLedger:
    """Owns all reads and writes of stock quantities."""

    def __init__(self, store, max_attempts: int = DEFAULT_MAX_ATTEMPTS):
        self.store = store
        self.max_attempts = max_attempts
        self._locks: Dict[Tuple[str, str], _KeyLock] = {}

    @asynccontextmanager
    async def _locked(self, item: str, unit: str) -> AsyncIterator[None]:
        """Serialize writes per (item, unit); the entry is dropped once unused."""
        key = (item, unit)
        entry = self._locks.get(key)
        if entry is None:
            entry = self._locks[key] = _KeyLock()
        entry.users += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0:
                del self._locks[key]

    # =========================================================================
    # Reads
    # =========================================================================

    async def _first_row(self, item: str, unit: str) -> Optional[StockRow]:
        rows = await self.store.find_rows(item, unit)
        if not rows:
            return None
        if len(rows) > 1:
            logger.warning(
                f"Data integrity: {len(rows)} stock rows for item={item!r} unit={unit!r}; "
                f"using row {rows[0].row_id}"
            )
        return rows[0]

    async def lookup(self, item: str, unit: str) -> Optional[StockRecord]:
        """
        Find the stock record for (item, unit).

        Returns:
            StockRecord, or None when no row matches
        """
        row = await self._first_row(item, unit)
        if row is None:
            return None
        return StockRecord(item=row.item, unit=row.unit, quantity=row.quantity, unit_price=row.unit_price)

    async def list_stock(self) -> List[StockRecord]:
        rows = await self.store.list_rows()
        return [
            StockRecord(item=r.item, unit=r.unit, quantity=r.quantity, unit_price=r.unit_price)
            for r in rows
        ]

    # =========================================================================
    # Writes
    # =========================================================================

    async def try_decrement(self, item: str, unit: str, quantity: int) -> StockReservation:
        """
        Atomically take quantity units of (item, unit) out of stock.

        Raises:
            ItemNotFound: no row for (item, unit)
            InsufficientStock: quantity on hand is below quantity; nothing written
            TransientConflict: the row kept changing under us
            StoreUnavailable: backend error; nothing written
        """
        if quantity <= 0:
            raise ValueError(f"quantity must be positive, got {quantity}")
        return await self._adjust(item, unit, -quantity)

    async def restock(self, item: str, unit: str, quantity: int) -> StockReservation:
        """Put quantity units back. Same discipline as try_decrement."""
        if quantity <= 0:
            raise ValueError(f"quantity must be positive, got {quantity}")
        return await self._adjust(item, unit, quantity)

    async def upsert_item(self, item: str, unit: str, quantity: int, unit_price: int) -> StockRecord:
        """Set quantity and price for (item, unit), creating the row if needed."""
        async with self._locked(item, unit):
            row = await self.store.upsert(item, unit, quantity, unit_price)
        logger.info(f"Stock set: {item} ({unit}) quantity={quantity} price={unit_price}")
        return StockRecord(item=row.item, unit=row.unit, quantity=row.quantity, unit_price=row.unit_price)

    async def _adjust(self, item: str, unit: str, delta: int) -> StockReservation:
        async with self._locked(item, unit):
            for attempt in range(1, self.max_attempts + 1):
                row = await self._first_row(item, unit)
                if row is None:
                    raise ItemNotFound(item, unit)

                new_quantity = row.quantity + delta
                if new_quantity < 0:
                    raise InsufficientStock(item, unit, requested=-delta, available=row.quantity)

                if await self.store.compare_and_set(row.row_id, row.version, new_quantity):
                    logger.info(
                        f"Stock {item} ({unit}): {row.quantity} -> {new_quantity}"
                    )
                    return StockReservation(
                        item=item,
                        unit=unit,
                        quantity_taken=-delta,
                        new_quantity=new_quantity,
                        unit_price=row.unit_price,
                    )

                logger.warning(
                    f"Stock {item} ({unit}) changed concurrently "
                    f"(attempt {attempt}/{self.max_attempts})"
                )

        raise TransientConflict(
            f"Could not update stock for {item} ({unit}) after {self.max_attempts} attempts",
            details={"item": item, "unit": unit},
        )
