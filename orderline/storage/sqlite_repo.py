"""
SQLite Repository

Backing store for inventory and orders. Both tables keep the column layout of
the shop's spreadsheet so rows can be exported back to it unchanged.

Blocking sqlite calls run in a worker thread; every sqlite3.Error, and any
OSError opening the database file, surfaces as StoreUnavailable.
"""

import asyncio
import logging
import os
import sqlite3
from datetime import datetime
from functools import partial
from pathlib import Path
from typing import Any, Callable, List, Optional, TypeVar

from orderline.errors import StoreUnavailable
from orderline.models.orders import Order, StockRow

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Default database path
DEFAULT_DB_PATH = "./data/db/orderline.db"

# Seconds a writer waits on a locked database before giving up
BUSY_TIMEOUT = 5.0


def get_connection(db_path: Optional[str] = None) -> sqlite3.Connection:
    """Get a database connection."""
    db_path = db_path or os.environ.get("DATABASE_PATH", DEFAULT_DB_PATH)

    # Ensure directory exists
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path, timeout=BUSY_TIMEOUT)
    conn.row_factory = sqlite3.Row
    return conn


def init_database(db_path: Optional[str] = None):
    """Initialize database tables."""
    conn = get_connection(db_path)

    try:
        cursor = conn.cursor()

        # Inventory: [itemName, unit, reserved, quantity, unitPrice] + row version
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS inventory (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                item_name TEXT NOT NULL,
                unit TEXT NOT NULL,
                reserved TEXT DEFAULT '',
                quantity INTEGER NOT NULL DEFAULT 0 CHECK (quantity >= 0),
                unit_price INTEGER NOT NULL DEFAULT 0 CHECK (unit_price >= 0),
                version INTEGER NOT NULL DEFAULT 0
            )
        """)

        # Orders: [sequenceNumber, timestamp, customer, item, quantity, unit,
        #          reserved, deliveryTarget, status, reserved, total]
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS orders (
                sequence_number INTEGER PRIMARY KEY AUTOINCREMENT,
                created_at TEXT NOT NULL,
                customer TEXT NOT NULL,
                item TEXT NOT NULL,
                quantity INTEGER NOT NULL,
                unit TEXT NOT NULL,
                reserved_1 TEXT DEFAULT '',
                delivery_target TEXT NOT NULL,
                status TEXT NOT NULL,
                reserved_2 TEXT DEFAULT '',
                total INTEGER NOT NULL
            )
        """)

        cursor.execute("CREATE INDEX IF NOT EXISTS idx_inventory_key ON inventory(item_name, unit)")

        conn.commit()
        logger.info("Database initialized successfully")

    finally:
        conn.close()


def _row_to_stock(row: sqlite3.Row) -> StockRow:
    return StockRow(
        row_id=row["id"],
        item=row["item_name"],
        unit=row["unit"],
        quantity=row["quantity"],
        unit_price=row["unit_price"],
        version=row["version"],
    )


def _row_to_order(row: sqlite3.Row) -> Order:
    return Order(
        sequence_number=row["sequence_number"],
        created_at=datetime.fromisoformat(row["created_at"]),
        customer=row["customer"],
        item=row["item"],
        quantity=row["quantity"],
        unit=row["unit"],
        delivery_target=row["delivery_target"],
        status=row["status"],
        total=row["total"],
    )


class _SqliteStore:
    """Shared plumbing: one connection per call, run off the event loop."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path or os.environ.get("DATABASE_PATH", DEFAULT_DB_PATH)

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        try:
            return await asyncio.to_thread(partial(func, *args))
        except (sqlite3.Error, OSError) as e:
            logger.error(f"{type(self).__name__}.{func.__name__} failed: {e}")
            raise StoreUnavailable(f"Database error: {e}") from e

    def ping(self) -> None:
        try:
            conn = get_connection(self.db_path)
            try:
                conn.execute("SELECT 1")
            finally:
                conn.close()
        except (sqlite3.Error, OSError) as e:
            raise StoreUnavailable(f"Database error: {e}") from e


class SqliteInventoryStore(_SqliteStore):
    """Inventory table with optimistic per-row versioning."""

    async def find_rows(self, item: str, unit: str) -> List[StockRow]:
        """All rows matching (item, unit) exactly, in insertion order."""
        return await self._run(self._find_rows, item, unit)

    def _find_rows(self, item: str, unit: str) -> List[StockRow]:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "SELECT * FROM inventory WHERE item_name = ? AND unit = ? ORDER BY id",
                (item, unit),
            )
            return [_row_to_stock(r) for r in cursor.fetchall()]
        finally:
            conn.close()

    async def compare_and_set(self, row_id: int, expected_version: int, new_quantity: int) -> bool:
        """
        Write new_quantity only if the row still has expected_version.

        Returns False when another writer got there first.
        """
        return await self._run(self._compare_and_set, row_id, expected_version, new_quantity)

    def _compare_and_set(self, row_id: int, expected_version: int, new_quantity: int) -> bool:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                """
                UPDATE inventory
                SET quantity = ?, version = version + 1
                WHERE id = ? AND version = ?
                """,
                (new_quantity, row_id, expected_version),
            )
            conn.commit()
            return cursor.rowcount == 1
        finally:
            conn.close()

    async def list_rows(self) -> List[StockRow]:
        return await self._run(self._list_rows)

    def _list_rows(self) -> List[StockRow]:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute("SELECT * FROM inventory ORDER BY id")
            return [_row_to_stock(r) for r in cursor.fetchall()]
        finally:
            conn.close()

    async def upsert(self, item: str, unit: str, quantity: int, unit_price: int) -> StockRow:
        """Overwrite the first matching row, or insert a new one."""
        return await self._run(self._upsert, item, unit, quantity, unit_price)

    def _upsert(self, item: str, unit: str, quantity: int, unit_price: int) -> StockRow:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT id FROM inventory WHERE item_name = ? AND unit = ? ORDER BY id LIMIT 1",
                (item, unit),
            )
            existing = cursor.fetchone()
            if existing:
                row_id = existing["id"]
                cursor.execute(
                    """
                    UPDATE inventory
                    SET quantity = ?, unit_price = ?, version = version + 1
                    WHERE id = ?
                    """,
                    (quantity, unit_price, row_id),
                )
            else:
                cursor.execute(
                    "INSERT INTO inventory (item_name, unit, quantity, unit_price) VALUES (?, ?, ?, ?)",
                    (item, unit, quantity, unit_price),
                )
                row_id = cursor.lastrowid
            conn.commit()

            cursor.execute("SELECT * FROM inventory WHERE id = ?", (row_id,))
            return _row_to_stock(cursor.fetchone())
        finally:
            conn.close()


class SqliteOrderStore(_SqliteStore):
    """Append-only orders table."""

    async def insert(
        self,
        created_at: datetime,
        customer: str,
        item: str,
        quantity: int,
        unit: str,
        delivery_target: str,
        status: str,
        total: int,
    ) -> int:
        """Append one order row and return its sequence number."""
        return await self._run(
            self._insert, created_at, customer, item, quantity, unit, delivery_target, status, total
        )

    def _insert(
        self,
        created_at: datetime,
        customer: str,
        item: str,
        quantity: int,
        unit: str,
        delivery_target: str,
        status: str,
        total: int,
    ) -> int:
        conn = get_connection(self.db_path)
        try:
            # AUTOINCREMENT hands out the number inside the insert itself
            cursor = conn.execute(
                """
                INSERT INTO orders
                (created_at, customer, item, quantity, unit, delivery_target, status, total)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (created_at.isoformat(), customer, item, quantity, unit, delivery_target, status, total),
            )
            conn.commit()
            return cursor.lastrowid
        finally:
            conn.close()

    async def list_orders(self, limit: int = 50, offset: int = 0) -> List[Order]:
        return await self._run(self._list_orders, limit, offset)

    def _list_orders(self, limit: int, offset: int) -> List[Order]:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "SELECT * FROM orders ORDER BY sequence_number DESC LIMIT ? OFFSET ?",
                (limit, offset),
            )
            return [_row_to_order(r) for r in cursor.fetchall()]
        finally:
            conn.close()

    async def get_order(self, sequence_number: int) -> Optional[Order]:
        return await self._run(self._get_order, sequence_number)

    def _get_order(self, sequence_number: int) -> Optional[Order]:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "SELECT * FROM orders WHERE sequence_number = ?", (sequence_number,)
            )
            row = cursor.fetchone()
            return _row_to_order(row) if row else None
        finally:
            conn.close()
