"""Inventory admin endpoints."""

from typing import List

from fastapi import APIRouter, Depends

from api.dependencies import get_api_key, get_ledger
from orderline.models.orders import RestockRequest, StockRecord, StockReservation, StockUpdate
from orderline.services import InventoryLedger

router = APIRouter(dependencies=[Depends(get_api_key)])


@router.get("", response_model=List[StockRecord])
async def list_stock(ledger: InventoryLedger = Depends(get_ledger)):
    """All inventory rows in table order."""
    return await ledger.list_stock()


@router.put("", response_model=StockRecord)
async def set_stock(update: StockUpdate, ledger: InventoryLedger = Depends(get_ledger)):
    """Create or overwrite the row for (item, unit)."""
    return await ledger.upsert_item(update.item, update.unit, update.quantity, update.unit_price)


@router.post("/restock", response_model=StockReservation)
async def restock(request: RestockRequest, ledger: InventoryLedger = Depends(get_ledger)):
    """Add stock to an existing row. 404 if the row does not exist."""
    return await ledger.restock(request.item, request.unit, request.quantity)
