"""Order admin endpoints."""

from typing import List, Union

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_api_key, get_recorder
from api.middleware.errors import NotFoundError
from orderline.models.orders import Order, OrderRequest, ParseFailure, ParseRequest
from orderline.services import OrderRecorder, parse_command

router = APIRouter(dependencies=[Depends(get_api_key)])


@router.get("", response_model=List[Order])
async def list_orders(
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    recorder: OrderRecorder = Depends(get_recorder),
):
    """Recorded orders, newest first."""
    return await recorder.list_orders(limit=limit, offset=offset)


@router.get("/{sequence_number}", response_model=Order)
async def get_order(sequence_number: int, recorder: OrderRecorder = Depends(get_recorder)):
    order = await recorder.get_order(sequence_number)
    if order is None:
        raise NotFoundError("Order", str(sequence_number))
    return order


@router.post("/parse", response_model=Union[OrderRequest, ParseFailure])
async def parse_order_text(request: ParseRequest):
    """
    Run text through the command parser without touching stock.

    Useful for checking how a message will be understood.
    """
    return parse_command(request.text)
