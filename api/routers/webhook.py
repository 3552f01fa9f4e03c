"""
Messaging Webhook

Acknowledges every POST immediately; events are processed in background
tasks and answered through the reply API.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from api.dependencies import get_dispatcher, get_event_processor
from orderline.models.events import WebhookEvent, WebhookPayload
from orderline.services import EventDispatcher, EventProcessor

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/webhook")
async def receive_webhook(
    request: Request,
    processor: EventProcessor = Depends(get_event_processor),
    dispatcher: EventDispatcher = Depends(get_dispatcher),
) -> Dict[str, Any]:
    """
    Accept a batch of events.

    Always returns 200. A malformed body is dropped whole; a malformed
    event is skipped and the rest of the batch still runs.
    """
    try:
        payload = WebhookPayload.model_validate(await request.json())
    except (ValueError, ValidationError) as e:
        logger.warning(f"Discarding malformed webhook body: {e}")
        return {"status": "ok"}

    scheduled = 0
    for index, raw in enumerate(payload.events):
        try:
            event = WebhookEvent.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Skipping malformed event #{index}: {e}")
            continue
        if processor.submit(event, dispatcher) is not None:
            scheduled += 1

    logger.info(f"Webhook: {len(payload.events)} event(s), {scheduled} scheduled")
    return {"status": "ok"}
