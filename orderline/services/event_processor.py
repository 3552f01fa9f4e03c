"""
Event Processor

Per-event task body:

    Received -> Classified{text|audio|other}
             -> [audio: Fetching -> Transcoding -> Recognizing]
             -> Parsing -> Resolving -> Committing -> Replied

Any step may end in Failed(kind), which maps to one fixed reply. Nothing
raised here escapes the task.
"""

import asyncio
import logging
from typing import Optional

from orderline import messages
from orderline.errors import DeliveryFailure, OrderLineError
from orderline.models.common import FailureKind, MessageKind
from orderline.models.events import WebhookEvent
from orderline.services.dispatcher import EventDispatcher
from orderline.services.order_pipeline import OrderPipeline
from orderline.services.voice_pipeline import VoicePipeline

logger = logging.getLogger(__name__)

# Reply tokens expire shortly after the event; stay well inside that window
DEFAULT_REPLY_DEADLINE = 20.0


class EventProcessor:
    """Handles webhook events end to end, including the reply."""

    def __init__(
        self,
        orders: OrderPipeline,
        voice: VoicePipeline,
        messaging,
        reply_deadline: float = DEFAULT_REPLY_DEADLINE,
    ):
        self.orders = orders
        self.voice = voice
        self.messaging = messaging
        self.reply_deadline = reply_deadline

    def submit(self, event: WebhookEvent, dispatcher: EventDispatcher) -> Optional[asyncio.Task]:
        """Schedule handle_event as an independent task. Ignored events are dropped here."""
        if event.kind == MessageKind.OTHER:
            logger.debug(f"Ignoring event type={event.type}")
            return None
        return dispatcher.spawn(self.handle_event(event), name=f"event-{event.reply_token}")

    async def handle_event(self, event: WebhookEvent) -> Optional[str]:
        """
        Process one event and send its reply.

        Returns:
            The reply text that was attempted, or None for ignored events
        """
        kind = event.kind
        if kind == MessageKind.OTHER:
            return None

        try:
            reply = await asyncio.wait_for(self._build_reply(event, kind), timeout=self.reply_deadline)
        except asyncio.TimeoutError:
            logger.error(f"Event exceeded {self.reply_deadline}s deadline; sending generic reply")
            reply = messages.failure_reply(FailureKind.TIMEOUT)
        except Exception:
            logger.exception("Unexpected error while processing event")
            reply = messages.failure_reply(FailureKind.INTERNAL)

        await self._send(event.reply_token, reply)
        return reply

    async def _build_reply(self, event: WebhookEvent, kind: MessageKind) -> str:
        if kind == MessageKind.TEXT:
            outcome = await self.orders.place_order(event.message.text)
            return outcome.reply

        try:
            clip = await self.voice.ingest(event.message.id)
        except OrderLineError as e:
            logger.warning(f"Voice pipeline failed ({e.kind.value}): {e.message}")
            return messages.VOICE_FALLBACK

        outcome = await self.orders.place_order(clip.transcript)
        return messages.heard(clip.transcript, outcome.reply)

    async def _send(self, reply_token: Optional[str], text: str):
        if not reply_token:
            logger.warning(f"No reply token; dropping reply {text!r}")
            return
        try:
            await self.messaging.reply(reply_token, text)
        except DeliveryFailure as e:
            logger.error(f"Reply delivery failed: {e.message}")
