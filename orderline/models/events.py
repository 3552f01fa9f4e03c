"""
Webhook Payload Models

Only the fields the bot reads are declared; everything else is kept as extra.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from orderline.models.common import MessageKind


class EventMessage(BaseModel):
    """The `message` object of a message event."""

    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    type: str
    text: Optional[str] = None


class WebhookEvent(BaseModel):
    """A single event delivered by the messaging platform."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: str
    reply_token: Optional[str] = Field(default=None, alias="replyToken")
    message: Optional[EventMessage] = None

    @property
    def kind(self) -> MessageKind:
        """Classify the event for the processing state machine."""
        if self.type != "message" or self.message is None:
            return MessageKind.OTHER
        if self.message.type == "text" and self.message.text is not None:
            return MessageKind.TEXT
        if self.message.type == "audio" and self.message.id:
            return MessageKind.AUDIO
        return MessageKind.OTHER


class WebhookPayload(BaseModel):
    """
    Body of an inbound webhook POST.

    Events stay raw here; each one is validated as a WebhookEvent on its own.
    """

    model_config = ConfigDict(extra="allow")

    destination: Optional[str] = None
    events: List[Any] = Field(default_factory=list)
