"""Voice ingestion data models."""

from typing import Optional

from pydantic import BaseModel, Field


class VoiceClip(BaseModel):
    """An inbound audio message and its transcript."""

    clip_id: str
    raw_audio: bytes = Field(..., repr=False, description="Bytes in the platform's native container")
    transcript: Optional[str] = None

    @property
    def size_bytes(self) -> int:
        return len(self.raw_audio)
