"""
Voice Ingestion Pipeline

fetch -> (archive, detached) -> transcode -> recognize -> transcript.
"""

import logging
from typing import Optional

from orderline.models.voice import VoiceClip
from orderline.services.dispatcher import EventDispatcher

logger = logging.getLogger(__name__)


class VoicePipeline:
    """Turns an audio message id into a transcript."""

    def __init__(
        self,
        messaging,
        transcoder,
        recognizer,
        archiver,
        dispatcher: Optional[EventDispatcher] = None,
        sample_rate: int = 16000,
        archive_extension: str = "m4a",
    ):
        self.messaging = messaging
        self.transcoder = transcoder
        self.recognizer = recognizer
        self.archiver = archiver
        self.dispatcher = dispatcher or EventDispatcher()
        self.sample_rate = sample_rate
        self.archive_extension = archive_extension

    async def ingest(self, clip_id: str) -> VoiceClip:
        """
        Fetch, transcode and transcribe one clip.

        Once the bytes are fetched the raw clip is archived in the background
        whatever happens next.

        Raises:
            UpstreamFetchError, TranscodeError, RecognitionError
        """
        logger.info(f"[voice {clip_id}] Fetching")
        raw = await self.messaging.fetch_content(clip_id)
        clip = VoiceClip(clip_id=clip_id, raw_audio=raw)

        self.dispatcher.spawn(self.archive(clip), name=f"archive-{clip_id}")

        logger.info(f"[voice {clip_id}] Transcoding {clip.size_bytes} bytes")
        pcm = await self.transcoder.to_pcm(raw)

        logger.info(f"[voice {clip_id}] Recognizing")
        clip.transcript = await self.recognizer.recognize(pcm, self.sample_rate)
        logger.info(f"[voice {clip_id}] Transcript: {clip.transcript}")
        return clip

    async def archive(self, clip: VoiceClip):
        """Store the raw clip. Failures are logged, never raised."""
        try:
            path = await self.archiver.archive_clip(clip.raw_audio, extension=self.archive_extension)
            logger.info(f"[voice {clip.clip_id}] Archived to {path}")
        except Exception:
            logger.exception(f"[voice {clip.clip_id}] Archival failed")
