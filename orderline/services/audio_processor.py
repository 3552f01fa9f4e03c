"""
Audio Processor

Converts voice-message containers to the raw encoding the speech recognizer
expects: mono, 16 kHz, 16-bit little-endian linear PCM.
"""

import asyncio
import io
import logging

from pydub import AudioSegment

from orderline.errors import TranscodeError

logger = logging.getLogger(__name__)

# Recognizer input format
TARGET_SAMPLE_RATE = 16000
TARGET_CHANNELS = 1
TARGET_SAMPLE_WIDTH = 2  # bytes -> LINEAR16


def transcode_to_pcm(
    raw: bytes,
    source_format: str = "m4a",
    sample_rate: int = TARGET_SAMPLE_RATE,
) -> bytes:
    """
    Decode raw container bytes and re-encode as linear PCM.

    Args:
        raw: Audio bytes in the source container
        source_format: Container format hint for ffmpeg (m4a, ogg, wav...)
        sample_rate: Output sample rate in Hz

    Returns:
        Headerless PCM frames

    Raises:
        TranscodeError: the bytes could not be decoded
    """
    if not raw:
        raise TranscodeError("Empty audio clip")

    try:
        audio = AudioSegment.from_file(io.BytesIO(raw), format=source_format)
    except Exception as e:
        # pydub surfaces decoder problems as CouldntDecodeError, missing ffmpeg as OSError
        raise TranscodeError(f"Could not decode {source_format} audio: {e}") from e

    audio = (
        audio.set_channels(TARGET_CHANNELS)
        .set_frame_rate(sample_rate)
        .set_sample_width(TARGET_SAMPLE_WIDTH)
    )
    logger.info(f"Transcoded {len(raw)} bytes of {source_format} -> {len(audio) / 1000.0:.1f}s PCM")
    return audio.raw_data


class AudioTranscoder:
    """Async wrapper running the ffmpeg-backed decode off the event loop."""

    def __init__(self, source_format: str = "m4a", sample_rate: int = TARGET_SAMPLE_RATE):
        self.source_format = source_format
        self.sample_rate = sample_rate

    async def to_pcm(self, raw: bytes) -> bytes:
        return await asyncio.to_thread(transcode_to_pcm, raw, self.source_format, self.sample_rate)
