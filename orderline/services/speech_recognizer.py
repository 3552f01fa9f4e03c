"""
Speech Recognizer

Google Cloud Speech-to-Text, one synchronous recognize call per clip.
"""

import asyncio
import logging
from typing import Optional

from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import speech

from orderline import messages
from orderline.errors import RecognitionError

logger = logging.getLogger(__name__)


class SpeechRecognizer:
    """Transcribes LINEAR16 PCM audio in a fixed language."""

    def __init__(
        self,
        language_code: str = "th-TH",
        credentials_file: Optional[str] = None,
        client: Optional[speech.SpeechClient] = None,
    ):
        self.language_code = language_code
        self.credentials_file = credentials_file
        self._client = client

    @property
    def client(self) -> speech.SpeechClient:
        # Created on first use so the app can start without credentials
        if self._client is None:
            try:
                if self.credentials_file:
                    self._client = speech.SpeechClient.from_service_account_file(self.credentials_file)
                else:
                    self._client = speech.SpeechClient()
            except (OSError, ValueError, auth_exceptions.GoogleAuthError) as e:
                # Missing or unreadable key file, or no default credentials
                raise RecognitionError(f"Could not create speech client: {e}") from e
        return self._client

    def _recognize(self, pcm: bytes, sample_rate: int) -> str:
        config = speech.RecognitionConfig(
            encoding=speech.RecognitionConfig.AudioEncoding.LINEAR16,
            sample_rate_hertz=sample_rate,
            language_code=self.language_code,
            enable_automatic_punctuation=True,
        )
        audio = speech.RecognitionAudio(content=pcm)

        try:
            response = self.client.recognize(config=config, audio=audio)
        except (google_exceptions.GoogleAPIError, auth_exceptions.GoogleAuthError) as e:
            raise RecognitionError(f"Speech recognition failed: {e}") from e

        if not response.results or not response.results[0].alternatives:
            logger.info("Recognizer returned no result")
            return messages.UNCLEAR_AUDIO

        transcript = response.results[0].alternatives[0].transcript.strip()
        return transcript or messages.UNCLEAR_AUDIO

    async def recognize(self, pcm: bytes, sample_rate: int) -> str:
        """
        Transcribe PCM audio.

        Returns:
            Top alternative of the first result, or the unclear-audio sentinel

        Raises:
            RecognitionError: quota, auth or malformed-audio errors
        """
        return await asyncio.to_thread(self._recognize, pcm, sample_rate)
