"""Tests for the speech recognizer wrapper."""

import asyncio
from types import SimpleNamespace

import pytest
from google.api_core import exceptions as google_exceptions
from google.cloud import speech

from orderline import messages
from orderline.errors import RecognitionError
from orderline.services.speech_recognizer import SpeechRecognizer


class StubSpeechClient:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def recognize(self, config, audio):
        self.requests.append((config, audio))
        if self.error:
            raise self.error
        return self.response


def _response(*transcripts):
    alternatives = [SimpleNamespace(transcript=t) for t in transcripts]
    return SimpleNamespace(results=[SimpleNamespace(alternatives=alternatives)] if transcripts else [])


def test_top_alternative_of_first_result():
    client = StubSpeechClient(_response("สั่งข้าว 3 ถุง", "สั่งขาว 3 ถุง"))
    recognizer = SpeechRecognizer(client=client)

    transcript = asyncio.run(recognizer.recognize(b"\x00\x00" * 10, 16000))

    assert transcript == "สั่งข้าว 3 ถุง"


def test_request_config():
    client = StubSpeechClient(_response("ok"))
    recognizer = SpeechRecognizer(language_code="th-TH", client=client)

    asyncio.run(recognizer.recognize(b"\x00\x00", 16000))

    config, audio = client.requests[0]
    assert config.language_code == "th-TH"
    assert config.sample_rate_hertz == 16000
    assert config.enable_automatic_punctuation is True
    assert config.encoding == speech.RecognitionConfig.AudioEncoding.LINEAR16
    assert audio.content == b"\x00\x00"


def test_no_results_yields_unclear_sentinel():
    recognizer = SpeechRecognizer(client=StubSpeechClient(_response()))

    assert asyncio.run(recognizer.recognize(b"", 16000)) == messages.UNCLEAR_AUDIO


def test_api_error_raises_recognition_error():
    client = StubSpeechClient(error=google_exceptions.ResourceExhausted("quota"))
    recognizer = SpeechRecognizer(client=client)

    with pytest.raises(RecognitionError):
        asyncio.run(recognizer.recognize(b"\x00\x00", 16000))


def test_missing_credentials_file_is_recognition_error(temp_dir):
    recognizer = SpeechRecognizer(credentials_file=str(temp_dir / "missing-key.json"))

    with pytest.raises(RecognitionError):
        asyncio.run(recognizer.recognize(b"\x00\x00" * 10, 16000))
