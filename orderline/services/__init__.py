"""
OrderLine Business Logic Services

No framework dependencies. Components take their collaborators (stores,
clients) as constructor arguments.
"""

from orderline.services.audio_processor import AudioTranscoder, transcode_to_pcm
from orderline.services.command_parser import parse_command, tokenize
from orderline.services.dispatcher import EventDispatcher
from orderline.services.event_processor import EventProcessor
from orderline.services.inventory_ledger import InventoryLedger
from orderline.services.messaging_client import MessagingClient
from orderline.services.order_pipeline import OrderPipeline
from orderline.services.order_recorder import OrderRecorder
from orderline.services.speech_recognizer import SpeechRecognizer
from orderline.services.voice_pipeline import VoicePipeline

__all__ = [
    "parse_command",
    "tokenize",
    "InventoryLedger",
    "OrderRecorder",
    "OrderPipeline",
    "AudioTranscoder",
    "transcode_to_pcm",
    "SpeechRecognizer",
    "MessagingClient",
    "VoicePipeline",
    "EventDispatcher",
    "EventProcessor",
]
