"""
API Dependencies

Builds the component graph once per process. Components themselves take
their collaborators explicitly; only this module knows how they are wired.
"""

from functools import lru_cache

from api.config import get_settings
from orderline.services import (
    AudioTranscoder,
    EventDispatcher,
    EventProcessor,
    InventoryLedger,
    MessagingClient,
    OrderPipeline,
    OrderRecorder,
    SpeechRecognizer,
    VoicePipeline,
)
from orderline.storage import LocalBlobStore, SqliteInventoryStore, SqliteOrderStore

# Re-export verify_api_key as get_api_key
from api.middleware.auth import verify_api_key as get_api_key  # noqa: F401


@lru_cache()
def get_inventory_store() -> SqliteInventoryStore:
    return SqliteInventoryStore(get_settings().database_path)


@lru_cache()
def get_order_store() -> SqliteOrderStore:
    return SqliteOrderStore(get_settings().database_path)


@lru_cache()
def get_ledger() -> InventoryLedger:
    """Get singleton inventory ledger (owns the per-item locks)."""
    return InventoryLedger(get_inventory_store(), max_attempts=get_settings().cas_max_attempts)


@lru_cache()
def get_recorder() -> OrderRecorder:
    return OrderRecorder(get_order_store())


@lru_cache()
def get_order_pipeline() -> OrderPipeline:
    return OrderPipeline(get_ledger(), get_recorder(), dispatcher=get_dispatcher())


@lru_cache()
def get_messaging_client() -> MessagingClient:
    settings = get_settings()
    return MessagingClient(
        access_token=settings.line_channel_access_token,
        api_base=settings.line_api_base,
        data_api_base=settings.line_data_api_base,
        timeout=settings.http_timeout_seconds,
    )


@lru_cache()
def get_dispatcher() -> EventDispatcher:
    return EventDispatcher()


@lru_cache()
def get_voice_pipeline() -> VoicePipeline:
    settings = get_settings()
    return VoicePipeline(
        messaging=get_messaging_client(),
        transcoder=AudioTranscoder(settings.source_audio_format, settings.speech_sample_rate),
        recognizer=SpeechRecognizer(
            language_code=settings.speech_language,
            credentials_file=settings.google_application_credentials,
        ),
        archiver=LocalBlobStore(settings.archive_dir, settings.voice_folder_id),
        dispatcher=get_dispatcher(),
        sample_rate=settings.speech_sample_rate,
        archive_extension=settings.source_audio_format,
    )


@lru_cache()
def get_event_processor() -> EventProcessor:
    return EventProcessor(
        orders=get_order_pipeline(),
        voice=get_voice_pipeline(),
        messaging=get_messaging_client(),
        reply_deadline=get_settings().reply_deadline_seconds,
    )
