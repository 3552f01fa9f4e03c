"""Pytest configuration and fixtures."""

import os
import tempfile
from pathlib import Path
from typing import Generator, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

# Set test environment before importing app
_TEST_DATA_DIR = tempfile.mkdtemp(prefix="orderline-test-")
os.environ["DEBUG"] = "true"
os.environ["API_KEYS"] = ""
os.environ["LINE_CHANNEL_ACCESS_TOKEN"] = "test-token"
os.environ["DATABASE_PATH"] = os.path.join(_TEST_DATA_DIR, "api.db")
os.environ["ARCHIVE_DIR"] = os.path.join(_TEST_DATA_DIR, "voice")

from orderline.errors import RecognitionError, TranscodeError, UpstreamFetchError  # noqa: E402
from orderline.services import (  # noqa: E402
    EventDispatcher,
    EventProcessor,
    InventoryLedger,
    OrderPipeline,
    OrderRecorder,
    VoicePipeline,
)
from orderline.storage import (  # noqa: E402
    SqliteInventoryStore,
    SqliteOrderStore,
    get_connection,
    init_database,
)


# =============================================================================
# Test doubles for external collaborators
# =============================================================================

class FakeMessaging:
    """Records replies; serves canned audio content."""

    def __init__(self, content: bytes = b"fake-m4a-bytes", fetch_error: Optional[Exception] = None):
        self.content = content
        self.fetch_error = fetch_error
        self.fetched: List[str] = []
        self.replies: List[Tuple[str, str]] = []
        self.reply_error: Optional[Exception] = None

    async def fetch_content(self, message_id: str) -> bytes:
        self.fetched.append(message_id)
        if self.fetch_error:
            raise self.fetch_error
        return self.content

    async def reply(self, reply_token: str, text: str):
        if self.reply_error:
            raise self.reply_error
        self.replies.append((reply_token, text))


class FakeTranscoder:
    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.calls = 0

    async def to_pcm(self, raw: bytes) -> bytes:
        self.calls += 1
        if self.error:
            raise self.error
        return b"pcm:" + raw


class FakeRecognizer:
    def __init__(self, transcript: str = "สั่ง ข้าว 2 ถุง", error: Optional[Exception] = None):
        self.transcript = transcript
        self.error = error
        self.calls = 0

    async def recognize(self, pcm: bytes, sample_rate: int) -> str:
        self.calls += 1
        if self.error:
            raise self.error
        return self.transcript


class FakeArchiver:
    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.archived: List[bytes] = []

    async def archive_clip(self, content: bytes, extension: str = "m4a") -> str:
        if self.error:
            raise self.error
        self.archived.append(content)
        return f"/archive/voice_{len(self.archived)}.{extension}"


# =============================================================================
# Storage fixtures
# =============================================================================

def seed_stock(db_path: str, rows: List[Tuple[str, str, int, int]]):
    """Insert raw inventory rows (item, unit, quantity, unit_price), duplicates allowed."""
    conn = get_connection(db_path)
    try:
        conn.executemany(
            "INSERT INTO inventory (item_name, unit, quantity, unit_price) VALUES (?, ?, ?, ?)",
            rows,
        )
        conn.commit()
    finally:
        conn.close()


def read_quantity(db_path: str, item: str, unit: str) -> int:
    conn = get_connection(db_path)
    try:
        row = conn.execute(
            "SELECT quantity FROM inventory WHERE item_name = ? AND unit = ? ORDER BY id LIMIT 1",
            (item, unit),
        ).fetchone()
        return row["quantity"]
    finally:
        conn.close()


def count_orders(db_path: str) -> int:
    conn = get_connection(db_path)
    try:
        return conn.execute("SELECT COUNT(*) FROM orders").fetchone()[0]
    finally:
        conn.close()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def db_path(temp_dir: Path) -> str:
    """Fresh database with inventory seeded from the shop's sample sheet."""
    path = str(temp_dir / "orderline.db")
    init_database(path)
    seed_stock(path, [
        ("ข้าว", "ถุง", 10, 50),
        ("ข้าว", "ชิ้น", 5, 20),
        ("น้ำปลา", "ขวด", 0, 35),
        ("ไข่", "แผง", 4, 110),
    ])
    return path


@pytest.fixture
def inventory_store(db_path: str) -> SqliteInventoryStore:
    return SqliteInventoryStore(db_path)


@pytest.fixture
def order_store(db_path: str) -> SqliteOrderStore:
    return SqliteOrderStore(db_path)


@pytest.fixture
def seed(db_path: str):
    """Append raw inventory rows to the test database."""
    return lambda rows: seed_stock(db_path, rows)


@pytest.fixture
def quantity_of(db_path: str):
    """Read quantity on hand straight from the table."""
    return lambda item, unit: read_quantity(db_path, item, unit)


@pytest.fixture
def order_count(db_path: str):
    """Count rows in the orders table."""
    return lambda: count_orders(db_path)


@pytest.fixture
def ledger(inventory_store: SqliteInventoryStore) -> InventoryLedger:
    return InventoryLedger(inventory_store)


@pytest.fixture
def recorder(order_store: SqliteOrderStore) -> OrderRecorder:
    return OrderRecorder(order_store)


@pytest.fixture
def order_pipeline(ledger: InventoryLedger, recorder: OrderRecorder, dispatcher) -> OrderPipeline:
    return OrderPipeline(ledger, recorder, dispatcher=dispatcher)


# =============================================================================
# Voice / event fixtures
# =============================================================================

@pytest.fixture
def messaging() -> FakeMessaging:
    return FakeMessaging()


@pytest.fixture
def transcoder() -> FakeTranscoder:
    return FakeTranscoder()


@pytest.fixture
def recognizer() -> FakeRecognizer:
    return FakeRecognizer()


@pytest.fixture
def archiver() -> FakeArchiver:
    return FakeArchiver()


@pytest.fixture
def dispatcher() -> EventDispatcher:
    return EventDispatcher()


@pytest.fixture
def voice_pipeline(messaging, transcoder, recognizer, archiver, dispatcher) -> VoicePipeline:
    return VoicePipeline(messaging, transcoder, recognizer, archiver, dispatcher=dispatcher)


@pytest.fixture
def event_processor(order_pipeline, voice_pipeline, messaging) -> EventProcessor:
    return EventProcessor(order_pipeline, voice_pipeline, messaging, reply_deadline=5.0)


@pytest.fixture
def voice_errors() -> dict:
    return {
        "fetch": UpstreamFetchError("content endpoint returned 404"),
        "transcode": TranscodeError("could not decode m4a"),
        "recognition": RecognitionError("quota exceeded"),
    }


# =============================================================================
# API fixtures
# =============================================================================

@pytest.fixture
def api_client() -> Generator[TestClient, None, None]:
    """Create a FastAPI test client."""
    from api.main import app

    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
