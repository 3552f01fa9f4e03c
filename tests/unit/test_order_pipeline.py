"""Tests for the order pipeline."""

import asyncio

import pytest

from orderline import messages
from orderline.errors import StoreUnavailable
from orderline.models.common import FailureKind
from orderline.services.order_pipeline import OrderPipeline
from orderline.services.order_recorder import OrderRecorder
from orderline.storage import SqliteOrderStore


class FailingRecorder:
    async def append(self, request, unit_price):
        raise StoreUnavailable("disk I/O error")


class SlowRecorder:
    """Delays each append so a caller deadline can expire mid-commit."""

    def __init__(self, recorder, delay: float):
        self.recorder = recorder
        self.delay = delay

    async def append(self, request, unit_price):
        await asyncio.sleep(self.delay)
        return await self.recorder.append(request, unit_price)


def test_successful_order_commits_and_replies(order_pipeline, quantity_of, order_count):
    outcome = asyncio.run(order_pipeline.place_order("ลูกค้า สั่ง ข้าว 3 ถุง ส่งโดย แดง"))

    assert outcome.succeeded
    assert outcome.order.total == 150
    assert outcome.reply == "ลูกค้า ค่ะ!\nข้าว 3ถุง = 150฿\nส่งโดย แดง\nรหัส: 1"
    assert quantity_of("ข้าว", "ถุง") == 7
    assert order_count() == 1


def test_default_unit_resolves_piece_row(order_pipeline, quantity_of):
    outcome = asyncio.run(order_pipeline.place_order("สั่ง ข้าว 2"))

    assert outcome.succeeded
    assert outcome.order.unit == "ชิ้น"
    assert outcome.order.total == 40
    assert quantity_of("ข้าว", "ชิ้น") == 3


def test_trailing_particle_still_commits(order_pipeline, quantity_of):
    outcome = asyncio.run(order_pipeline.place_order("สั่ง ข้าว 3 ถุง ครับ"))

    assert outcome.succeeded
    assert outcome.order.unit == "ถุง"
    assert quantity_of("ข้าว", "ถุง") == 7


def test_parse_failure_reply(order_pipeline, order_count):
    outcome = asyncio.run(order_pipeline.place_order("สวัสดีค่ะ"))

    assert outcome.failure == FailureKind.PARSE_FAILURE
    assert outcome.reply == messages.NOT_UNDERSTOOD
    assert order_count() == 0


def test_insufficient_stock_changes_nothing(order_pipeline, quantity_of, order_count):
    outcome = asyncio.run(order_pipeline.place_order("สั่ง ข้าว 11 ถุง"))

    assert outcome.failure == FailureKind.INSUFFICIENT_STOCK
    assert outcome.reply == "สต็อกข้าวไม่พอ!"
    assert quantity_of("ข้าว", "ถุง") == 10
    assert order_count() == 0


def test_zero_stock_item_is_out_of_stock(order_pipeline):
    outcome = asyncio.run(order_pipeline.place_order("สั่ง น้ำปลา 1 ขวด"))

    assert outcome.failure == FailureKind.INSUFFICIENT_STOCK


def test_unknown_item_is_reported_as_not_found(order_pipeline, order_count):
    outcome = asyncio.run(order_pipeline.place_order("สั่ง กาแฟ 1 ถุง"))

    assert outcome.failure == FailureKind.ITEM_NOT_FOUND
    assert outcome.reply == "ไม่พบสินค้า กาแฟ (ถุง) ในสต็อกค่ะ"
    assert order_count() == 0


def test_failed_recording_returns_stock(ledger, quantity_of):
    pipeline = OrderPipeline(ledger, FailingRecorder())

    outcome = asyncio.run(pipeline.place_order("สั่ง ข้าว 4 ถุง"))

    assert outcome.failure == FailureKind.STORE_UNAVAILABLE
    assert outcome.reply == messages.CONNECTION_ERROR
    assert quantity_of("ข้าว", "ถุง") == 10


def test_concurrent_orders_from_different_users(order_pipeline, quantity_of, order_count):
    texts = [f"สั่ง ไข่ 1 แผง ส่งโดย {name}" for name in ("แดง", "ดำ", "ขาว", "เขียว", "ฟ้า", "ม่วง")]

    async def run():
        return await asyncio.gather(*(order_pipeline.place_order(t) for t in texts))

    outcomes = asyncio.run(run())

    accepted = [o for o in outcomes if o.succeeded]
    assert len(accepted) == 4
    assert quantity_of("ไข่", "แผง") == 0
    assert order_count() == 4
    assert len({o.order.sequence_number for o in accepted}) == 4


def test_commit_outlives_caller_timeout_and_is_drained(ledger, recorder, dispatcher, quantity_of, order_count):
    pipeline = OrderPipeline(ledger, SlowRecorder(recorder, delay=0.1), dispatcher=dispatcher)

    async def run():
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(pipeline.place_order("สั่ง ข้าว 2 ถุง"), timeout=0.01)
        assert dispatcher.pending == 1
        await dispatcher.drain(timeout=5.0)

    asyncio.run(run())

    assert dispatcher.pending == 0
    assert quantity_of("ข้าว", "ถุง") == 8
    assert order_count() == 1


def test_unopenable_order_database_returns_stock(ledger, temp_dir, quantity_of):
    blocker = temp_dir / "not-a-dir"
    blocker.write_text("")
    recorder = OrderRecorder(SqliteOrderStore(str(blocker / "orders.db")))
    pipeline = OrderPipeline(ledger, recorder)

    outcome = asyncio.run(pipeline.place_order("สั่ง ข้าว 4 ถุง"))

    assert outcome.failure == FailureKind.STORE_UNAVAILABLE
    assert quantity_of("ข้าว", "ถุง") == 10
