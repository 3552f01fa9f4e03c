"""
Reply Texts

Fixed user-facing replies, one per outcome.
"""

from orderline.models.common import FailureKind
from orderline.models.orders import Order

NOT_UNDERSTOOD = "ไม่เข้าใจคำสั่งค่ะ"
OUT_OF_STOCK = "สต็อก{item}ไม่พอ!"
ITEM_NOT_FOUND = "ไม่พบสินค้า {item} ({unit}) ในสต็อกค่ะ"
CONNECTION_ERROR = "เชื่อมต่อระบบไม่ได้ กรุณาลองใหม่อีกครั้งค่ะ"
VOICE_FALLBACK = "STT ล้มเหลว ลองส่ง Text แทน"
GENERIC_ERROR = "ระบบขัดข้อง กรุณาลองใหม่อีกครั้งค่ะ"

# Transcript used when the recognizer hears nothing
UNCLEAR_AUDIO = "ไม่ชัดค่ะ"

HEARD_PREFIX = 'ได้ยิน: "{transcript}"'

ORDER_CONFIRMED = (
    "{customer} ค่ะ!\n"
    "{item} {quantity}{unit} = {total}฿\n"
    "ส่งโดย {delivery_target}\n"
    "รหัส: {sequence_number}"
)

_FAILURE_REPLIES = {
    FailureKind.PARSE_FAILURE: NOT_UNDERSTOOD,
    FailureKind.STORE_UNAVAILABLE: CONNECTION_ERROR,
    FailureKind.TRANSIENT_CONFLICT: CONNECTION_ERROR,
    FailureKind.UPSTREAM_FETCH: VOICE_FALLBACK,
    FailureKind.TRANSCODE: VOICE_FALLBACK,
    FailureKind.RECOGNITION: VOICE_FALLBACK,
    FailureKind.TIMEOUT: GENERIC_ERROR,
    FailureKind.INTERNAL: GENERIC_ERROR,
}


def failure_reply(kind: FailureKind, item: str = "", unit: str = "") -> str:
    """Reply text for a failure kind."""
    if kind == FailureKind.INSUFFICIENT_STOCK:
        return OUT_OF_STOCK.format(item=item)
    if kind == FailureKind.ITEM_NOT_FOUND:
        return ITEM_NOT_FOUND.format(item=item, unit=unit)
    return _FAILURE_REPLIES.get(kind, GENERIC_ERROR)


def order_confirmation(order: Order) -> str:
    """Reply text for a committed order."""
    return ORDER_CONFIRMED.format(
        customer=order.customer,
        item=order.item,
        quantity=order.quantity,
        unit=order.unit,
        total=order.total,
        delivery_target=order.delivery_target,
        sequence_number=order.sequence_number,
    )


def heard(transcript: str, reply: str) -> str:
    """Prefix a voice reply with what was heard."""
    return HEARD_PREFIX.format(transcript=transcript) + "\n" + reply
