"""Tests for the command parser."""

import pytest

from orderline.models.orders import OrderRequest, ParseFailure
from orderline.services.command_parser import (
    INVALID_QUANTITY,
    MISSING_ITEM,
    MISSING_KEYWORD,
    MISSING_QUANTITY,
    TokenKind,
    parse_command,
    tokenize,
)


def test_parse_full_command():
    """All optional fields present."""
    result = parse_command("ลูกค้า สั่ง ข้าว 3 ถุง ส่งโดย แดง")

    assert isinstance(result, OrderRequest)
    assert result.customer == "ลูกค้า"
    assert result.item == "ข้าว"
    assert result.quantity == 3
    assert result.unit == "ถุง"
    assert result.delivery_target == "แดง"


def test_parse_minimal_command_applies_defaults():
    result = parse_command("สั่ง ข้าว 3")

    assert isinstance(result, OrderRequest)
    assert result.customer == "ลูกค้าไม่ระบุ"
    assert result.item == "ข้าว"
    assert result.quantity == 3
    assert result.unit == "ชิ้น"
    assert result.delivery_target == "ไม่ระบุ"


def test_parse_without_spaces():
    """Thai is usually written without spaces between words."""
    result = parse_command("สั่งข้าว3ถุงส่งโดยแดง")

    assert isinstance(result, OrderRequest)
    assert result.item == "ข้าว"
    assert result.quantity == 3
    assert result.unit == "ถุง"
    assert result.delivery_target == "แดง"


def test_delivery_keyword_is_not_taken_as_unit():
    result = parse_command("สั่ง ข้าว 2 ส่งโดย สมชาย")

    assert isinstance(result, OrderRequest)
    assert result.unit == "ชิ้น"
    assert result.delivery_target == "สมชาย"


def test_name_fields_take_one_thai_run():
    result = parse_command("ป้า แดง สั่ง น้ำ ปลา 2 ขวด")

    # Only the run right before the keyword is the customer; "ปลา" is not a quantity
    assert isinstance(result, ParseFailure)
    assert result.reason == MISSING_QUANTITY

    result = parse_command("ป้า แดง สั่ง น้ำปลา 2 ขวด")

    assert isinstance(result, OrderRequest)
    assert result.customer == "แดง"
    assert result.item == "น้ำปลา"


def test_trailing_text_is_ignored():
    result = parse_command("สั่ง ไข่ 1 แผง ด่วน!! ok")

    assert isinstance(result, OrderRequest)
    assert result.unit == "แผง"
    assert result.quantity == 1


def test_polite_particle_after_unit_is_ignored():
    result = parse_command("สั่ง ข้าว 3 ถุง ครับ")

    assert isinstance(result, OrderRequest)
    assert result.unit == "ถุง"
    assert result.delivery_target == "ไม่ระบุ"


def test_leading_latin_text_is_not_customer():
    result = parse_command("hello สั่ง ไข่ 1")

    assert isinstance(result, OrderRequest)
    assert result.customer == "ลูกค้าไม่ระบุ"


def test_transcript_punctuation():
    """Recognizer output carries punctuation."""
    result = parse_command("สั่งข้าว 5 ถุง.")

    assert isinstance(result, OrderRequest)
    assert result.quantity == 5
    assert result.unit == "ถุง"


def test_second_keyword_used_when_first_fails():
    result = parse_command("สั่ง อะไรดี สั่ง ข้าว 2")

    assert isinstance(result, OrderRequest)
    assert result.item == "ข้าว"
    assert result.customer == "อะไรดี"


@pytest.mark.parametrize("text,reason", [
    ("ข้าว 3 ถุง", MISSING_KEYWORD),
    ("", MISSING_KEYWORD),
    ("order rice 3", MISSING_KEYWORD),
    ("สั่ง 3 ถุง", MISSING_ITEM),
    ("สั่ง ข้าว ถุง", MISSING_QUANTITY),
    ("สั่ง ข้าว -3", MISSING_QUANTITY),
    ("สั่ง ข้าว 0 ถุง", INVALID_QUANTITY),
    ("ไม่ชัดค่ะ", MISSING_KEYWORD),
])
def test_parse_failures(text, reason):
    result = parse_command(text)

    assert isinstance(result, ParseFailure)
    assert result.reason == reason


def test_fractional_quantity_reads_integer_part():
    """Only the integer part before the dot is read; the rest is trailing text."""
    result = parse_command("สั่ง ข้าว 1.5 ถุง")

    assert isinstance(result, OrderRequest)
    assert result.quantity == 1
    assert result.unit == "ชิ้น"


def test_thai_digits_are_not_a_quantity():
    result = parse_command("สั่ง ข้าว ๓ ถุง")

    assert isinstance(result, ParseFailure)


def test_tokenize_splits_keywords_out_of_runs():
    tokens = tokenize("ลูกค้าสั่งข้าว 3")

    assert [t.kind for t in tokens] == [
        TokenKind.WORD, TokenKind.ORDER, TokenKind.WORD, TokenKind.NUMBER,
    ]
    assert tokens[0].text == "ลูกค้า"
    assert tokens[2].text == "ข้าว"
