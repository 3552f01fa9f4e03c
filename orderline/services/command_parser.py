"""
Command Parser

Turns a chat message into an OrderRequest.

Recognized shape (each name field is a single run of Thai script):

    [customer] สั่ง item quantity [unit] [ส่งโดย deliverer]

e.g. "ลูกค้า สั่ง ข้าว 3 ถุง ส่งโดย แดง"

Words after the last matched field are ignored.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from orderline.models.orders import (
    DEFAULT_CUSTOMER,
    DEFAULT_DELIVERY_TARGET,
    DEFAULT_UNIT,
    OrderRequest,
    ParseFailure,
    ParseResult,
)

logger = logging.getLogger(__name__)


class TokenKind(str, Enum):
    WORD = "word"
    NUMBER = "number"
    ORDER = "order"
    DELIVERY = "delivery"
    OTHER = "other"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str


# Keyword table. Longest first so a keyword is never shadowed by its prefix.
KEYWORDS = {
    "ส่งโดย": TokenKind.DELIVERY,
    "สั่ง": TokenKind.ORDER,
}

_KEYWORD_RE = re.compile("|".join(re.escape(k) for k in sorted(KEYWORDS, key=len, reverse=True)))

_TOKEN_RE = re.compile(
    r"(?P<number>[0-9]+)"
    r"|(?P<word>[\u0E00-\u0E7F]+)"
    r"|(?P<space>\s+)"
    r"|(?P<other>.)",
    re.DOTALL,
)

# Failure reasons
MISSING_KEYWORD = "missing_keyword"
MISSING_ITEM = "missing_item"
MISSING_QUANTITY = "missing_quantity"
INVALID_QUANTITY = "invalid_quantity"


def tokenize(text: str) -> List[Token]:
    """Split text into tokens. Keywords are split out of Thai runs."""
    tokens: List[Token] = []
    for match in _TOKEN_RE.finditer(text):
        kind = match.lastgroup
        value = match.group()
        if kind == "space":
            continue
        if kind == "word":
            tokens.extend(_split_keywords(value))
        elif kind == "number":
            tokens.append(Token(TokenKind.NUMBER, value))
        else:
            tokens.append(Token(TokenKind.OTHER, value))
    return tokens


def _split_keywords(run: str) -> List[Token]:
    tokens = []
    pos = 0
    for match in _KEYWORD_RE.finditer(run):
        if match.start() > pos:
            tokens.append(Token(TokenKind.WORD, run[pos:match.start()]))
        tokens.append(Token(KEYWORDS[match.group()], match.group()))
        pos = match.end()
    if pos < len(run):
        tokens.append(Token(TokenKind.WORD, run[pos:]))
    return tokens


def _take_word(tokens: List[Token], pos: int) -> Tuple[Optional[str], int]:
    """Consume one WORD token at pos, if there is one."""
    if pos < len(tokens) and tokens[pos].kind == TokenKind.WORD:
        return tokens[pos].text, pos + 1
    return None, pos


def _preceding_word(tokens: List[Token], end: int) -> Optional[str]:
    """The WORD token directly before index `end`."""
    if end > 0 and tokens[end - 1].kind == TokenKind.WORD:
        return tokens[end - 1].text
    return None


def _parse_from(tokens: List[Token], keyword_pos: int) -> ParseResult:
    """Match the tail of the grammar after the order keyword at keyword_pos."""
    item, pos = _take_word(tokens, keyword_pos + 1)
    if item is None:
        return ParseFailure(reason=MISSING_ITEM)

    if pos >= len(tokens) or tokens[pos].kind != TokenKind.NUMBER:
        return ParseFailure(reason=MISSING_QUANTITY)
    quantity = int(tokens[pos].text, 10)
    if quantity <= 0:
        return ParseFailure(reason=INVALID_QUANTITY)

    unit, pos = _take_word(tokens, pos + 1)

    delivery_target = None
    if pos < len(tokens) and tokens[pos].kind == TokenKind.DELIVERY:
        delivery_target, pos = _take_word(tokens, pos + 1)

    return OrderRequest(
        customer=_preceding_word(tokens, keyword_pos) or DEFAULT_CUSTOMER,
        item=item,
        quantity=quantity,
        unit=unit or DEFAULT_UNIT,
        delivery_target=delivery_target or DEFAULT_DELIVERY_TARGET,
    )


def parse_command(text: str) -> ParseResult:
    """
    Parse an order command.

    Every order keyword is tried in turn; the first one followed by a valid
    item and quantity wins. Returns ParseFailure (never raises) when no
    keyword yields a match.

    Args:
        text: Raw message text or voice transcript

    Returns:
        OrderRequest with defaults applied, or ParseFailure
    """
    tokens = tokenize(text or "")

    failure = ParseFailure(reason=MISSING_KEYWORD)
    for pos, token in enumerate(tokens):
        if token.kind != TokenKind.ORDER:
            continue
        result = _parse_from(tokens, pos)
        if isinstance(result, OrderRequest):
            return result
        failure = result

    logger.debug(f"Command not understood ({failure.reason}): {text!r}")
    return failure
