import re
from typing import Any

import orjson
from humps import main as humps

from niltx.exceptions import InvalidAmountError
from niltx.exceptions import InvalidNumberError
from niltx.exceptions import MalformedHexError

HEX_BYTES_RE = re.compile(r'0x(?:[0-9a-fA-F]{2})*')
HEX_QUANTITY_RE = re.compile(r'0x[0-9a-fA-F]+')
AMOUNT_RE = re.compile(r'[0-9]+')
# NOTE: Below the interpreter limit for int <-> str conversion (4300 digits by default)
DIGITS_CHUNK = 4000


def snake_to_camel(value: str) -> str:
    """humps wrapper for JSON keys; trailing underscore of reserved words is dropped"""
    return humps.camelize(value.rstrip('_'))


def parse_hex_bytes(field: str, value: Any, size: int | None = None) -> str:
    """Validate `0x`-prefixed byte string, optionally of exact size in bytes"""
    if not isinstance(value, str) or not HEX_BYTES_RE.fullmatch(value):
        raise MalformedHexError(field, value)
    if size is not None and len(value) != 2 + size * 2:
        raise MalformedHexError(field, value)
    return value


def parse_hex_quantity(field: str, value: Any) -> str:
    """Validate `0x`-prefixed big integer"""
    if not isinstance(value, str) or not HEX_QUANTITY_RE.fullmatch(value):
        raise MalformedHexError(field, value)
    return value


def parse_amount(field: str, value: Any) -> int:
    """Convert decimal string to arbitrary precision integer"""
    if not isinstance(value, str) or not AMOUNT_RE.fullmatch(value):
        raise InvalidAmountError(field, value)
    return decimal_to_int(value)


def decimal_to_int(value: str) -> int:
    """Convert decimal string of any length to integer regardless of `sys.set_int_max_str_digits`"""
    result = 0
    for i in range(0, len(value), DIGITS_CHUNK):
        chunk = value[i : i + DIGITS_CHUNK]
        result = result * 10 ** len(chunk) + int(chunk)
    return result


def int_to_decimal(value: int) -> str:
    """Convert non-negative integer of any size to decimal string regardless of `sys.set_int_max_str_digits`"""
    chunks: list[int] = []
    base = 10**DIGITS_CHUNK
    while True:
        value, chunk = divmod(value, base)
        chunks.append(chunk)
        if not value:
            break
    head, *tail = reversed(chunks)
    return str(head) + ''.join(f'{chunk:0{DIGITS_CHUNK}d}' for chunk in tail)


def parse_number(field: str, value: Any) -> int:
    """Validate non-negative JSON integer"""
    # NOTE: bool is a subclass of int
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidNumberError(field, value)
    return value


def hex_to_int(value: str) -> int:
    """Decode `0x`-prefixed big-endian integer; empty byte string is zero"""
    return int(value[2:] or '0', 16)


def json_dumps(obj: Any | str, option: int | None = orjson.OPT_INDENT_2) -> bytes:
    """Smarter json.dumps"""
    return orjson.dumps(
        obj,
        option=option,
    )
