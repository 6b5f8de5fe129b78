import logging
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import fields
from typing import Any
from typing import Self

from niltx.enums import TransactionFlag
from niltx.exceptions import InvalidTypeError
from niltx.exceptions import MissingFieldError
from niltx.exceptions import UnknownFlagError
from niltx.utils import hex_to_int
from niltx.utils import int_to_decimal
from niltx.utils import parse_amount
from niltx.utils import parse_hex_bytes
from niltx.utils import parse_hex_quantity
from niltx.utils import parse_number
from niltx.utils import snake_to_camel

HASH_SIZE = 32

_logger = logging.getLogger(__name__)


def parse_flag(tag: Any) -> TransactionFlag:
    if isinstance(tag, TransactionFlag):
        return tag
    try:
        return TransactionFlag(tag)
    except ValueError as e:
        raise UnknownFlagError(tag) from e


def _get(transaction_json: Mapping[str, Any], key: str) -> Any:
    value = transaction_json.get(key)
    if value is None:
        raise MissingFieldError(key)
    return value


def _parse_flags(value: Any) -> tuple[TransactionFlag, ...]:
    if not isinstance(value, list | tuple):
        raise InvalidTypeError('flags', 'an array', value)
    return tuple(parse_flag(tag) for tag in value)


def _parse_bool(field: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise InvalidTypeError(field, 'a boolean', value)
    return value


@dataclass(frozen=True)
class TransactionRecord:
    """Transaction as returned by node JSON-RPC API.

    Byte strings and quantities are kept as received; amounts are decoded to `int`.
    `index` is `None` when the transaction is not included in a block.
    """

    flags: tuple[TransactionFlag, ...]
    success: bool
    data: str
    block_hash: str
    block_number: int
    from_: str
    gas_used: str
    fee_credit: int
    max_priority_fee_per_gas: int
    max_fee_per_gas: int
    hash: str
    seqno: str
    to: str
    refund_to: str
    bounce_to: str
    index: str | None
    value: int
    signature: str

    @property
    def gas(self) -> int:
        return hex_to_int(self.gas_used)

    @property
    def nonce(self) -> int:
        return hex_to_int(self.seqno)

    @property
    def position(self) -> int | None:
        if self.index is None:
            return None
        return hex_to_int(self.index)

    def has_flag(self, flag: TransactionFlag | str) -> bool:
        """Check membership of a flag or its wire tag.

        Unlike `is_*` shortcuts, raises `UnknownFlagError` if the tag is not recognized.
        """
        return parse_flag(flag) in self.flags

    @property
    def is_internal(self) -> bool:
        return TransactionFlag.internal in self.flags

    @property
    def is_external(self) -> bool:
        return TransactionFlag.external in self.flags

    @property
    def is_deploy(self) -> bool:
        return TransactionFlag.deploy in self.flags

    @property
    def is_refund(self) -> bool:
        return TransactionFlag.refund in self.flags

    @property
    def is_bounce(self) -> bool:
        return TransactionFlag.bounce in self.flags

    @property
    def is_response(self) -> bool:
        return TransactionFlag.response in self.flags

    @classmethod
    def from_json(cls, transaction_json: Mapping[str, Any]) -> Self:
        if not isinstance(transaction_json, Mapping):
            raise InvalidTypeError('<record>', 'an object', transaction_json)

        for key in sorted(transaction_json.keys() - WIRE_KEYS):
            _logger.debug('Ignoring unknown transaction field `%s`', key)

        # NOTE: Arguments are evaluated in order, so the first invalid field in wire order is reported
        return cls(
            flags=_parse_flags(_get(transaction_json, 'flags')),
            success=_parse_bool('success', _get(transaction_json, 'success')),
            data=parse_hex_bytes('data', _get(transaction_json, 'data')),
            block_hash=parse_hex_bytes('blockHash', _get(transaction_json, 'blockHash'), HASH_SIZE),
            block_number=parse_number('blockNumber', _get(transaction_json, 'blockNumber')),
            from_=parse_hex_bytes('from', _get(transaction_json, 'from')),
            gas_used=parse_hex_quantity('gasUsed', _get(transaction_json, 'gasUsed')),
            fee_credit=parse_amount('feeCredit', _get(transaction_json, 'feeCredit')),
            max_priority_fee_per_gas=parse_amount(
                'maxPriorityFeePerGas',
                _get(transaction_json, 'maxPriorityFeePerGas'),
            ),
            max_fee_per_gas=parse_amount('maxFeePerGas', _get(transaction_json, 'maxFeePerGas')),
            hash=parse_hex_bytes('hash', _get(transaction_json, 'hash'), HASH_SIZE),
            seqno=parse_hex_quantity('seqno', _get(transaction_json, 'seqno')),
            to=parse_hex_bytes('to', _get(transaction_json, 'to')),
            refund_to=parse_hex_bytes('refundTo', _get(transaction_json, 'refundTo')),
            bounce_to=parse_hex_bytes('bounceTo', _get(transaction_json, 'bounceTo')),
            index=(
                parse_hex_bytes('index', transaction_json['index'])
                if transaction_json.get('index') is not None
                else None
            ),
            value=parse_amount('value', _get(transaction_json, 'value')),
            signature=parse_hex_bytes('signature', _get(transaction_json, 'signature')),
        )

    def to_json(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for field in fields(self):
            value = getattr(self, field.name)
            if field.name == 'flags':
                value = [flag.value for flag in value]
            elif field.name in AMOUNT_FIELDS:
                value = int_to_decimal(value)
            elif value is None:
                continue
            result[snake_to_camel(field.name)] = value
        return result


AMOUNT_FIELDS = frozenset(('fee_credit', 'max_priority_fee_per_gas', 'max_fee_per_gas', 'value'))
WIRE_KEYS = frozenset(snake_to_camel(field.name) for field in fields(TransactionRecord))


def parse(raw: Mapping[str, Any]) -> TransactionRecord:
    """Validate JSON-RPC transaction object and convert it to `TransactionRecord`"""
    return TransactionRecord.from_json(raw)


def serialize(record: TransactionRecord) -> dict[str, Any]:
    """Convert `TransactionRecord` back to JSON-RPC transaction object"""
    return record.to_json()
