"""Helpers to unwrap JSON-RPC 2.0 responses carrying transaction objects.

Transport is out of scope; these functions accept payloads already received by an HTTP or WebSocket client.
"""

import logging
from collections.abc import Mapping
from collections.abc import Sequence
from typing import Any

import orjson

from niltx.exceptions import InvalidTypeError
from niltx.exceptions import MissingFieldError
from niltx.exceptions import RpcError
from niltx.models import TransactionRecord

_logger = logging.getLogger(__name__)


def loads(payload: bytes | str | Any) -> Any:
    """Decode raw payload; already decoded objects are returned as is"""
    if not isinstance(payload, bytes | bytearray | str):
        return payload
    try:
        return orjson.loads(payload)
    except orjson.JSONDecodeError as e:
        raise InvalidTypeError('<payload>', 'JSON', payload) from e


def unwrap(envelope: Any) -> Any:
    """Return `result` member of JSON-RPC response or raise `RpcError`"""
    if not isinstance(envelope, Mapping):
        raise InvalidTypeError('<response>', 'an object', envelope)

    if (error := envelope.get('error')) is not None:
        if isinstance(error, Mapping):
            message, code = str(error.get('message', '')), error.get('code')
        else:
            message, code = str(error), None
        _logger.warning('Node returned an error for request `%s`: %s', envelope.get('id'), message)
        raise RpcError(message, code)

    if 'result' not in envelope:
        raise MissingFieldError('result')
    return envelope['result']


def parse_response(payload: bytes | str | Mapping[str, Any]) -> TransactionRecord | None:
    """Parse response of a transaction lookup method; `None` means the transaction is unknown to the node"""
    result = unwrap(loads(payload))
    if result is None:
        return None
    return TransactionRecord.from_json(result)


def parse_transactions(items: Sequence[Mapping[str, Any]]) -> tuple[TransactionRecord, ...]:
    """Parse list of transaction objects, e.g. `transactions` of a full block"""
    if not isinstance(items, Sequence) or isinstance(items, str | bytes):
        raise InvalidTypeError('transactions', 'an array', items)
    return tuple(TransactionRecord.from_json(item) for item in items)


def parse_batch(payload: bytes | str | Sequence[Mapping[str, Any]]) -> tuple[TransactionRecord | None, ...]:
    """Parse batch response; results are ordered by request id when every id is an integer"""
    envelopes = loads(payload)
    if not isinstance(envelopes, list):
        raise InvalidTypeError('<batch>', 'an array', envelopes)

    # NOTE: Servers may return batch responses in any order
    ids = [envelope.get('id') if isinstance(envelope, Mapping) else None for envelope in envelopes]
    if all(isinstance(id_, int) and not isinstance(id_, bool) for id_ in ids):
        envelopes = sorted(envelopes, key=lambda envelope: envelope['id'])

    return tuple(parse_response(envelope) for envelope in envelopes)
