from typing import Any

import orjson
import pytest

from niltx.enums import TransactionFlag
from niltx.exceptions import InvalidTypeError
from niltx.exceptions import MalformedHexError
from niltx.exceptions import MissingFieldError
from niltx.exceptions import RpcError
from niltx.models import TransactionRecord
from niltx.rpc import loads
from niltx.rpc import parse_batch
from niltx.rpc import parse_response
from niltx.rpc import parse_transactions
from niltx.rpc import unwrap
from tests import RESPONSES_PATH
from tests import load_response


def test_parse_response() -> None:
    record = parse_response(load_response('eth_getTransactionByHash.json'))

    assert isinstance(record, TransactionRecord)
    assert record.flags == (TransactionFlag.external,)
    assert record.gas == 21000
    assert record.nonce == 0
    assert record.position == 0


def test_parse_response_raw() -> None:
    content = (RESPONSES_PATH / 'eth_getTransactionByHash.json').read_bytes()
    assert parse_response(content) == parse_response(content.decode())
    assert parse_response(content) == parse_response(load_response('eth_getTransactionByHash.json'))


def test_parse_response_not_found() -> None:
    assert parse_response(load_response('not_found.json')) is None


def test_parse_response_error(caplog: pytest.LogCaptureFixture) -> None:
    with pytest.raises(RpcError) as exc_info:
        parse_response(load_response('error.json'))

    assert exc_info.value.code == -32602
    assert exc_info.value.message.startswith('invalid argument 0')
    assert 'Node returned an error for request `3`' in caplog.text


def test_unwrap_plain_error() -> None:
    with pytest.raises(RpcError) as exc_info:
        unwrap({'jsonrpc': '2.0', 'id': 1, 'error': 'boom'})
    assert exc_info.value.message == 'boom'
    assert exc_info.value.code is None


def test_unwrap_no_result() -> None:
    with pytest.raises(MissingFieldError) as exc_info:
        unwrap({'jsonrpc': '2.0', 'id': 1})
    assert exc_info.value.field == 'result'


@pytest.mark.parametrize('envelope', [None, [], 'result'])
def test_unwrap_not_object(envelope: Any) -> None:
    with pytest.raises(InvalidTypeError):
        unwrap(envelope)


def test_loads() -> None:
    assert loads(b'{"a": 1}') == {'a': 1}
    assert loads('[1]') == [1]
    assert loads({'a': 1}) == {'a': 1}

    with pytest.raises(InvalidTypeError) as exc_info:
        loads(b'{"a": ')
    assert exc_info.value.field == '<payload>'


def test_parse_response_invalid_result() -> None:
    envelope = load_response('eth_getTransactionByHash.json')
    envelope['result']['hash'] = '0x00'
    with pytest.raises(MalformedHexError) as exc_info:
        parse_response(envelope)
    assert exc_info.value.field == 'hash'


def test_parse_transactions() -> None:
    first = load_response('transaction.json')
    second = load_response('eth_getTransactionByHash.json')['result']

    records = parse_transactions([first, second])

    assert [record.hash for record in records] == [first['hash'], second['hash']]
    assert parse_transactions([]) == ()


def test_parse_transactions_not_array() -> None:
    with pytest.raises(InvalidTypeError):
        parse_transactions(load_response('transaction.json'))  # type: ignore[arg-type]


def test_parse_batch() -> None:
    records = parse_batch(load_response('batch.json'))

    assert len(records) == 2
    first, second = records
    assert first is not None
    assert first.flags == (TransactionFlag.internal, TransactionFlag.response)
    assert first.success is False
    assert first.index is None
    assert first.value == 15
    assert second is None


def test_parse_batch_keeps_order_without_ids() -> None:
    batch = load_response('batch.json')
    batch[0]['id'] = 'b'
    batch[1]['id'] = 'a'

    records = parse_batch(orjson.dumps(batch))

    assert records[0] is None
    assert records[1] is not None


def test_parse_batch_error() -> None:
    batch = load_response('batch.json')
    batch.append(load_response('error.json'))
    with pytest.raises(RpcError):
        parse_batch(batch)


def test_parse_batch_not_array() -> None:
    with pytest.raises(InvalidTypeError):
        parse_batch(load_response('not_found.json'))  # type: ignore[arg-type]
