# NOTE: All imports except the basic ones are very lazy in this module. Let's keep it that way.
import logging
from collections.abc import Callable
from contextlib import suppress
from functools import wraps
from pathlib import Path
from typing import TYPE_CHECKING
from typing import Any
from typing import TypeVar
from typing import cast

import click

from niltx import __version__
from niltx import env

if TYPE_CHECKING:
    from niltx.models import TransactionRecord

STDIN = '-'

_logger = logging.getLogger(__name__)


def echo(message: str, err: bool = False, **styles: Any) -> None:
    with suppress(BrokenPipeError):
        click.secho(message, err=err, **styles)


def green_echo(message: str) -> None:
    echo(message, fg='green')


def red_echo(message: str) -> None:
    echo(message, err=True, fg='red')


WrappedCommandT = TypeVar('WrappedCommandT', bound=Callable[..., None])


def _cli_wrapper(fn: WrappedCommandT) -> WrappedCommandT:
    @wraps(fn)
    def wrapper(ctx: click.Context, *args: Any, **kwargs: Any) -> None:
        from niltx.exceptions import Error

        try:
            fn(ctx, *args, **kwargs)
        except Error as e:
            red_echo(str(e))
            echo(e.help(), err=True)
            ctx.exit(1)

    return cast(WrappedCommandT, wrapper)


def _read(path: str) -> bytes:
    if path == STDIN:
        return click.get_binary_stream('stdin').read()
    return Path(path).read_bytes()


def _parse_document(content: bytes) -> tuple['TransactionRecord | None', ...]:
    """Parse transaction object, array of them, JSON-RPC response or batch response"""
    from collections.abc import Mapping

    from niltx.models import TransactionRecord
    from niltx.rpc import loads
    from niltx.rpc import parse_batch
    from niltx.rpc import parse_response
    from niltx.rpc import parse_transactions

    document = loads(content)
    if isinstance(document, list):
        if document and all(isinstance(item, Mapping) and 'jsonrpc' in item for item in document):
            return parse_batch(document)
        return parse_transactions(document)
    if isinstance(document, Mapping) and ('jsonrpc' in document or 'result' in document or 'error' in document):
        return (parse_response(document),)
    return (TransactionRecord.from_json(document),)


@click.group(context_settings={'max_content_width': 120})
@click.version_option(__version__)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Validate and normalize =nil; JSON-RPC transaction objects."""
    # NOTE: Test runner captures logs on its own
    if not env.TEST:
        from niltx.sys import set_up_logging

        set_up_logging()


@cli.command()
@click.argument('paths', type=click.Path(exists=True, dir_okay=False, allow_dash=True), nargs=-1, required=True)
@click.pass_context
@_cli_wrapper
def parse(ctx: click.Context, paths: tuple[str, ...]) -> None:
    """Print normalized transactions as JSON array.

    Each PATH (or `-` for stdin) may contain a transaction object, an array of them, a JSON-RPC response or a batch of responses.
    Unknown transactions (`"result": null`) are printed as `null`.
    """
    from niltx.utils import json_dumps

    result: list[dict[str, Any] | None] = []
    for path in paths:
        _logger.debug('Parsing `%s`', path)
        records = _parse_document(_read(path))
        result.extend(record.to_json() if record is not None else None for record in records)

    echo(json_dumps(result).decode())


@cli.command()
@click.argument('paths', type=click.Path(exists=True, dir_okay=False, allow_dash=True), nargs=-1, required=True)
@click.pass_context
@_cli_wrapper
def check(ctx: click.Context, paths: tuple[str, ...]) -> None:
    """Validate files without printing transactions.

    Prints a line per PATH and exits with code 1 if any of them is invalid.
    """
    from niltx.exceptions import Error

    failed = False
    for path in paths:
        try:
            records = _parse_document(_read(path))
        except Error as e:
            red_echo(f'{path}: {e}')
            failed = True
            continue

        found = sum(1 for record in records if record is not None)
        green_echo(f'{path}: {found} transaction(s) OK')

    if failed:
        ctx.exit(1)


@cli.command(name='env')
@click.pass_context
@_cli_wrapper
def env_(ctx: click.Context) -> None:
    """Print `NILTX_*` environment variables."""
    for key, value in sorted(env.dump().items()):
        echo(f'NILTX_{key}={value}')
