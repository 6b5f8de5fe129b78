import textwrap
from abc import ABC
from abc import abstractmethod
from dataclasses import dataclass
from dataclasses import fields
from typing import Any

tab = ('_' * 80) + '\n\n'


def unindent(text: str) -> str:
    """Remove indentation from text"""
    return textwrap.dedent(text).strip()


def format_help(help: str) -> str:
    """Format help text"""
    return tab + unindent(help) + '\n'


def shorten(value: Any, width: int = 72) -> str:
    """Repr of a value cut to fit in a single line of help text"""
    text = repr(value)
    if len(text) <= width:
        return text
    return text[: width - 3] + '...'


class Error(ABC, Exception):
    """Base class for _known_ exceptions in this module.

    Instances of this class should have a nice help message explaining the error and how to fix it.
    """

    def __str__(self) -> str:
        if not self.__doc__:
            raise NotImplementedError(f'{self.__class__.__name__} has no docstring')
        details = ', '.join(f'{f.name}={shorten(getattr(self, f.name))}' for f in fields(self))  # type: ignore[arg-type]
        return self.__doc__ + ' -> ' + details

    def help(self) -> str:
        """Return a string containing a help message for this error."""
        return format_help(self._help())

    @classmethod
    def default_help(cls) -> str:
        return format_help(
            """
                An unexpected error has occurred! Most likely it's a bug in niltx.

                Please, include the input that caused it when reporting the issue.
        """
        )

    @abstractmethod
    def _help(self) -> str: ...


class InvalidRecordError(Error, ValueError):
    """Transaction object doesn't match the JSON-RPC schema"""


@dataclass(repr=False)
class MissingFieldError(InvalidRecordError):
    """Required field is missing"""

    field: str

    def _help(self) -> str:
        return f"""
            Field `{self.field}` is required, but it's absent or `null`.

            Only `index` may be omitted; it's absent for transactions not included in a block yet.
        """


@dataclass(repr=False)
class MalformedHexError(InvalidRecordError):
    """Field is not a valid hex string"""

    field: str
    value: Any

    def _help(self) -> str:
        return f"""
            Field `{self.field}` has unexpected value {shorten(self.value)}.

            Byte strings must be `0x` followed by an even number of hex digits; `hash` and `blockHash` are 32 bytes long.
            Quantities (`gasUsed`, `seqno`) must be `0x` followed by at least one hex digit.
        """


@dataclass(repr=False)
class UnknownFlagError(InvalidRecordError):
    """Transaction has an unknown flag"""

    tag: Any

    def _help(self) -> str:
        return f"""
            Flag {shorten(self.tag)} is not one of `Internal`, `External`, `Deploy`, `Refund`, `Bounce`, `Response`.

            Most likely the node API has been changed; update niltx to a version that supports it.
        """


@dataclass(repr=False)
class InvalidNumberError(InvalidRecordError):
    """Field is not a non-negative integer"""

    field: str
    value: Any

    def _help(self) -> str:
        return f"""
            Field `{self.field}` has unexpected value {shorten(self.value)}.

            Expected a JSON number without fraction part, greater than or equal to zero.
        """


@dataclass(repr=False)
class InvalidAmountError(InvalidRecordError):
    """Field is not a decimal integer string"""

    field: str
    value: Any

    def _help(self) -> str:
        return f"""
            Field `{self.field}` has unexpected value {shorten(self.value)}.

            Amounts are encoded as strings of decimal digits, e.g. "1000000000000000000".
            Signs, fractions, exponents and whitespace are not allowed.
        """


@dataclass(repr=False)
class InvalidTypeError(InvalidRecordError):
    """Field has unexpected JSON type"""

    field: str
    expected: str
    value: Any

    def _help(self) -> str:
        return f"""
            Field `{self.field}` must be {self.expected}, got {type(self.value).__name__} {shorten(self.value)}.
        """


@dataclass(repr=False)
class RpcError(Error):
    """Node returned a JSON-RPC error"""

    message: str
    code: int | None = None

    def _help(self) -> str:
        return f"""
            Node responded with error {self.code if self.code is not None else '(no code)'}:

              {self.message}

            Make sure that the method and its params are correct and the node is synced.
        """
