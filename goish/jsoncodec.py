"""JSON encoding and decoding of plain Python values, with streaming support.

Values are ``None``, ``bool``, ``int``, ``float``, ``str``, ``list`` and
``dict`` with string keys. Encoded objects always list their keys in sorted
order.
"""

from __future__ import annotations

import codecs
import enum
import json
import math
import operator
import re
from typing import Any

from .streams import Reader, ShortWrite, UnexpectedEOF, Writer

_CHUNK_SIZE = 4096
_WHITESPACE = re.compile(r"[ \t\n\r]*")
_NUMBER_START = frozenset("-0123456789")
_VALUE_START = frozenset('{["tfn') | _NUMBER_START


class JSONError(ValueError):
    """Raised when a value cannot be encoded or a document cannot be decoded."""


def _reject_constant(name: str) -> Any:
    raise JSONError(f"unmarshal error: invalid literal {name}")


def _make_decoder(use_number: bool = False) -> json.JSONDecoder:
    if use_number:
        return json.JSONDecoder(
            parse_int=str, parse_float=str, parse_constant=_reject_constant
        )
    return json.JSONDecoder(parse_constant=_reject_constant)


def _dumps(value: Any, indent: str | None = None, prefix: str = "") -> str:
    separators = (",", ":") if indent is None else (",", ": ")
    try:
        text = json.dumps(
            value,
            ensure_ascii=False,
            allow_nan=False,
            sort_keys=True,
            separators=separators,
            indent=indent,
        )
    except (TypeError, ValueError, RecursionError) as exc:
        raise JSONError(f"marshal error: {exc}") from exc
    if indent is not None and prefix:
        text = text.replace("\n", "\n" + prefix)
    return text


def _loads(text: str) -> Any:
    try:
        return _make_decoder().decode(text)
    except json.JSONDecodeError as exc:
        raise JSONError(f"unmarshal error: {exc}") from exc


def _escape_html(text: str) -> str:
    # These characters can only appear inside string literals of encoded JSON.
    return (
        text.replace("&", "\\u0026").replace("<", "\\u003c").replace(">", "\\u003e")
    )


def _to_text(data: bytes | bytearray | memoryview) -> str:
    try:
        return bytes(data).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise JSONError(f"unmarshal error: invalid UTF-8: {exc}") from exc


# ---------------------------------------------------------------- core API


def marshal(value: Any) -> bytes:
    """Return the compact JSON encoding of ``value`` as UTF-8 bytes."""
    return _dumps(value).encode("utf-8")


def marshal_string(value: Any) -> str:
    """Return the compact JSON encoding of ``value`` as text."""
    return _dumps(value)


def unmarshal(data: bytes | bytearray | memoryview) -> Any:
    """Parse one JSON document from UTF-8 bytes."""
    return _loads(_to_text(data))


def unmarshal_string(data: str) -> Any:
    """Parse one JSON document from text."""
    return _loads(data)


def valid(data: bytes | bytearray | memoryview) -> bool:
    """Report whether ``data`` holds exactly one valid JSON document."""
    try:
        unmarshal(data)
    except JSONError:
        return False
    return True


def valid_string(data: str) -> bool:
    """Report whether ``data`` holds exactly one valid JSON document."""
    try:
        unmarshal_string(data)
    except JSONError:
        return False
    return True


def compact(src: bytes | bytearray | memoryview) -> bytes:
    """Return ``src`` re-encoded without insignificant whitespace."""
    return marshal(unmarshal(src))


def indent(src: bytes | bytearray | memoryview, prefix: str, indent: str) -> bytes:
    """Return ``src`` with one element per line, each line after the first led by ``prefix``."""
    return _dumps(unmarshal(src), indent=indent, prefix=prefix).encode("utf-8")


def new_encoder(writer: Writer) -> Encoder:
    return Encoder(writer)


def new_decoder(reader: Reader) -> Decoder:
    return Decoder(reader)


# ---------------------------------------------------------------- streaming


class Encoder:
    """Writes JSON values, each followed by a newline, to a Writer."""

    def __init__(self, writer: Writer) -> None:
        self._writer = writer
        self._prefix = ""
        self._indent = ""
        self._escape_html = True

    def encode(self, value: Any) -> None:
        """Write the encoding of ``value`` and a trailing newline."""
        if self._prefix or self._indent:
            text = _dumps(value, indent=self._indent, prefix=self._prefix)
        else:
            text = _dumps(value)
        if self._escape_html:
            text = _escape_html(text)
        data = (text + "\n").encode("utf-8")
        if self._writer.write(data) != len(data):
            raise ShortWrite()

    def set_indent(self, prefix: str, indent: str) -> None:
        """Put each element on its own line, led by ``prefix`` and nested ``indent``."""
        self._prefix = prefix
        self._indent = indent

    def set_escape_html(self, escape: bool) -> None:
        """Choose whether ``<``, ``>`` and ``&`` inside strings are escaped."""
        self._escape_html = escape


class _Delim(str):
    """A structural token: one of ``[``, ``]``, ``{`` or ``}``."""

    def __repr__(self) -> str:
        return f"Delim({str.__repr__(self)})"


class _State(enum.Enum):
    TOP_VALUE = enum.auto()
    ARRAY_START = enum.auto()
    ARRAY_VALUE = enum.auto()
    ARRAY_COMMA = enum.auto()
    OBJECT_START = enum.auto()
    OBJECT_KEY = enum.auto()
    OBJECT_COLON = enum.auto()
    OBJECT_VALUE = enum.auto()
    OBJECT_COMMA = enum.auto()


_VALUE_ALLOWED = frozenset(
    {_State.TOP_VALUE, _State.ARRAY_START, _State.ARRAY_VALUE, _State.OBJECT_VALUE}
)


class Decoder:
    """Reads a sequence of JSON values, or their tokens, from a Reader."""

    def __init__(self, reader: Reader) -> None:
        self._reader = reader
        self._text = ""
        self._pos = 0
        self._eof = False
        self._utf8 = codecs.getincrementaldecoder("utf-8")()
        self._use_number = False
        self._disallow_unknown_fields = False
        self._state = _State.TOP_VALUE
        self._stack: list[_State] = []

    # -- buffering

    def _fill(self) -> bool:
        """Append more input to the buffer; return False once the input is exhausted."""
        if self._eof:
            return False
        if self._pos:
            self._text = self._text[self._pos:]
            self._pos = 0
        chunk = self._reader.read(_CHUNK_SIZE)
        try:
            if chunk:
                self._text += self._utf8.decode(chunk)
            else:
                self._eof = True
                self._text += self._utf8.decode(b"", final=True)
        except UnicodeDecodeError as exc:
            raise JSONError(f"unmarshal error: invalid UTF-8: {exc}") from exc
        return True

    def _peek(self) -> str | None:
        """Skip whitespace and return the next character, or None at end of input."""
        while True:
            self._pos = _WHITESPACE.match(self._text, self._pos).end()
            if self._pos < len(self._text):
                return self._text[self._pos]
            if not self._fill():
                return None

    def _scan_value(self) -> Any:
        decoder = _make_decoder(self._use_number)
        while True:
            try:
                value, end = decoder.raw_decode(self._text, self._pos)
            except json.JSONDecodeError as exc:
                if self._fill():
                    continue
                raise JSONError(f"unmarshal error: {exc}") from exc
            # A number touching the end of the buffer may continue in the next chunk.
            if (
                end == len(self._text)
                and self._text[self._pos] in _NUMBER_START
                and self._fill()
            ):
                continue
            self._pos = end
            return value

    # -- token state

    def _end_of_input(self) -> Exception:
        if self._stack or self._state is not _State.TOP_VALUE:
            return UnexpectedEOF()
        return EOFError("EOF")

    def _expect(self, char: str, message: str) -> None:
        found = self._peek()
        if found is None:
            raise UnexpectedEOF()
        if found != char:
            raise JSONError(message)
        self._pos += 1

    def _prepare_for_decode(self) -> None:
        if self._state is _State.ARRAY_COMMA:
            self._expect(",", "expected comma after array element")
            self._state = _State.ARRAY_VALUE
        elif self._state is _State.OBJECT_COLON:
            self._expect(":", "expected colon after object key")
            self._state = _State.OBJECT_VALUE

    def _value_end(self) -> None:
        if self._state in (_State.ARRAY_START, _State.ARRAY_VALUE):
            self._state = _State.ARRAY_COMMA
        elif self._state is _State.OBJECT_VALUE:
            self._state = _State.OBJECT_COMMA

    def _read_value(self) -> Any:
        found = self._peek()
        if found is None:
            raise self._end_of_input()
        if found not in _VALUE_START:
            raise JSONError(f"unmarshal error: invalid character {found!r} looking for beginning of value")
        value = self._scan_value()
        self._value_end()
        return value

    # -- public API

    def decode(self) -> Any:
        """Read and return the next complete JSON value."""
        self._prepare_for_decode()
        if self._state not in _VALUE_ALLOWED:
            raise JSONError("not at beginning of value")
        return self._read_value()

    def more(self) -> bool:
        """Report whether another element follows in the current array or object."""
        found = self._peek()
        return found is not None and found not in "]}"

    def token(self) -> Any:
        """Return the next token: a delimiter string, an object key, or a scalar value."""
        while True:
            found = self._peek()
            if found is None:
                raise self._end_of_input()
            if found == "[":
                if self._state not in _VALUE_ALLOWED:
                    raise JSONError("unexpected '['")
                self._pos += 1
                self._stack.append(self._state)
                self._state = _State.ARRAY_START
                return _Delim("[")
            if found == "]":
                if self._state not in (_State.ARRAY_START, _State.ARRAY_COMMA):
                    raise JSONError("unexpected ']'")
                self._pos += 1
                self._state = self._stack.pop()
                self._value_end()
                return _Delim("]")
            if found == "{":
                if self._state not in _VALUE_ALLOWED:
                    raise JSONError("unexpected '{'")
                self._pos += 1
                self._stack.append(self._state)
                self._state = _State.OBJECT_START
                return _Delim("{")
            if found == "}":
                if self._state not in (_State.OBJECT_START, _State.OBJECT_COMMA):
                    raise JSONError("unexpected '}'")
                self._pos += 1
                self._state = self._stack.pop()
                self._value_end()
                return _Delim("}")
            if found == ":":
                if self._state is not _State.OBJECT_COLON:
                    raise JSONError("unexpected ':'")
                self._pos += 1
                self._state = _State.OBJECT_VALUE
                continue
            if found == ",":
                if self._state is _State.ARRAY_COMMA:
                    self._pos += 1
                    self._state = _State.ARRAY_VALUE
                    continue
                if self._state is _State.OBJECT_COMMA:
                    self._pos += 1
                    self._state = _State.OBJECT_KEY
                    continue
                raise JSONError("unexpected ','")
            if found == '"' and self._state in (_State.OBJECT_START, _State.OBJECT_KEY):
                key = self._scan_value()
                self._state = _State.OBJECT_COLON
                return key
            if self._state not in _VALUE_ALLOWED:
                raise JSONError(f"unexpected {found!r}")
            return self._read_value()

    def use_number(self) -> None:
        """Decode numbers as their literal text instead of int or float."""
        self._use_number = True

    def disallow_unknown_fields(self) -> None:
        """Record that unknown fields are disallowed; generic values have no fixed fields to check."""
        self._disallow_unknown_fields = True


# ---------------------------------------------------------------- value helpers


def is_null(value: Any) -> bool:
    return value is None


def is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_float(value: Any) -> bool:
    return isinstance(value, float)


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_array(value: Any) -> bool:
    return isinstance(value, list)


def is_object(value: Any) -> bool:
    return isinstance(value, dict)


def get_bool(value: Any, default: bool = False) -> bool:
    return value if is_bool(value) else default


def get_int(value: Any, default: int = 0) -> int:
    return value if is_int(value) else default


def get_float(value: Any, default: float = 0.0) -> float:
    """Return a number as float; integers convert, anything else gives ``default``."""
    if is_float(value) or is_int(value):
        return float(value)
    return default


def get_string(value: Any, default: str = "") -> str:
    return value if is_string(value) else default


def get_array(value: Any, default: list | None = None) -> list:
    if is_array(value):
        return value
    return [] if default is None else default


def get_object(value: Any, default: dict | None = None) -> dict:
    if is_object(value):
        return value
    return {} if default is None else default


def make_null() -> Any:
    """Return the value that the JSON literal ``null`` decodes to."""
    return _loads("null")


def make_bool(value: bool) -> bool:
    return bool(value)


def make_int(value: int) -> int:
    return operator.index(value)


def make_float(value: float) -> float:
    result = float(value)
    if not math.isfinite(result):
        raise JSONError(f"unsupported float value: {result}")
    return result


def make_string(value: str) -> str:
    if not isinstance(value, str):
        raise TypeError("make_string expects str")
    return value


def make_array(value: Any) -> list:
    return list(value)


def make_object(value: Any) -> dict:
    result = dict(value)
    if not all(isinstance(key, str) for key in result):
        raise TypeError("object keys must be strings")
    return result