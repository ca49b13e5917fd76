"""Decoder for PHP ``serialize()`` values.

Metadata written by the host platform stores structured values in PHP's
serialization format. Only the scalar and array forms are supported:

    N;                 -> None
    b:1;               -> True
    i:42;              -> 42
    d:0.5;             -> 0.5
    s:5:"hello";       -> "hello"   (length counts UTF-8 bytes)
    a:2:{i:0;s:1:"a";i:1;s:1:"b";}  -> ["a", "b"]

Arrays whose keys are exactly 0..n-1 in order decode to lists, anything else
to dicts.
"""

from __future__ import annotations

import re
from typing import Any

from meta_map.core.exceptions import SerializationError

_LOOKS_SERIALIZED = re.compile(r'^(?:N;|b:[01];|i:-?\d+;|d:[^;]+;|s:\d+:"|a:\d+:\{)')

_FLOAT_SPECIALS = {"INF": float("inf"), "-INF": float("-inf"), "NAN": float("nan")}

# Deepest array nesting the decoder accepts
_MAX_NESTING = 128


class _Decoder:
    def __init__(self, data: bytes) -> None:
        self._data = data
        self._pos = 0
        self._depth = 0

    def _fail(self, detail: str) -> SerializationError:
        return SerializationError(detail, self._pos)

    def _expect(self, token: bytes) -> None:
        end = self._pos + len(token)
        if self._data[self._pos:end] != token:
            raise self._fail(f"expected {token.decode()!r}")
        self._pos = end

    def _read_until(self, delimiter: bytes) -> str:
        end = self._data.find(delimiter, self._pos)
        if end < 0:
            raise self._fail(f"missing {delimiter.decode()!r}")
        chunk = self._data[self._pos:end]
        self._pos = end + len(delimiter)
        return chunk.decode("ascii", errors="replace")

    def _read_int(self, delimiter: bytes) -> int:
        raw = self._read_until(delimiter)
        try:
            return int(raw)
        except ValueError:
            raise self._fail(f"invalid integer {raw!r}") from None

    def decode(self) -> Any:
        value = self._value()
        if self._pos != len(self._data):
            raise self._fail("trailing data")
        return value

    def _value(self) -> Any:
        tag = self._data[self._pos:self._pos + 1]

        if tag == b"N":
            self._expect(b"N;")
            return None

        if tag == b"b":
            self._expect(b"b:")
            flag = self._read_int(b";")
            if flag not in (0, 1):
                raise self._fail(f"invalid boolean {flag}")
            return bool(flag)

        if tag == b"i":
            self._expect(b"i:")
            return self._read_int(b";")

        if tag == b"d":
            self._expect(b"d:")
            raw = self._read_until(b";")
            if raw in _FLOAT_SPECIALS:
                return _FLOAT_SPECIALS[raw]
            try:
                return float(raw)
            except ValueError:
                raise self._fail(f"invalid float {raw!r}") from None

        if tag == b"s":
            self._expect(b"s:")
            length = self._read_int(b":")
            self._expect(b'"')
            end = self._pos + length
            if length < 0 or end > len(self._data):
                raise self._fail("string length out of range")
            chunk = self._data[self._pos:end]
            self._pos = end
            self._expect(b'";')
            try:
                return chunk.decode("utf-8")
            except UnicodeDecodeError:
                raise self._fail("string is not valid UTF-8") from None

        if tag == b"a":
            self._expect(b"a:")
            size = self._read_int(b":")
            self._expect(b"{")
            self._depth += 1
            if self._depth > _MAX_NESTING:
                raise self._fail("nesting too deep")
            items: dict[Any, Any] = {}
            for _ in range(size):
                key = self._value()
                if not isinstance(key, (int, str)) or isinstance(key, bool):
                    raise self._fail("array keys must be integers or strings")
                items[key] = self._value()
            self._expect(b"}")
            self._depth -= 1
            if list(items.keys()) == list(range(len(items))):
                return list(items.values())
            return items

        raise self._fail(f"unsupported type tag {tag.decode(errors='replace')!r}")


def unserialize(text: str | bytes) -> Any:
    """Decode a PHP-serialized value.

    Raises:
        SerializationError: If the input is malformed or has trailing data.
    """
    data = text.encode("utf-8") if isinstance(text, str) else text
    return _Decoder(data).decode()


def is_serialized(value: Any) -> bool:
    """Return True if *value* is a string shaped like a serialized value."""
    if not isinstance(value, str):
        return False
    return bool(_LOOKS_SERIALIZED.match(value.strip()))


def maybe_unserialize(value: Any) -> Any:
    """Decode *value* when it is a cleanly serialized string.

    Anything else, including strings that fail to decode, is returned
    unchanged. Never raises.
    """
    if not is_serialized(value):
        return value
    try:
        return unserialize(value.strip())
    except SerializationError:
        return value
