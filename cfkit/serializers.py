"""Serializers: typed codecs for row keys, column names and values."""

from __future__ import annotations

import json
import pickle
import struct
import uuid
from dataclasses import dataclass
from typing import Any, Callable


@dataclass(frozen=True)
class Serializer:
    """A tagged, bidirectional converter between values and bytes.

    ``kind`` names the value type the serializer handles, so a registry
    of per-column serializers can be inspected without calling them.
    """

    kind: str
    to_bytes: Callable[[Any], bytes]
    from_bytes: Callable[[bytes], Any]

    def __repr__(self) -> str:
        return f"Serializer({self.kind!r})"


def _string_to_bytes(val: str) -> bytes:
    if not isinstance(val, str):
        raise TypeError(f"Expected str, got {type(val).__name__}")
    return val.encode("utf-8")


def _bytes_to_bytes(val: bytes) -> bytes:
    if not isinstance(val, (bytes, bytearray)):
        raise TypeError(f"Expected bytes, got {type(val).__name__}")
    return bytes(val)


def _int_codec(byte_length: int) -> tuple[Callable[[int], bytes], Callable[[bytes], int]]:
    def encode(val: int) -> bytes:
        return int(val).to_bytes(byte_length, byteorder="big", signed=True)

    def decode(raw: bytes) -> int:
        return int.from_bytes(raw, byteorder="big", signed=True)

    return encode, decode


_long_encode, _long_decode = _int_codec(8)
_int_encode, _int_decode = _int_codec(4)

BYTES = Serializer("bytes", _bytes_to_bytes, bytes)
STRING = Serializer("string", _string_to_bytes, lambda raw: raw.decode("utf-8"))
LONG = Serializer("long", _long_encode, _long_decode)
INTEGER = Serializer("integer", _int_encode, _int_decode)
BOOLEAN = Serializer(
    "boolean",
    lambda val: b"\x01" if val else b"\x00",
    lambda raw: raw != b"\x00",
)
DOUBLE = Serializer(
    "double",
    lambda val: struct.pack(">d", val),
    lambda raw: struct.unpack(">d", raw)[0],
)
UUID = Serializer("uuid", lambda val: val.bytes, lambda raw: uuid.UUID(bytes=raw))


def json_value() -> Serializer:
    """JSON-encoded values (UTF-8, sorted keys)."""

    def encode(val: Any) -> bytes:
        return json.dumps(val, sort_keys=True).encode("utf-8")

    def decode(raw: bytes) -> Any:
        return json.loads(raw.decode("utf-8"))

    return Serializer("json", encode, decode)


def pickled(protocol: int = pickle.HIGHEST_PROTOCOL) -> Serializer:
    """Pickle-encoded values. Only use with trusted stores."""
    return Serializer(
        "pickle",
        lambda val: pickle.dumps(val, protocol=protocol),
        pickle.loads,
    )
