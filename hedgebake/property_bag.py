"""A small keyed store of 8-byte values and strings, with a binary file form."""

from __future__ import annotations

import struct
from typing import Any, BinaryIO

_MASK64 = (1 << 64) - 1
_FNV_OFFSET = 0xCBF29CE484222325
_FNV_PRIME = 0x100000001B3

_KINDS = {
    "bool": "?",
    "i8": "b",
    "u8": "B",
    "i16": "h",
    "u16": "H",
    "i32": "i",
    "u32": "I",
    "i64": "q",
    "u64": "Q",
    "f32": "f",
    "f64": "d",
}


def str_hash(name: str) -> int:
    """Return the 64-bit FNV-1a hash of the UTF-8 encoding of ``name``."""
    value = _FNV_OFFSET
    for byte in name.encode("utf-8"):
        value = ((value ^ byte) * _FNV_PRIME) & _MASK64
    return value


def _key(key: str | int) -> int:
    if isinstance(key, str):
        return str_hash(key)
    if isinstance(key, int) and not isinstance(key, bool):
        return key & _MASK64
    raise TypeError(f"property key must be str or int, not {type(key).__name__}")


def _format(kind: str | None, sample: Any) -> str:
    if kind is None:
        if isinstance(sample, bool):
            kind = "bool"
        elif isinstance(sample, int):
            kind = "i64"
        elif isinstance(sample, float):
            kind = "f64"
        elif sample is None:
            kind = "u64"
        else:
            raise TypeError(f"cannot store a value of type {type(sample).__name__}")
    try:
        return "<" + _KINDS[kind]
    except KeyError:
        raise ValueError(f"unknown property kind {kind!r}") from None


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise ValueError("truncated property bag data")
    return data


def _read_cstring(stream: BinaryIO) -> str:
    chunks = bytearray()
    while True:
        byte = _read_exact(stream, 1)
        if byte == b"\0":
            return chunks.decode("utf-8")
        chunks += byte


class PropertyBag:
    """Values keyed by 64-bit hashes; numbers share a raw 8-byte slot."""

    def __init__(self) -> None:
        self.properties: dict[int, int] = {}
        self.string_properties: dict[int, str] = {}

    def get(self, key: str | int, default: Any = None, kind: str | None = None) -> Any:
        """Read a value as ``kind``; the kind is taken from ``default`` when omitted."""
        fmt = _format(kind, default)
        raw = self.properties.get(_key(key))
        if raw is None:
            if default is not None:
                return default
            raw = 0
        data = raw.to_bytes(8, "little")[: struct.calcsize(fmt)]
        return struct.unpack(fmt, data)[0]

    def set(self, key: str | int, value: Any, kind: str | None = None) -> None:
        """Store ``value`` in the low bytes of the slot, keeping the rest of it."""
        fmt = _format(kind, value)
        hashed = _key(key)
        try:
            packed = struct.pack(fmt, value)
        except struct.error as error:
            raise ValueError(f"cannot store {value!r}: {error}") from None
        existing = self.properties.get(hashed, 0).to_bytes(8, "little")
        self.properties[hashed] = int.from_bytes(packed + existing[len(packed):], "little")

    def get_string(self, key: str | int, default: str = "") -> str:
        return self.string_properties.get(_key(key), default)

    def set_string(self, key: str | int, value: str) -> None:
        self.string_properties[_key(key)] = value

    def read(self, stream: BinaryIO) -> None:
        """Replace the contents with those read from a binary stream."""
        count, string_count = struct.unpack("<II", _read_exact(stream, 8))
        properties: dict[int, int] = {}
        for _ in range(count):
            key, value = struct.unpack("<QQ", _read_exact(stream, 16))
            properties.setdefault(key, value)
        strings: dict[int, str] = {}
        for _ in range(string_count):
            (key,) = struct.unpack("<Q", _read_exact(stream, 8))
            strings.setdefault(key, _read_cstring(stream))
        self.properties = properties
        self.string_properties = strings

    def write(self, stream: BinaryIO) -> None:
        stream.write(struct.pack("<II", len(self.properties), len(self.string_properties)))
        for key, value in self.properties.items():
            stream.write(struct.pack("<QQ", key, value))
        for key, value in self.string_properties.items():
            stream.write(struct.pack("<Q", key))
            stream.write(value.encode("utf-8") + b"\0")

    def load(self, path: str) -> None:
        """Load from ``path``; a file that cannot be opened leaves the bag empty."""
        self.properties = {}
        self.string_properties = {}
        try:
            stream = open(path, "rb")
        except OSError:
            return
        with stream:
            self.read(stream)

    def save(self, path: str) -> None:
        with open(path, "wb") as stream:
            self.write(stream)