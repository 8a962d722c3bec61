"""Binary encoding of records: a header of field descriptions followed by a body."""

from __future__ import annotations

from dataclasses import dataclass, field as dataclass_field
from typing import Iterable, Iterator, List, Tuple

from .field import Field
from .record import FieldNotFoundError, Record
from .value import Value, ValueType

_MAX_VARINT_LEN = 10


class DecodeError(ValueError):
    """Raised when encoded record data is malformed or truncated."""


def _put_uvarint(x: int) -> bytes:
    if x < 0:
        raise ValueError("uvarint cannot encode a negative number")
    out = bytearray()
    while x >= 0x80:
        out.append((x & 0x7F) | 0x80)
        x >>= 7
    out.append(x)
    return bytes(out)


def _read_uvarint(data: bytes, offset: int = 0) -> Tuple[int, int]:
    """Read an unsigned varint at offset; return the number and bytes read."""
    x = 0
    shift = 0
    for i, b in enumerate(data[offset : offset + _MAX_VARINT_LEN]):
        if i == _MAX_VARINT_LEN - 1 and b > 1:
            raise DecodeError("can't decode data")
        x |= (b & 0x7F) << shift
        if b < 0x80:
            return x, i + 1
        shift += 7
    raise DecodeError("can't decode data")


@dataclass
class FieldHeader:
    """Metadata of one field: its name, type, data size and body offset."""

    name_size: int
    name: str
    type: int
    size: int
    offset: int

    @classmethod
    def decode(cls, data: bytes) -> Tuple["FieldHeader", int]:
        """Decode a field header; return it and the number of bytes read."""
        data = bytes(data)
        name_size, pos = _read_uvarint(data)
        if pos + name_size > len(data):
            raise DecodeError("can't decode data")
        try:
            name = data[pos : pos + name_size].decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError("can't decode field name") from exc
        pos += name_size
        type_, n = _read_uvarint(data, pos)
        pos += n
        size, n = _read_uvarint(data, pos)
        pos += n
        offset, n = _read_uvarint(data, pos)
        pos += n
        return cls(name_size, name, type_, size, offset), pos

    def encode(self) -> bytes:
        """Encode the field header."""
        return b"".join(
            (
                _put_uvarint(self.name_size),
                self.name.encode("utf-8"),
                _put_uvarint(self.type),
                _put_uvarint(self.size),
                _put_uvarint(self.offset),
            )
        )


@dataclass
class Header:
    """Metadata of a record: header size, field count and field headers."""

    size: int = 0
    fields_count: int = 0
    field_headers: List[FieldHeader] = dataclass_field(default_factory=list)

    @classmethod
    def decode(cls, data: bytes) -> Tuple["Header", int]:
        """Decode a header; return it and the number of bytes it takes."""
        data = bytes(data)
        size, n = _read_uvarint(data)
        if n + size > len(data):
            raise DecodeError("can't decode data")
        hdata = data[n : n + size]
        read = n + size

        fields_count, n = _read_uvarint(hdata)
        hdata = hdata[n:]

        headers: List[FieldHeader] = []
        while hdata:
            fh, n = FieldHeader.decode(hdata)
            hdata = hdata[n:]
            headers.append(fh)

        return cls(size, fields_count, headers), read

    def body_size(self) -> int:
        """Return the total size of the field data."""
        return sum(fh.size for fh in self.field_headers)

    def encode(self) -> bytes:
        """Encode the header, updating its field count and size."""
        self.fields_count = len(self.field_headers)
        content = _put_uvarint(self.fields_count) + b"".join(
            fh.encode() for fh in self.field_headers
        )
        self.size = len(content)
        return _put_uvarint(self.size) + content


@dataclass
class Format:
    """A decoded record: its header and its body."""

    header: Header
    body: bytes

    @classmethod
    def decode(cls, data: bytes) -> "Format":
        """Decode encoded record data."""
        data = bytes(data)
        header, n = Header.decode(data)
        return cls(header, data[n:])


def _field_from(fh: FieldHeader, body: bytes) -> Field:
    end = fh.offset + fh.size
    if end > len(body):
        raise DecodeError(f"data of field {fh.name} is out of bounds")
    try:
        type_ = ValueType(fh.type)
    except ValueError as exc:
        raise DecodeError(f"unknown type {fh.type}") from exc
    return Field(fh.name, Value(type_, body[fh.offset : end]))


def encode(record: Iterable[Field]) -> bytes:
    """Encode a record."""
    header = Header()
    chunks: List[bytes] = []
    offset = 0
    for f in record:
        header.field_headers.append(
            FieldHeader(
                name_size=len(f.name.encode("utf-8")),
                name=f.name,
                type=int(f.type),
                size=len(f.data),
                offset=offset,
            )
        )
        offset += len(f.data)
        chunks.append(f.data)
    return header.encode() + b"".join(chunks)


def decode_field(data: bytes, name: str) -> Field:
    """Decode a single field from encoded data without decoding the rest."""
    data = bytes(data)
    hsize, n = _read_uvarint(data)
    if n + hsize > len(data):
        raise DecodeError("can't decode data")
    hdata = data[n : n + hsize]
    body = data[n + hsize :]

    _, n = _read_uvarint(hdata)
    hdata = hdata[n:]

    while hdata:
        fh, n = FieldHeader.decode(hdata)
        hdata = hdata[n:]
        if fh.name == name:
            return _field_from(fh, body)

    raise FieldNotFoundError(name)


class EncodedRecord(Record):
    """A record read lazily from its encoded form."""

    def __init__(self, data: bytes) -> None:
        self.data = bytes(data)

    def get_field(self, name: str) -> Field:
        return decode_field(self.data, name)

    def __iter__(self) -> Iterator[Field]:
        fmt = Format.decode(self.data)
        for fh in fmt.header.field_headers:
            yield _field_from(fh, fmt.body)