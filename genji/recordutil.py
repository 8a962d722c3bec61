"""Helpers to dump, export and scan records."""

from __future__ import annotations

import base64
import json
import math
import struct
from typing import Any, Iterable, List, TextIO, Tuple

from .field import Field
from .record import RecordScanner
from .value import ValueType


def dump_record(out: TextIO, record: Iterable[Field]) -> None:
    """Write the name, type and value of each field, one per line."""
    for f in record:
        out.write(f"{f.name}({f.type}): {f.decode()!r}\n")


def _shortest_float32(x: float) -> float:
    if not math.isfinite(x):
        return x
    for precision in range(1, 10):
        text = f"{x:.{precision}g}"
        if struct.unpack(">f", struct.pack(">f", float(text)))[0] == x:
            return float(text)
    return x


def _json_dumps(x: Any) -> str:
    text = json.dumps(x, ensure_ascii=False, allow_nan=False)
    return (
        text.replace("<", "\\u003c")
        .replace(">", "\\u003e")
        .replace("&", "\\u0026")
        .replace("\u2028", "\\u2028")
        .replace("\u2029", "\\u2029")
    )


def _field_json(f: Field) -> str:
    x = f.decode()
    if isinstance(x, bytes):
        x = base64.b64encode(x).decode("ascii")
    elif f.type is ValueType.FLOAT32:
        x = _shortest_float32(x)
    return _json_dumps(x)


def _record_json(record: Iterable[Field]) -> str:
    members = [f"{_json_dumps(f.name)}:{_field_json(f)}" for f in record]
    return "{" + ",".join(members) + "}"


def record_to_json(out: TextIO, record: Iterable[Field]) -> None:
    """Write the record as a JSON object followed by a newline."""
    out.write(_record_json(record) + "\n")


def _csv_field(text: str) -> str:
    needs_quotes = text != "" and (
        text == "\\."
        or any(c in text for c in ',"\r\n')
        or text[0].isspace()
    )
    if not needs_quotes:
        return text
    return '"' + text.replace('"', '""') + '"'


def iterator_to_csv(out: TextIO, records: Iterable[Iterable[Field]]) -> None:
    """Write the values of every record as CSV lines."""
    for record in records:
        line: List[str] = []
        for f in record:
            f.decode()
            line.append(_csv_field(str(f.value)))
        out.write(",".join(line) + "\n")


def iterator_to_json(out: TextIO, records: Iterable[Iterable[Field]]) -> None:
    """Write every record as a JSON object on its own line."""
    for record in records:
        record_to_json(out, record)


_PY_TARGETS = {
    bytes: ValueType.BYTES,
    str: ValueType.STRING,
    bool: ValueType.BOOL,
    int: ValueType.INT,
    float: ValueType.FLOAT64,
}


def _convert(f: Field, target: Any) -> Any:
    if isinstance(target, ValueType):
        t = target
    elif isinstance(target, type) and target in _PY_TARGETS:
        t = _PY_TARGETS[target]
    else:
        raise TypeError("unsupported type")

    if t is ValueType.BYTES:
        return f.value.decode_to_bytes()
    if t is ValueType.STRING:
        return f.value.decode_to_string()
    if t is ValueType.BOOL:
        return f.value.decode_to_bool()
    return f.value.convert(t)


def scan(record: Iterable[Field], *args: Any) -> Tuple[Any, ...]:
    """Convert the fields of a record, in order, to the given target types.

    Targets are value types or one of bytes, str, bool, int and float. The
    result holds one value per target; targets left without a field get None.
    A single record scanner is instead filled with the record and an empty
    tuple is returned.
    """
    if len(args) == 1 and not isinstance(args[0], type) and isinstance(args[0], RecordScanner):
        args[0].scan_record(record)
        return ()

    results: List[Any] = []
    for f in record:
        if len(results) >= len(args):
            raise ValueError("target list too small")
        results.append(_convert(f, args[len(results)]))
    results.extend([None] * (len(args) - len(results)))
    return tuple(results)