# genji

This package holds the building blocks of a small embedded document database:

- **Typed values** (`genji.value`). A `Value` pairs a `ValueType` with an
  order-preserving binary encoding. Encoded integers and floats sort in the
  same order as the numbers they encode, so they can serve directly as index
  keys.
- **Fields and records** (`genji.field`, `genji.record`). A `Field` is a named
  `Value`. A `Record` is a group of fields. `FieldBuffer` is an ordered,
  mutable record. `MapRecord` and `new_from_map` wrap a plain mapping.
- **Streams** (`genji.stream`). A `Stream` is a lazy pipeline over records. It
  offers `map`, `filter`, `limit`, `offset`, `append`, `count` and `first`.
- **A binary record format** (`genji.recordformat`). `encode` turns a record
  into bytes. `decode_field` reads a single field without decoding the rest.
  `EncodedRecord` exposes encoded bytes as a record.
- **Output helpers** (`genji.recordutil`). These dump records as text, JSON or
  CSV. `scan` converts the fields of a record to chosen types.
- **A SQL tokenizer** (`genji.tokens`, `genji.scanner`). It provides `Token`,
  `Pos`, `Scanner`, and `BufScanner`, which can push tokens back.

The package has no runtime dependencies.

## Values

```python
from genji.value import Value, ValueType

v = Value.from_python(3.14)
print(v.type, v)        # Float64 3.14
print(v.decode())       # 3.14

n = Value.typed(ValueType.UINT16, 10)
print(n.convert(ValueType.INT64))   # 10
```

`from_python` infers the type from the Python value:

| Python value | `ValueType` |
|---|---|
| `bool` | `BOOL` |
| `int` | `INT` |
| `float` | `FLOAT64` |
| `str` | `STRING` |
| bytes-like | `BYTES` |

Use `Value.typed(type, x)` to choose the type yourself.

A `Value` can be read back in several ways:

- `decode_to_bytes` returns the raw data.
- `decode_to_string` works only for `STRING` and `BYTES` values.
- `decode_to_bool` returns whether the value is truthy.
- `convert(target)` turns one numeric type into another. Integer results
  wrap around to the width of the target type.

Some functions work on raw bytes and types rather than on `Value` objects:

- `encode_value` and `decode_value` work on raw bytes.
- `zero_value` and `is_zero_value` deal with each type's zero value.
- `is_number`, `is_integer` and `is_float` classify types.
- `type_from_name` maps names such as `"int64"` or `"[]byte"` to a
  `ValueType`.

## Records and the binary format

```python
from genji.field import Field
from genji.record import FieldBuffer
from genji.recordformat import EncodedRecord, Format, decode_field, encode

rec = FieldBuffer(
    Field.from_python("name", "john"),
    Field.from_python("age", 10),
)

data = encode(rec)
print(decode_field(data, "name"))   # name:john

for field in EncodedRecord(data):
    print(field)

print(Format.decode(data).header.fields_count)   # 2
```

A `FieldBuffer` supports the following operations:

- `add`, `set`, `replace` and `delete`
- `get_field` and `scan_record`
- iteration, `len()` and indexing

A missing field raises `FieldNotFoundError`. Malformed encoded data raises
`DecodeError`.

## Streams and output

```python
import io

from genji.field import Field
from genji.record import FieldBuffer
from genji.recordutil import iterator_to_csv, record_to_json, scan
from genji.stream import Stream

records = [
    FieldBuffer(Field.from_python("name", f"John {i}"), Field.from_python("age", 10 + i))
    for i in range(3)
]

out = io.StringIO()
iterator_to_csv(out, Stream(records).offset(1).limit(1))
print(out.getvalue())   # John 1,11

out = io.StringIO()
record_to_json(out, records[0])
print(out.getvalue())   # {"name":"John 0","age":10}

print(scan(records[2], str, float))   # ('John 2', 12.0)
```

The other output helpers are:

- `iterator_to_json` writes one JSON object per line.
- `dump_record` writes each field's name, type and value.

A stream operator can raise `StreamClosed` to end iteration early without an
error.

## Tokenizing SQL

```python
from genji.scanner import Scanner
from genji.tokens import Token

scanner = Scanner("SELECT a FROM t WHERE a = 'b'")
while True:
    tok, pos, lit = scanner.scan()
    if tok is Token.EOF:
        break
    print(tok, pos, lit)
```

- Keywords are matched regardless of case.
- Positions are zero-based line and character indexes.
- `BufScanner` adds `unscan()` to push tokens back.
- `scan_string`, `scan_delimited` and `scan_bare_ident` read pieces of text
  directly.
- Bad strings and bad escapes raise `BadStringError` and `BadEscapeError`,
  both subclasses of `ScanError`.

## What this package does not do

This package is not a database on its own. It has no storage engine, tables or
indexes, and it cannot parse or execute SQL statements. The scanner only splits
text into tokens, and records live in memory or in the bytes that `encode`
returns.