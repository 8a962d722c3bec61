"""Records: groups of fields, and in-memory implementations of them."""

from __future__ import annotations

import abc
from typing import Any, Iterable, Iterator, List, Mapping, Protocol, runtime_checkable

from .field import Field


class FieldNotFoundError(LookupError):
    """Raised when a record has no field of the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f'field "{name}" not found')
        self.name = name


class Record(abc.ABC):
    """A group of fields."""

    @abc.abstractmethod
    def get_field(self, name: str) -> Field:
        """Return the field of the given name or raise FieldNotFoundError."""

    @abc.abstractmethod
    def __iter__(self) -> Iterator[Field]:
        """Yield every field of the record."""


@runtime_checkable
class RecordScanner(Protocol):
    """Something that can copy the fields of a record into itself."""

    def scan_record(self, record: Iterable[Field]) -> None:
        """Read every field of the record."""


class FieldBuffer(Record):
    """A mutable list of fields that is itself a record."""

    def __init__(self, *args: Field) -> None:
        self._fields: List[Field] = list(args)

    def add(self, field: Field) -> None:
        """Append a field."""
        self._fields.append(field)

    def scan_record(self, record: Iterable[Field]) -> None:
        """Append every field of record."""
        self._fields.extend(record)

    def get_field(self, name: str) -> Field:
        for f in self._fields:
            if f.name == name:
                return f
        raise FieldNotFoundError(name)

    def set(self, field: Field) -> None:
        """Replace the field of the same name, or append it if there is none."""
        for i, f in enumerate(self._fields):
            if f.name == field.name:
                self._fields[i] = field
                return
        self.add(field)

    def delete(self, name: str) -> None:
        """Remove the field of the given name."""
        for i, f in enumerate(self._fields):
            if f.name == name:
                del self._fields[i]
                return
        raise FieldNotFoundError(name)

    def replace(self, name: str, field: Field) -> None:
        """Put field in place of the field of the given name."""
        for i, f in enumerate(self._fields):
            if f.name == name:
                self._fields[i] = field
                return
        raise FieldNotFoundError(name)

    def __iter__(self) -> Iterator[Field]:
        return iter(list(self._fields))

    def __len__(self) -> int:
        return len(self._fields)

    def __getitem__(self, index: int) -> Field:
        return self._fields[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldBuffer):
            return NotImplemented
        return self._fields == other._fields

    def __repr__(self) -> str:
        return f"FieldBuffer({', '.join(repr(f) for f in self._fields)})"


class MapRecord(Record):
    """A record backed by a mapping of names to Python values."""

    def __init__(self, mapping: Mapping[str, Any]) -> None:
        self._mapping = mapping

    def get_field(self, name: str) -> Field:
        if name not in self._mapping:
            raise FieldNotFoundError(name)
        return Field.from_python(name, self._mapping[name])

    def __iter__(self) -> Iterator[Field]:
        for name, x in self._mapping.items():
            if x is None:
                continue
            yield Field.from_python(name, x)


def new_from_map(mapping: Mapping[str, Any]) -> Record:
    """Create a record from a mapping; None values are skipped when iterating."""
    return MapRecord(mapping)