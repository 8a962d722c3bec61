"""Named, typed fields that make up records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .value import TypeLike, Value, ValueType


@dataclass(frozen=True)
class Field:
    """A typed piece of information stored under a name."""

    name: str
    value: Value

    @property
    def type(self) -> ValueType:
        """Type of the field's value."""
        return self.value.type

    @property
    def data(self) -> bytes:
        """Encoded data of the field's value."""
        return self.value.data

    @classmethod
    def from_python(cls, name: str, x: Any) -> "Field":
        """Create a field whose type is inferred from x."""
        return cls(name, Value.from_python(x))

    @classmethod
    def typed(cls, name: str, type: TypeLike, x: Any) -> "Field":
        """Create a field of the given type from x."""
        return cls(name, Value.typed(type, x))

    def decode(self) -> Any:
        """Decode the field's value into a Python value."""
        return self.value.decode()

    def __str__(self) -> str:
        return f"{self.name}:{self.value}"