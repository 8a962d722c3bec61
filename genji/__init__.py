"""Typed values, records, streams, a binary record format and a SQL tokenizer."""

__version__ = "0.1.0"

__all__ = [
    "field",
    "record",
    "recordformat",
    "recordutil",
    "scanner",
    "stream",
    "tokens",
    "value",
]