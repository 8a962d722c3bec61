"""Lazy pipelines of records."""

from __future__ import annotations

from typing import Callable, Iterable, Iterator, List, Optional

from .record import Record


class StreamClosed(Exception):
    """Raised by an operator to end a stream early without error."""


RecordFn = Callable[[Record], Optional[Record]]
StreamOperator = Callable[[], RecordFn]


class _Chain:
    """Iterates over several record sources one after the other."""

    def __init__(self, sources: List[Iterable[Record]]) -> None:
        self.sources = sources

    def __iter__(self) -> Iterator[Record]:
        for source in self.sources:
            yield from source


class Stream:
    """Reads records from a source and passes them through an operator.

    An operator is a factory called once per iteration; the function it
    returns gets each record and returns a record to pass on, None to skip
    it, or raises StreamClosed to end the iteration.
    """

    def __init__(self, source: Optional[Iterable[Record]]) -> None:
        self._source = source
        self._op: Optional[StreamOperator] = None

    def __iter__(self) -> Iterator[Record]:
        if self._source is None:
            return
        if self._op is None:
            yield from self._source
            return
        fn = self._op()
        for r in self._source:
            try:
                out = fn(r)
            except StreamClosed:
                return
            if out is not None:
                yield out

    def pipe(self, op: StreamOperator) -> "Stream":
        """Return a stream reading from this one and applying op."""
        s = Stream(self)
        s._op = op
        return s

    def map(self, fn: Callable[[Record], Optional[Record]]) -> "Stream":
        """Apply fn to each record; a None result skips the record."""
        return self.pipe(lambda: fn)

    def filter(self, fn: Callable[[Record], bool]) -> "Stream":
        """Keep only the records for which fn is true."""

        def op() -> RecordFn:
            return lambda r: r if fn(r) else None

        return self.pipe(op)

    def limit(self, n: int) -> "Stream":
        """End the stream once n records have passed."""

        def op() -> RecordFn:
            count = 0

            def fn(r: Record) -> Record:
                nonlocal count
                if count < n:
                    count += 1
                    return r
                raise StreamClosed

            return fn

        return self.pipe(op)

    def offset(self, n: int) -> "Stream":
        """Skip the first n records."""

        def op() -> RecordFn:
            skipped = 0

            def fn(r: Record) -> Optional[Record]:
                nonlocal skipped
                if skipped < n:
                    skipped += 1
                    return None
                return r

            return fn

        return self.pipe(op)

    def append(self, source: Iterable[Record]) -> "Stream":
        """Return a stream that reads source after this one, keeping the operator."""
        if isinstance(self._source, _Chain):
            chain = _Chain(self._source.sources + [source])
        else:
            chain = _Chain([self, source])
        s = Stream(chain)
        s._op = self._op
        return s

    def count(self) -> int:
        """Count the records of the stream."""
        return sum(1 for _ in self)

    def first(self) -> Optional[Record]:
        """Return the first record, or None if the stream is empty."""
        return next(iter(self), None)