"""
Destinations for successful API responses.

The caller picks how a response body is consumed: ``RawSink`` copies the
bytes verbatim into a writable object, ``Typed`` decodes the body as JSON
and builds a value from it.
"""

import json
from typing import Any, BinaryIO, Callable, Generic, Optional, TypeVar


T = TypeVar("T")


class Destination:
    """Base class for response destinations."""


class RawSink(Destination):
    """Write the raw response body to ``writer`` without interpreting it."""

    def __init__(self, writer: BinaryIO):
        self.writer = writer
        self.bytes_written = 0

    def write(self, chunk: bytes) -> None:
        if chunk:
            self.writer.write(chunk)
            self.bytes_written += len(chunk)


class Typed(Destination, Generic[T]):
    """
    Decode the response body as JSON and store ``factory(data)`` in ``value``.

    An empty body leaves ``value`` untouched: some successful calls
    legitimately answer with nothing.
    """

    def __init__(self, factory: Callable[[Any], T] = None, default: Optional[T] = None):
        self.factory = factory
        self.value: Optional[T] = default

    def decode(self, data: bytes) -> None:
        if not data.strip():
            return
        decoded = json.loads(data)
        if decoded is None:
            return
        self.value = self.factory(decoded) if self.factory else decoded
