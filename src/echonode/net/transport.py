"""
echonode — Transport (Abstract I/O Layer)

Goal:
  Keep the node and codec pure and testable by hiding where records come
  from and where replies go.

Notes:
  - "wire" bytes are canonical JSON produced by echonode.net.codec.encode_message()
  - Transport is responsible for:
      * framing (turning a byte stream into discrete JSON records)
      * writing one reply per call, newline-terminated, flushed before returning
  - recv() is lazy, in arrival order, and not restartable.

This module is pure structure: no streams here.
"""

from __future__ import annotations

from typing import Iterator, Protocol, runtime_checkable


class TransportError(RuntimeError):
    """Raised when a reply cannot be written or flushed."""


@runtime_checkable
class Transport(Protocol):
    """
    A transport backend owns framing in both directions.

    The node loop iterates recv() until it is exhausted (end of input).
    """

    def recv(self) -> Iterator[bytes]: ...

    def send(self, payload: bytes) -> None: ...
