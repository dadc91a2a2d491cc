from __future__ import annotations

from typing import Iterator, List


class InMemoryTransport:
    """
    Minimal in-process transport used for unit tests.

    - Does not touch stdin/stdout
    - Provides the same surface run_node expects:
        recv(), send()
    """

    def __init__(self) -> None:
        self._inbox: List[bytes] = []
        self._out: List[bytes] = []

    def recv(self) -> Iterator[bytes]:
        # Records injected while iterating are still delivered, in order.
        while self._inbox:
            yield self._inbox.pop(0)

    def send(self, payload: bytes) -> None:
        self._out.append(payload)

    # ---- helpers for tests / harness ----

    def inject(self, payload: bytes | str) -> None:
        if isinstance(payload, str):
            payload = payload.encode("utf-8")
        self._inbox.append(payload)

    def drain(self) -> List[bytes]:
        out = list(self._out)
        self._out.clear()
        return out
