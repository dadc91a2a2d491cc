from __future__ import annotations

import json
import sys
from typing import BinaryIO, Iterator, Optional

from echonode.net.codec import WireDecodeError
from echonode.net.transport import TransportError

_WS = " \t\n\r"


def _incomplete(err: json.JSONDecodeError, buf: str) -> bool:
    # The decoder ran off the end of the buffer: more input may finish the record.
    return err.pos >= len(buf) or err.msg.startswith("Unterminated string")


class StdioTransport:
    """
    Framing over a pair of binary streams (stdin/stdout by default).

    Input is a sequence of JSON values separated by whitespace. The harness
    sends one per line, but a value may span lines and a line may carry more
    than one value. Each yielded record is the exact UTF-8 text of one value.
    """

    def __init__(self, instream: Optional[BinaryIO] = None, outstream: Optional[BinaryIO] = None) -> None:
        self._in = instream if instream is not None else sys.stdin.buffer
        self._out = outstream if outstream is not None else sys.stdout.buffer
        self._decoder = json.JSONDecoder()

    def _lines(self) -> Iterator[str]:
        for raw in iter(self._in.readline, b""):
            try:
                yield raw.decode("utf-8")
            except UnicodeDecodeError as e:
                raise WireDecodeError("invalid_utf8", f"invalid utf-8: {e}") from e

    def recv(self) -> Iterator[bytes]:
        buf = ""
        for line in self._lines():
            buf += line
            while True:
                start = len(buf) - len(buf.lstrip(_WS))
                if start == len(buf):
                    buf = ""
                    break
                try:
                    _, end = self._decoder.raw_decode(buf, start)
                except json.JSONDecodeError as e:
                    if _incomplete(e, buf):
                        buf = buf[start:]
                        break
                    raise WireDecodeError("invalid_json", f"invalid json: {e}") from e
                yield buf[start:end].encode("utf-8")
                buf = buf[end:]

        if buf.strip(_WS):
            raise WireDecodeError("invalid_json", "invalid json: truncated record at end of input")

    def send(self, payload: bytes) -> None:
        try:
            self._out.write(payload)
            self._out.write(b"\n")
            self._out.flush()
        except (OSError, ValueError) as e:
            raise TransportError(f"write failed: {e}") from e
