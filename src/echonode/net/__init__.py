# src/echonode/net/__init__.py
"""
echonode — Network package

  - messages: wire dataclasses (envelope, body, payload variants)
  - schemas: strict per-variant payload validation
  - codec: deterministic JSON encoding/decoding
  - transport: abstract I/O interface
  - transport_stdio: whitespace-delimited JSON over stdin/stdout
  - transport_memory: in-process transport for tests
  - node: the init/echo state machine
  - net_loop: decode -> handle -> encode loop
"""

from __future__ import annotations

__all__ = [
    "messages",
    "schemas",
    "codec",
    "transport",
    "transport_stdio",
    "transport_memory",
    "node",
    "net_loop",
]
