"""
echonode — a "hello world" node for harness-driven distributed-systems exercises.

Reads JSON messages from stdin, answers the init handshake and echo
requests, writes replies to stdout. Run with `python -m echonode`.
"""

from __future__ import annotations

__version__ = "0.1.0"
