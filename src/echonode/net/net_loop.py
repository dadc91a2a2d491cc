from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from echonode.config import NodeConfig, load_node_config
from echonode.metrics import inc_counter
from echonode.net.codec import WireDecodeError, WireEncodeError, decode_message, encode_message, message_to_wire
from echonode.net.net_logging import log_event
from echonode.net.node import EchoNode, ProtocolError
from echonode.net.transport import Transport, TransportError

log = logging.getLogger("echonode.net")


@dataclass(slots=True)
class NodeRunStats:
    received: int = 0
    replied: int = 0
    ignored: int = 0


def _step(node: EchoNode, transport: Transport, record: bytes, cfg: NodeConfig, stats: NodeRunStats) -> None:
    try:
        msg = decode_message(record)
    except WireDecodeError as e:
        log_event(log, "decode_failed", level=logging.ERROR, code=e.code, err=str(e))
        raise

    stats.received += 1
    inc_counter("messages_received")
    inc_counter(f"messages_{msg.body.payload.type.value}")
    if cfg.log_messages:
        log_event(log, "message_in", level=logging.DEBUG, msg=message_to_wire(msg))

    was_ready = node.is_ready()
    try:
        reply = node.handle(msg)
    except ProtocolError as e:
        log_event(log, "protocol_violation", level=logging.ERROR, code=e.code, err=str(e), src=msg.source, dest=msg.destination)
        raise

    if not was_ready and node.is_ready():
        log_event(log, "node_initialized", node_id=node.self_id)

    if reply is None:
        stats.ignored += 1
        inc_counter("messages_ignored")
        log_event(log, "message_ignored", level=logging.DEBUG, type=msg.body.payload.type.value, src=msg.source, ready=node.is_ready())
        return

    try:
        transport.send(encode_message(reply))
    except (WireEncodeError, TransportError) as e:
        log_event(log, "send_failed", level=logging.ERROR, err=str(e))
        raise

    stats.replied += 1
    inc_counter("messages_replied")
    if cfg.log_messages:
        log_event(log, "message_out", level=logging.DEBUG, msg=message_to_wire(reply))


def run_node(node: EchoNode, transport: Transport, *, cfg: Optional[NodeConfig] = None) -> NodeRunStats:
    """Drive node from transport until end of input.

    Every error is fatal and propagates after being logged.
    """
    cfg = cfg or load_node_config()
    stats = NodeRunStats()
    for record in transport.recv():
        _step(node, transport, record, cfg, stats)
    return stats
