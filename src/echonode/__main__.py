# src/echonode/__main__.py
from __future__ import annotations

import logging
import sys

from echonode.config import load_node_config
from echonode.metrics import snapshot
from echonode.net.codec import WireDecodeError, WireEncodeError
from echonode.net.net_logging import configure_logging, log_event
from echonode.net.net_loop import run_node
from echonode.net.node import EchoNode, ProtocolError
from echonode.net.transport import TransportError
from echonode.net.transport_stdio import StdioTransport

log = logging.getLogger("echonode")


def main() -> int:
    cfg = load_node_config()
    configure_logging(cfg.log_level)

    node = EchoNode()
    log_event(log, "node_started")
    try:
        stats = run_node(node, StdioTransport(), cfg=cfg)
    except (WireDecodeError, WireEncodeError, TransportError, ProtocolError) as e:
        code = getattr(e, "code", type(e).__name__)
        log_event(log, "node_fatal", level=logging.CRITICAL, code=code, err=str(e), node_id=node.self_id)
        return 1

    fields = {"node_id": node.self_id, "received": stats.received, "replied": stats.replied, "ignored": stats.ignored}
    if cfg.metrics_enabled:
        fields["metrics"] = snapshot()
    log_event(log, "node_stopped", **fields)
    return 0


if __name__ == "__main__":
    sys.exit(main())
