# src/echonode/net/node.py
"""
echonode — Echo Node State Machine

Lifecycle:
  INITIALIZING -> READY   (exactly once, on `init`)

While INITIALIZING the node has no identity: `echo` and stray replies are
dropped silently. Once READY the node id is fixed, every message must be
addressed to it, and a second `init` is a protocol violation.

Message ids:
  - `init_ok` always carries msg_id 0
  - `echo_ok` replies carry 1, 2, 3, ... in emission order

No I/O here: handle() takes a decoded Message and returns the reply (if any).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from echonode.net.messages import Echo, EchoOk, Init, InitOk, Message, MsgId, NodeId, reply_to

INIT_OK_MSG_ID: MsgId = 0
FIRST_MSG_ID: MsgId = 1


# ---------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------


class ProtocolError(RuntimeError):
    code = "protocol_error"


class MisroutedMessage(ProtocolError):
    """Raised when a READY node receives a message addressed to another node."""

    code = "misrouted_message"

    def __init__(self, expected: NodeId, actual: NodeId) -> None:
        super().__init__(f"Received message for {actual!r}, this node is {expected!r}")
        self.expected = expected
        self.actual = actual


class UnexpectedInit(ProtocolError):
    """Raised when `init` arrives after the node is already READY."""

    code = "unexpected_init"

    def __init__(self, self_id: NodeId) -> None:
        super().__init__(f"Received init while already initialized as {self_id!r}")
        self.self_id = self_id


# ---------------------------------------------------------------------
# State
# ---------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Initializing:
    pass


@dataclass(frozen=True, slots=True)
class Ready:
    self_id: NodeId
    next_message_id: MsgId = FIRST_MSG_ID


NodeState = Union[Initializing, Ready]


class EchoNode:
    def __init__(self) -> None:
        self._state: NodeState = Initializing()

    @property
    def state(self) -> NodeState:
        return self._state

    @property
    def self_id(self) -> Optional[NodeId]:
        st = self._state
        return st.self_id if isinstance(st, Ready) else None

    def is_ready(self) -> bool:
        return isinstance(self._state, Ready)

    def handle(self, incoming: Message) -> Optional[Message]:
        st = self._state
        if isinstance(st, Ready):
            return self._handle_ready(st, incoming)
        return self._handle_initializing(incoming)

    def _handle_initializing(self, incoming: Message) -> Optional[Message]:
        payload = incoming.body.payload
        if not isinstance(payload, Init):
            # Not ready yet: echo and stray replies are dropped.
            return None

        self._state = Ready(self_id=payload.node_id, next_message_id=FIRST_MSG_ID)
        return reply_to(incoming, msg_id=INIT_OK_MSG_ID, payload=InitOk())

    def _handle_ready(self, st: Ready, incoming: Message) -> Optional[Message]:
        if incoming.destination != st.self_id:
            raise MisroutedMessage(expected=st.self_id, actual=incoming.destination)

        payload = incoming.body.payload
        if isinstance(payload, Echo):
            reply = reply_to(incoming, msg_id=st.next_message_id, payload=EchoOk(echo=payload.echo))
            self._state = Ready(self_id=st.self_id, next_message_id=st.next_message_id + 1)
            return reply

        if isinstance(payload, Init):
            raise UnexpectedInit(self_id=st.self_id)

        # init_ok / echo_ok addressed to us: nothing to do.
        return None
