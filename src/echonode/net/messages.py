from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union

NodeId = str
MsgId = int


class MsgType(str, Enum):
    INIT = "init"
    INIT_OK = "init_ok"

    ECHO = "echo"
    ECHO_OK = "echo_ok"


# ----------------------------
# Payload variants
# ----------------------------

@dataclass(frozen=True, slots=True)
class Init:
    node_id: NodeId
    node_ids: Tuple[NodeId, ...] = field(default_factory=tuple)

    type = MsgType.INIT


@dataclass(frozen=True, slots=True)
class InitOk:
    type = MsgType.INIT_OK


@dataclass(frozen=True, slots=True)
class Echo:
    echo: str

    type = MsgType.ECHO


@dataclass(frozen=True, slots=True)
class EchoOk:
    echo: str

    type = MsgType.ECHO_OK


Payload = Union[Init, InitOk, Echo, EchoOk]


# ----------------------------
# Envelope
# ----------------------------

@dataclass(frozen=True, slots=True)
class Body:
    """Flat on the wire: `type`, `msg_id`, `in_reply_to` and the payload fields
    share one JSON object."""

    payload: Payload
    id: Optional[MsgId] = None
    in_reply_to: Optional[MsgId] = None


@dataclass(frozen=True, slots=True)
class Message:
    source: NodeId
    destination: NodeId
    body: Body


def reply_to(incoming: Message, *, msg_id: Optional[MsgId], payload: Payload) -> Message:
    """Build a reply: addressing swapped, `in_reply_to` echoing the request id."""
    return Message(
        source=incoming.destination,
        destination=incoming.source,
        body=Body(payload=payload, id=msg_id, in_reply_to=incoming.body.id),
    )
