from __future__ import annotations

"""Payload schemas.

Strict shape checks for each payload variant, keyed by the `type` tag. The
codec validates the tag first, then runs the matching schema over the
remaining body fields (everything except `type`, `msg_id`, `in_reply_to`).

Strict means: unknown keys are rejected and no type coercion happens, so
`"echo": 5` or `"node_ids": "n1"` fail instead of being silently converted.
"""

from typing import Any, Dict, List, Type

from pydantic import BaseModel, ConfigDict, StrictStr

from echonode.net.messages import Echo, EchoOk, Init, InitOk, MsgType, Payload

Json = Dict[str, Any]


class _StrictModel(BaseModel):
    """Strict model: reject unknown keys and coercions."""

    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)

    def to_payload(self) -> Payload:  # pragma: no cover
        raise NotImplementedError


class InitPayload(_StrictModel):
    node_id: StrictStr
    node_ids: List[StrictStr]

    def to_payload(self) -> Payload:
        return Init(node_id=self.node_id, node_ids=tuple(self.node_ids))


class InitOkPayload(_StrictModel):
    def to_payload(self) -> Payload:
        return InitOk()


class EchoPayload(_StrictModel):
    echo: StrictStr

    def to_payload(self) -> Payload:
        return Echo(echo=self.echo)


class EchoOkPayload(_StrictModel):
    echo: StrictStr

    def to_payload(self) -> Payload:
        return EchoOk(echo=self.echo)


_SCHEMAS: Dict[MsgType, Type[_StrictModel]] = {
    MsgType.INIT: InitPayload,
    MsgType.INIT_OK: InitOkPayload,
    MsgType.ECHO: EchoPayload,
    MsgType.ECHO_OK: EchoOkPayload,
}


def validate_payload(msg_type: MsgType, fields: Json) -> Payload:
    """Validate variant fields and build the payload dataclass.

    Raises pydantic.ValidationError on a shape mismatch; the codec maps it to
    WireDecodeError("invalid_message_shape").
    """
    sch = _SCHEMAS[msg_type]
    return sch.model_validate(fields).to_payload()


__all__ = [
    "InitPayload",
    "InitOkPayload",
    "EchoPayload",
    "EchoOkPayload",
    "validate_payload",
]
