# src/echonode/net/codec.py
from __future__ import annotations

import json
from dataclasses import fields, is_dataclass
from typing import Any, Dict

from pydantic import ValidationError

from echonode.net.messages import Body, Message, MsgType
from echonode.net.schemas import validate_payload

Json = Dict[str, Any]

# Body keys owned by the envelope; everything else belongs to the payload.
_CONTROL_KEYS = ("type", "msg_id", "in_reply_to")


class WireDecodeError(RuntimeError):
    def __init__(self, code: str, msg: str) -> None:
        super().__init__(msg)
        self.code = code


class WireEncodeError(RuntimeError):
    def __init__(self, code: str, msg: str) -> None:
        super().__init__(msg)
        self.code = code


def dumps_json(obj: Any) -> bytes:
    # Key order is the insertion order built by encode_message, not sorted.
    try:
        return json.dumps(obj, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise WireEncodeError("encode_failed", f"encode failed: {e}") from e


def loads_json(data: bytes | str) -> Any:
    try:
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        return json.loads(data)
    except json.JSONDecodeError as e:
        raise WireDecodeError("invalid_json", f"invalid json: {e}") from e
    except UnicodeDecodeError as e:
        raise WireDecodeError("invalid_utf8", f"invalid utf-8: {e}") from e


def _coerce_msg_type(v: Any) -> MsgType:
    if isinstance(v, MsgType):
        return v
    if isinstance(v, str):
        try:
            return MsgType(v)
        except ValueError as e:
            raise WireDecodeError("unknown_message_type", f"Unknown message type: {v}") from e
    raise WireDecodeError("invalid_message_type", f"Invalid message type field: {type(v).__name__}")


def _coerce_opt_uint(v: Any, field: str) -> int | None:
    if v is None:
        return None
    if isinstance(v, bool):
        raise WireDecodeError("invalid_int_field", f"Invalid int field '{field}': bool not allowed")
    if not isinstance(v, int):
        raise WireDecodeError("invalid_int_field", f"Invalid int field '{field}': expected int, got {type(v).__name__}")
    if v < 0:
        raise WireDecodeError("invalid_int_field", f"Invalid int field '{field}': must be >= 0")
    return v


def _coerce_node_id(v: Any, field: str) -> str:
    if not isinstance(v, str):
        raise WireDecodeError("invalid_envelope", f"Envelope field '{field}' must be a string")
    return v


def _payload_fields(payload: Any) -> Json:
    return {f.name: getattr(payload, f.name) for f in fields(payload)}


def _body_to_wire(body: Body) -> Json:
    out: Json = {
        "type": body.payload.type.value,
        "msg_id": body.id,
        "in_reply_to": body.in_reply_to,
    }
    for k, v in _payload_fields(body.payload).items():
        out[k] = list(v) if isinstance(v, tuple) else v
    return out


def message_to_wire(msg: Message) -> Json:
    if not isinstance(msg, Message) or not is_dataclass(msg.body.payload):
        raise WireEncodeError("not_message", "msg must be a Message dataclass")
    return {
        "src": msg.source,
        "dest": msg.destination,
        "body": _body_to_wire(msg.body),
    }


def encode_message(msg: Message) -> bytes:
    """Canonical JSON for one message, without the trailing newline."""
    return dumps_json(message_to_wire(msg))


def message_from_wire(raw: Any) -> Message:
    if not isinstance(raw, dict):
        raise WireDecodeError("invalid_message", "wire message must be an object")

    for key in ("src", "dest", "body"):
        if key not in raw:
            raise WireDecodeError("invalid_envelope", f"Wire message missing '{key}'")

    source = _coerce_node_id(raw["src"], "src")
    destination = _coerce_node_id(raw["dest"], "dest")

    body_raw = raw["body"]
    if not isinstance(body_raw, dict):
        raise WireDecodeError("missing_body", "Wire message 'body' must be an object")

    # Tag first: variant fields are only looked at once the variant is known.
    if "type" not in body_raw:
        raise WireDecodeError("invalid_message_type", "Wire message body missing 'type'")
    mtype = _coerce_msg_type(body_raw["type"])

    msg_id = _coerce_opt_uint(body_raw.get("msg_id"), "msg_id")
    in_reply_to = _coerce_opt_uint(body_raw.get("in_reply_to"), "in_reply_to")

    variant = {k: v for (k, v) in body_raw.items() if k not in _CONTROL_KEYS}
    try:
        payload = validate_payload(mtype, variant)
    except ValidationError as e:
        raise WireDecodeError("invalid_message_shape", f"Invalid {mtype.value} payload: {e}") from e

    return Message(
        source=source,
        destination=destination,
        body=Body(payload=payload, id=msg_id, in_reply_to=in_reply_to),
    )


def decode_message(payload: bytes | str) -> Message:
    return message_from_wire(loads_json(payload))
