from __future__ import annotations

from typing import Optional

import pytest

from echonode.net.messages import Body, Echo, EchoOk, Init, InitOk, Message, Payload
from echonode.net.node import EchoNode, Initializing, MisroutedMessage, ProtocolError, Ready, UnexpectedInit


def _msg(payload: Payload, *, msg_id: Optional[int] = None, src: str = "c1", dest: str = "n1") -> Message:
    return Message(source=src, destination=dest, body=Body(payload=payload, id=msg_id))


def _ready_node(node_id: str = "n1") -> EchoNode:
    node = EchoNode()
    node.handle(_msg(Init(node_id=node_id, node_ids=(node_id,)), msg_id=1, dest=node_id))
    return node


def test_new_node_is_initializing() -> None:
    node = EchoNode()
    assert node.state == Initializing()
    assert not node.is_ready()
    assert node.self_id is None


def test_init_replies_init_ok_with_id_zero() -> None:
    node = EchoNode()
    reply = node.handle(_msg(Init(node_id="n1", node_ids=("n1", "n2")), msg_id=17))

    assert reply == Message(source="n1", destination="c1", body=Body(payload=InitOk(), id=0, in_reply_to=17))
    assert node.state == Ready(self_id="n1", next_message_id=1)
    assert node.self_id == "n1"


def test_init_without_msg_id_replies_with_null_in_reply_to() -> None:
    node = EchoNode()
    reply = node.handle(_msg(Init(node_id="n1"), msg_id=None))
    assert reply is not None
    assert reply.body.id == 0
    assert reply.body.in_reply_to is None


def test_init_takes_identity_from_payload_not_envelope() -> None:
    node = EchoNode()
    reply = node.handle(_msg(Init(node_id="n3"), msg_id=1, dest="somewhere"))
    assert node.self_id == "n3"
    assert reply is not None
    assert reply.source == "somewhere"


@pytest.mark.parametrize("payload", [Echo(echo="early"), InitOk(), EchoOk(echo="stray")])
def test_initializing_ignores_non_init(payload: Payload) -> None:
    node = EchoNode()
    assert node.handle(_msg(payload, msg_id=5)) is None
    assert node.state == Initializing()


def test_echo_replies_with_same_text_and_correlation() -> None:
    node = _ready_node()
    reply = node.handle(_msg(Echo(echo="hello"), msg_id=2))
    assert reply == Message(source="n1", destination="c1", body=Body(payload=EchoOk(echo="hello"), id=1, in_reply_to=2))
    assert node.state == Ready(self_id="n1", next_message_id=2)


def test_echo_ids_increase_by_one() -> None:
    node = _ready_node()
    texts = ["a", "", "  spaced  ", "ünïcödé", "line\nbreak"]
    replies = [node.handle(_msg(Echo(echo=t), msg_id=100 + i, src=f"c{i}")) for i, t in enumerate(texts)]

    assert [r.body.id for r in replies] == [1, 2, 3, 4, 5]
    assert [r.body.in_reply_to for r in replies] == [100, 101, 102, 103, 104]
    assert [r.body.payload.echo for r in replies] == texts
    assert [r.destination for r in replies] == [f"c{i}" for i in range(len(texts))]
    assert all(r.source == "n1" for r in replies)


@pytest.mark.parametrize("payload", [InitOk(), EchoOk(echo="x")])
def test_ready_ignores_replies_without_consuming_ids(payload: Payload) -> None:
    node = _ready_node()
    assert node.handle(_msg(payload, msg_id=9)) is None
    reply = node.handle(_msg(Echo(echo="next"), msg_id=10))
    assert reply is not None and reply.body.id == 1


def test_second_init_is_fatal() -> None:
    node = _ready_node()
    with pytest.raises(UnexpectedInit) as e:
        node.handle(_msg(Init(node_id="n2"), msg_id=3))
    assert e.value.code == "unexpected_init"
    assert node.state == Ready(self_id="n1", next_message_id=1)


def test_misrouted_message_is_fatal() -> None:
    node = _ready_node()
    with pytest.raises(MisroutedMessage) as e:
        node.handle(_msg(Echo(echo="hi"), msg_id=3, dest="n2"))
    assert isinstance(e.value, ProtocolError)
    assert (e.value.expected, e.value.actual) == ("n1", "n2")
    assert node.state == Ready(self_id="n1", next_message_id=1)


def test_misrouting_checked_before_payload() -> None:
    # A misaddressed init reports the routing problem, not the duplicate init.
    node = _ready_node()
    with pytest.raises(MisroutedMessage):
        node.handle(_msg(Init(node_id="n1"), msg_id=3, dest="n9"))
    with pytest.raises(MisroutedMessage):
        node.handle(_msg(InitOk(), dest="n9"))
