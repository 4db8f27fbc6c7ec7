"""End-to-end delivery and presence over the WebSocket endpoint."""

import pytest
from starlette.websockets import WebSocketDisconnect


def _send(client, headers_for, sender, recipient, **body):
    res = client.post(f"/messages/send/{recipient}", json=body, headers=headers_for(sender))
    assert res.status_code == 201
    return res.json()


def test_bad_token_is_closed_with_policy_violation(client):
    with pytest.raises(WebSocketDisconnect) as exc:
        with client.websocket_connect("/ws?token=garbage") as ws:
            ws.receive_json()
    assert exc.value.code == 1008


def test_token_in_authorization_header_is_accepted(client, headers_for):
    with client.websocket_connect("/ws", headers=headers_for("alice")) as ws:
        assert ws.receive_json()["data"] == {"user_ids": ["alice"]}


def test_online_recipient_gets_exactly_the_sent_record(client, headers_for, ws_url):
    with client.websocket_connect(ws_url("bob")) as bob:
        presence = bob.receive_json()
        assert presence["type"] == "presence_snapshot"
        assert presence["data"] == {"user_ids": ["bob"]}

        sent = _send(client, headers_for, "alice", "bob", text="hi")

        event = bob.receive_json()
        assert event["type"] == "message_delivery"
        assert event["data"]["id"] == sent["id"]
        assert event["data"]["text"] == "hi"
        assert event["data"]["sender_id"] == "alice"

        history = client.get("/messages/alice", headers=headers_for("bob")).json()
        assert [m["id"] for m in history] == [sent["id"]]


def test_offline_recipient_finds_message_in_history_without_replay(client, headers_for, ws_url):
    first = _send(client, headers_for, "alice", "bob", text="while you were out")

    with client.websocket_connect(ws_url("bob")) as bob:
        assert bob.receive_json()["type"] == "presence_snapshot"

        history = client.get("/messages/alice", headers=headers_for("bob")).json()
        assert [m["id"] for m in history] == [first["id"]]

        second = _send(client, headers_for, "alice", "bob", text="now you're here")
        event = bob.receive_json()
        assert event["type"] == "message_delivery"
        assert event["data"]["id"] == second["id"]


def test_presence_follows_connects_and_disconnects(client, headers_for, ws_url):
    with client.websocket_connect(ws_url("alice")) as alice:
        assert alice.receive_json()["data"] == {"user_ids": ["alice"]}

        with client.websocket_connect(ws_url("bob")) as bob:
            assert bob.receive_json()["data"] == {"user_ids": ["alice", "bob"]}
            assert alice.receive_json()["data"] == {"user_ids": ["alice", "bob"]}

            roster = client.get("/users", headers=headers_for("carol")).json()
            assert {u["id"]: u["online"] for u in roster} == {"alice": True, "bob": True}

        assert alice.receive_json()["data"] == {"user_ids": ["alice"]}


def test_sender_is_not_pushed_its_own_message(client, headers_for, ws_url):
    with client.websocket_connect(ws_url("alice")) as alice:
        alice.receive_json()
        _send(client, headers_for, "alice", "carol", text="to carol")

        with client.websocket_connect(ws_url("bob")) as bob:
            bob.receive_json()
            # The next thing alice sees is bob coming online, not her own message
            assert alice.receive_json()["type"] == "presence_snapshot"
