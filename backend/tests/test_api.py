"""REST endpoints through the FastAPI app with an in-memory store."""

from conftest import service_token

PNG = "data:image/png;base64,iVBORw0KGgo="


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/").status_code == 200


def test_metrics_endpoint_exposes_chat_metrics(client):
    res = client.get("/metrics")
    assert res.status_code == 200
    assert "chat_online_users" in res.text


def test_requests_without_valid_token_are_rejected(client):
    assert client.get("/users").status_code in (401, 403)

    expired = {"Authorization": f"Bearer {service_token('alice', expires_in=-10)}"}
    res = client.get("/users", headers=expired)
    assert res.status_code == 401
    assert "expired" in res.json()["error"]

    forged = {"Authorization": f"Bearer {service_token('alice', secret='x' * 40)}"}
    assert client.get("/users", headers=forged).status_code == 401


def test_roster_excludes_caller(client, auth_headers):
    res = client.get("/users", headers=auth_headers)
    assert res.status_code == 200
    roster = res.json()
    assert [u["id"] for u in roster] == ["bob", "carol"]
    assert all(u["online"] is False for u in roster)
    assert roster[0]["avatar_url"] == "https://cdn.example/bob.png"


def test_send_returns_created_record_and_history_has_it(client, headers_for):
    res = client.post("/messages/send/bob", json={"text": "hello bob"}, headers=headers_for("alice"))
    assert res.status_code == 201
    sent = res.json()
    assert sent["sender_id"] == "alice"
    assert sent["recipient_id"] == "bob"
    assert sent["text"] == "hello bob"
    assert sent["image"] is None and sent["video"] is None
    assert sent["id"] and sent["created_at"]

    reply = client.post("/messages/send/alice", json={"image": PNG}, headers=headers_for("bob"))
    assert reply.status_code == 201

    for viewer, peer in (("alice", "bob"), ("bob", "alice")):
        history = client.get(f"/messages/{peer}", headers=headers_for(viewer)).json()
        assert [m["id"] for m in history] == [sent["id"], reply.json()["id"]]
        assert history[1]["image"] == PNG


def test_history_limit_returns_latest(client, headers_for):
    ids = [
        client.post("/messages/send/bob", json={"text": str(i)}, headers=headers_for("alice")).json()["id"]
        for i in range(3)
    ]
    res = client.get("/messages/bob", params={"limit": 2}, headers=headers_for("alice"))
    assert [m["id"] for m in res.json()] == ids[1:]


def test_history_is_private_to_the_pair(client, headers_for):
    client.post("/messages/send/bob", json={"text": "secret"}, headers=headers_for("alice"))
    assert client.get("/messages/bob", headers=headers_for("carol")).json() == []


def test_send_error_mapping(client, auth_headers):
    cases = [
        ({"text": "   "}, 400),
        ({"image": PNG, "video": "data:video/mp4;base64,AAAA"}, 400),
        ({"text": "x" * 5001}, 400),
        ({"image": "https://example.com/cat.png"}, 415),
        ({"video": PNG}, 415),
    ]
    for body, status in cases:
        res = client.post("/messages/send/bob", json=body, headers=auth_headers)
        assert res.status_code == status, body
        assert res.json()["error"]

    assert client.get("/messages/bob", headers=auth_headers).json() == []


def test_send_to_unknown_user_is_404(client, auth_headers):
    res = client.post("/messages/send/mallory", json={"text": "hi"}, headers=auth_headers)
    assert res.status_code == 404
