def test_broadcast_read_and_delete(client, admin_headers, add_member):
    add_member(id=1, name="One", email="one@example.com")
    add_member(id=2, name="Two", email="two@example.com")
    add_member(id=3, name="No Email")
    one = {"X-Forwarded-User": "one@example.com"}
    two = {"X-Forwarded-User": "two@example.com"}

    sent = client.post("/v1/notifications/broadcast", json={"message": "Reunion on Sunday"}, headers=admin_headers)
    assert sent.status_code == 201
    assert sent.json()["sent"] == 2

    inbox = client.get("/v1/notifications", headers=one).json()
    assert inbox["unread_count"] == 1
    notification = inbox["items"][0]
    assert notification["type"] == "admin_broadcast"
    assert notification["is_read"] is False

    other_inbox = client.get("/v1/notifications", headers=two).json()
    assert client.post(f"/v1/notifications/{other_inbox['items'][0]['id']}/read", headers=one).status_code == 403

    read = client.post(f"/v1/notifications/{notification['id']}/read", headers=one)
    assert read.status_code == 200
    assert read.json()["is_read"] is True
    assert client.get("/v1/notifications", headers=one).json()["unread_count"] == 0

    assert client.delete(f"/v1/notifications/{notification['id']}", headers=one).status_code == 204
    assert client.get("/v1/notifications", headers=one).json()["items"] == []
    assert client.delete(f"/v1/notifications/{notification['id']}", headers=one).status_code == 404


def test_mark_all_read(client, add_member):
    add_member(id=1, name="One", email="one@example.com")
    add_member(id=2, name="Two", email="two@example.com")
    one = {"X-Forwarded-User": "one@example.com"}
    two = {"X-Forwarded-User": "two@example.com"}

    for text in ("first", "second"):
        response = client.post("/v1/notifications", json={"recipient_member_id": 2, "message": text}, headers=one)
        assert response.status_code == 201
        assert response.json()["sender_name"] == "One"

    assert client.get("/v1/notifications", headers=two).json()["unread_count"] == 2
    assert client.get("/v1/notifications", headers=one).json()["unread_count"] == 0

    marked = client.post("/v1/notifications/read-all", headers=two)
    assert marked.json()["updated"] == 2
    assert client.get("/v1/notifications", headers=two).json()["unread_count"] == 0


def test_cannot_notify_yourself(client, add_member):
    add_member(id=1, name="One", email="one@example.com")
    response = client.post(
        "/v1/notifications",
        json={"recipient_member_id": 1, "message": "hi me"},
        headers={"X-Forwarded-User": "one@example.com"},
    )
    assert response.status_code == 400


def test_broadcast_requires_admin(client, add_member):
    add_member(id=1, name="One", email="one@example.com")
    response = client.post(
        "/v1/notifications/broadcast", json={"message": "spam"}, headers={"X-Forwarded-User": "one@example.com"}
    )
    assert response.status_code == 403
