def test_event_crud_and_notification(client, admin_headers, add_member):
    add_member(id=1, name="Ana", email="ana@example.com")
    ana = {"X-Forwarded-User": "ana@example.com"}

    created = client.post(
        "/v1/events",
        json={"title": "Reunion", "date": "2025-08-15", "location": "Lake house", "event_type": "event"},
        headers=admin_headers,
    )
    assert created.status_code == 201
    event = created.json()
    assert event["created_by_email"] == "admin@example.com"

    inbox = client.get("/v1/notifications", headers=ana).json()
    assert inbox["items"][0]["type"] == "event"
    assert inbox["items"][0]["metadata"]["event_id"] == event["id"]

    assert client.post("/v1/events", json={"title": "Nope", "date": "2025-01-01"}, headers=ana).status_code == 403

    listed = client.get("/v1/events", params={"year": 2025, "month": 8}, headers=ana).json()["items"]
    assert [item["title"] for item in listed] == ["Reunion"]
    assert client.get("/v1/events", params={"year": 2025, "month": 9}, headers=ana).json()["items"] == []

    moved = client.patch(f"/v1/events/{event['id']}", json={"date": "2025-09-01", "event_type": "holiday"}, headers=admin_headers)
    assert moved.status_code == 200
    assert moved.json()["date"] == "2025-09-01"
    assert moved.json()["event_type"] == "holiday"

    assert client.delete(f"/v1/events/{event['id']}", headers=admin_headers).status_code == 204
    assert client.get(f"/v1/events/{event['id']}", headers=ana).status_code == 404


def test_calendar_merges_birthdays_anniversaries_and_events(client, admin_headers, add_member):
    add_member(id=1, name="Ana", birth_date="1990-06-01", anniversary_date="2015-06-20")
    add_member(id=2, name="Ben", spouse_id=1, birth_date="1988-11-03")
    client.post("/v1/events", json={"title": "Picnic", "date": "2025-06-01"}, headers=admin_headers)

    response = client.get("/v1/calendar", params={"year": 2025, "month": 6}, headers=admin_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 3

    first_day = [item for item in body["items"] if item["date"] == "2025-06-01"]
    assert [item["type"] for item in first_day] == ["birthday", "event"]
    assert body["items"][-1]["type"] == "anniversary"
    assert body["items"][-1]["details"]["member2_id"] == 2

    only_events = client.get(
        "/v1/calendar",
        params={"year": 2025, "month": 6, "include_birthdays": False, "include_anniversaries": False},
        headers=admin_headers,
    ).json()
    assert [item["title"] for item in only_events["items"]] == ["Picnic"]


def test_calendar_rejects_bad_month(client, admin_headers):
    assert client.get("/v1/calendar", params={"year": 2025, "month": 13}, headers=admin_headers).status_code == 422
