from app.core.config import settings


def _image(index=0):
    return {"image_url": f"https://cdn.example.com/{index}.jpg", "asset_id": f"asset-{index}", "title": f"Photo {index}"}


def test_upload_is_pending_until_approved(client, admin_headers, add_member):
    add_member(id=1, name="Uploader", email="up@example.com")
    add_member(id=2, name="Viewer", email="view@example.com")
    uploader = {"X-Forwarded-User": "up@example.com"}
    viewer = {"X-Forwarded-User": "view@example.com"}

    uploaded = client.post("/v1/gallery", json={"images": [_image()]}, headers=uploader)
    assert uploaded.status_code == 201
    image = uploaded.json()["items"][0]
    assert image["status"] == "pending"
    assert image["batch_id"] is None
    assert image["tagged_member_id"] == 1

    assert client.get("/v1/gallery", headers=viewer).json()["items"] == []
    assert client.get("/v1/gallery").json()["items"] == []
    assert client.get(f"/v1/gallery/{image['id']}", headers=viewer).status_code == 404
    assert client.get(f"/v1/gallery/{image['id']}", headers=uploader).status_code == 200
    assert len(client.get("/v1/gallery", headers=admin_headers).json()["items"]) == 1

    assert client.post(f"/v1/gallery/{image['id']}/approve", headers=viewer).status_code == 403

    approved = client.post(f"/v1/gallery/{image['id']}/approve", headers=admin_headers)
    assert approved.status_code == 200
    assert approved.json()["status"] == "approved"
    assert [item["id"] for item in client.get("/v1/gallery", headers=viewer).json()["items"]] == [image["id"]]

    assert client.post(f"/v1/gallery/{image['id']}/approve", headers=admin_headers).status_code == 200
    assert client.post(f"/v1/gallery/{image['id']}/reject", headers=admin_headers).status_code == 409


def test_upload_notifies_other_members(client, add_member):
    add_member(id=1, name="Uploader", email="up@example.com")
    add_member(id=2, name="Viewer", email="view@example.com")

    client.post("/v1/gallery", json={"images": [_image(1), _image(2)]}, headers={"X-Forwarded-User": "up@example.com"})

    viewer_inbox = client.get("/v1/notifications", headers={"X-Forwarded-User": "view@example.com"}).json()
    assert viewer_inbox["unread_count"] == 1
    assert viewer_inbox["items"][0]["metadata"]["redirect_to"] == "/gallery"
    uploader_inbox = client.get("/v1/notifications", headers={"X-Forwarded-User": "up@example.com"}).json()
    assert uploader_inbox["unread_count"] == 0


def test_batch_shares_batch_id_and_is_capped(client, add_member):
    add_member(id=1, name="Uploader", email="up@example.com")
    headers = {"X-Forwarded-User": "up@example.com"}

    batch = client.post("/v1/gallery", json={"images": [_image(1), _image(2)]}, headers=headers)
    ids = {item["batch_id"] for item in batch.json()["items"]}
    assert len(ids) == 1 and None not in ids

    too_many = client.post("/v1/gallery", json={"images": [_image(i) for i in range(11)]}, headers=headers)
    assert too_many.status_code == 400

    empty = client.post("/v1/gallery", json={"images": []}, headers=headers)
    assert empty.status_code == 422


def test_monthly_quota_for_members(client, admin_headers, add_member, monkeypatch):
    monkeypatch.setattr(settings, "gallery_monthly_limit", 2)
    add_member(id=1, name="Uploader", email="up@example.com")
    headers = {"X-Forwarded-User": "up@example.com"}

    assert client.post("/v1/gallery", json={"images": [_image(1), _image(2)]}, headers=headers).status_code == 201
    over = client.post("/v1/gallery", json={"images": [_image(3)]}, headers=headers)
    assert over.status_code == 403


def test_search_update_and_delete(client, admin_headers, add_member):
    add_member(id=1, name="Uploader", email="up@example.com")
    add_member(id=2, name="Other", email="other@example.com")
    uploader = {"X-Forwarded-User": "up@example.com"}

    beach = {**_image(1), "title": "Beach day", "location": "Goa", "taken_on": "2024-05-02"}
    hills = {**_image(2), "title": "Hills", "taken_on": "2024-07-09"}
    created = client.post("/v1/gallery", json={"images": [beach, hills]}, headers=uploader).json()["items"]
    for item in created:
        client.post(f"/v1/gallery/{item['id']}/approve", headers=admin_headers)

    found = client.get("/v1/gallery", params={"search": "goa"}, headers=uploader).json()["items"]
    assert [item["title"] for item in found] == ["Beach day"]

    in_july = client.get("/v1/gallery", params={"month": 7, "year": 2024}, headers=uploader).json()["items"]
    assert [item["title"] for item in in_july] == ["Hills"]

    oldest = client.get("/v1/gallery", params={"sort": "oldest"}, headers=uploader).json()["items"]
    assert [item["title"] for item in oldest] == ["Beach day", "Hills"]

    renamed = client.patch(f"/v1/gallery/{created[1]['id']}", json={"title": "Mountains"}, headers=admin_headers)
    assert renamed.status_code == 200
    assert renamed.json()["title"] == "Mountains"

    other = {"X-Forwarded-User": "other@example.com"}
    assert client.delete(f"/v1/gallery/{created[0]['id']}", headers=other).status_code == 403
    assert client.delete(f"/v1/gallery/{created[0]['id']}", headers=uploader).status_code == 204
    assert client.delete(f"/v1/gallery/{created[1]['id']}", headers=admin_headers).status_code == 204


def test_admin_without_member_can_upload(client, admin_headers, add_member):
    add_member(id=1, name="Viewer", email="view@example.com")
    uploaded = client.post("/v1/gallery", json={"images": [_image()]}, headers=admin_headers)
    assert uploaded.status_code == 201
    assert uploaded.json()["items"][0]["uploaded_by_member_id"] is None
