def test_admin_stats(client, admin_headers, add_member):
    add_member(id=1, name="Ana", email="ana@example.com", gender="female", generation=0)
    add_member(id=2, name="Ben", gender="male", generation=1)

    client.get("/v1/members", headers={"X-Forwarded-User": "ana@example.com", "X-Current-Path": "/tree"})

    response = client.get("/v1/stats/admin", headers=admin_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["total_members"] == 2
    assert body["active_users_count"] == 1
    assert body["active_users"][0]["name"] == "Ana"
    assert "/tree" in [item["path"] for item in body["top_pages"]]
    assert {item["name"]: item["value"] for item in body["gender_stats"]} == {"female": 1, "male": 1}
    assert [item["name"] for item in body["generation_stats"]] == ["Gen 0", "Gen 1"]
    assert sum(item["users"] for item in body["growth_stats"]) == 2


def test_admin_stats_counts_pending_uploads(client, admin_headers, add_member):
    add_member(id=1, name="Ana", email="ana@example.com")
    client.post(
        "/v1/gallery",
        json={"images": [{"image_url": "https://cdn.example.com/a.jpg", "asset_id": "a"}]},
        headers={"X-Forwarded-User": "ana@example.com"},
    )
    body = client.get("/v1/stats/admin", headers=admin_headers).json()
    assert body["recent_activity"]["pending_uploads"] == 1
    assert body["recent_activity"]["uploads_24h"] == 1


def test_admin_stats_requires_admin(client, add_member):
    add_member(id=1, name="Ana", email="ana@example.com")
    assert client.get("/v1/stats/admin", headers={"X-Forwarded-User": "ana@example.com"}).status_code == 403
